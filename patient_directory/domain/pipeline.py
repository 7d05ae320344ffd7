"""Query Pipeline - filter, filter, sort, paginate.

``execute`` runs a QueryRequest over an in-memory snapshot of patient
records:

    1. Free-text search (name, id, primary phone, primary email, medical issue)
    2. Category filter on the medical issue
    3. Stable sort by the requested field and direction
    4. Page slicing plus pagination metadata

Every stage is a pure function of its inputs. Records are never mutated and
no I/O happens here; the caller supplies the snapshot.
"""

import math
from functools import lru_cache
from typing import Callable, Iterable, Optional, Sequence, Union

from pyuca import Collator

from patient_directory.domain.patient_record import PatientRecord
from patient_directory.domain.query import (
    PaginationMeta,
    QueryRequest,
    QueryResult,
    SortDirection,
    SortField,
)

SortKey = Callable[[PatientRecord], Union[tuple, int]]


@lru_cache()
def get_collator() -> Collator:
    """Get the Unicode collator (cached, the collation table is loaded once)."""
    return Collator()


def _text_key(value: Optional[str]) -> tuple:
    """Locale-aware sort key: accents and case only break ties between base letters."""
    return get_collator().sort_key(value or "")


SORT_KEYS: dict[SortField, SortKey] = {
    SortField.NAME: lambda record: _text_key(record.patient_name),
    SortField.AGE: lambda record: record.age or 0,
    SortField.ID: lambda record: record.patient_id,
    SortField.MEDICAL_ISSUE: lambda record: _text_key(record.medical_issue),
}


def matches_search(record: PatientRecord, search_text: str) -> bool:
    """Check whether a record matches a lower-cased search string.

    Phone numbers are compared raw. A record without contacts can still match
    on name, id or medical issue.
    """
    if search_text in record.patient_name.lower():
        return True
    if search_text in str(record.patient_id):
        return True

    contact = record.primary_contact
    if contact is not None:
        if contact.number and search_text in contact.number:
            return True
        if contact.email and search_text in contact.email.lower():
            return True

    return search_text in record.medical_issue.lower()


def apply_search(records: Iterable[PatientRecord], search_text: Optional[str]) -> list[PatientRecord]:
    """Keep records matching the search text; no-op when it is empty."""
    if not search_text:
        return list(records)
    return [record for record in records if matches_search(record, search_text)]


def apply_category_filter(
    records: Iterable[PatientRecord],
    categories: Optional[frozenset[str]]
) -> list[PatientRecord]:
    """Keep records whose lower-cased medical issue is in ``categories``."""
    if not categories:
        return list(records)
    return [record for record in records if record.medical_issue.lower() in categories]


def sort_records(
    records: Iterable[PatientRecord],
    field: SortField,
    direction: SortDirection
) -> list[PatientRecord]:
    """Return records sorted by ``field``.

    ``sorted`` is stable and ``reverse=True`` keeps equal keys in input
    order, so ties keep their original relative order in both directions.
    """
    return sorted(
        records,
        key=SORT_KEYS[field],
        reverse=direction is SortDirection.DESCENDING
    )


def paginate(records: Sequence[PatientRecord], page: int, page_size: int) -> QueryResult:
    """Slice one page out of ``records`` and compute pagination metadata.

    A page past the end yields no items; it is not an error.
    """
    start_index = (page - 1) * page_size
    end_index = start_index + page_size

    total_items = len(records)
    total_pages = math.ceil(total_items / page_size)
    has_next_page = page < total_pages
    has_prev_page = page > 1

    return QueryResult(
        items=tuple(records[start_index:end_index]),
        pagination=PaginationMeta(
            current_page=page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=page_size,
            has_next_page=has_next_page,
            has_prev_page=has_prev_page,
            next_page=page + 1 if has_next_page else None,
            prev_page=page - 1 if has_prev_page else None,
        )
    )


def execute(records: Sequence[PatientRecord], request: QueryRequest) -> QueryResult:
    """Run a query over a record snapshot.

    Parameters:
        records: Snapshot of the full record collection
        request: Validated query request

    Returns:
        QueryResult: The requested page and its pagination metadata
    """
    filtered = apply_search(records, request.search_text)
    filtered = apply_category_filter(filtered, request.category_filter)
    ordered = sort_records(filtered, request.sort_field, request.sort_direction)
    return paginate(ordered, request.page, request.page_size)


def list_categories(records: Iterable[PatientRecord]) -> list[tuple[str, int]]:
    """Count records per medical issue.

    Labels that differ only by case are counted together under the first
    spelling seen.

    Returns:
        list[tuple[str, int]]: (label, count) pairs ordered by label, ignoring case
    """
    labels: dict[str, str] = {}
    counts: dict[str, int] = {}
    for record in records:
        value = record.medical_issue.lower()
        labels.setdefault(value, record.medical_issue)
        counts[value] = counts.get(value, 0) + 1

    return [(labels[value], counts[value]) for value in sorted(counts, key=_text_key)]
