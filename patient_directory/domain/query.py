"""Query request and result models.

Query parameters arrive as an untrusted flat mapping of strings. All
coercion and clamping happens in ``QueryRequest.from_params`` so the rules
can be tested on their own; nothing downstream re-validates.

Malformed values are never rejected. They fall back to defaults or are
clamped into range.
"""

import re
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from patient_directory.domain.patient_record import PatientRecord

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class SortField(str, Enum):
    """Fields a query may sort by. Values are the transport names."""
    NAME = "patient_name"
    AGE = "age"
    ID = "patient_id"
    MEDICAL_ISSUE = "medical_issue"


class SortDirection(str, Enum):
    """Sort direction. Values are the transport names."""
    ASCENDING = "asc"
    DESCENDING = "desc"


def parse_int(value: Optional[str], default: int) -> int:
    """Parse the leading integer of a string, like JavaScript's parseInt.

    ``"3abc"`` parses as 3 and ``"2.9"`` as 2. Anything without a leading
    integer, including None, yields ``default``.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def parse_categories(value: Optional[str]) -> Optional[frozenset[str]]:
    """Split a comma-delimited category list into lower-cased, trimmed labels."""
    if not value:
        return None
    return frozenset(part.strip().lower() for part in value.split(","))


class QueryRequest(BaseModel):
    """A validated directory query.

    Attributes:
        page: 1-based page number, never below 1
        page_size: Items per page, within [1, 100]
        search_text: Lower-cased free-text search, or None
        sort_field: Field to sort by
        sort_direction: Ascending or descending
        category_filter: Lower-cased medical issue labels to keep, or None
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(DEFAULT_PAGE, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)
    search_text: Optional[str] = None
    sort_field: SortField = SortField.NAME
    sort_direction: SortDirection = SortDirection.ASCENDING
    category_filter: Optional[frozenset[str]] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Optional[str]]) -> 'QueryRequest':
        """Build a request from transport parameters.

        Recognised keys: ``page``, ``limit``, ``search``, ``sortBy``,
        ``sortOrder`` and ``medicalIssue``. Unknown keys are ignored.

        Parameters:
            params: Flat mapping of parameter names to raw string values

        Returns:
            QueryRequest: Request with every value coerced into range
        """
        page = max(1, parse_int(params.get("page"), DEFAULT_PAGE))
        page_size = min(
            max(MIN_PAGE_SIZE, parse_int(params.get("limit"), DEFAULT_PAGE_SIZE)),
            MAX_PAGE_SIZE
        )

        search = params.get("search")
        search_text = search.lower() if search else None

        try:
            sort_field = SortField(params.get("sortBy") or SortField.NAME.value)
        except ValueError:
            sort_field = SortField.NAME

        # Only the exact string "asc" (or no value) sorts ascending
        sort_order = params.get("sortOrder") or SortDirection.ASCENDING.value
        sort_direction = (
            SortDirection.ASCENDING if sort_order == SortDirection.ASCENDING.value
            else SortDirection.DESCENDING
        )

        return cls(
            page=page,
            page_size=page_size,
            search_text=search_text,
            sort_field=sort_field,
            sort_direction=sort_direction,
            category_filter=parse_categories(params.get("medicalIssue")),
        )


class PaginationMeta(BaseModel):
    """Pagination metadata, serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_page: int = Field(..., alias="currentPage", description="Requested page, clamped to >= 1")
    total_pages: int = Field(..., alias="totalPages", description="Number of pages after filtering")
    total_items: int = Field(..., alias="totalItems", description="Number of records after filtering")
    items_per_page: int = Field(..., alias="itemsPerPage", description="Effective page size")
    has_next_page: bool = Field(..., alias="hasNextPage")
    has_prev_page: bool = Field(..., alias="hasPrevPage")
    next_page: Optional[int] = Field(None, alias="nextPage")
    prev_page: Optional[int] = Field(None, alias="prevPage")


class QueryResult(BaseModel):
    """One page of query results plus pagination metadata."""

    model_config = ConfigDict(frozen=True)

    items: tuple[PatientRecord, ...] = ()
    pagination: PaginationMeta
