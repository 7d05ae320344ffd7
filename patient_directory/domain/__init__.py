"""Domain layer for Patient Directory.

This module contains the patient record schema, the query models and the
query pipeline. Nothing here depends on infrastructure beyond Pydantic.
"""

from .patient_record import ContactInfo, PatientRecord
from .query import QueryRequest, QueryResult, PaginationMeta, SortField, SortDirection
from .pipeline import execute, list_categories

__all__ = [
    "ContactInfo",
    "PatientRecord",
    "QueryRequest",
    "QueryResult",
    "PaginationMeta",
    "SortField",
    "SortDirection",
    "execute",
    "list_categories",
]
