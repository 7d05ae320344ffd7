"""Pydantic models for the patient query endpoints.

This module defines the response models for the patient list and the
medical issue categories.
"""

from typing import Optional

from pydantic import BaseModel, Field

from patient_directory.domain.patient_record import PatientRecord
from patient_directory.domain.query import PaginationMeta, QueryResult


class PatientListResponse(BaseModel):
    """Response model for the patient query."""

    data: list[PatientRecord] = Field(..., description="Patients on the requested page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def from_result(cls, result: QueryResult) -> 'PatientListResponse':
        """Build the response from a pipeline result."""
        return cls(data=list(result.items), pagination=result.pagination)


class CategoryEntry(BaseModel):
    """One medical issue category."""

    label: str = Field(..., description="Category label as it appears in the dataset")
    value: str = Field(..., description="Lower-cased value to pass as medicalIssue")
    count: int = Field(..., description="Number of patients in this category")


class CategoriesResponse(BaseModel):
    """Response model for the categories query."""

    categories: list[CategoryEntry] = Field(..., description="Categories ordered by label")
    total: int = Field(..., description="Number of patients across all categories")


class ErrorResponse(BaseModel):
    """Error body returned by the patient endpoints."""

    error: str = Field(..., description="Human-readable error message")
    detail: Optional[str] = Field(None, description="Additional detail")
