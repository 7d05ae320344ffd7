"""API response models."""

from patient_directory.api.models.health import HealthResponse, SourceHealth
from patient_directory.api.models.patients import (
    CategoriesResponse,
    CategoryEntry,
    ErrorResponse,
    PatientListResponse,
)
