"""Patient directory service for the API.

This service loads a snapshot from the record source, runs the query
pipeline over it and reports failures through Result so routes can map
them onto status codes.
"""

import logging
from typing import Mapping, Optional

from patient_directory.api.models.health import SourceHealth
from patient_directory.api.models.patients import (
    CategoriesResponse,
    CategoryEntry,
    PatientListResponse,
)
from patient_directory.domain.pipeline import execute, list_categories
from patient_directory.domain.ports import (
    RecordSourcePort,
    Result,
    SourceMalformedError,
    SourceNotFoundError,
)
from patient_directory.domain.query import QueryRequest

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "UnexpectedError"


class DirectoryService:
    """Service for querying the patient directory."""

    def __init__(self, source: RecordSourcePort):
        """Initialize DirectoryService.

        Parameters:
            source: Record source adapter instance
        """
        self.source = source

    def query_patients(self, params: Mapping[str, Optional[str]]) -> Result[PatientListResponse]:
        """Run a patient query.

        Parameters:
            params: Raw query parameters (page, limit, search, sortBy, sortOrder, medicalIssue)

        Returns:
            Result containing PatientListResponse or error
        """
        try:
            request = QueryRequest.from_params(params)
            records = self.source.load_records()
            result = execute(records, request)

            logger.debug(
                f"Query page={request.page} limit={request.page_size} "
                f"sort={request.sort_field.value}:{request.sort_direction.value} "
                f"matched={result.pagination.total_items}"
            )
            return Result.success_result(PatientListResponse.from_result(result))

        except (SourceNotFoundError, SourceMalformedError) as e:
            return Result.failure_result(e, error_details={"source": e.source})
        except Exception as e:
            logger.error(f"Error querying patients: {str(e)}", exc_info=True)
            return Result.failure_result(e, error_type=UNEXPECTED_ERROR)

    def list_categories(self) -> Result[CategoriesResponse]:
        """List medical issue categories with patient counts.

        Returns:
            Result containing CategoriesResponse or error
        """
        try:
            records = self.source.load_records()
            entries = [
                CategoryEntry(label=label, value=label.lower(), count=count)
                for label, count in list_categories(records)
            ]
            return Result.success_result(CategoriesResponse(categories=entries, total=len(records)))

        except (SourceNotFoundError, SourceMalformedError) as e:
            return Result.failure_result(e, error_details={"source": e.source})
        except Exception as e:
            logger.error(f"Error listing categories: {str(e)}", exc_info=True)
            return Result.failure_result(e, error_type=UNEXPECTED_ERROR)

    def check_health(self) -> SourceHealth:
        """Check whether the record source can be loaded.

        Returns:
            SourceHealth: Availability and record count of the source
        """
        path = "unknown"

        try:
            info = self.source.describe() or {}
            path = str(info.get("path", path))
            records = self.source.load_records()
        except Exception as e:
            logger.warning(f"Record source health check failed: {str(e)}")
            return SourceHealth(status="unavailable", path=path, error=str(e))

        return SourceHealth(status="available", path=path, record_count=len(records))
