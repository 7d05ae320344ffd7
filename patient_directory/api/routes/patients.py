"""Patient query endpoints.

This module provides the read-only patient query endpoint, its CORS
pre-flight handler, and the medical issue categories endpoint.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from patient_directory.api.dependencies import DirectoryServiceDep
from patient_directory.api.middleware import CORS_HEADERS
from patient_directory.api.models.patients import (
    CategoriesResponse,
    ErrorResponse,
    PatientListResponse,
)
from patient_directory.domain.ports import Result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["patients"])

QUERY_PARAMS = ("page", "limit", "search", "sortBy", "sortOrder", "medicalIssue")

ERROR_STATUS = {
    "SourceNotFoundError": 404,
    "SourceMalformedError": 500,
}

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Dataset not found"},
    500: {"model": ErrorResponse, "description": "Dataset malformed or unexpected failure"},
}


def error_response(result: Result) -> JSONResponse:
    """Map a failed Result onto an error response.

    Source errors keep their message; anything else becomes a generic 500.
    """
    status_code = ERROR_STATUS.get(result.error_type)
    if status_code is None:
        status_code, message = 500, "Internal server error"
    else:
        message = result.error

    logger.warning(f"Request failed: {result.error_type}: {result.error}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
        headers=CORS_HEADERS
    )


@router.get(
    "/data",
    response_model=PatientListResponse,
    responses=ERROR_RESPONSES,
)
def get_patients(
    request: Request,
    service: DirectoryServiceDep,
    page: Optional[str] = Query(None, description="Page number (default 1, minimum 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default 10, range 1-100)"),
    search: Optional[str] = Query(None, description="Case-insensitive search over name, ID, phone, email and medical issue"),
    sortBy: Optional[str] = Query(None, description="patient_name, age, patient_id or medical_issue"),
    sortOrder: Optional[str] = Query(None, description="asc or desc"),
    medicalIssue: Optional[str] = Query(None, description="Comma-separated medical issues to include"),
):
    """Query the patient directory.

    Supports free-text search, filtering by medical issue, sorting and
    pagination. Malformed parameters fall back to defaults instead of
    failing the request.
    """
    # Parameters are declared for the OpenAPI schema; coercion happens in the service
    params = {key: request.query_params.get(key) for key in QUERY_PARAMS}

    result = service.query_patients(params)
    if result.is_failure():
        return error_response(result)

    return JSONResponse(
        status_code=200,
        content=result.value.model_dump(mode="json", by_alias=True),
        headers=CORS_HEADERS
    )


@router.options("/data", include_in_schema=False)
def options_patients() -> Response:
    """Answer a CORS pre-flight request with an empty body."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.get(
    "/categories",
    response_model=CategoriesResponse,
    responses=ERROR_RESPONSES,
)
def get_categories(service: DirectoryServiceDep):
    """List medical issue categories with patient counts.

    The ``value`` of each entry can be passed in the ``medicalIssue``
    parameter of ``/api/data``.
    """
    result = service.list_categories()
    if result.is_failure():
        return error_response(result)

    return JSONResponse(
        status_code=200,
        content=result.value.model_dump(mode="json"),
        headers=CORS_HEADERS
    )
