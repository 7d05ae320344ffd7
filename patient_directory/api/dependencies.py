"""Dependency injection for the API.

This module provides dependency functions for FastAPI, handing routes the
configured record source and the directory service built on top of it.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from patient_directory.adapters.json_record_source import JSONRecordSource
from patient_directory.api.services.directory_service import DirectoryService
from patient_directory.domain.ports import RecordSourcePort
from patient_directory.infrastructure.config_manager import get_data_source_config

logger = logging.getLogger(__name__)


@lru_cache()
def get_record_source() -> RecordSourcePort:
    """Get record source instance (cached).

    The source is created once per process so that its parsed snapshot can be
    shared between requests.

    Returns:
        RecordSourcePort: Configured record source
    """
    config = get_data_source_config()
    logger.debug(f"Creating JSON record source with path: {config.data_file}")
    return JSONRecordSource.from_config(config)


def get_directory_service(
    source: Annotated[RecordSourcePort, Depends(get_record_source)]
) -> DirectoryService:
    """Get a directory service bound to the configured record source."""
    return DirectoryService(source)


# Type aliases for dependency injection
DirectoryServiceDep = Annotated[DirectoryService, Depends(get_directory_service)]
