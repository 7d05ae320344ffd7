"""Domain Ports - Abstract Contracts for Record Sources.

This module defines the Port interface that Record Source adapters must
implement, the Result type used to pass success or failure between layers,
and the exception hierarchy adapters raise.

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Adapters (JSON file, database, etc.) implement RecordSourcePort
    - The query pipeline never talks to a source directly; it receives a snapshot
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from patient_directory.domain.patient_record import PatientRecord

T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Services return a Result so that routes can map failure kinds onto HTTP
    status codes without catching domain exceptions themselves.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Kind of error (SourceNotFoundError, SourceMalformedError, etc.)
        error_details: Additional error context (source path, record index, etc.)

    Example:
        ```python
        result = service.query_patients(params)
        if result.is_success():
            return result.value
        log_error(result.error, result.error_details)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(success=True, value=value)

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Kind of error; defaults to the exception class name
            error_details: Additional context

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class RecordSourceError(Exception):
    """Base exception for all record source errors.

    Attributes:
        source: The source identifier (path, URL) involved
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class SourceNotFoundError(RecordSourceError):
    """Raised when the backing dataset cannot be located."""
    pass


class SourceMalformedError(RecordSourceError):
    """Raised when the dataset exists but does not parse into patient records.

    Attributes:
        source: The source identifier that failed to parse
        details: Extra context such as the offending record index
    """

    def __init__(self, message: str, source: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, source=source)
        self.details = details or {}


class RecordSourcePort(ABC):
    """Abstract contract for record source adapters.

    A record source hands the full, current collection of patient records to
    the caller as an immutable snapshot. How the snapshot is obtained (file,
    database, cache) is the adapter's concern.
    """

    @abstractmethod
    def load_records(self) -> tuple[PatientRecord, ...]:
        """Return the full record collection as an immutable snapshot.

        Returns:
            tuple[PatientRecord, ...]: Every record in the source, in source order

        Raises:
            SourceNotFoundError: If the source cannot be located
            SourceMalformedError: If the source content is not a sequence of records
        """
        pass

    def describe(self) -> Optional[dict]:
        """Get metadata about the source (optional, adapter-specific).

        Returns:
            Optional[dict]: Metadata such as 'path', 'format' or 'size',
                or None if nothing can be determined.
        """
        return None
