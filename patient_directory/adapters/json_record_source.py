"""JSON Record Source Adapter.

This adapter implements the RecordSourcePort contract for a JSON file holding
an array of patient objects.

Architecture:
    - Implements RecordSourcePort (Hexagonal Architecture)
    - Parses and validates the whole file once, then serves an immutable
      snapshot until the file changes on disk
    - Distinguishes a missing file from a file that fails to parse
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from patient_directory.domain.patient_record import PatientRecord
from patient_directory.domain.ports import (
    RecordSourcePort,
    SourceMalformedError,
    SourceNotFoundError,
)
from patient_directory.infrastructure.config_manager import DataSourceConfig

logger = logging.getLogger(__name__)


class JSONRecordSource(RecordSourcePort):
    """Record source backed by a JSON file.

    The parsed snapshot is cached and keyed by the file's modification time
    and size. A changed file is re-read on the next call.

    Parameters:
        path: Path to the JSON dataset
        encoding: File encoding
        cache_enabled: Reuse the parsed snapshot while the file is unchanged
    """

    def __init__(
        self,
        path: Union[str, Path],
        encoding: str = "utf-8",
        cache_enabled: bool = True
    ):
        self.path = Path(path)
        self.encoding = encoding
        self.cache_enabled = cache_enabled
        self.adapter_name = "json_record_source"

        self._lock = threading.Lock()
        self._cache_key: Optional[tuple[int, int]] = None
        self._snapshot: Optional[tuple[PatientRecord, ...]] = None

    @classmethod
    def from_config(cls, config: DataSourceConfig) -> 'JSONRecordSource':
        """Create a source from a DataSourceConfig."""
        return cls(
            path=config.data_path,
            encoding=config.encoding,
            cache_enabled=config.cache_enabled
        )

    def load_records(self) -> tuple[PatientRecord, ...]:
        """Return every record in the file as an immutable snapshot.

        Raises:
            SourceNotFoundError: If the file does not exist
            SourceMalformedError: If the file is not a JSON array of patient records
        """
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            logger.error(f"Mock data file not found: {self.path}")
            raise SourceNotFoundError("Data file not found", source=str(self.path))

        cache_key = (stat.st_mtime_ns, stat.st_size)

        with self._lock:
            if self.cache_enabled and self._snapshot is not None and self._cache_key == cache_key:
                return self._snapshot

            snapshot = self._read_snapshot()
            if self.cache_enabled:
                self._cache_key = cache_key
                self._snapshot = snapshot
            return snapshot

    def _read_snapshot(self) -> tuple[PatientRecord, ...]:
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                contents = f.read()
        except FileNotFoundError:
            # Removed between stat() and open()
            logger.error(f"Mock data file not found: {self.path}")
            raise SourceNotFoundError("Data file not found", source=str(self.path))
        except UnicodeDecodeError as e:
            logger.error(f"Error decoding data file {self.path}: {str(e)}")
            raise SourceMalformedError("Invalid data format", source=str(self.path))

        try:
            data = json.loads(contents)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing JSON data: {str(e)}")
            raise SourceMalformedError(
                "Invalid data format",
                source=str(self.path),
                details={"line": e.lineno, "column": e.colno}
            )

        if not isinstance(data, list):
            logger.error("Data is not an array")
            raise SourceMalformedError("Invalid data structure", source=str(self.path))

        records = []
        for index, raw in enumerate(data):
            try:
                records.append(PatientRecord.model_validate(raw))
            except PydanticValidationError as e:
                logger.error(f"Record {index} in {self.path} failed validation: {e.error_count()} error(s)")
                raise SourceMalformedError(
                    "Invalid data structure",
                    source=str(self.path),
                    details={"record_index": index, "errors": e.error_count()}
                )

        logger.info(
            f"Loaded {len(records)} patients from {self.path.name}",
            extra={"source_path": str(self.path), "record_count": len(records)}
        )
        return tuple(records)

    def describe(self) -> Optional[dict]:
        """Get metadata about the JSON file without parsing it."""
        info = {
            "format": "json",
            "path": str(self.path),
            "encoding": self.encoding,
        }
        try:
            info["size"] = self.path.stat().st_size
            info["exists"] = True
        except FileNotFoundError:
            info["exists"] = False
        return info
