"""Record source adapters for Patient Directory.

Adapters implement RecordSourcePort and hand the domain an immutable
snapshot of patient records.
"""

from patient_directory.adapters.json_record_source import JSONRecordSource

__all__ = ["JSONRecordSource"]
