"""Unit tests for JSONRecordSource.

These tests write small datasets to a temporary directory and verify
loading, error classification and snapshot caching.
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from patient_directory.adapters.json_record_source import JSONRecordSource
from patient_directory.domain.patient_record import PatientRecord
from patient_directory.domain.ports import SourceMalformedError, SourceNotFoundError
from patient_directory.infrastructure.config_manager import DataSourceConfig

SAMPLE_PATIENTS = [
    {
        "patient_id": 1,
        "patient_name": "Alice Johnson",
        "age": 34,
        "photo_url": None,
        "contact": [{"address": "1 Main St", "number": "555-1234", "email": "alice@example.com"}],
        "medical_issue": "Fever",
    },
    {
        "patient_id": 2,
        "patient_name": "Bob Smith",
        "age": 51,
        "photo_url": "https://example.com/bob.png",
        "contact": [],
        "medical_issue": "Rash",
    },
]


@pytest.fixture
def data_file(tmp_path):
    """Write the sample dataset and return its path."""
    path = tmp_path / "MOCK_DATA.json"
    path.write_text(json.dumps(SAMPLE_PATIENTS), encoding="utf-8")
    return path


class TestJSONRecordSourceLoading:
    """Test successful loads."""

    def test_loads_records_in_source_order(self, data_file):
        source = JSONRecordSource(data_file)

        records = source.load_records()

        assert isinstance(records, tuple)
        assert [r.patient_id for r in records] == [1, 2]
        assert all(isinstance(r, PatientRecord) for r in records)

    def test_primary_contact(self, data_file):
        alice, bob = JSONRecordSource(data_file).load_records()

        assert alice.primary_contact.number == "555-1234"
        assert alice.primary_contact.email == "alice@example.com"
        assert bob.primary_contact is None

    def test_records_serialize_back_to_source_shape(self, data_file):
        records = JSONRecordSource(data_file).load_records()

        assert [r.model_dump(mode="json") for r in records] == SAMPLE_PATIENTS

    def test_records_are_frozen(self, data_file):
        record = JSONRecordSource(data_file).load_records()[0]

        with pytest.raises(PydanticValidationError):
            record.age = 99

    def test_extra_keys_are_ignored(self, tmp_path):
        path = tmp_path / "extra.json"
        patient = dict(SAMPLE_PATIENTS[0], blood_type="O+")
        path.write_text(json.dumps([patient]), encoding="utf-8")

        records = JSONRecordSource(path).load_records()

        assert records[0].patient_name == "Alice Johnson"

    def test_null_or_missing_age_is_served(self, tmp_path):
        path = tmp_path / "no_age.json"
        without_age = dict(SAMPLE_PATIENTS[1])
        del without_age["age"]
        path.write_text(json.dumps([dict(SAMPLE_PATIENTS[0], age=None), without_age]), encoding="utf-8")

        records = JSONRecordSource(path).load_records()

        assert [r.age for r in records] == [None, None]
        assert records[0].model_dump(mode="json")["age"] is None

    def test_empty_array(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")

        assert JSONRecordSource(path).load_records() == ()

    def test_from_config(self, data_file):
        config = DataSourceConfig(data_file=str(data_file), cache_enabled=False)

        source = JSONRecordSource.from_config(config)

        assert source.path == data_file
        assert source.cache_enabled is False
        assert len(source.load_records()) == 2


class TestJSONRecordSourceErrors:
    """Test that missing and malformed sources are reported distinctly."""

    def test_missing_file(self, tmp_path):
        source = JSONRecordSource(tmp_path / "absent.json")

        with pytest.raises(SourceNotFoundError) as exc_info:
            source.load_records()

        assert str(exc_info.value) == "Data file not found"
        assert exc_info.value.source.endswith("absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{\"patient_id\": 1,", encoding="utf-8")

        with pytest.raises(SourceMalformedError) as exc_info:
            JSONRecordSource(path).load_records()

        assert str(exc_info.value) == "Invalid data format"

    def test_top_level_not_an_array(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"patients": SAMPLE_PATIENTS}), encoding="utf-8")

        with pytest.raises(SourceMalformedError) as exc_info:
            JSONRecordSource(path).load_records()

        assert str(exc_info.value) == "Invalid data structure"

    def test_invalid_record_reports_index(self, tmp_path):
        path = tmp_path / "bad_record.json"
        bad = dict(SAMPLE_PATIENTS[1])
        del bad["patient_name"]
        path.write_text(json.dumps([SAMPLE_PATIENTS[0], bad]), encoding="utf-8")

        with pytest.raises(SourceMalformedError) as exc_info:
            JSONRecordSource(path).load_records()

        assert exc_info.value.details["record_index"] == 1

    def test_negative_age_is_rejected(self, tmp_path):
        path = tmp_path / "negative_age.json"
        path.write_text(json.dumps([dict(SAMPLE_PATIENTS[0], age=-1)]), encoding="utf-8")

        with pytest.raises(SourceMalformedError):
            JSONRecordSource(path).load_records()

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b"[\xff\xfe]")

        with pytest.raises(SourceMalformedError):
            JSONRecordSource(path).load_records()


class TestJSONRecordSourceCaching:
    """Test snapshot caching."""

    def test_unchanged_file_returns_cached_snapshot(self, data_file):
        source = JSONRecordSource(data_file)

        first = source.load_records()
        second = source.load_records()

        assert first is second

    def test_changed_file_is_reloaded(self, data_file):
        source = JSONRecordSource(data_file)
        first = source.load_records()

        data_file.write_text(json.dumps(SAMPLE_PATIENTS[:1]), encoding="utf-8")
        second = source.load_records()

        assert len(first) == 2
        assert len(second) == 1

    def test_cache_disabled_reads_every_time(self, data_file):
        source = JSONRecordSource(data_file, cache_enabled=False)

        first = source.load_records()
        second = source.load_records()

        assert first == second
        assert first is not second

    def test_deleted_file_is_reported_missing(self, data_file):
        source = JSONRecordSource(data_file)
        source.load_records()

        data_file.unlink()

        with pytest.raises(SourceNotFoundError):
            source.load_records()


class TestJSONRecordSourceDescribe:
    """Test source metadata."""

    def test_describe_existing_file(self, data_file):
        info = JSONRecordSource(data_file).describe()

        assert info["format"] == "json"
        assert info["path"] == str(data_file)
        assert info["exists"] is True
        assert info["size"] == data_file.stat().st_size

    def test_describe_missing_file(self, tmp_path):
        info = JSONRecordSource(tmp_path / "absent.json").describe()

        assert info["exists"] is False
        assert "size" not in info
