"""Test module for the `PayloadBuilder` component."""

import json

import pytest

from rcl_backend.models import Report, ExportConfig, OperationType
from rcl_backend.errors import MissingSenderId
from rcl_backend.components import PayloadBuilder


def test_build(file_storage):
    """Test method `PayloadBuilder.build`."""
    builder = PayloadBuilder(file_storage / "payloads")
    report = Report("S1", "01", id_="a", year="2024", month="03")
    payload = builder.build(report, ExportConfig(OperationType.INSERT))

    assert payload.is_file()
    assert payload.parent == file_storage / "payloads"
    content = json.loads(payload.read_text(encoding="utf-8"))
    assert content["header"]["senderDatasetId"] == "S1.01"
    assert content["header"]["operation"] == "INSERT"
    assert content["header"]["year"] == "2024"
    assert content["dataset"] == report.json


def test_build_empty_dataset(file_storage):
    """Test method `PayloadBuilder.build` with an empty dataset."""
    builder = PayloadBuilder(file_storage)
    payload = builder.build(
        Report("S1", dataset_id="d"),
        ExportConfig(OperationType.SUBMIT, empty_dataset=True),
    )
    content = json.loads(payload.read_text(encoding="utf-8"))
    assert content["header"]["senderDatasetId"] == "S1"
    assert content["header"]["datasetId"] == "d"
    assert content["dataset"] is None


def test_build_missing_sender_id(file_storage):
    """Test method `PayloadBuilder.build` without sender id."""
    with pytest.raises(MissingSenderId):
        PayloadBuilder(file_storage).build(
            Report(None), ExportConfig(OperationType.INSERT)
        )
    assert list(file_storage.iterdir()) == []
