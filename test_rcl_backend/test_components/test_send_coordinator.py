"""Test module for the `SendCoordinator` component."""

import pytest
from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    Report,
    ReportStatus,
    OperationType,
    ExportConfig,
    MessageResponse,
)
from rcl_backend.errors import RemoteQueryFailed, SendRejected
from rcl_backend.components import SendCoordinator, PayloadBuilder


@pytest.fixture(name="payload")
def _payload(file_storage):
    payload = file_storage / "payload.json"
    payload.write_text(
        '{"header": {"operation": "INSERT"}, "dataset": null}',
        encoding="utf-8",
    )
    return payload


@pytest.fixture(name="report")
def _report(store):
    report = Report("S1")
    store.insert(report)
    return report


@pytest.fixture(name="coordinator")
def _coordinator(fake_dcf, store, file_storage):
    return SendCoordinator(
        fake_dcf, store, PayloadBuilder(file_storage / "payloads")
    )


@pytest.mark.parametrize(
    ("operation", "expected"),
    [
        (OperationType.INSERT, ReportStatus.UPLOADED),
        (OperationType.REPLACE, ReportStatus.UPLOADED),
        (OperationType.REJECT, ReportStatus.REJECTION_SENT),
        (OperationType.SUBMIT, ReportStatus.SUBMISSION_SENT),
        (OperationType.NOT_SUPPORTED, ReportStatus.DRAFT),
    ],
)
def test_send(
    operation, expected, coordinator: SendCoordinator, report, payload, store
):
    """Test method `SendCoordinator.send`."""
    log = Logger(default_origin="Test")
    message = coordinator.send(report, payload, operation, log)

    assert message.message_id == "msg-1"
    assert report.message_id == "msg-1"
    assert report.status is expected
    assert store.updates == 1
    stored = store.get(report.id_)
    assert stored.message_id == "msg-1"
    assert stored.status is expected
    assert Context.EVENT in log


@pytest.mark.parametrize(
    ("operation", "modifying", "validation"),
    [
        (OperationType.INSERT, True, True),
        (OperationType.REPLACE, True, True),
        (OperationType.REJECT, True, False),
        (OperationType.SUBMIT, False, False),
    ],
)
def test_send_message_history(
    operation,
    modifying,
    validation,
    coordinator: SendCoordinator,
    report,
    payload,
    store,
    fake_dcf,
):
    """Test tracking of message ids in `SendCoordinator.send`."""
    report.last_modifying_message_id = "old"
    report.last_validation_message_id = "old"
    store.update(report)
    fake_dcf.message = MessageResponse(True, "new")
    coordinator.send(report, payload, operation)

    stored = store.get(report.id_)
    assert stored.message_id == "new"
    assert stored.last_message_id == "new"
    assert stored.last_modifying_message_id == (
        "new" if modifying else "old"
    )
    assert stored.last_validation_message_id == (
        "new" if validation else "old"
    )


def test_send_rejected_message_history(
    coordinator: SendCoordinator, report, payload, store, fake_dcf
):
    """
    Test that a refused message is not recorded as last message.
    """
    fake_dcf.message = MessageResponse(False, error="invalid payload")
    with pytest.raises(SendRejected):
        coordinator.send(report, payload, OperationType.INSERT)
    stored = store.get(report.id_)
    assert stored.last_message_id is None
    assert stored.last_modifying_message_id is None


def test_send_rejected(
    coordinator: SendCoordinator, report, payload, store, fake_dcf
):
    """Test method `SendCoordinator.send` for a refused message."""
    fake_dcf.message = MessageResponse(False, error="invalid payload")
    with pytest.raises(SendRejected) as exc_info:
        coordinator.send(report, payload, OperationType.INSERT)

    assert exc_info.value.response.error == "invalid payload"
    assert report.status is ReportStatus.UPLOAD_FAILED
    assert store.updates == 1
    assert store.get(report.id_).status is ReportStatus.UPLOAD_FAILED


def test_send_transport_failure(
    coordinator: SendCoordinator, report, payload, store, fake_dcf
):
    """Test method `SendCoordinator.send` for a failed request."""
    fake_dcf.fail = True
    with pytest.raises(RemoteQueryFailed) as exc_info:
        coordinator.send(report, payload, OperationType.INSERT)

    assert Context.ERROR in exc_info.value.log
    assert report.status is ReportStatus.DRAFT
    assert store.updates == 0


def test_export_and_send(
    coordinator: SendCoordinator, report, fake_dcf, file_storage
):
    """Test method `SendCoordinator.export_and_send`."""
    coordinator.export_and_send(
        report, ExportConfig(OperationType.SUBMIT, empty_dataset=True)
    )

    assert report.status is ReportStatus.SUBMISSION_SENT
    assert fake_dcf.calls == [("send_message", OperationType.SUBMIT)]
    assert fake_dcf.payloads[0]["header"]["operation"] == "SUBMIT"
    assert fake_dcf.payloads[0]["dataset"] is None
    assert list((file_storage / "payloads").iterdir()) == []


def test_export_and_send_cleanup_on_failure(
    coordinator: SendCoordinator, report, fake_dcf, file_storage
):
    """
    Test method `SendCoordinator.export_and_send` removes the payload
    if sending fails.
    """
    fake_dcf.message = MessageResponse(False)
    with pytest.raises(SendRejected):
        coordinator.export_and_send(
            report, ExportConfig(OperationType.INSERT)
        )
    assert list((file_storage / "payloads").iterdir()) == []


def test_export_and_send_retain_payload(
    coordinator: SendCoordinator, report, file_storage
):
    """
    Test method `SendCoordinator.export_and_send` with `retain_payload`.
    """
    coordinator.retain_payload = True
    coordinator.export_and_send(report, ExportConfig(OperationType.INSERT))
    assert len(list((file_storage / "payloads").iterdir())) == 1


def test_export_and_send_without_builder(fake_dcf, store, report):
    """
    Test method `SendCoordinator.export_and_send` without builder.
    """
    with pytest.raises(ValueError):
        SendCoordinator(fake_dcf, store).export_and_send(
            report, ExportConfig(OperationType.INSERT)
        )
    assert fake_dcf.calls == []
