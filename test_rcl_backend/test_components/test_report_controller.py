"""Test module for the `ReportController` component."""

from threading import Thread, Event, Barrier

import pytest
from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    Report,
    ReportStatus,
    RemoteDataset,
    RemoteDatasetStatus,
    OperationType,
    ExportConfig,
    Ack,
    AckLog,
    ReconcileOutcome,
    MessageResponse,
)
from rcl_backend.errors import UnsupportedOperation, AckNotReady
from rcl_backend.components import ReportController, PayloadBuilder


@pytest.fixture(name="controller")
def _controller(store, fake_dcf, data_collection, file_storage):
    return ReportController(
        store,
        fake_dcf,
        data_collection,
        PayloadBuilder(file_storage / "payloads"),
    )


def test_create_report(controller: ReportController, store):
    """Test method `ReportController.create_report`."""
    log = Logger(default_origin="Test")
    report = controller.create_report("S1", year="2024", log=log)
    assert report.status is ReportStatus.DRAFT
    assert store.get(report.id_) == report
    assert controller.is_locally_present("S1")
    assert Context.INFO in log

    with pytest.raises(ValueError):
        controller.create_report("S1")


def test_create_amendment(controller: ReportController):
    """Test method `ReportController.create_amendment`."""
    controller.create_report("S1", year="2024", month="05")
    first = controller.create_amendment("S1")
    second = controller.create_amendment("S1")
    assert first.version == "01"
    assert second.version == "02"
    assert second.year == "2024"
    assert second.month == "05"
    assert [r.version for r in controller.get_all_versions("S1")] == [
        "", "01", "02"
    ]

    with pytest.raises(ValueError):
        controller.create_amendment("S2")


def test_make_editable(controller: ReportController, store):
    """Test method `ReportController.make_editable`."""
    report = controller.create_report("S1")
    report.set_status(ReportStatus.REJECTED)
    store.update(report)

    controller.make_editable(report)
    assert store.get(report.id_).status is ReportStatus.DRAFT
    assert store.get(report.id_).previous_status is ReportStatus.REJECTED


def test_get_send_operation_new_report(
    controller: ReportController, fake_dcf
):
    """
    Test method `ReportController.get_send_operation` for a report
    without remote dataset.
    """
    report = controller.create_report("S1")
    operation = controller.get_send_operation(report)
    assert operation.operation is OperationType.INSERT
    assert operation.dataset is None
    assert len(fake_dcf.calls) == 1


def test_get_send_operation_unsupported(
    controller: ReportController, fake_dcf
):
    """
    Test method `ReportController.get_send_operation` for an
    unsupported remote status.
    """
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.SUBMITTED)
    ]
    with pytest.raises(UnsupportedOperation):
        controller.get_send_operation(controller.create_report("S1"))


def test_export_and_send_resolves_operation(
    controller: ReportController, fake_dcf
):
    """
    Test method `ReportController.export_and_send` without explicit
    operation.
    """
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.VALID)
    ]
    report = controller.create_report("S1")
    controller.export_and_send(report)
    assert ("send_message", OperationType.REPLACE) in fake_dcf.calls
    assert report.status is ReportStatus.UPLOADED


def test_export_and_send_unsupported(
    controller: ReportController, fake_dcf, store
):
    """
    Test method `ReportController.export_and_send` for an unsupported
    remote status.
    """
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.PROCESSING)
    ]
    report = controller.create_report("S1")
    with pytest.raises(UnsupportedOperation):
        controller.export_and_send(report)
    assert all(call[0] != "send_message" for call in fake_dcf.calls)
    assert store.updates == 0


def test_lifecycle(controller: ReportController, fake_dcf):
    """Test a complete lifecycle of a report."""
    report = controller.create_report("S1")

    # insert
    controller.export_and_send(report, ExportConfig(OperationType.INSERT))
    assert report.status is ReportStatus.UPLOADED

    # acknowledgment
    fake_dcf.acks["msg-1"] = Ack(False)
    assert controller.get_ack(report) == Ack(False)
    fake_dcf.acks["msg-1"] = Ack(
        True, AckLog("D1", RemoteDatasetStatus.VALID)
    )
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.VALID)
    ]
    result = controller.refresh_status(report)
    assert result.outcome is ReconcileOutcome.UNCHANGED
    assert report.status is ReportStatus.VALID
    assert report.dataset_id == "D1"

    # submit
    controller.export_and_send(
        report, ExportConfig(OperationType.SUBMIT, empty_dataset=True)
    )
    assert report.status is ReportStatus.SUBMISSION_SENT
    fake_dcf.acks["msg-1"] = Ack(
        True, AckLog("D1", RemoteDatasetStatus.SUBMITTED)
    )
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.SUBMITTED)
    ]
    controller.refresh_status(report)
    assert report.status is ReportStatus.SUBMITTED

    # acceptance
    fake_dcf.datasets = [
        RemoteDataset("D1", "S1", RemoteDatasetStatus.ACCEPTED_DWH)
    ]
    result = controller.reconcile_status(report)
    assert result.outcome is ReconcileOutcome.EXPECTED_TRANSITION
    assert report.status is ReportStatus.ACCEPTED_DWH


def test_delete_all_versions(controller: ReportController):
    """Test method `ReportController.delete_all_versions`."""
    controller.create_report("S1")
    controller.create_amendment("S1")
    assert controller.delete_all_versions("S1")
    assert not controller.is_locally_present("S1")
    assert not controller.delete_all_versions("S1")


def test_lock_serializes_calls(controller: ReportController):
    """Test that `ReportController.lock` serializes per report."""
    report = Report("S1", id_="a")
    other = Report("S2", id_="b")
    entered = Event()

    def _():
        with controller.lock(report):
            entered.set()

    with controller.lock(report):
        thread = Thread(target=_)
        thread.start()
        assert not entered.wait(0.1)
        with controller.lock(other):
            pass
    thread.join(1)
    assert entered.is_set()


def test_lock_registry_is_released(controller: ReportController):
    """Test that released locks are removed from the registry."""
    report = Report("S1", id_="a")
    with controller.lock(report):
        assert len(controller._locks) == 1
    assert controller._locks == {}

    controller.create_report("S1")
    controller.create_amendment("S1")
    assert controller._locks == {}


def test_operations_use_stored_state(
    controller: ReportController, fake_dcf, store
):
    """
    Test that operations on an outdated copy of a report act on the
    stored state instead of overwriting it.
    """
    report = controller.create_report("S1")
    controller.export_and_send(report, ExportConfig(OperationType.INSERT))
    fake_dcf.acks["msg-1"] = Ack(
        True, AckLog("D1", RemoteDatasetStatus.VALID)
    )

    first = controller.get_report(report.id_)
    second = controller.get_report(report.id_)

    fake_dcf.message = MessageResponse(True, "msg-2")
    controller.export_and_send(first, ExportConfig(OperationType.REPLACE))
    assert store.get(report.id_).message_id == "msg-2"

    # `second` still references 'msg-1'
    fake_dcf.acks["msg-2"] = Ack(False)
    with pytest.raises(AckNotReady):
        controller.refresh_status(second)
    assert second.message_id == "msg-2"
    assert ("get_ack", "msg-1") not in fake_dcf.calls
    stored = store.get(report.id_)
    assert stored.message_id == "msg-2"
    assert stored.status is ReportStatus.UPLOADED


def test_make_editable_outdated_copy(controller: ReportController, store):
    """
    Test method `ReportController.make_editable` for an outdated copy
    of a report.
    """
    report = controller.create_report("S1")
    copy = controller.get_report(report.id_)
    report.dataset_id = "D1"
    report.set_status(ReportStatus.REJECTED)
    store.update(report)

    controller.make_editable(copy)
    stored = store.get(report.id_)
    assert stored.status is ReportStatus.DRAFT
    assert stored.previous_status is ReportStatus.REJECTED
    assert stored.dataset_id == "D1"


def test_create_amendment_beyond_two_digits(controller: ReportController):
    """
    Test method `ReportController.create_amendment` for versions with
    more than two digits.
    """
    controller.create_report("S1", "99")
    assert controller.create_amendment("S1").version == "100"
    assert controller.create_amendment("S1").version == "101"
    assert [r.version for r in controller.get_all_versions("S1")] == [
        "99", "100", "101"
    ]


@pytest.mark.parametrize(
    ("first", "second"),
    [("", "00"), ("00", ""), ("01", "01")],
)
def test_create_report_duplicate_version(
    first, second, controller: ReportController
):
    """
    Test method `ReportController.create_report` for versions that
    share the same correlation key.
    """
    controller.create_report("S1", first)
    with pytest.raises(ValueError):
        controller.create_report("S1", second)
    assert len(controller.get_all_versions("S1")) == 1


def test_create_report_concurrent(controller: ReportController):
    """
    Test method `ReportController.create_report` for concurrent calls
    with the same version.
    """
    barrier = Barrier(4)
    results = []

    def _():
        barrier.wait()
        try:
            results.append(controller.create_report("S1"))
        except ValueError as exc_info:
            results.append(exc_info)

    threads = [Thread(target=_) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)

    assert len(results) == 4
    assert len([r for r in results if isinstance(r, Report)]) == 1
    assert len(controller.get_all_versions("S1")) == 1
