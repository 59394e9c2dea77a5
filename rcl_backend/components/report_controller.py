"""
This module defines the `ReportController` component of the
rcl-backend.
"""

from typing import Optional
from contextlib import contextmanager
from dataclasses import fields
from pathlib import Path
from threading import Lock

from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    Report,
    ReportStatus,
    OperationType,
    ExportConfig,
    MessageResponse,
    Ack,
    ReconcileResult,
)
from rcl_backend import versioning
from .operation_resolver import SendOperation, resolve_send_operation
from .report_store import ReportStore
from .dataset_locator import DatasetLocator
from .send_coordinator import SendCoordinator
from .ack_reconciler import AcknowledgmentReconciler
from .payload_builder import PayloadBuilder


class ReportController:
    """
    A `ReportController` bundles the report lifecycle operations. Calls
    that concern the same report are serialized.

    Keyword arguments:
    store -- report store
    transport -- DCF-client (see `DCFRestClient0`)
    data_collection -- data collection code prefix
    builder -- payload builder
               (default None)
    retain_payload -- if `True`, payload files are not removed after
                      sending
                      (default False)
    """

    _TAG = "Report Controller"

    def __init__(
        self,
        store: ReportStore,
        transport,
        data_collection: str,
        builder: Optional[PayloadBuilder] = None,
        retain_payload: bool = False,
    ) -> None:
        self.store = store
        self.locator = DatasetLocator(transport, data_collection)
        self.coordinator = SendCoordinator(
            transport, store, builder, retain_payload
        )
        self.reconciler = AcknowledgmentReconciler(
            transport, store, self.locator, data_collection
        )
        self._locks: dict[tuple[str, str], list] = {}
        self._registry_lock = Lock()

    @contextmanager
    def _hold(self, key: tuple[str, str]):
        """
        Context manager holding the lock registered for `key`. The
        registry entry is dropped once no caller holds or awaits it.
        """
        with self._registry_lock:
            entry = self._locks.setdefault(key, [Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._registry_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    @contextmanager
    def lock(self, report: Report):
        """
        Context manager holding the lock of `report`. While held,
        `report` reflects the stored state of that report.
        """
        if report.id_ is None:
            with self._hold(("sender", report.sender_id or "")):
                yield
            return
        with self._hold(("report", report.id_)):
            self._reload(report)
            yield

    def _reload(self, report: Report) -> None:
        """Replaces the state of `report` with the stored one."""
        stored = self.store.get(report.id_)
        if stored is None:
            return
        for field in fields(Report):
            setattr(report, field.name, getattr(stored, field.name))

    def get_report(self, id_: str) -> Optional[Report]:
        """Returns the report `id_` from the store or `None`."""
        return self.store.get(id_)

    def create_report(
        self,
        sender_id: str,
        version: str = "",
        year: Optional[str] = None,
        month: Optional[str] = None,
        log: Optional[Logger] = None,
    ) -> Report:
        """
        Creates and persists a new report in `DRAFT`.

        Raises `ValueError` if this version of `sender_id` already
        exists (all baseline versions are considered equal).
        """
        with self._hold(("sender", sender_id)):
            return self._create_report(sender_id, version, year, month, log)

    def _create_report(
        self,
        sender_id: str,
        version: str,
        year: Optional[str],
        month: Optional[str],
        log: Optional[Logger],
    ) -> Report:
        key = versioning.correlation_key(sender_id, version)
        if any(
            versioning.correlation_key(report.sender_id, report.version)
            == key
            for report in self.store.get_all_versions(sender_id)
        ):
            raise ValueError(
                f"Report '{sender_id}' in version '{version}' does "
                + "already exist."
            )
        report = Report(sender_id, version, year=year, month=month)
        self.store.insert(report)
        if log is not None:
            log.log(
                Context.INFO,
                body=f"Created report '{report.id_}' for sender "
                + f"'{sender_id}'.",
            )
        return report

    def create_amendment(
        self, sender_id: str, log: Optional[Logger] = None
    ) -> Report:
        """
        Creates a new version (in `DRAFT`) based on the latest version
        of `sender_id`.

        Raises `ValueError` if no version of `sender_id` exists.
        """
        with self._hold(("sender", sender_id)):
            versions = self.store.get_all_versions(sender_id)
            if not versions:
                raise ValueError(f"Unknown report '{sender_id}'.")
            latest = versions[-1]
            return self._create_report(
                sender_id,
                versioning.next_version(latest.version),
                latest.year,
                latest.month,
                log,
            )

    def make_editable(
        self, report: Report, log: Optional[Logger] = None
    ) -> Report:
        """Moves `report` back into `DRAFT` and persists it."""
        with self.lock(report):
            if report.status is not ReportStatus.DRAFT:
                report.make_editable()
                self.store.update(report)
                if log is not None:
                    log.log(
                        Context.INFO,
                        body=f"Report '{report.id_}' is editable again.",
                    )
        return report

    def get_send_operation(
        self, report: Report, log: Optional[Logger] = None
    ) -> SendOperation:
        """
        Returns the `SendOperation` allowed next for `report` (see
        `resolve_send_operation`).
        """
        with self.lock(report):
            return resolve_send_operation(self.locator.locate(report, log))

    def send(
        self,
        report: Report,
        payload: Path,
        operation: OperationType,
        log: Optional[Logger] = None,
    ) -> MessageResponse:
        """See `SendCoordinator.send`."""
        with self.lock(report):
            return self.coordinator.send(report, payload, operation, log)

    def export_and_send(
        self,
        report: Report,
        config: Optional[ExportConfig] = None,
        log: Optional[Logger] = None,
    ) -> MessageResponse:
        """
        See `SendCoordinator.export_and_send`. If no `config` is given,
        the operation is resolved from the remote dataset status.
        """
        with self.lock(report):
            if config is None:
                config = ExportConfig(
                    resolve_send_operation(
                        self.locator.locate(report, log)
                    ).operation
                )
            return self.coordinator.export_and_send(report, config, log)

    def get_ack(
        self, report: Report, log: Optional[Logger] = None
    ) -> Optional[Ack]:
        """See `AcknowledgmentReconciler.fetch_ack`."""
        with self.lock(report):
            return self.reconciler.fetch_ack(report, log)

    def update_status_with_ack(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReportStatus:
        """See `AcknowledgmentReconciler.update_status_with_ack`."""
        with self.lock(report):
            return self.reconciler.update_status_with_ack(report, log)

    def reconcile_status(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReconcileResult:
        """See `AcknowledgmentReconciler.reconcile`."""
        with self.lock(report):
            return self.reconciler.reconcile(report, log)

    def refresh_status(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReconcileResult:
        """See `AcknowledgmentReconciler.refresh_status`."""
        with self.lock(report):
            return self.reconciler.refresh_status(report, log)

    def is_locally_present(self, sender_id: Optional[str]) -> bool:
        """See `ReportStore.is_locally_present`."""
        return self.store.is_locally_present(sender_id)

    def get_all_versions(self, sender_id: str) -> list[Report]:
        """See `ReportStore.get_all_versions`."""
        return self.store.get_all_versions(sender_id)

    def delete_all_versions(
        self, sender_id: str, log: Optional[Logger] = None
    ) -> bool:
        """See `ReportStore.delete_all_versions`."""
        with self._hold(("sender", sender_id)):
            deleted = self.store.delete_all_versions(sender_id)
        if deleted and log is not None:
            log.log(
                Context.INFO,
                body=f"Deleted all versions of report '{sender_id}'.",
            )
        return deleted
