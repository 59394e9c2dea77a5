"""
This module defines the `SendCoordinator` component of the rcl-backend.
"""

from typing import Optional
from pathlib import Path

from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    Report,
    ReportStatus,
    OperationType,
    ExportConfig,
    MessageResponse,
)
from rcl_backend.errors import RemoteQueryFailed, SendRejected
from .report_store import ReportStore
from .payload_builder import PayloadBuilder


_STATUS_BY_OPERATION = {
    OperationType.INSERT: ReportStatus.UPLOADED,
    OperationType.REPLACE: ReportStatus.UPLOADED,
    OperationType.REJECT: ReportStatus.REJECTION_SENT,
    OperationType.SUBMIT: ReportStatus.SUBMISSION_SENT,
}
_MODIFYING_OPERATIONS = frozenset(
    {OperationType.INSERT, OperationType.REPLACE, OperationType.REJECT}
)
_VALIDATING_OPERATIONS = frozenset(
    {OperationType.INSERT, OperationType.REPLACE}
)


class SendCoordinator:
    """
    A `SendCoordinator` dispatches messages for reports and records the
    outcome in the local store.

    Keyword arguments:
    transport -- DCF-client providing `send_message` (see
                 `DCFRestClient0`)
    store -- report store
    builder -- payload builder used in `export_and_send`
               (default None)
    retain_payload -- if `True`, payload files are not removed after
                      sending
                      (default False)
    """

    _TAG = "Send Coordinator"

    def __init__(
        self,
        transport,
        store: ReportStore,
        builder: Optional[PayloadBuilder] = None,
        retain_payload: bool = False,
    ) -> None:
        self.transport = transport
        self.store = store
        self.builder = builder
        self.retain_payload = retain_payload

    def send(
        self,
        report: Report,
        payload: Path,
        operation: OperationType,
        log: Optional[Logger] = None,
    ) -> MessageResponse:
        """
        Sends `payload` with `operation` and persists the resulting
        state of `report`.

        Raises `RemoteQueryFailed` if the message could not be
        delivered (`report` is left untouched) and `SendRejected` if
        the DCF refused it (`report` is moved to `UPLOAD_FAILED`).
        """
        if log is None:
            log = Logger(default_origin=self._TAG)
        response = self.transport.send_message(payload, operation)
        log.merge(response.log)
        if not response.success:
            raise RemoteQueryFailed(
                f"Unable to send report '{report.id_}'", response.log
            )

        message: MessageResponse = response.data
        if not message.success:
            report.set_status(ReportStatus.UPLOAD_FAILED)
            self.store.update(report)
            log.log(
                Context.ERROR,
                body=f"Message for report '{report.id_}' was rejected: "
                + f"{message.error or 'no reason given'}.",
            )
            raise SendRejected(message)

        report.message_id = message.message_id
        report.last_message_id = message.message_id
        if operation in _MODIFYING_OPERATIONS:
            report.last_modifying_message_id = message.message_id
        if operation in _VALIDATING_OPERATIONS:
            report.last_validation_message_id = message.message_id
        status = _STATUS_BY_OPERATION.get(operation)
        if status is not None:
            report.set_status(status)
        self.store.update(report)
        log.log(
            Context.EVENT,
            body=f"Sent report '{report.id_}' with operation "
            + f"'{operation.value}' (message '{message.message_id}'; "
            + f"status '{report.status.value}').",
        )
        return message

    def export_and_send(
        self,
        report: Report,
        config: ExportConfig,
        log: Optional[Logger] = None,
    ) -> MessageResponse:
        """
        Builds the payload of `report` according to `config` and sends
        it (see `send`). The payload file is removed afterwards unless
        `retain_payload` is set.
        """
        if self.builder is None:
            raise ValueError(
                "Cannot export report without a payload builder."
            )
        payload = self.builder.build(report, config)
        try:
            return self.send(report, payload, config.operation, log)
        finally:
            if not self.retain_payload:
                payload.unlink(missing_ok=True)
