"""
This module defines the `AcknowledgmentReconciler` component of the
rcl-backend.

The reconciliation of local and remote status follows a fixed table:
* the DCF has no dataset or both statuses coincide: unchanged
* local `SUBMITTED` and remote `ACCEPTED_DWH`/`REJECTED_EDITABLE`:
  adopt the remote status
* local not `SUBMITTED` and remote `DELETED`/`REJECTED`: back to
  `DRAFT`
* any other combination is inconsistent and left as is
"""

from typing import Optional

from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    Report,
    ReportStatus,
    RemoteDatasetStatus,
    OpResError,
    Ack,
    ReconcileOutcome,
    ReconcileResult,
)
from rcl_backend.errors import (
    AckUnavailable,
    AckNotReady,
    AuthorizationDenied,
    InvalidCollection,
)
from rcl_backend import util
from .report_store import ReportStore
from .dataset_locator import DatasetLocator


_ADOPTED_AFTER_SUBMISSION = frozenset(
    {
        RemoteDatasetStatus.ACCEPTED_DWH,
        RemoteDatasetStatus.REJECTED_EDITABLE,
    }
)
_RESET_TO_DRAFT = frozenset(
    {
        RemoteDatasetStatus.DELETED,
        RemoteDatasetStatus.REJECTED,
    }
)


class AcknowledgmentReconciler:
    """
    An `AcknowledgmentReconciler` interprets acknowledgments and the
    remote dataset status to update the local status of reports.

    Keyword arguments:
    transport -- DCF-client providing `get_ack` (see `DCFRestClient0`)
    store -- report store
    locator -- dataset locator
    data_collection -- data collection code prefix (used to name the
                       affected data collection in errors)
    """

    _TAG = "Acknowledgment Reconciler"

    def __init__(
        self,
        transport,
        store: ReportStore,
        locator: DatasetLocator,
        data_collection: str,
    ) -> None:
        self.transport = transport
        self.store = store
        self.locator = locator
        self.data_collection = data_collection

    def fetch_ack(
        self, report: Report, log: Optional[Logger] = None
    ) -> Optional[Ack]:
        """
        Returns the acknowledgment of the last message sent for
        `report` or `None` if the report has never been sent.

        Raises
        * `AckUnavailable` if the acknowledgment cannot be retrieved,
        * `InvalidCollection` if the DCF does not know the data
          collection, and
        * `AuthorizationDenied` if the account is not authorized for
          the data collection.
        """
        if not report.message_id:
            return None

        response = self.transport.get_ack(report.message_id)
        if log is not None:
            log.merge(response.log)
        if not response.success:
            raise AckUnavailable(
                "Unable to fetch acknowledgment for message "
                + f"'{report.message_id}'",
                response.log,
            )

        ack: Ack = response.data
        if ack.log is not None:
            match ack.log.op_res_error:
                case OpResError.NOT_EXISTING_DC:
                    raise InvalidCollection(
                        util.data_collection_code(
                            self.data_collection, report.year
                        )
                    )
                case OpResError.USER_NOT_AUTHORIZED:
                    raise AuthorizationDenied(
                        util.data_collection_code(
                            self.data_collection, report.year
                        )
                    )
        return ack

    def reconcile(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReconcileResult:
        """
        Aligns the status of `report` with the status of its remote
        dataset and persists `report` if its status changed.
        """
        previous = report.status
        dataset = self.locator.locate(report, log)

        if dataset is None or previous.matches(dataset.status):
            return ReconcileResult(
                ReconcileOutcome.UNCHANGED, previous, previous, dataset
            )

        status = None
        if previous is ReportStatus.SUBMITTED:
            if dataset.status in _ADOPTED_AFTER_SUBMISSION:
                status = ReportStatus.from_remote(dataset.status)
        elif dataset.status in _RESET_TO_DRAFT:
            status = ReportStatus.DRAFT

        if status is None:
            if log is not None:
                log.log(
                    Context.WARNING,
                    body=f"Status of report '{report.id_}' "
                    + f"('{previous.value}') is inconsistent with the "
                    + f"status of dataset '{dataset.id_}' "
                    + f"('{dataset.status.value}').",
                )
            return ReconcileResult(
                ReconcileOutcome.INCONSISTENT, previous, previous, dataset
            )

        if status is not previous:
            report.set_status(status)
            self.store.update(report)
            if log is not None:
                log.log(
                    Context.EVENT,
                    body=f"Changed status of report '{report.id_}' from "
                    + f"'{previous.value}' to '{status.value}' (dataset "
                    + f"'{dataset.id_}' is '{dataset.status.value}').",
                )
        return ReconcileResult(
            ReconcileOutcome.EXPECTED_TRANSITION, previous, status, dataset
        )

    def _apply_ack(
        self, report: Report, ack: Ack, log: Optional[Logger]
    ) -> ReportStatus:
        """Adopts dataset id and status of a ready `ack`."""
        report.dataset_id = ack.log.dataset_id
        status = ReportStatus.from_remote(ack.log.dataset_status)
        if status is ReportStatus.UNKNOWN:
            if log is not None:
                log.log(
                    Context.WARNING,
                    body=f"Acknowledgment for report '{report.id_}' "
                    + "reports dataset status "
                    + f"'{ack.log.dataset_status.value}' which has no "
                    + "local counterpart; keeping status "
                    + f"'{report.status.value}'.",
                )
        elif status is not report.status:
            report.set_status(status)
        self.store.update(report)
        return report.status

    def update_status_with_ack(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReportStatus:
        """
        Adopts dataset id and status reported in the acknowledgment of
        the last message of `report` (if ready) and persists `report`.
        Returns the resulting status.
        """
        ack = self.fetch_ack(report, log)
        if ack is None or not ack.ready or ack.log is None:
            return report.status
        return self._apply_ack(report, ack, log)

    def refresh_status(
        self, report: Report, log: Optional[Logger] = None
    ) -> ReconcileResult:
        """
        Refreshes the status of `report`.

        If `report` awaits an acknowledgment, the acknowledgment is
        applied first; `AckNotReady` is raised if it is unavailable,
        still in processing, or references no dataset. Afterwards, the
        status is reconciled with the remote dataset.
        """
        if not report.status.can_receive_acknowledgment():
            return self.reconcile(report, log)

        ack = self.fetch_ack(report, log)
        if ack is None:
            raise AckNotReady(
                None,
                f"Report '{report.id_}' is awaiting an acknowledgment but "
                + "has no message id.",
            )
        if not ack.ready or ack.log is None or not ack.log.is_ok:
            raise AckNotReady(
                ack,
                f"Message '{report.message_id}' of report '{report.id_}' "
                + "is still in processing.",
            )
        if not ack.log.dataset_status.exists_in_dcf():
            raise AckNotReady(
                ack,
                f"Acknowledgment for message '{report.message_id}' "
                + "reports an invalid dataset status "
                + f"('{ack.log.dataset_status.value}').",
            )

        self._apply_ack(report, ack, log)
        return self.reconcile(report, log)
