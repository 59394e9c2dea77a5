from .dcf_client import ClientResponse, DCFRestClient0
from .operation_resolver import SendOperation, resolve_send_operation
from .report_store import ReportStore
from .dataset_locator import DatasetLocator
from .payload_builder import PayloadBuilder
from .send_coordinator import SendCoordinator
from .ack_reconciler import AcknowledgmentReconciler
from .report_controller import ReportController


__all__ = [
    "ClientResponse",
    "DCFRestClient0",
    "SendOperation",
    "resolve_send_operation",
    "ReportStore",
    "DatasetLocator",
    "PayloadBuilder",
    "SendCoordinator",
    "AcknowledgmentReconciler",
    "ReportController",
]
