from .report_status import ReportStatus, RemoteDatasetStatus
from .operation import OperationType, ExportConfig
from .report import Report
from .dataset import RemoteDataset
from .message import MessageResponse
from .ack import OpResError, AckLog, Ack
from .reconciliation import ReconcileOutcome, ReconcileResult
from .authority_configuration import AuthorityConfiguration


__all__ = [
    "ReportStatus",
    "RemoteDatasetStatus",
    "OperationType",
    "ExportConfig",
    "Report",
    "RemoteDataset",
    "MessageResponse",
    "OpResError",
    "AckLog",
    "Ack",
    "ReconcileOutcome",
    "ReconcileResult",
    "AuthorityConfiguration",
]
