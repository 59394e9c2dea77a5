"""
Decision table for the next network operation of a report.
"""

from typing import Optional
from dataclasses import dataclass

from rcl_backend.models import OperationType, RemoteDataset, RemoteDatasetStatus
from rcl_backend.errors import UnsupportedOperation


_OPERATION_BY_STATUS = {
    RemoteDatasetStatus.REJECTED_EDITABLE: OperationType.REPLACE,
    RemoteDatasetStatus.VALID: OperationType.REPLACE,
    RemoteDatasetStatus.VALID_WITH_WARNINGS: OperationType.REPLACE,
    RemoteDatasetStatus.DELETED: OperationType.INSERT,
}


@dataclass
class SendOperation:
    """
    Resolved send operation together with the remote dataset it has
    been derived from.
    """

    operation: OperationType
    dataset: Optional[RemoteDataset] = None


def resolve_send_operation(
    dataset: Optional[RemoteDataset],
) -> SendOperation:
    """
    Returns the `SendOperation` that is allowed next for a report whose
    authoritative remote counterpart is `dataset`.

    Raises `UnsupportedOperation` if the remote status has no defined
    next action.

    Keyword arguments:
    dataset -- most recent matching remote dataset or `None` if the
               authority has no record
    """
    if dataset is None:
        return SendOperation(OperationType.INSERT)
    operation = _OPERATION_BY_STATUS.get(dataset.status)
    if operation is None:
        raise UnsupportedOperation(dataset.status)
    return SendOperation(operation, dataset)
