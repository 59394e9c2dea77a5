"""Error definitions for the report lifecycle."""

from typing import Optional

from dcm_common import Logger

from rcl_backend.models import RemoteDatasetStatus, MessageResponse, Ack


class ReportError(Exception):
    """Base class of all report lifecycle errors."""


class MissingSenderId(ReportError):
    """A report lacks the sender id required for correlation."""

    def __init__(self, report_id: Optional[str] = None) -> None:
        self.report_id = report_id
        super().__init__(
            "Cannot retrieve the dataset of report "
            + f"'{report_id}' since it lacks a sender id."
        )


class UnsupportedOperation(ReportError):
    """No send operation is defined for the dataset status."""

    def __init__(self, status: RemoteDatasetStatus) -> None:
        self.status = status
        super().__init__(
            f"No send operation for status '{status.value}' is supported."
        )


class RemoteQueryFailed(ReportError):
    """A request to the DCF did not succeed."""

    def __init__(self, msg: str, log: Optional[Logger] = None) -> None:
        self.log = log
        super().__init__(
            msg
            if log is None
            else f"{msg}:\n{log.fancy()}"
        )


class AckUnavailable(RemoteQueryFailed):
    """The acknowledgment of a message could not be retrieved."""


class SendRejected(ReportError):
    """The DCF refused a message."""

    def __init__(self, response: MessageResponse) -> None:
        self.response = response
        super().__init__(
            "Message has been rejected by the DCF"
            + (f": {response.error}" if response.error else ".")
        )


class AuthorizationDenied(ReportError):
    """The user is not authorized for the data collection."""

    def __init__(self, data_collection: str) -> None:
        self.data_collection = data_collection
        super().__init__(
            "Account is not authorized for the data collection "
            + f"'{data_collection}'."
        )


class InvalidCollection(ReportError):
    """The data collection does not exist in the DCF."""

    def __init__(self, data_collection: str) -> None:
        self.data_collection = data_collection
        super().__init__(
            f"The data collection '{data_collection}' is not a valid one."
        )


class AckNotReady(ReportError):
    """The acknowledgment cannot be used (yet)."""

    def __init__(self, ack: Optional[Ack], msg: str) -> None:
        self.ack = ack
        super().__init__(msg)
