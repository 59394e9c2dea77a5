"""
Status vocabulary of local reports and remote (DCF) datasets.

Both enumerations are closed; conversion from text never falls back to
a live status. Unrecognized text (including empty values) maps to the
respective `UNKNOWN`-sentinel.
"""

from typing import Optional
from enum import Enum


class RemoteDatasetStatus(Enum):
    """Dataset states as reported by the DCF."""

    VALID = "VALID"
    VALID_WITH_WARNINGS = "VALID_WITH_WARNINGS"
    REJECTED_EDITABLE = "REJECTED_EDITABLE"
    REJECTED = "REJECTED"
    DELETED = "DELETED"
    SUBMITTED = "SUBMITTED"
    ACCEPTED_DWH = "ACCEPTED_DWH"
    PROCESSING = "PROCESSING"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "RemoteDatasetStatus":
        """
        Returns the status associated with `value` or `UNKNOWN` if
        `value` is not part of the vocabulary.
        """
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN

    def exists_in_dcf(self) -> bool:
        """Returns `False` if no dataset record exists for this status."""
        return self is not RemoteDatasetStatus.UNKNOWN


class ReportStatus(Enum):
    """Lifecycle states of a local report."""

    DRAFT = "DRAFT"
    UPLOADED = "UPLOADED"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    SUBMISSION_SENT = "SUBMISSION_SENT"
    REJECTION_SENT = "REJECTION_SENT"
    SUBMITTED = "SUBMITTED"
    VALID = "VALID"
    VALID_WITH_WARNINGS = "VALID_WITH_WARNINGS"
    REJECTED_EDITABLE = "REJECTED_EDITABLE"
    REJECTED = "REJECTED"
    DELETED = "DELETED"
    ACCEPTED_DWH = "ACCEPTED_DWH"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "ReportStatus":
        """
        Returns the status associated with `value` or `UNKNOWN` if
        `value` is not part of the vocabulary.
        """
        if not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def from_remote(cls, status: RemoteDatasetStatus) -> "ReportStatus":
        """
        Returns the local counterpart of the remote `status` or
        `UNKNOWN` if the status only exists on the DCF-side.
        """
        if status is RemoteDatasetStatus.UNKNOWN:
            return cls.UNKNOWN
        return cls.from_string(status.value)

    def matches(self, status: RemoteDatasetStatus) -> bool:
        """
        Returns `True` if this status and the remote `status` share the
        same code. Sentinels never match.
        """
        return (
            self is not ReportStatus.UNKNOWN
            and status is not RemoteDatasetStatus.UNKNOWN
            and self.value == status.value
        )

    def is_editable(self) -> bool:
        """Returns `True` if a report in this status may be edited."""
        return self in _EDITABLE

    def can_receive_acknowledgment(self) -> bool:
        """
        Returns `True` while the report awaits feedback from the DCF.
        """
        return self in _AWAITING_ACK


_EDITABLE = frozenset(
    {
        ReportStatus.DRAFT,
        ReportStatus.UPLOAD_FAILED,
        ReportStatus.REJECTED_EDITABLE,
    }
)
_AWAITING_ACK = frozenset(
    {
        ReportStatus.UPLOADED,
        ReportStatus.SUBMISSION_SENT,
        ReportStatus.REJECTION_SENT,
    }
)
