"""
ReconcileResult data-model definition
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum

from dcm_common.models import DataModel

from .report_status import ReportStatus
from .dataset import RemoteDataset


class ReconcileOutcome(Enum):
    """Classification of a status reconciliation."""

    UNCHANGED = "unchanged"
    EXPECTED_TRANSITION = "expected-transition"
    INCONSISTENT = "inconsistent"


@dataclass
class ReconcileResult(DataModel):
    """
    Result of aligning a local report with its DCF dataset.

    Keyword arguments:
    outcome -- classification of the reconciliation
    previous -- local status before reconciling
    status -- local status after reconciling
    remote -- dataset the reconciliation was based on
              (default None; no dataset exists in the DCF)
    """

    outcome: ReconcileOutcome
    previous: ReportStatus
    status: ReportStatus
    remote: Optional[RemoteDataset] = None

    @property
    def changed(self) -> bool:
        """Returns `True` if the local status has been modified."""
        return self.previous is not self.status

    @DataModel.serialization_handler("outcome")
    @classmethod
    def outcome_serialization_handler(cls, value):
        """Handles `outcome`-serialization."""
        return value.value

    @DataModel.deserialization_handler("outcome")
    @classmethod
    def outcome_deserialization_handler(cls, value):
        """Handles `outcome`-deserialization."""
        return ReconcileOutcome(value)

    @DataModel.serialization_handler("previous")
    @classmethod
    def previous_serialization_handler(cls, value):
        """Handles `previous`-serialization."""
        return value.value

    @DataModel.deserialization_handler("previous")
    @classmethod
    def previous_deserialization_handler(cls, value):
        """Handles `previous`-deserialization."""
        return ReportStatus.from_string(value)

    @DataModel.serialization_handler("status")
    @classmethod
    def status_serialization_handler(cls, value):
        """Handles `status`-serialization."""
        return value.value

    @DataModel.deserialization_handler("status")
    @classmethod
    def status_deserialization_handler(cls, value):
        """Handles `status`-deserialization."""
        return ReportStatus.from_string(value)

    @DataModel.serialization_handler("remote")
    @classmethod
    def remote_serialization_handler(cls, value):
        """Handles `remote`-serialization."""
        if value is None:
            DataModel.skip()
        return value.json

    @DataModel.deserialization_handler("remote")
    @classmethod
    def remote_deserialization_handler(cls, value):
        """Handles `remote`-deserialization."""
        if value is None:
            DataModel.skip()
        return RemoteDataset.from_json(value)
