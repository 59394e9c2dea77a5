"""
Ack and AckLog data-model definitions
"""

from typing import Optional
from dataclasses import dataclass, field
from enum import Enum

from dcm_common.models import DataModel

from .report_status import RemoteDatasetStatus


class OpResError(Enum):
    """Operation-result errors reported in an acknowledgment."""

    NONE = "NONE"
    NOT_EXISTING_DC = "NOT_EXISTING_DC"
    USER_NOT_AUTHORIZED = "USER_NOT_AUTHORIZED"
    OTHER = "OTHER"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "OpResError":
        """
        Returns the error associated with `value`. A missing value
        means no error; unrecognized text maps to `OTHER`.
        """
        if value is None or value == "":
            return cls.NONE
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.OTHER


@dataclass
class AckLog(DataModel):
    """
    Contents of a ready acknowledgment.

    Keyword arguments:
    dataset_id -- DCF-assigned dataset identifier
                  (default None)
    dataset_status -- status of the dataset after processing the message
                      (default `RemoteDatasetStatus.UNKNOWN`)
    op_res_error -- operation-result error
                    (default `OpResError.NONE`)
    """

    dataset_id: Optional[str] = None
    dataset_status: RemoteDatasetStatus = field(
        default_factory=lambda: RemoteDatasetStatus.UNKNOWN
    )
    op_res_error: OpResError = field(default_factory=lambda: OpResError.NONE)

    @property
    def is_ok(self) -> bool:
        """Returns `True` if the operation did not fail."""
        return self.op_res_error is OpResError.NONE

    @DataModel.serialization_handler("dataset_id", "datasetId")
    @classmethod
    def dataset_id_serialization_handler(cls, value):
        """Handles `dataset_id`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("dataset_id", "datasetId")
    @classmethod
    def dataset_id_deserialization_handler(cls, value):
        """Handles `dataset_id`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("dataset_status", "datasetStatus")
    @classmethod
    def dataset_status_serialization_handler(cls, value):
        """Handles `dataset_status`-serialization."""
        return value.value

    @DataModel.deserialization_handler("dataset_status", "datasetStatus")
    @classmethod
    def dataset_status_deserialization_handler(cls, value):
        """Handles `dataset_status`-deserialization."""
        return RemoteDatasetStatus.from_string(value)

    @DataModel.serialization_handler("op_res_error", "opResError")
    @classmethod
    def op_res_error_serialization_handler(cls, value):
        """Handles `op_res_error`-serialization."""
        return value.value

    @DataModel.deserialization_handler("op_res_error", "opResError")
    @classmethod
    def op_res_error_deserialization_handler(cls, value):
        """Handles `op_res_error`-deserialization."""
        return OpResError.from_string(value)


@dataclass
class Ack(DataModel):
    """
    Acknowledgment of a previously dispatched message.

    Keyword arguments:
    ready -- whether the DCF finished processing the message
    log -- acknowledgment contents (only if `ready`)
           (default None)
    """

    ready: bool
    log: Optional[AckLog] = None

    @DataModel.serialization_handler("log")
    @classmethod
    def log_serialization_handler(cls, value):
        """Handles `log`-serialization."""
        if value is None:
            DataModel.skip()
        return value.json

    @DataModel.deserialization_handler("log")
    @classmethod
    def log_deserialization_handler(cls, value):
        """Handles `log`-deserialization."""
        if value is None:
            DataModel.skip()
        return AckLog.from_json(value)
