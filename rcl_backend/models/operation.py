"""
OperationType and ExportConfig data-model definitions
"""

from dataclasses import dataclass
from enum import Enum

from dcm_common.models import DataModel


class OperationType(Enum):
    """Network operations supported by the DCF."""

    INSERT = "INSERT"
    REPLACE = "REPLACE"
    REJECT = "REJECT"
    SUBMIT = "SUBMIT"
    NOT_SUPPORTED = "NOT_SUPPORTED"


@dataclass
class ExportConfig(DataModel):
    """
    Settings for building the payload of a single message.

    Keyword arguments:
    operation -- operation the payload is sent with
    empty_dataset -- if `True`, the payload contains only the dataset
                     header (used for REJECT/SUBMIT-messages)
                     (default False)
    """

    operation: OperationType
    empty_dataset: bool = False

    @DataModel.serialization_handler("operation")
    @classmethod
    def operation_serialization_handler(cls, value):
        """Handles `operation`-serialization."""
        return value.value

    @DataModel.deserialization_handler("operation")
    @classmethod
    def operation_deserialization_handler(cls, value):
        """Handles `operation`-deserialization."""
        return OperationType(value)

    @DataModel.serialization_handler("empty_dataset", "emptyDataset")
    @classmethod
    def empty_dataset_serialization_handler(cls, value):
        """Handles `empty_dataset`-serialization."""
        return value

    @DataModel.deserialization_handler("empty_dataset", "emptyDataset")
    @classmethod
    def empty_dataset_deserialization_handler(cls, value):
        """Handles `empty_dataset`-deserialization."""
        if value is None:
            DataModel.skip()
        return value
