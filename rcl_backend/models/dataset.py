"""
RemoteDataset data-model definition
"""

from dataclasses import dataclass

from dcm_common.models import DataModel

from .report_status import RemoteDatasetStatus


@dataclass
class RemoteDataset(DataModel):
    """
    Class to represent a dataset as listed by the DCF.

    Keyword arguments:
    id_ -- DCF-assigned dataset identifier
    sender_id -- sender dataset id (including the version suffix for
                 amendments)
    status -- dataset status in the DCF
    """

    id_: str
    sender_id: str
    status: RemoteDatasetStatus

    @DataModel.serialization_handler("id_", "id")
    @classmethod
    def id__serialization_handler(cls, value):
        """Handles `id_`-serialization."""
        return value

    @DataModel.deserialization_handler("id_", "id")
    @classmethod
    def id__deserialization_handler(cls, value):
        """Handles `id_`-deserialization."""
        return value

    @DataModel.serialization_handler("sender_id", "senderId")
    @classmethod
    def sender_id_serialization_handler(cls, value):
        """Handles `sender_id`-serialization."""
        return value

    @DataModel.deserialization_handler("sender_id", "senderId")
    @classmethod
    def sender_id_deserialization_handler(cls, value):
        """Handles `sender_id`-deserialization."""
        return value

    @DataModel.serialization_handler("status")
    @classmethod
    def status_serialization_handler(cls, value):
        """Handles `status`-serialization."""
        return value.value

    @DataModel.deserialization_handler("status")
    @classmethod
    def status_deserialization_handler(cls, value):
        """Handles `status`-deserialization."""
        return RemoteDatasetStatus.from_string(value)
