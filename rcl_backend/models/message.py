"""
MessageResponse data-model definition
"""

from typing import Optional
from dataclasses import dataclass

from dcm_common.models import DataModel


@dataclass
class MessageResponse(DataModel):
    """
    Synchronous response of the DCF to a dispatched message.

    Keyword arguments:
    success -- whether the message has been accepted for processing
    message_id -- identifier assigned to the message (only on success)
                  (default None)
    error -- error description given by the DCF (only on failure)
             (default None)
    """

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    @DataModel.serialization_handler("message_id", "messageId")
    @classmethod
    def message_id_serialization_handler(cls, value):
        """Handles `message_id`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("message_id", "messageId")
    @classmethod
    def message_id_deserialization_handler(cls, value):
        """Handles `message_id`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("error")
    @classmethod
    def error_serialization_handler(cls, value):
        """Handles `error`-serialization."""
        if value is None:
            DataModel.skip()
        return value
