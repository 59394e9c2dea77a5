"""
Report data-model definition
"""

from typing import Optional, Mapping
from dataclasses import dataclass, field

from dcm_common.models import DataModel

from rcl_backend import versioning
from .report_status import ReportStatus


@dataclass
class Report(DataModel):
    """
    Data model for a single version of a report (one row in the local
    report-table).

    Keyword arguments:
    sender_id -- client-assigned correlation key (shared by all
                 versions of a report)
    version -- version token; empty or `versioning.FIRST_VERSION` for
               the baseline version
               (default "")
    status -- local lifecycle status
              (default `ReportStatus.DRAFT`)
    id_ -- local row identifier
           (default None; assigned when inserted into the store)
    dataset_id -- DCF-assigned dataset identifier
                  (default None)
    message_id -- identifier of the last dispatched message
                  (default None)
    previous_status -- status before the most recent transition
                       (default None)
    year -- reporting year
            (default None)
    month -- reporting month
             (default None)
    last_message_id -- identifier of the most recently accepted message
                       (default None)
    last_modifying_message_id -- identifier of the last accepted
                                 message that changed the dataset
                                 (INSERT, REPLACE, or REJECT)
                                 (default None)
    last_validation_message_id -- identifier of the last accepted
                                  message that triggered a validation
                                  of the dataset (INSERT or REPLACE)
                                  (default None)
    """

    sender_id: Optional[str]
    version: str = ""
    status: ReportStatus = field(default_factory=lambda: ReportStatus.DRAFT)
    id_: Optional[str] = None
    dataset_id: Optional[str] = None
    message_id: Optional[str] = None
    previous_status: Optional[ReportStatus] = None
    year: Optional[str] = None
    month: Optional[str] = None
    last_message_id: Optional[str] = None
    last_modifying_message_id: Optional[str] = None
    last_validation_message_id: Optional[str] = None

    def set_status(self, status: ReportStatus) -> None:
        """Sets `status` and records the current one as previous."""
        self.previous_status = self.status
        self.status = status

    def make_editable(self) -> None:
        """Forces the report back into `DRAFT`."""
        self.set_status(ReportStatus.DRAFT)

    def is_editable(self) -> bool:
        """Returns `True` if the report can currently be edited."""
        return self.status.is_editable()

    def is_baseline_version(self) -> bool:
        """Returns `True` if this is the first version of the report."""
        return versioning.is_baseline(self.version)

    @property
    def was_sent(self) -> bool:
        """Returns `True` if a message has been dispatched before."""
        return bool(self.message_id)

    @DataModel.serialization_handler("id_", "id")
    @classmethod
    def id__serialization_handler(cls, value):
        """Handles `id_`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("id_", "id")
    @classmethod
    def id__deserialization_handler(cls, value):
        """Handles `id_`-deserialization."""
        if value is None:
            DataModel.skip()
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
        if value is None:
            DataModel.skip()
        return ReportStatus.from_string(value)

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

    @DataModel.serialization_handler("previous_status", "previousStatus")
    @classmethod
    def previous_status_serialization_handler(cls, value):
        """Handles `previous_status`-serialization."""
        if value is None:
            DataModel.skip()
        return value.value

    @DataModel.deserialization_handler("previous_status", "previousStatus")
    @classmethod
    def previous_status_deserialization_handler(cls, value):
        """Handles `previous_status`-deserialization."""
        if value is None:
            DataModel.skip()
        return ReportStatus.from_string(value)

    @DataModel.serialization_handler("year")
    @classmethod
    def year_serialization_handler(cls, value):
        """Handles `year`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("month")
    @classmethod
    def month_serialization_handler(cls, value):
        """Handles `month`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("last_message_id", "lastMessageId")
    @classmethod
    def last_message_id_serialization_handler(cls, value):
        """Handles `last_message_id`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("last_message_id", "lastMessageId")
    @classmethod
    def last_message_id_deserialization_handler(cls, value):
        """Handles `last_message_id`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler(
        "last_modifying_message_id", "lastModifyingMessageId"
    )
    @classmethod
    def last_modifying_message_id_serialization_handler(cls, value):
        """Handles `last_modifying_message_id`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler(
        "last_modifying_message_id", "lastModifyingMessageId"
    )
    @classmethod
    def last_modifying_message_id_deserialization_handler(cls, value):
        """Handles `last_modifying_message_id`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler(
        "last_validation_message_id", "lastValidationMessageId"
    )
    @classmethod
    def last_validation_message_id_serialization_handler(cls, value):
        """Handles `last_validation_message_id`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler(
        "last_validation_message_id", "lastValidationMessageId"
    )
    @classmethod
    def last_validation_message_id_deserialization_handler(cls, value):
        """Handles `last_validation_message_id`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @property
    def row(self) -> dict:
        """Convert to database row."""
        return {
            "id": self.id_,
            "sender_id": self.sender_id,
            "version": self.version,
            "status": self.status.value,
            "previous_status": (
                None
                if self.previous_status is None
                else self.previous_status.value
            ),
            "dataset_id": self.dataset_id,
            "message_id": self.message_id,
            "year": self.year,
            "month": self.month,
            "last_message_id": self.last_message_id,
            "last_modifying_message_id": self.last_modifying_message_id,
            "last_validation_message_id": self.last_validation_message_id,
        }

    @classmethod
    def from_row(cls, row: Mapping) -> "Report":
        """Initialize instance from database row."""
        return cls(
            id_=row["id"],
            sender_id=row.get("sender_id"),
            version=row.get("version") or "",
            status=ReportStatus.from_string(row.get("status")),
            previous_status=(
                None
                if not row.get("previous_status")
                else ReportStatus.from_string(row["previous_status"])
            ),
            dataset_id=row.get("dataset_id"),
            message_id=row.get("message_id"),
            year=row.get("year"),
            month=row.get("month"),
            last_message_id=row.get("last_message_id"),
            last_modifying_message_id=row.get("last_modifying_message_id"),
            last_validation_message_id=row.get(
                "last_validation_message_id"
            ),
        )
