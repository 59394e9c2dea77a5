"""
This module defines the `PayloadBuilder` component of the rcl-backend.
"""

from pathlib import Path
from uuid import uuid4
import json

from rcl_backend.models import Report, ExportConfig
from rcl_backend.errors import MissingSenderId
from rcl_backend import versioning


class PayloadBuilder:
    """
    A `PayloadBuilder` writes the message payload of a report into a
    JSON-file.

    Keyword arguments:
    destination -- working directory for payload files
    """

    def __init__(self, destination: Path) -> None:
        self.destination = destination

    def build(self, report: Report, config: ExportConfig) -> Path:
        """
        Returns path to the payload file for sending `report` with the
        settings given in `config`.

        The payload consists of a header (identifying the dataset and
        the operation) and the dataset itself. The dataset is `None` if
        `config.empty_dataset` is set.
        """
        key = versioning.correlation_key(report.sender_id, report.version)
        if key is None:
            raise MissingSenderId(report.id_)

        self.destination.mkdir(parents=True, exist_ok=True)
        payload = self.destination / f"{uuid4()}.json"
        payload.write_text(
            json.dumps(
                {
                    "header": {
                        "senderDatasetId": key,
                        "operation": config.operation.value,
                        "datasetId": report.dataset_id,
                        "year": report.year,
                        "month": report.month,
                    },
                    "dataset": (
                        None if config.empty_dataset else report.json
                    ),
                },
                indent=2,
            ),
            encoding="utf-8",
        )
        return payload
