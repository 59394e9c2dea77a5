"""Utility definitions."""

from typing import Optional
from pathlib import Path
from json import loads, JSONDecodeError
from uuid import uuid3, UUID

from dcm_common.db import SQLAdapter

from rcl_backend.models import (
    Report,
    ReportStatus,
    AuthorityConfiguration,
)


def load_authority_configuration_from_string(
    json: str,
) -> AuthorityConfiguration:
    """Loads the DCF-gateway configuration from the given JSON-string."""

    try:
        authority_json = loads(json)
    except JSONDecodeError as exc_info:
        raise ValueError(
            f"Invalid DCF configuration: {exc_info}."
        ) from exc_info

    if not isinstance(authority_json, dict):
        raise ValueError(
            "Invalid DCF configuration: Expected object but got "
            + f"'{type(authority_json).__name__}'."
        )

    try:
        return AuthorityConfiguration.from_json(authority_json)
    except (TypeError, ValueError, KeyError) as exc_info:
        raise ValueError(
            "Unable to deserialize DCF configuration "
            + f"({type(exc_info).__name__}): {exc_info}"
        ) from exc_info


def load_authority_configuration_from_file(
    path: Path,
) -> AuthorityConfiguration:
    """Loads the DCF-gateway configuration from the given `path`."""
    return load_authority_configuration_from_string(
        path.read_text(encoding="utf-8")
    )


def data_collection_code(prefix: str, year: Optional[str]) -> str:
    """
    Returns the code of the data collection for the reporting `year`
    (or `prefix` if no year is given).
    """
    if not year:
        return prefix
    return f"{prefix}.{year}"


uuid_namespace = UUID("5b0f8c2e-3f4d-4c53-9d84-7f3ab0b1c6e2")


class DemoData:
    """Generated demo-data uuids."""

    report1 = str(uuid3(uuid_namespace, name="report1"))
    report2 = str(uuid3(uuid_namespace, name="report2"))
    report3 = str(uuid3(uuid_namespace, name="report3"))
    sender1 = "DEMO-0001"
    sender2 = "DEMO-0002"

    @classmethod
    def print(cls):
        """Print relevant DemoData to stdout."""
        attributes = [
            ("report1", cls.report1),
            ("report2", cls.report2),
            ("report3", cls.report3),
            ("sender1", cls.sender1),
            ("sender2", cls.sender2),
        ]
        line_length = max(len(f"{x[0]}: {x[1]}") for x in attributes)
        print("# " + "#" * line_length + " #")
        print("# # ReportDemoData" + " " * (line_length - 16) + " #")
        for x in attributes:
            y = f"{x[0]}: {x[1]}"
            print(
                f"# {y}"
                + " " * max(0, line_length - len(y))  # pad line length
                + " #"
            )
        print("# " + "#" * line_length + " #")


def create_demo_reports(db: SQLAdapter):
    """
    Creates a set of demo-reports.

    Keyword arguments:
    db -- database that should be written to
    """
    for report in [
        Report(
            DemoData.sender1,
            id_=DemoData.report1,
            year="2024",
            month="01",
        ),
        Report(
            DemoData.sender2,
            id_=DemoData.report2,
            status=ReportStatus.SUBMITTED,
            dataset_id="12345",
            message_id="67890",
            year="2024",
            month="02",
        ),
        Report(
            DemoData.sender2,
            version="01",
            id_=DemoData.report3,
            year="2024",
            month="02",
        ),
    ]:
        db.insert("reports", report.row).eval()
