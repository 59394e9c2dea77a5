"""
This module defines the `ReportStore` component of the rcl-backend.
"""

from typing import Any, Optional
from uuid import uuid4

from dcm_common.db import SQLAdapter

from rcl_backend.models import Report
from rcl_backend import versioning


class ReportStore:
    """
    A `ReportStore` persists `Report`s as rows of a single table (one
    row per report version).

    Keyword arguments:
    db -- database adapter
    table -- name of the report table
             (default "reports")
    """

    def __init__(self, db: SQLAdapter, table: str = "reports") -> None:
        self.db = db
        self.table = table

    def get_all(self) -> list[Report]:
        """Returns all reports."""
        return [
            Report.from_row(row)
            for row in self.db.get_rows(self.table).eval(
                "fetching reports"
            )
        ]

    def get(self, id_: str) -> Optional[Report]:
        """Returns the report with the given `id_` or `None`."""
        row = self.db.get_row(self.table, id_).eval(
            f"fetching report '{id_}'"
        )
        if row is None:
            return None
        return Report.from_row(row)

    def get_by_field(self, column: str, value: Any) -> list[Report]:
        """Returns all reports where `column` equals `value`."""
        return [
            Report.from_row(row)
            for row in self.db.get_rows(self.table, value, column).eval(
                f"fetching reports with {column}='{value}'"
            )
        ]

    def insert(self, report: Report) -> str:
        """
        Writes a new row for `report` and returns its id. If `report`
        has no id yet, one is generated (and set in `report`).
        """
        if report.id_ is None:
            report.id_ = str(uuid4())
        self.db.insert(self.table, report.row).eval(
            f"writing report '{report.id_}'"
        )
        return report.id_

    def update(self, report: Report) -> None:
        """Overwrites the row of `report` with its current state."""
        if report.id_ is None:
            raise ValueError(
                f"Cannot update report of sender '{report.sender_id}' "
                + "without id (not yet stored)."
            )
        self.db.update(self.table, report.row).eval(
            f"updating report '{report.id_}'"
        )

    def delete_by_field(self, column: str, value: Any) -> int:
        """
        Deletes all reports where `column` equals `value` and returns
        the number of deleted rows.
        """
        count = len(
            self.db.get_rows(self.table, value, column, ["id"]).eval(
                f"fetching reports with {column}='{value}'"
            )
        )
        if count > 0:
            self.db.delete(self.table, value, column).eval(
                f"deleting reports with {column}='{value}'"
            )
        return count

    def is_locally_present(self, sender_id: Optional[str]) -> bool:
        """Returns `True` if any version of `sender_id` is stored."""
        if sender_id is None:
            return False
        return (
            len(
                self.db.get_rows(
                    self.table, sender_id, "sender_id", ["id"]
                ).eval(f"fetching reports of sender '{sender_id}'")
            )
            > 0
        )

    def get_all_versions(self, sender_id: str) -> list[Report]:
        """Returns all versions of `sender_id` ordered by version."""
        return sorted(
            self.get_by_field("sender_id", sender_id),
            key=lambda report: versioning.version_order(report.version),
        )

    def delete_all_versions(self, sender_id: str) -> bool:
        """
        Deletes all versions of `sender_id`. Returns `True` if any row
        has been removed.
        """
        return self.delete_by_field("sender_id", sender_id) > 0
