"""
This module defines the `DatasetLocator` component of the rcl-backend.
"""

from typing import Optional

from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import Report, RemoteDataset
from rcl_backend.errors import MissingSenderId, RemoteQueryFailed
from rcl_backend import versioning, util


class DatasetLocator:
    """
    A `DatasetLocator` retrieves the remote datasets that correspond to
    a local report.

    Keyword arguments:
    transport -- DCF-client providing `get_dataset_list` (see
                 `DCFRestClient0`)
    data_collection -- data collection code prefix; the reporting year
                       of a report is appended when querying
    """

    def __init__(self, transport, data_collection: str) -> None:
        self.transport = transport
        self.data_collection = data_collection

    def locate_all(
        self, report: Report, log: Optional[Logger] = None
    ) -> list[RemoteDataset]:
        """
        Returns all remote datasets listed under the correlation key of
        `report` in the order given by the DCF (newest first).

        Raises `MissingSenderId` (before any request is made) if the
        report has no sender id and `RemoteQueryFailed` if the dataset
        list cannot be retrieved.
        """
        key = versioning.correlation_key(report.sender_id, report.version)
        if key is None:
            raise MissingSenderId(report.id_)

        data_collection = util.data_collection_code(
            self.data_collection, report.year
        )
        response = self.transport.get_dataset_list(data_collection)
        if log is not None:
            log.merge(response.log)
        if not response.success:
            raise RemoteQueryFailed(
                "Unable to list datasets of data collection "
                + f"'{data_collection}'",
                response.log,
            )

        matches = [
            dataset for dataset in response.data if dataset.sender_id == key
        ]
        if log is not None:
            log.log(
                Context.INFO,
                body=f"Found {len(matches)} dataset(s) for sender dataset "
                + f"id '{key}' in data collection '{data_collection}'.",
            )
        return matches

    def locate(
        self, report: Report, log: Optional[Logger] = None
    ) -> Optional[RemoteDataset]:
        """
        Returns the most recent remote dataset of `report` or `None` if
        the DCF has no record of it (see `locate_all`).
        """
        return next(iter(self.locate_all(report, log)), None)
