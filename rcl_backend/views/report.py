"""
Report View-class definition
"""

from typing import Optional

from flask import Blueprint, Response, jsonify
from data_plumber_http.decorators import flask_handler, flask_args, flask_json
from dcm_common import Logger
from dcm_common import services
from dcm_common.services.views.interface import View

from rcl_backend.config import AppConfig
from rcl_backend.models import Report, OperationType, ExportConfig
from rcl_backend.errors import (
    ReportError,
    MissingSenderId,
    UnsupportedOperation,
    RemoteQueryFailed,
    SendRejected,
    AuthorizationDenied,
    InvalidCollection,
    AckNotReady,
)
from rcl_backend.components import ReportController
from rcl_backend import handlers


_STATUS_BY_ERROR = (
    (MissingSenderId, 422),
    (UnsupportedOperation, 409),
    (RemoteQueryFailed, 502),
    (SendRejected, 502),
    (AuthorizationDenied, 403),
    (InvalidCollection, 404),
    (AckNotReady, 503),
)


def error_response(exc_info: ReportError) -> Response:
    """Returns the HTTP-response associated with `exc_info`."""
    return Response(
        str(exc_info),
        mimetype="text/plain",
        status=next(
            (
                status
                for error, status in _STATUS_BY_ERROR
                if isinstance(exc_info, error)
            ),
            500,
        ),
    )


class ReportLifecycleView(View):
    """
    View-class for the lifecycle of reports.

    Keyword arguments:
    config -- `AppConfig`-object
    controller -- `ReportController`-object
    """

    NAME = "report"

    def __init__(
        self,
        config: AppConfig,
        controller: ReportController,
    ) -> None:
        super().__init__(config)
        self.controller = controller

    def _load(self, id_: str) -> tuple[Optional[Report], Optional[Response]]:
        """
        Returns a tuple of the report `id_` and `None` or, if the report
        does not exist, `None` and an error-response.
        """
        report = self.controller.get_report(id_)
        if report is None:
            return None, Response(
                f"Unknown report '{id_}'.",
                mimetype="text/plain",
                status=404,
            )
        return report, None

    def _get_report(self, bp: Blueprint):
        @bp.route("/report", methods=["GET"], provide_automatic_options=False)
        @flask_handler(  # process query
            handler=handlers.get_report_id_handler(True),
            json=flask_args,
        )
        def get_report(id_: str):
            """Fetch report associated with given `id_`."""
            report, error = self._load(id_)
            if error is not None:
                return error
            return jsonify(report.json), 200

    def _post_report(self, bp: Blueprint):
        @bp.route("/report", methods=["POST"], provide_automatic_options=False)
        @flask_handler(  # process query
            handler=services.no_args_handler,
            json=flask_args,
        )
        @flask_handler(  # process report
            handler=handlers.post_report_handler,
            json=flask_json,
        )
        def post_report(
            sender_id: str,
            version: str = "",
            year: Optional[str] = None,
            month: Optional[str] = None,
        ):
            """Create new report in 'DRAFT'."""
            try:
                report = self.controller.create_report(
                    sender_id, version, year, month
                )
            except ValueError as exc_info:
                return Response(
                    str(exc_info), mimetype="text/plain", status=409
                )
            return jsonify(report.json), 200

    def _post_amendment(self, bp: Blueprint):
        @bp.route(
            "/report/amendment",
            methods=["POST"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=services.no_args_handler,
            json=flask_args,
        )
        @flask_handler(  # process body
            handler=handlers.sender_id_handler,
            json=flask_json,
        )
        def post_amendment(sender_id: str):
            """Create next version of the report `sender_id`."""
            try:
                report = self.controller.create_amendment(sender_id)
            except ValueError as exc_info:
                return Response(
                    str(exc_info), mimetype="text/plain", status=404
                )
            return jsonify(report.json), 200

    def _make_editable(self, bp: Blueprint):
        @bp.route(
            "/report/editable",
            methods=["POST"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=services.no_args_handler,
            json=flask_args,
        )
        @flask_handler(  # process body
            handler=handlers.get_report_id_handler(True),
            json=flask_json,
        )
        def make_editable(id_: str):
            """Move report back into 'DRAFT'."""
            report, error = self._load(id_)
            if error is not None:
                return error
            return jsonify(self.controller.make_editable(report).json), 200

    def _get_versions(self, bp: Blueprint):
        @bp.route(
            "/report/versions",
            methods=["GET"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=handlers.sender_id_handler,
            json=flask_args,
        )
        def get_versions(sender_id: str):
            """List all versions of report `sender_id`."""
            return (
                jsonify(
                    [
                        report.json
                        for report in self.controller.get_all_versions(
                            sender_id
                        )
                    ]
                ),
                200,
            )

    def _delete_versions(self, bp: Blueprint):
        @bp.route(
            "/report/versions",
            methods=["DELETE"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=handlers.sender_id_handler,
            json=flask_args,
        )
        def delete_versions(sender_id: str):
            """Delete all versions of report `sender_id`."""
            if not self.controller.delete_all_versions(sender_id):
                return Response(
                    f"Unknown report '{sender_id}'.",
                    mimetype="text/plain",
                    status=404,
                )
            return Response(
                f"Deleted report '{sender_id}'.",
                mimetype="text/plain",
                status=200,
            )

    def _get_operation(self, bp: Blueprint):
        @bp.route(
            "/report/operation",
            methods=["GET"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=handlers.get_report_id_handler(True),
            json=flask_args,
        )
        def get_operation(id_: str):
            """Resolve next send operation of report `id_`."""
            report, error = self._load(id_)
            if error is not None:
                return error
            log = Logger(default_origin="Report Lifecycle")
            try:
                operation = self.controller.get_send_operation(report, log)
            except ReportError as exc_info:
                return error_response(exc_info)
            return (
                jsonify(
                    {
                        "operation": operation.operation.value,
                        "dataset": (
                            None
                            if operation.dataset is None
                            else operation.dataset.json
                        ),
                        "log": log.json,
                    }
                ),
                200,
            )

    def _send(self, bp: Blueprint):
        @bp.route(
            "/report/send", methods=["POST"], provide_automatic_options=False
        )
        @flask_handler(  # process query
            handler=services.no_args_handler,
            json=flask_args,
        )
        @flask_handler(  # process body
            handler=handlers.send_report_handler,
            json=flask_json,
        )
        def send(
            id_: str,
            operation: Optional[str] = None,
            empty_dataset: bool = False,
        ):
            """Export report `id_` and send it to the DCF."""
            report, error = self._load(id_)
            if error is not None:
                return error
            log = Logger(default_origin="Report Lifecycle")
            try:
                message = self.controller.export_and_send(
                    report,
                    (
                        None
                        if operation is None
                        else ExportConfig(
                            OperationType(operation), empty_dataset
                        )
                    ),
                    log,
                )
            except ReportError as exc_info:
                return error_response(exc_info)
            return (
                jsonify(
                    {
                        "report": report.json,
                        "message": message.json,
                        "log": log.json,
                    }
                ),
                200,
            )

    def _get_ack(self, bp: Blueprint):
        @bp.route(
            "/report/ack", methods=["GET"], provide_automatic_options=False
        )
        @flask_handler(  # process query
            handler=handlers.get_report_id_handler(True),
            json=flask_args,
        )
        def get_ack(id_: str):
            """Fetch acknowledgment of the last message of report `id_`."""
            report, error = self._load(id_)
            if error is not None:
                return error
            log = Logger(default_origin="Report Lifecycle")
            try:
                ack = self.controller.get_ack(report, log)
            except ReportError as exc_info:
                return error_response(exc_info)
            return (
                jsonify(
                    {
                        "ack": None if ack is None else ack.json,
                        "log": log.json,
                    }
                ),
                200,
            )

    def _refresh(self, bp: Blueprint):
        @bp.route(
            "/report/refresh",
            methods=["POST"],
            provide_automatic_options=False,
        )
        @flask_handler(  # process query
            handler=services.no_args_handler,
            json=flask_args,
        )
        @flask_handler(  # process body
            handler=handlers.get_report_id_handler(True),
            json=flask_json,
        )
        def refresh(id_: str):
            """Refresh status of report `id_`."""
            report, error = self._load(id_)
            if error is not None:
                return error
            log = Logger(default_origin="Report Lifecycle")
            try:
                result = self.controller.refresh_status(report, log)
            except ReportError as exc_info:
                return error_response(exc_info)
            return (
                jsonify(
                    {
                        "report": report.json,
                        "result": result.json,
                        "log": log.json,
                    }
                ),
                200,
            )

    def configure_bp(self, bp: Blueprint, *args, **kwargs) -> None:
        self._get_report(bp)
        self._post_report(bp)
        self._post_amendment(bp)
        self._make_editable(bp)
        self._get_versions(bp)
        self._delete_versions(bp)
        self._get_operation(bp)
        self._send(bp)
        self._get_ack(bp)
        self._refresh(bp)
