from typing import Optional
from pathlib import Path
import json

from flask import Flask, jsonify, request
import pytest
from dcm_common import Logger, LoggingContext as Context
from dcm_common.db import SQLiteAdapter3
from dcm_common.services.tests import run_service

from rcl_backend.config import AppConfig
from rcl_backend.models import (
    OperationType,
    Report,
    RemoteDataset,
    MessageResponse,
    Ack,
)
from rcl_backend.components import ClientResponse, ReportStore


@pytest.fixture(scope="session", autouse=True)
def disable_extension_logging():
    """
    Disables the stderr-logging via the helper method `print_status`
    of the `dcm_common.services.extensions`-subpackage.
    """
    # pylint: disable=import-outside-toplevel
    from dcm_common.services.extensions.common import PrintStatusSettings

    PrintStatusSettings.silent = True


@pytest.fixture(name="file_storage")
def _file_storage(tmp_path):
    file_storage = tmp_path / "file_storage"
    file_storage.mkdir()
    return file_storage


@pytest.fixture(name="dcf_port")
def _dcf_port():
    return 5060


@pytest.fixture(name="dcf_url")
def _dcf_url(dcf_port):
    return f"http://localhost:{dcf_port}"


@pytest.fixture(name="data_collection")
def _data_collection():
    return "TEST_DC"


@pytest.fixture(name="testing_config")
def _testing_config(file_storage, dcf_url, data_collection):
    """Returns test-config"""
    # setup config-class
    class TestingConfig(AppConfig):
        TESTING = True

        FS_MOUNT_POINT = file_storage
        DCF_SRC = json.dumps(
            {
                "url": dcf_url,
                "dataCollection": data_collection,
                "basicAuth": "Authorization: Basic AAAaaa",
                "timeout": 1,
            }
        )

        DB_ADAPTER_STARTUP_IMMEDIATELY = True
        DB_ADAPTER_STARTUP_INTERVAL = 0.01
        DB_INIT_STARTUP_INTERVAL = 0.01

        DB_LOAD_SCHEMA = True
        DB_GENERATE_DEMO = True

    return TestingConfig


@pytest.fixture(name="db")
def _db():
    # setup empty database
    db = SQLiteAdapter3(allow_overflow=False)
    db.read_file(AppConfig.DB_SCHEMA)
    return db


class CountingStore(ReportStore):
    """`ReportStore` that counts calls to `update`."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.updates = 0

    def update(self, report: Report) -> None:
        self.updates += 1
        super().update(report)


@pytest.fixture(name="store")
def _store(db):
    return CountingStore(db)


class FakeDCF:
    """
    In-memory DCF-client. Records all requests in `calls`.

    Keyword arguments:
    datasets -- datasets listed for any data collection
                (default None)
    message -- response to sent messages
               (default None; successful response with id 'msg-1')
    acks -- mapping of message ids and acknowledgments
            (default None)
    """

    _TAG = "Fake DCF"

    def __init__(
        self,
        datasets: Optional[list[RemoteDataset]] = None,
        message: Optional[MessageResponse] = None,
        acks: Optional[dict[str, Ack]] = None,
    ) -> None:
        self.datasets = datasets or []
        self.message = message or MessageResponse(True, "msg-1")
        self.acks = acks or {}
        self.fail = False
        self.calls = []
        self.payloads = []

    def _failed(self) -> ClientResponse:
        log = Logger(default_origin=self._TAG)
        log.log(Context.ERROR, body="Connection refused.")
        return ClientResponse(False, log, None)

    def get_dataset_list(self, data_collection: str) -> ClientResponse:
        self.calls.append(("get_dataset_list", data_collection))
        if self.fail:
            return self._failed()
        return ClientResponse(
            True, Logger(default_origin=self._TAG), list(self.datasets)
        )

    def send_message(
        self, payload: Path, operation: OperationType
    ) -> ClientResponse:
        self.calls.append(("send_message", operation))
        if self.fail:
            return self._failed()
        self.payloads.append(json.loads(payload.read_text(encoding="utf-8")))
        return ClientResponse(
            True, Logger(default_origin=self._TAG), self.message
        )

    def get_ack(self, message_id: str) -> ClientResponse:
        self.calls.append(("get_ack", message_id))
        if self.fail or message_id not in self.acks:
            return self._failed()
        return ClientResponse(
            True, Logger(default_origin=self._TAG), self.acks[message_id]
        )


@pytest.fixture(name="fake_dcf")
def _fake_dcf():
    return FakeDCF()


@pytest.fixture(name="dcf_stub")
def _dcf_stub():
    """
    Returns factory for DCF-gateway-stub apps.
    """
    def _app_factory(
        datasets: Optional[list[dict]] = None,
        acks: Optional[dict[str, dict]] = None,
        message: Optional[dict] = None,
    ):
        _app = Flask(__name__)

        @_app.route("/datasets", methods=["GET"])
        def datasets_get():
            if request.headers.get("Authorization") != "Basic AAAaaa":
                return "Unauthorized", 401
            return jsonify({"datasets": datasets or []}), 200

        @_app.route("/acks/<id_>", methods=["GET"])
        def acks_get(id_: str):
            if id_ not in (acks or {}):
                return f"Unknown message '{id_}'.", 404
            return jsonify(acks[id_]), 200

        @_app.route("/messages", methods=["POST"])
        def messages_post():
            if "payload" not in request.files:
                return "Missing payload.", 400
            operation = request.form.get("operation")
            payload = json.loads(request.files["payload"].read())
            if payload["header"]["operation"] != operation:
                return "Operation does not match payload.", 400
            return jsonify(
                message or {"success": True, "messageId": f"msg-{operation}"}
            ), 200

        return _app

    return _app_factory


@pytest.fixture(name="run_dcf_stub")
def _run_dcf_stub(run_service, dcf_stub, dcf_port):
    """Runs DCF-gateway-stub."""
    def _(**kwargs):
        run_service(dcf_stub(**kwargs), port=dcf_port)
    return _
