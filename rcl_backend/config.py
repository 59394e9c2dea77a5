"""Configuration module for the rcl-backend-app."""

import os
from pathlib import Path
from importlib.metadata import version

import yaml
from dcm_common.services import FSConfig, DBConfig

from rcl_backend import util


class AppConfig(FSConfig, DBConfig):
    """
    Configuration for the rcl-backend-app.
    """

    # ------ EXTENSIONS ------
    DB_INIT_STARTUP_INTERVAL = 1.0

    # ------ DATABASE ------
    DB_SCHEMA = Path(__file__).parent / "init.sql"
    DB_LOAD_SCHEMA = (int(os.environ.get("DB_LOAD_SCHEMA") or 0)) == 1
    DB_GENERATE_DEMO = (int(os.environ.get("DB_GENERATE_DEMO") or 0)) == 1

    # ------ DCF ------
    DCF_SRC = os.environ.get("DCF_SRC")
    DATA_COLLECTION_CODE = os.environ.get("DATA_COLLECTION_CODE")

    # ------ PAYLOAD ------
    PAYLOAD_DESTINATION = Path(
        os.environ.get("PAYLOAD_DESTINATION", "payloads")
    )
    DEBUG_RETAIN_PAYLOAD = (
        int(os.environ.get("DEBUG_RETAIN_PAYLOAD") or 0)
    ) == 1

    # ------ IDENTIFY ------
    # generate self-description
    API_DOCUMENT = Path(__file__).parent / "openapi.yaml"
    API = yaml.load(
        API_DOCUMENT.read_text(encoding="utf-8"),
        Loader=yaml.SafeLoader
    )

    def __init__(self, *args, **kwargs) -> None:
        # load DCF-gateway
        if self.DCF_SRC is None:
            raise ValueError("Missing DCF configuration (DCF_SRC).")
        try:
            dcf_src = Path(self.DCF_SRC)
            if not dcf_src.is_file():
                raise FileNotFoundError("Not a file.")
        except (OSError, FileNotFoundError):
            self.authority = util.load_authority_configuration_from_string(
                self.DCF_SRC
            )
        else:
            self.authority = util.load_authority_configuration_from_file(
                dcf_src
            )

        if self.DATA_COLLECTION_CODE is not None:
            self.authority.data_collection = self.DATA_COLLECTION_CODE

        if self.PAYLOAD_DESTINATION.is_absolute():
            raise ValueError(
                f"Payload directory '{self.PAYLOAD_DESTINATION}' is an "
                + "absolute directory. (Expected a directory relative to "
                + f"FS_MOUNT_POINT '{self.FS_MOUNT_POINT}'.)"
            )
        self.payload_destination = (
            self.FS_MOUNT_POINT / self.PAYLOAD_DESTINATION
        )

        super().__init__(*args, **kwargs)

    def set_identity(self) -> None:
        super().set_identity()

        self.CONTAINER_SELF_DESCRIPTION["description"] = (
            "This API provides endpoints for the lifecycle of reports "
            + "submitted to the DCF."
        )

        # version
        self.CONTAINER_SELF_DESCRIPTION["version"]["api"] = (
            self.API["info"]["version"]
        )
        self.CONTAINER_SELF_DESCRIPTION["version"]["app"] = version(
            "rcl-backend"
        )

        # configuration
        settings = self.CONTAINER_SELF_DESCRIPTION["configuration"]["settings"]
        settings["database"]["schema"] = {
            "load": self.DB_LOAD_SCHEMA,
            "demo": self.DB_GENERATE_DEMO,
        }
        settings["dcf"] = {
            "data_collection": self.authority.data_collection,
            "timeout": {"duration": self.authority.timeout},
            "proxy": self.authority.proxy is not None,
        }
        settings["payload"] = {
            "destination": str(self.PAYLOAD_DESTINATION),
            "retain": self.DEBUG_RETAIN_PAYLOAD,
        }

        self.CONTAINER_SELF_DESCRIPTION["configuration"]["services"] = {
            "dcf": self.authority.url,
        }
