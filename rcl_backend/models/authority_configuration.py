"""
AuthorityConfiguration data-model definition
"""

from typing import Optional, Mapping
from pathlib import Path

from dcm_common.models import DataModel


class AuthorityConfiguration(DataModel):
    """
    Data model for the connection details of the DCF-gateway.

    Keyword arguments:
    url -- base-url for API
    data_collection -- prefix of the data collection code; the
                       reporting year is appended per report
    auth_file -- path to basic auth-header file
                 (default None)
    basic_auth -- basic auth-header (e.g., "Authorization: Basic ...")
                  (default None)
    proxy -- proxy-information (see `requests`-library for details)
             (default None)
    timeout -- timeout duration for requests in seconds; None indicates
               not timing out
               (default 10)
    """

    url: str
    data_collection: str
    auth_file: Optional[Path]
    basic_auth: Optional[str]
    proxy: Optional[Mapping[str, str]]
    timeout: Optional[float]

    def __init__(
        self,
        url: str,
        data_collection: str,
        auth_file: Optional[Path] = None,
        basic_auth: Optional[str] = None,
        proxy: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = 10,
    ) -> None:
        self.url = url
        self.data_collection = data_collection
        if auth_file is not None and not auth_file.is_file():
            raise ValueError(
                f"Authentication file '{auth_file}' does not exist."
            )
        if auth_file is None and basic_auth is None:
            raise ValueError(
                f"Model '{self.__class__.__name__}' needs either 'auth_file' "
                + "or explicit 'basic_auth'."
            )
        self.auth_file = auth_file
        self.basic_auth = basic_auth
        self.proxy = proxy
        self.timeout = timeout

    @property
    def auth(self) -> str | Path:
        """Returns the configured authorization header (or its file)."""
        return self.basic_auth or self.auth_file

    @DataModel.serialization_handler("data_collection", "dataCollection")
    @classmethod
    def data_collection_serialization_handler(cls, value):
        """Handles `data_collection`-serialization."""
        return value

    @DataModel.deserialization_handler("data_collection", "dataCollection")
    @classmethod
    def data_collection_deserialization_handler(cls, value):
        """Handles `data_collection`-deserialization."""
        return value

    @DataModel.serialization_handler("auth_file", "authFile")
    @classmethod
    def auth_file_serialization_handler(cls, value):
        """Handles `auth_file`-serialization."""
        if value is None:
            DataModel.skip()
        return str(value)

    @DataModel.deserialization_handler("auth_file", "authFile")
    @classmethod
    def auth_file_deserialization_handler(cls, value):
        """Handles `auth_file`-deserialization."""
        if value is None:
            DataModel.skip()
        return Path(value)

    @DataModel.serialization_handler("basic_auth", "basicAuth")
    @classmethod
    def basic_auth_serialization_handler(cls, value):
        """Handles `basic_auth`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("basic_auth", "basicAuth")
    @classmethod
    def basic_auth_deserialization_handler(cls, value):
        """Handles `basic_auth`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("proxy")
    @classmethod
    def proxy_serialization_handler(cls, value):
        """Handles `proxy`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("proxy")
    @classmethod
    def proxy_deserialization_handler(cls, value):
        """Handles `proxy`-deserialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.serialization_handler("timeout")
    @classmethod
    def timeout_serialization_handler(cls, value):
        """Handles `timeout`-serialization."""
        if value is None:
            DataModel.skip()
        return value

    @DataModel.deserialization_handler("timeout")
    @classmethod
    def timeout_deserialization_handler(cls, value):
        """Handles `timeout`-deserialization."""
        if value is None:
            DataModel.skip()
        return value
