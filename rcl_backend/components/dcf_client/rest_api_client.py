"""
This module defines the `DCFRestClient0` component of the rcl-backend
and its `ClientResponse`.
"""

from typing import Any, Optional
from dataclasses import dataclass
from pathlib import Path

import requests
from data_plumber_http import Object, Property, String, Boolean, Array, Null
from data_plumber_http.settings import Responses
from dcm_common import Logger, LoggingContext as Context

from rcl_backend.models import (
    OperationType,
    RemoteDataset,
    MessageResponse,
    Ack,
)


@dataclass
class ClientResponse:
    """
    Result of a request to the DCF-gateway; `data` holds the validated
    response (or `None` if `success` is `False`).
    """

    success: bool
    log: Logger
    data: Any


class DCFRestClient0:
    """
    A `DCFRestClient0` can be used to list the datasets of a data
    collection, dispatch messages, and collect acknowledgments from a
    JSON-gateway to the DCF.

    Keyword arguments:
    auth -- authorization HTTP header file or string (sent in all
            requests); expected format 'Authorization: Basic <pass>'
    url -- url to the gateway instance
    proxies -- JSON object containing a mapping of protocol name and
               corresponding proxy-address
               (default None)
    timeout -- timeout duration for remote repository in seconds; None
               indicates not timing out
               (default 10)
    """

    _TAG: str = "DCF REST-API v0-Client"
    _DATASET_LIST_HANDLER = Object(
        properties={
            Property("datasets", required=True): Array(
                items=Object(
                    model=lambda **kwargs: RemoteDataset.from_json(kwargs),
                    properties={
                        Property("id", required=True): String(),
                        Property("senderId", required=True): String(),
                        Property("status", required=True): String(),
                    },
                    accept_only=["id", "senderId", "status"],
                )
            ),
        },
        accept_only=["datasets"],
    ).assemble(_loc="<API response body>")
    _MESSAGE_RESPONSE_HANDLER = Object(
        model=lambda **kwargs: MessageResponse.from_json(kwargs),
        properties={
            Property("success", required=True): Boolean(),
            Property("messageId"): String() | Null(),
            Property("error"): String() | Null(),
        },
        accept_only=["success", "messageId", "error"],
    ).assemble(_loc="<API response body>")
    _ACK_HANDLER = Object(
        model=lambda **kwargs: Ack.from_json(kwargs),
        properties={
            Property("ready", required=True): Boolean(),
            Property("log"): Object(
                properties={
                    Property("datasetId"): String() | Null(),
                    Property("datasetStatus"): String() | Null(),
                    Property("opResError"): String() | Null(),
                },
                accept_only=["datasetId", "datasetStatus", "opResError"],
            )
            | Null(),
        },
        accept_only=["ready", "log"],
    ).assemble(_loc="<API response body>")

    def __init__(
        self,
        auth: str | Path,
        url: str,
        proxies: Optional[dict] = None,
        timeout: Optional[float] = 10,
    ) -> None:
        self._url = url
        self.proxies = proxies
        self.timeout = timeout
        if isinstance(auth, Path):
            _auth_header = auth.read_text(encoding="utf-8").strip().split(": ")
        else:
            _auth_header = auth.split(": ")
        if _auth_header[0] != "Authorization":
            raise ValueError(
                "Bad authorization header (expected format 'Authorization: "
                + "Basic <pass>')"
            )
        self._headers = {
            _auth_header[0]: _auth_header[1],
            "accept": "application/json",
        }

    @property
    def headers(self) -> dict[str, str]:
        """Returns a mapping of http-headers sent in all requests."""
        return self._headers.copy()

    def _process_exception(
        self, exc_info: requests.exceptions.RequestException
    ) -> str:
        """Process and log exception."""
        if isinstance(exc_info, requests.ConnectionError):
            return (
                f"Unable to establish connection to '{self._url}' "
                + f"({exc_info})."
            )
        if isinstance(exc_info, requests.Timeout):
            return f"Connection to '{self._url}' timed out ({exc_info})."
        return (
            f"Problem encountered while making a request to '{self._url}' "
            + f"({exc_info})."
        )

    def _evaluate(
        self,
        log: Logger,
        url: str,
        response: requests.Response,
        handler,
    ) -> ClientResponse:
        """
        Validates `response` with the data-plumber `handler` and returns
        a `ClientResponse` containing the validated data or `None` on
        fail.
        """
        if response.status_code == 204:
            log.log(
                Context.ERROR,
                body=f"Getting resource '{url}' failed: No content.",
            )
            return ClientResponse(False, log, None)

        # log any errors
        if response.status_code >= 400:
            log.log(
                Context.ERROR,
                body=(
                    f"Getting resource '{url}' failed: Got error-code "
                    + f"'{response.status_code}': {response.text}."
                ),
            )
            return ClientResponse(False, log, None)

        try:
            json = response.json()
        except requests.exceptions.JSONDecodeError as exc_info:
            log.log(
                Context.ERROR,
                body=f"Response from '{url}' is not valid JSON ({exc_info}).",
            )
            return ClientResponse(False, log, None)

        validation = handler.run(json=json)
        if validation.last_status != Responses().GOOD.status:
            log.log(
                Context.ERROR,
                body=(
                    "Received invalid response body: "
                    + validation.last_message
                ),
            )
            return ClientResponse(False, log, None)
        return ClientResponse(True, log, validation.data.value)

    def get_request(
        self, url: str, handler, params: Optional[dict] = None
    ) -> ClientResponse:
        """
        Returns a `ClientResponse` containing the validated response
        body or `None` on fail.

        Keyword arguments:
        url -- request url to process
        handler -- data-plumber pipeline for the response body
        params -- query parameters
                  (default None)
        """
        log = Logger(default_origin=self._TAG)

        # make request
        try:
            response = requests.get(
                url,
                params=params,
                headers=self._headers,
                proxies=self.proxies,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc_info:
            log.log(Context.ERROR, body=self._process_exception(exc_info))
            return ClientResponse(False, log, None)

        return self._evaluate(log, url, response, handler)

    def get_dataset_list(self, data_collection: str) -> ClientResponse:
        """
        GET-/datasets?dataCollection={data_collection}

        Returns a `ClientResponse` containing a list of `RemoteDataset`s
        (newest first) or `None` on fail.

        Keyword arguments:
        data_collection -- code of the data collection
        """
        response = self.get_request(
            f"{self._url}/datasets",
            self._DATASET_LIST_HANDLER,
            params={"dataCollection": data_collection},
        )
        if response.success:
            response.data = response.data["datasets"]
        return response

    def get_ack(self, message_id: str) -> ClientResponse:
        """
        GET-/acks/{message_id}

        Returns a `ClientResponse` containing an `Ack` or `None` on
        fail.

        Keyword arguments:
        message_id -- id of the message to be acknowledged
        """
        if not message_id:
            log = Logger(default_origin=self._TAG)
            log.log(
                Context.ERROR,
                body="The input argument 'message_id' cannot be the empty "
                + "string.",
            )
            return ClientResponse(False, log, None)
        return self.get_request(
            f"{self._url}/acks/{message_id}", self._ACK_HANDLER
        )

    def send_message(
        self, payload: Path, operation: OperationType
    ) -> ClientResponse:
        """
        POST-/messages

        Dispatch the message contained in `payload`.

        Returns a `ClientResponse` containing a `MessageResponse` or
        `None` on fail.

        Keyword arguments:
        payload -- path to the payload file
        operation -- operation the payload is sent with
        """
        log = Logger(default_origin=self._TAG)

        # make request
        url = f"{self._url}/messages"
        try:
            with open(payload, "rb") as file:
                response = requests.post(
                    url,
                    data={"operation": operation.value},
                    files={"payload": (payload.name, file)},
                    headers=self._headers,
                    proxies=self.proxies,
                    timeout=self.timeout,
                )
        # `RequestException` derives from `OSError`; order matters here
        except requests.exceptions.RequestException as exc_info:
            log.log(Context.ERROR, body=self._process_exception(exc_info))
            return ClientResponse(False, log, None)
        except OSError as exc_info:
            log.log(
                Context.ERROR,
                body=f"Unable to read payload '{payload}' ({exc_info}).",
            )
            return ClientResponse(False, log, None)

        return self._evaluate(
            log, url, response, self._MESSAGE_RESPONSE_HANDLER
        )
