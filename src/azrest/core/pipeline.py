"""
HttpPipeline is the shared transport stack for every client in azrest: it joins urls,
adds the api version, client request id and authorization, sends the request with
requests (sync) or aiohttp (async), turns failures into AzureRestApiError and
deserializes the body.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import (
    Any,
    Coroutine,
    Dict,
    Iterable,
    Optional,
    Tuple,
)

from typing_extensions import Literal

from .constants import CLIENT_REQUEST_ID_HEADER, REQUEST_ID_HEADER
from .credentials import Credential
from .exceptions import AzureRestApiError, raise_for_status
from .paging import Page
from .transport import HttpRequest, HttpResponse, send_async, send_sync

_logger = logging.getLogger(__name__)


DEFAULT_TOTAL_POLL_TIMEOUT_SECONDS = 30 * 60  # 30 minutes
# only used if the Retry-After header is missing
DEFAULT_RETRY_AFTER_SECONDS: float = 1

# according to the docs, these are the only permitted completed statuses
_SUCCEEDED_STATUS = "Succeeded"
_FAILED_STATUSES = ("Failed", "Canceled")

POLL_SCHEMES = Literal[
    "AsyncOperationJsonStatus", "LocationStatusCode", "GetProvisioningState"
]


def deserialize_response(response: HttpResponse) -> Any:
    # If there's nothing to return, the Azure APIs will return content-type:
    # application/octet-stream with no actual content. It's easier to just return this
    # as None rather than having to fully support another content type
    if len(response.content) == 0:
        return None

    content_type = response.content_type
    if content_type.startswith("text/plain") or content_type.startswith(
        "application/xml"
    ):
        return response.text()

    if content_type.startswith("application/json"):
        return response.json()

    # assuming binary
    return response.content


class HttpPipeline:
    """
    base_url is prepended to relative url_paths. credential can be None for APIs that
    don't need authorization (e.g. the Azure Monitor ingestion endpoint). api_version is
    added as the api-version query parameter unless it is None.
    """

    def __init__(
        self,
        base_url: str,
        credential: Optional[Credential] = None,
        api_version: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credential = credential
        self.api_version = api_version
        self.timeout = timeout

    def with_api_version(self, api_version: Optional[str]) -> HttpPipeline:
        """A pipeline with the same url and credential for a different api version"""
        return HttpPipeline(
            self.base_url, self.credential, api_version, timeout=self.timeout
        )

    def prepare_request(
        self,
        method: str,
        url_path: str,
        *,
        query_parameters: Optional[Dict[str, str]] = None,
        json_content: Any = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        client_request_id: Optional[str] = None,
    ) -> HttpRequest:
        if url_path.startswith("http://") or url_path.startswith("https://"):
            # e.g. a nextLink or a polling url, these already contain the api-version
            url = url_path
        else:
            url = f"{self.base_url}/{url_path.lstrip('/')}"

        parameters = {}
        if self.api_version is not None and "api-version=" not in url:
            parameters["api-version"] = self.api_version
        if query_parameters:
            parameters.update(query_parameters)

        request_headers = {}
        if json_content is not None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)
        if client_request_id is not None:
            request_headers[CLIENT_REQUEST_ID_HEADER] = client_request_id

        return HttpRequest(
            method, url, parameters, request_headers, json=json_content, data=data
        )

    # the transport seam: tests replace these two methods

    def _transport_send(self, request: HttpRequest) -> HttpResponse:
        return send_sync(request, self.timeout)

    async def _transport_send_async(self, request: HttpRequest) -> HttpResponse:
        return await send_async(request, self.timeout)

    def send(
        self,
        request: HttpRequest,
        ignored_status_codes: Iterable[Tuple[int, str]] = tuple(),
    ) -> HttpResponse:
        if self.credential is not None:
            self.credential.authorize(request)
        _logger.debug("%s %s", request.method, request.url)
        response = self._transport_send(request)
        _logger.debug("%s %s -> %d", request.method, request.url, response.status)
        raise_for_status(response, ignored_status_codes)
        return response

    async def send_async(
        self,
        request: HttpRequest,
        ignored_status_codes: Iterable[Tuple[int, str]] = tuple(),
    ) -> HttpResponse:
        if self.credential is not None:
            await self.credential.authorize_async(request)
        _logger.debug("%s %s", request.method, request.url)
        response = await self._transport_send_async(request)
        _logger.debug("%s %s -> %d", request.method, request.url, response.status)
        raise_for_status(response, ignored_status_codes)
        return response

    def request(self, method: str, url_path: str, **kwargs: Any) -> Any:
        """
        Supports any REST API call, returns the deserialized content of the response.
        kwargs are passed to prepare_request
        """
        return deserialize_response(
            self.send(self.prepare_request(method, url_path, **kwargs))
        )

    async def request_async(self, method: str, url_path: str, **kwargs: Any) -> Any:
        """See request"""
        return deserialize_response(
            await self.send_async(self.prepare_request(method, url_path, **kwargs))
        )

    def request_object(
        self, method: str, url_path: str, **kwargs: Any
    ) -> Dict[str, Any]:
        """
        For REST API calls that return a json object. An empty body is returned as {},
        any other body raises AzureRestApiError
        """
        request = self.prepare_request(method, url_path, **kwargs)
        return _json_object(request, self.send(request))

    async def request_object_async(
        self, method: str, url_path: str, **kwargs: Any
    ) -> Dict[str, Any]:
        """See request_object"""
        request = self.prepare_request(method, url_path, **kwargs)
        return _json_object(request, await self.send_async(request))

    def request_paged(self, method: str, url_path: str, **kwargs: Any) -> Page[Any]:
        """
        For REST API calls that return a json body with a value list and a nextLink.
        Returns a single page of raw json items, the caller continues by calling this
        again with page.next_link as the url_path.
        """
        return _to_page(self.request_object(method, url_path, **kwargs))

    async def request_paged_async(
        self, method: str, url_path: str, **kwargs: Any
    ) -> Page[Any]:
        """See request_paged"""
        return _to_page(await self.request_object_async(method, url_path, **kwargs))

    async def poll_async(
        self,
        method: str,
        url_path: str,
        poll_scheme: POLL_SCHEMES,
        *,
        total_timeout_seconds: float = DEFAULT_TOTAL_POLL_TIMEOUT_SECONDS,
        **kwargs: Any,
    ) -> Tuple[Any, Optional[Coroutine[Any, Any, Any]]]:
        """
        Supports any Azure REST API that requires polling. Polling in the Azure REST API
        is very complicated:

        https://docs.microsoft.com/en-us/azure/azure-resource-manager/management/async-operations
        In practice there are 3 polling schemes:
        - AsyncOperationJsonStatus: Initial response is 201, has an Azure-AsyncOperation
          header that points us to the polling url, and the content contains information
          about the resource. The polling URL always returns 200, and indicates
          completion by response_json["status"] being a completed status. If polling
          isn't needed, the initial response will be 200.
        - LocationStatusCode: Initial response is 202, has a Location header that points
          us to the polling url, and the content is empty. The polling URL will return
          202 with empty content if not complete, and 200 once complete with the content
          containing information about the resource.
        - GetProvisioningState: Initial response is 200 or 201, does not have any
          special headers. response_json["properties"]["provisioningState"] is
          populated. We can repeatedly call GET on the resource to check this same
          provisioningState value.

        If the initial response indicates completion (i.e. no polling required), then
        this function will return (body of initial call, None). If polling is required,
        this will return (body of initial call, Awaitable[body of final polling call]).

        total_timeout_seconds indicates how long from start to finish we are willing to
        wait and poll for.
        """
        t0 = time.time()

        request = self.prepare_request(method, url_path, **kwargs)
        response = await self.send_async(request)
        response_json = deserialize_response(response)

        poll_request = _prepare_poll_request(
            poll_scheme, None, response, response_json, request.url
        )
        if poll_request is None:
            # response indicates that there's no need for polling
            return response_json, None

        return response_json, self._poll_continuation(
            poll_request, poll_scheme, t0, total_timeout_seconds, request.url
        )

    async def _poll_continuation(
        self,
        poll_request: _PreparedPollRequest,
        poll_scheme: POLL_SCHEMES,
        t0: float,
        total_timeout_seconds: float,
        original_url: str,
    ) -> Any:
        while time.time() - t0 < total_timeout_seconds:
            _logger.info(
                "Waiting for a long-running Azure operation (%ss)",
                poll_request.retry_after,
            )
            await asyncio.sleep(poll_request.retry_after)
            response = await self.send_async(
                self.prepare_request(
                    "GET", poll_request.url, headers=poll_request.headers
                )
            )
            response_json = deserialize_response(response)

            next_poll_request = _prepare_poll_request(
                poll_scheme, poll_request, response, response_json, original_url
            )
            if next_poll_request is None:
                return response_json
            poll_request = next_poll_request

        raise TimeoutError(
            f"Polling {original_url} timed out after {total_timeout_seconds} seconds"
        )


def _json_object(request: HttpRequest, response: HttpResponse) -> Dict[str, Any]:
    response_json = deserialize_response(response)
    if response_json is None:
        return {}
    if not isinstance(response_json, dict):
        raise AzureRestApiError(
            response.status,
            "UnexpectedResponse",
            f"Expected a json object from {request.method} {request.url} but got "
            f"{response.content_type or 'no content type'}",
        )
    return response_json


def _to_page(response_json: Dict[str, Any]) -> Page[Any]:
    return Page(response_json.get("value", []), response_json.get("nextLink"))


@dataclasses.dataclass(frozen=True)
class _PreparedPollRequest:
    retry_after: float
    url: str
    headers: Dict[str, str]


def _prepare_poll_request(
    poll_scheme: str,
    prev_poll_request: Optional[_PreparedPollRequest],
    response: HttpResponse,
    response_json: Any,
    original_url: str,
) -> Optional[_PreparedPollRequest]:
    """
    If prev_poll_request is None, this means that this is the initial response, which is
    treated differently in some schemes. Returns None if no (more) polling is needed.
    """

    # common to all poll schemes

    retry_after_str = response.headers.get("Retry-After")
    if retry_after_str is None:
        retry_after = DEFAULT_RETRY_AFTER_SECONDS
    else:
        try:
            retry_after = float(retry_after_str)
        except ValueError:
            retry_after = DEFAULT_RETRY_AFTER_SECONDS

    headers = {}
    request_id = response.headers.get(REQUEST_ID_HEADER)
    if request_id:
        headers["request-id"] = request_id

    if poll_scheme == "AsyncOperationJsonStatus":
        if prev_poll_request is None:
            # on the initial response, status codes are used to indicate whether polling
            # is needed
            if response.status not in (201, 202):
                return None
            url = response.headers["Azure-AsyncOperation"]
        else:
            # on polling response, status code will always be 200, and we need to check
            # the returned content
            status = response_json["status"]
            if status == _SUCCEEDED_STATUS:
                return None
            if status in _FAILED_STATUSES:
                raise AzureRestApiError(
                    response.status, status, "Failure while polling"
                )
            # the Azure-AsyncOperation header will only be provided on the initial
            # response. After that, we have to "remember" it from the previous call
            url = prev_poll_request.url
        return _PreparedPollRequest(retry_after, url, headers)
    elif poll_scheme == "LocationStatusCode":
        if response.status not in (201, 202):
            return None

        if prev_poll_request is None or "Location" in response.headers:
            url = response.headers["Location"]
        else:
            url = prev_poll_request.url
        return _PreparedPollRequest(retry_after, url, headers)
    elif poll_scheme == "GetProvisioningState":
        provisioning_state = response_json["properties"]["provisioningState"]
        if provisioning_state == _SUCCEEDED_STATUS:
            return None
        elif provisioning_state in _FAILED_STATUSES:
            raise AzureRestApiError(
                response.status, provisioning_state, "Failure while polling"
            )

        return _PreparedPollRequest(retry_after, original_url, headers)
    else:
        raise ValueError(f"Unexpected poll_scheme {poll_scheme}")

