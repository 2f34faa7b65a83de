from __future__ import annotations

import xml.dom.minidom
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple, Type

if TYPE_CHECKING:
    from .transport import HttpResponse


class AzureRestApiError(Exception):
    """
    status is the integer http status code. code and message are typically returned by
    Azure APIs. code is usually a single word/phrase like "ResourceNotFound", and
    message is usually a more verbose explanation.
    """

    def __init__(self, status: int, code: Optional[str], message: str):
        super().__init__(f"({status}) {code}: {message}" if code else message)
        self.status = status
        self.code = code
        self.message = message


class ResourceNotFoundError(AzureRestApiError):
    pass


class ResourceExistsError(AzureRestApiError):
    pass


class ResourceModifiedError(AzureRestApiError):
    pass


class CredentialUnavailableError(Exception):
    """None of the configured ways of getting a token worked"""


def _get_code_and_message_from_json(
    response_json: Any,
) -> Tuple[Optional[str], Optional[str]]:
    if not isinstance(response_json, dict):
        return None, None

    if "error" in response_json:
        error = response_json["error"]
    elif "errors" in response_json and len(response_json["errors"]) == 1:
        error = response_json["errors"][0]
    elif "odata.error" in response_json:
        error = response_json["odata.error"]
    else:
        error = None

    if not isinstance(error, dict):
        return None, None

    message = error.get("message")
    # the table/odata APIs nest the message one level deeper
    if isinstance(message, dict):
        message = message.get("value")
    return error.get("code"), message


def _get_code_and_message_from_xml(
    response_text: str,
) -> Tuple[Optional[str], Optional[str]]:
    """Parses the <Error><Code/><Message/></Error> body returned by storage APIs"""
    code, message = None, None
    try:
        parsed = xml.dom.minidom.parseString(response_text)
    except Exception:
        return code, message

    for node in parsed.documentElement.childNodes:
        if not node.childNodes:
            continue
        if node.nodeName == "Code":
            code = node.childNodes[0].nodeValue
        elif node.nodeName == "Message":
            message = node.childNodes[0].nodeValue

    return code, message


def _exception_type_from_code(status: int, code: Optional[str]) -> Type:
    if code in (
        "ResourceGroupNotFound",
        "ResourceNotFound",
        "QueueNotFound",
        "IndexNotFound",
    ):
        return ResourceNotFoundError
    elif code in ("EntityAlreadyExists", "QueueAlreadyExists", "ResourceExists"):
        return ResourceExistsError
    elif code in ("UpdateConditionNotSatisfied", "ConditionNotMet"):
        return ResourceModifiedError
    elif status == 404:
        return ResourceNotFoundError
    else:
        return AzureRestApiError


def error_from_response(response: HttpResponse) -> AzureRestApiError:
    code: Optional[str] = None
    message: Optional[str] = None

    if response.content_type == "application/json":
        try:
            code, message = _get_code_and_message_from_json(response.json())
        except ValueError:
            pass
    elif response.content_type == "application/xml":
        code, message = _get_code_and_message_from_xml(response.text())

    if message is None:
        message = response.text()

    return _exception_type_from_code(response.status, code)(
        response.status, code, message
    )


def raise_for_status(
    response: HttpResponse,
    ignored_status_codes: Iterable[Tuple[int, str]] = tuple(),
) -> None:
    """
    Like requests' raise_for_status, but raises AzureRestApiError based on parsing the
    response content. ignored_status_codes is a list of (status, code) that should not
    raise.
    """
    if not response.ok:
        error = error_from_response(response)
        if error.code is None or (error.status, error.code) not in ignored_status_codes:
            raise error
