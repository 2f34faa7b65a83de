"""
Storage accounts, connection strings and Shared Key Lite signing for the storage data
plane
"""
from __future__ import annotations

import base64
import dataclasses
import datetime
import hashlib
import hmac
import urllib.parse
from typing import Dict, Optional

from .constants import (
    DEVELOPMENT_STORAGE_ACCOUNT_KEY,
    DEVELOPMENT_STORAGE_ACCOUNT_NAME,
    DEVELOPMENT_STORAGE_QUEUE_ENDPOINT,
)
from .credentials import Credential
from .transport import HttpRequest


def _sign_string(key: str, string_to_sign: str) -> str:
    return base64.b64encode(
        hmac.HMAC(
            base64.b64decode(key), string_to_sign.encode("utf-8"), hashlib.sha256
        ).digest()
    ).decode("utf-8")


def _get_now_rfc1123() -> str:
    """
    This is a specific datetime format required for authentication with the storage APIs
    """
    # Copied from
    # https://github.com/Azure/azure-sdk-for-python/blob/1d5096eb1bc8cbd77223ecc7a628738a5f88751c/sdk/storage/azure-storage-file-datalake/azure/storage/filedatalake/_serialize.py#L45
    dt = datetime.datetime.now(datetime.timezone.utc)

    weekday = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"][dt.weekday()]
    month = [
        "Jan",
        "Feb",
        "Mar",
        "Apr",
        "May",
        "Jun",
        "Jul",
        "Aug",
        "Sep",
        "Oct",
        "Nov",
        "Dec",
    ][dt.month - 1]
    return "%s, %02d %s %04d %02d:%02d:%02d GMT" % (
        weekday,
        dt.day,
        month,
        dt.year,
        dt.hour,
        dt.minute,
        dt.second,
    )


def _replace_linear_whitespace(s: str) -> str:
    return s.replace("\n", " ").replace("\r", " ").replace("\t", " ")


def _canonicalized_headers(headers: Dict[str, str]) -> str:
    "Produce the CanonicalizedHeaders for authorization."
    # https://docs.microsoft.com/en-us/rest/api/storageservices/authorize-with-shared-key#constructing-the-canonicalized-headers-string
    headers_to_sign = []
    for key, value in headers.items():
        key = key.lower()
        if key.startswith("x-ms-"):
            headers_to_sign.append(f"{key}:{_replace_linear_whitespace(value)}")
    return "\n".join(sorted(headers_to_sign))


def _canonicalized_resource(account_name: str, url: str) -> str:
    """
    Shared Key Lite only includes the comp query parameter. For path-style urls (the
    emulator), the account name shows up twice: once here and once in the path.
    """
    parsed = urllib.parse.urlparse(url)
    resource = f"/{account_name}{parsed.path or '/'}"
    comp = urllib.parse.parse_qs(parsed.query).get("comp")
    if comp:
        resource += f"?comp={comp[0]}"
    return resource


class StorageSharedKeyCredential(Credential):
    """Signs storage requests with the account key"""

    def __init__(self, account_name: str, account_key: str):
        self.account_name = account_name
        self.account_key = account_key

    def authorize(self, request: HttpRequest) -> None:
        # https://docs.microsoft.com/en-us/rest/api/storageservices/authorize-with-shared-key#blob-queue-and-file-services-shared-key-lite-authorization
        request.headers.setdefault("x-ms-date", _get_now_rfc1123())
        url = request.url
        comp = request.params.get("comp")
        if comp is not None:
            url = f"{url}?comp={comp}"
        string_to_sign = "\n".join(
            [
                request.method,
                "",  # Content-MD5, but we don't include it because it's optional
                request.headers.get("Content-Type", ""),
                # according to the docs, x-ms-date should be here, but the python Azure
                # SDK leaves this blank, and this seems to work
                "",
                _canonicalized_headers(request.headers),
                _canonicalized_resource(self.account_name, url),
            ]
        )
        signature = _sign_string(self.account_key, string_to_sign)
        request.headers[
            "Authorization"
        ] = f"SharedKeyLite {self.account_name}:{signature}"


@dataclasses.dataclass(frozen=True)
class StorageAccount:
    name: str
    key: str
    queue_endpoint: str

    @classmethod
    def from_name_and_key(
        cls, name: str, key: str, endpoint_suffix: str = "core.windows.net"
    ) -> StorageAccount:
        return cls(name, key, f"https://{name}.queue.{endpoint_suffix}")

    @classmethod
    def from_connection_string(cls, connection_string: str) -> StorageAccount:
        """
        Parses e.g.
        DefaultEndpointsProtocol=https;AccountName=...;AccountKey=...;EndpointSuffix=...
        or UseDevelopmentStorage=true for the emulator.
        """
        settings: Dict[str, str] = {}
        for part in connection_string.split(";"):
            part = part.strip()
            if not part:
                continue
            key, sep, value = part.partition("=")
            if not sep:
                raise ValueError(f"Invalid connection string segment: {part}")
            settings[key.strip().lower()] = value.strip()

        if settings.get("usedevelopmentstorage", "").lower() == "true":
            return cls(
                DEVELOPMENT_STORAGE_ACCOUNT_NAME,
                DEVELOPMENT_STORAGE_ACCOUNT_KEY,
                DEVELOPMENT_STORAGE_QUEUE_ENDPOINT,
            )

        name = settings.get("accountname")
        key = settings.get("accountkey")
        if not name or not key:
            raise ValueError(
                "Connection string must contain AccountName and AccountKey"
            )

        queue_endpoint: Optional[str] = settings.get("queueendpoint")
        if queue_endpoint is None:
            protocol = settings.get("defaultendpointsprotocol", "https")
            suffix = settings.get("endpointsuffix", "core.windows.net")
            queue_endpoint = f"{protocol}://{name}.queue.{suffix}"

        return cls(name, key, queue_endpoint.rstrip("/"))

    def credential(self) -> StorageSharedKeyCredential:
        return StorageSharedKeyCredential(self.name, self.key)
