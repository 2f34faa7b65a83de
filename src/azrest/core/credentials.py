"""
Credentials know how to authorize an HttpRequest. There are three kinds:
- AzureKeyCredential sets an api-key header (Cognitive Search)
- token credentials (AzureCliCredential, ManagedIdentityCredential,
  DefaultAzureCredential) set a bearer token (Azure Resource Manager)
- azrest.core.storage_auth.StorageSharedKeyCredential signs the request (storage data
  plane)
"""
from __future__ import annotations

import abc
import asyncio.subprocess
import dataclasses
import datetime
import json
import logging
import os
import subprocess
import traceback
from typing import Dict, List, Optional, Tuple

from .constants import MANAGEMENT_SCOPE
from .exceptions import CredentialUnavailableError, raise_for_status
from .transport import HttpRequest, send_async, send_sync

_logger = logging.getLogger(__name__)


class Credential(abc.ABC):
    """Anything HttpPipeline can use to authorize requests"""

    @abc.abstractmethod
    def authorize(self, request: HttpRequest) -> None:
        ...

    async def authorize_async(self, request: HttpRequest) -> None:
        self.authorize(request)


class AzureKeyCredential(Credential):
    """An api key, e.g. a Cognitive Search admin or query key"""

    def __init__(self, key: str, header_name: str = "api-key"):
        self.update(key)
        self.header_name = header_name

    @property
    def key(self) -> str:
        return self._key

    def update(self, key: str) -> None:
        """Rotates the key, e.g. after regenerating it in the portal"""
        if not isinstance(key, str) or not key:
            raise ValueError("key must be a non-empty string")
        self._key = key

    def authorize(self, request: HttpRequest) -> None:
        request.headers[self.header_name] = self._key


@dataclasses.dataclass(frozen=True)
class AccessToken:
    token: str
    # aware datetime
    expires_on: datetime.datetime

    def expires_within(self, delta: datetime.timedelta) -> bool:
        return (
            self.expires_on - datetime.datetime.now(datetime.timezone.utc)
        ) < delta


def _scope_to_resource(scope: str) -> str:
    """
    Based on
    https://github.com/Azure/azure-sdk-for-python/blob/83964018f39b7702659d208cd2640f5eea7400fc/sdk/identity/azure-identity/azure/identity/_internal/__init__.py#L97

    which says "Convert an AADv2 scope to an AADv1 resource"
    """
    if scope.endswith("/.default"):
        return scope[: -len("/.default")]
    else:
        return scope


# 5 minutes makes sense here because get-access-token is guaranteed to always give a
# token that has at least 5 minutes left on it
_TOKEN_REFRESH_CUTOFF = datetime.timedelta(minutes=5)


class TokenCredential(Credential):
    """
    Authorizes requests with a bearer token for scope. Subclasses implement
    _request_token/_request_token_async, tokens are cached per scope until they're about
    to expire.
    """

    def __init__(self, scope: str = MANAGEMENT_SCOPE):
        self.scope = scope
        self._tokens: Dict[str, AccessToken] = {}

    @abc.abstractmethod
    def _request_token(self, scope: str) -> AccessToken:
        ...

    @abc.abstractmethod
    async def _request_token_async(self, scope: str) -> AccessToken:
        ...

    def _get_cached(self, scope: str) -> Optional[AccessToken]:
        token = self._tokens.get(scope)
        if token is None or token.expires_within(_TOKEN_REFRESH_CUTOFF):
            return None
        return token

    def get_token(self, scope: Optional[str] = None) -> AccessToken:
        scope = scope or self.scope
        token = self._get_cached(scope)
        if token is None:
            token = self._request_token(scope)
            self._tokens[scope] = token
        return token

    async def get_token_async(self, scope: Optional[str] = None) -> AccessToken:
        scope = scope or self.scope
        token = self._get_cached(scope)
        if token is None:
            token = await self._request_token_async(scope)
            self._tokens[scope] = token
        return token

    def authorize(self, request: HttpRequest) -> None:
        request.headers["Authorization"] = f"Bearer {self.get_token().token}"

    async def authorize_async(self, request: HttpRequest) -> None:
        token = await self.get_token_async()
        request.headers["Authorization"] = f"Bearer {token.token}"


# roughly based on
# https://github.com/Azure/azure-sdk-for-python/blob/main/sdk/identity/azure-identity/azure/identity/_credentials/azure_cli.py

_CLI_TOKEN_EXPIRES_ON_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
_CLI_TOKEN_COMMAND_LINE = "az account get-access-token --output json --resource {}"
_CLI_TIMEOUT_SECS = 10


class AzureCliCredential(TokenCredential):
    """
    Uses the Azure CLI's logged in account. As a side effect, records the subscription
    and tenant the CLI is currently using.
    """

    def __init__(self, scope: str = MANAGEMENT_SCOPE):
        super().__init__(scope)
        self.subscription_id: Optional[str] = None
        self.tenant_id: Optional[str] = None

    def _parse_output(self, return_code: Optional[int], output: str) -> AccessToken:
        if return_code != 0:
            raise CredentialUnavailableError(f"Unable to get CLI token: {output}")

        json_output = json.loads(output)
        if self.subscription_id is None:
            self.subscription_id = json_output.get("subscription")
        if self.tenant_id is None:
            self.tenant_id = json_output.get("tenant")

        # according to https://github.com/Azure/azure-sdk-for-net/issues/15801 this
        # will be a local datetime
        expires_on = datetime.datetime.strptime(
            json_output["expiresOn"], _CLI_TOKEN_EXPIRES_ON_FORMAT
        ).astimezone(datetime.timezone.utc)
        return AccessToken(json_output["accessToken"], expires_on)

    def _request_token(self, scope: str) -> AccessToken:
        result = subprocess.run(
            _CLI_TOKEN_COMMAND_LINE.format(_scope_to_resource(scope)),
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=_CLI_TIMEOUT_SECS,
        )
        return self._parse_output(result.returncode, result.stdout.decode())

    async def _request_token_async(self, scope: str) -> AccessToken:
        proc = await asyncio.subprocess.create_subprocess_shell(
            _CLI_TOKEN_COMMAND_LINE.format(_scope_to_resource(scope)),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        stdout, _ = await asyncio.wait_for(proc.communicate(), _CLI_TIMEOUT_SECS)
        return self._parse_output(proc.returncode, stdout.decode())


# based on
# https://github.com/Azure/azure-sdk-for-python/blob/main/sdk/identity/azure-identity/azure/identity/_credentials/managed_identity.py


class EnvironmentVariables:
    AZURE_CLIENT_ID = "AZURE_CLIENT_ID"
    AZURE_POD_IDENTITY_AUTHORITY_HOST = "AZURE_POD_IDENTITY_AUTHORITY_HOST"
    IDENTITY_ENDPOINT = "IDENTITY_ENDPOINT"
    IDENTITY_HEADER = "IDENTITY_HEADER"
    MSI_ENDPOINT = "MSI_ENDPOINT"
    MSI_SECRET = "MSI_SECRET"


IMDS_AUTHORITY = "http://169.254.169.254"
IMDS_TOKEN_PATH = "/metadata/identity/oauth2/token"

# on WSL, the IMDS endpoint will hang rather than failing to connect immediately, so put
# a relatively short timeout as it generally shouldn't require a long time to connect
_MANAGED_IDENTITY_TIMEOUT_SECS = 1


def managed_identity_request(scope: str) -> HttpRequest:
    """
    Chooses the managed identity endpoint based on the environment: App Service, Azure
    ML, Cloud Shell, or falls back to IMDS (VMs, AKS pod identity)
    """
    resource = _scope_to_resource(scope)
    parameters = {}

    client_id = os.environ.get(EnvironmentVariables.AZURE_CLIENT_ID)
    if client_id is not None:
        parameters["client_id"] = client_id

    identity_endpoint = os.environ.get(EnvironmentVariables.IDENTITY_ENDPOINT)
    msi_endpoint = os.environ.get(EnvironmentVariables.MSI_ENDPOINT)

    if identity_endpoint:
        identity_header = os.environ.get(EnvironmentVariables.IDENTITY_HEADER)
        if not identity_header:
            raise CredentialUnavailableError(
                f"{EnvironmentVariables.IDENTITY_ENDPOINT} is set but "
                f"{EnvironmentVariables.IDENTITY_HEADER} is not"
            )
        # App Service
        parameters.update({"api-version": "2019-08-01", "resource": resource})
        return HttpRequest(
            "GET",
            identity_endpoint,
            params=parameters,
            headers={"X-IDENTITY-HEADER": identity_header},
        )
    elif msi_endpoint:
        msi_secret = os.environ.get(EnvironmentVariables.MSI_SECRET)
        if msi_secret:
            # Azure ML
            parameters.update({"api-version": "2017-09-01", "resource": resource})
            return HttpRequest(
                "GET", msi_endpoint, params=parameters, headers={"secret": msi_secret}
            )
        else:
            # Cloud Shell
            return HttpRequest(
                "POST",
                msi_endpoint,
                params=parameters,
                headers={"Metadata": "true"},
                data={"resource": resource},
            )
    else:
        url = (
            os.environ.get(
                EnvironmentVariables.AZURE_POD_IDENTITY_AUTHORITY_HOST, IMDS_AUTHORITY
            ).strip("/")
            + IMDS_TOKEN_PATH
        )
        parameters.update({"api-version": "2018-02-01", "resource": resource})
        return HttpRequest("GET", url, params=parameters, headers={"Metadata": "true"})


def _parse_managed_identity_token(response_json: Dict) -> AccessToken:
    expires_on = response_json.get("expires_on")
    if expires_on is None:
        expires_at = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
            seconds=int(response_json.get("expires_in", 0))
        )
    else:
        expires_at = datetime.datetime.fromtimestamp(
            int(expires_on), datetime.timezone.utc
        )
    return AccessToken(response_json["access_token"], expires_at)


class ManagedIdentityCredential(TokenCredential):
    def _request_token(self, scope: str) -> AccessToken:
        response = send_sync(
            managed_identity_request(scope), timeout=_MANAGED_IDENTITY_TIMEOUT_SECS
        )
        raise_for_status(response)
        return _parse_managed_identity_token(response.json())

    async def _request_token_async(self, scope: str) -> AccessToken:
        response = await send_async(
            managed_identity_request(scope), timeout=_MANAGED_IDENTITY_TIMEOUT_SECS
        )
        raise_for_status(response)
        return _parse_managed_identity_token(response.json())


# loosely based on
# https://github.com/Azure/azure-sdk-for-python/blob/main/sdk/identity/azure-identity/azure/identity/_credentials/default.py


class DefaultAzureCredential(TokenCredential):
    """
    Tries the Azure CLI first, then managed identity. The first one that works is used
    for subsequent requests.
    """

    def __init__(self, scope: str = MANAGEMENT_SCOPE):
        super().__init__(scope)
        self.cli_credential = AzureCliCredential(scope)
        self.managed_identity_credential = ManagedIdentityCredential(scope)
        self._successful: Optional[TokenCredential] = None

    @property
    def _chain(self) -> List[Tuple[str, TokenCredential]]:
        return [
            ("CLI", self.cli_credential),
            ("managed identity", self.managed_identity_credential),
        ]

    @property
    def subscription_id(self) -> Optional[str]:
        return self.cli_credential.subscription_id

    @property
    def tenant_id(self) -> Optional[str]:
        return self.cli_credential.tenant_id

    def _unavailable(self, errors: List[Tuple[str, str]]) -> CredentialUnavailableError:
        return CredentialUnavailableError(
            "Unable to get a token for Azure.\n"
            + "\n".join(
                f"Error trying to get {name} token:\n{error}" for name, error in errors
            )
        )

    def _request_token(self, scope: str) -> AccessToken:
        if self._successful is not None:
            return self._successful.get_token(scope)

        errors = []
        for name, credential in self._chain:
            try:
                token = credential.get_token(scope)
            except Exception:
                _logger.debug("Unable to get %s token", name, exc_info=True)
                errors.append((name, traceback.format_exc()))
            else:
                self._successful = credential
                return token

        raise self._unavailable(errors)

    async def _request_token_async(self, scope: str) -> AccessToken:
        if self._successful is not None:
            return await self._successful.get_token_async(scope)

        errors = []
        for name, credential in self._chain:
            try:
                token = await credential.get_token_async(scope)
            except Exception:
                _logger.debug("Unable to get %s token", name, exc_info=True)
                errors.append((name, traceback.format_exc()))
            else:
                self._successful = credential
                return token

        raise self._unavailable(errors)
