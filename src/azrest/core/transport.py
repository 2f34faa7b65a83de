"""
The request/response types that flow through HttpPipeline, and the only two functions
that actually touch the network: one for requests (sync) and one for aiohttp (async).
Everything else works on HttpResponse so that error parsing and deserialization are
written once.
"""
from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Optional

import aiohttp
import requests
from multidict import CIMultiDict, CIMultiDictProxy


@dataclasses.dataclass
class HttpRequest:
    method: str
    url: str
    params: Dict[str, str] = dataclasses.field(default_factory=dict)
    headers: Dict[str, str] = dataclasses.field(default_factory=dict)
    json: Any = None
    data: Any = None

    def to_kwargs(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "url": self.url,
            "params": self.params,
            "headers": self.headers,
            "json": self.json,
            "data": self.data,
        }


@dataclasses.dataclass
class HttpResponse:
    """
    A fully-read response. headers is case-insensitive like the headers on both
    aiohttp.ClientResponse and requests.Response.
    """

    status: int
    headers: CIMultiDictProxy[str]
    content: bytes
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status < 400

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "").split(";")[0].strip().lower()

    def text(self) -> str:
        return self.content.decode("utf-8-sig")

    def json(self) -> Any:
        return json.loads(self.text())


def make_headers(headers: Optional[Dict[str, str]] = None) -> CIMultiDictProxy[str]:
    return CIMultiDictProxy(CIMultiDict(headers or {}))


def send_sync(request: HttpRequest, timeout: Optional[float] = None) -> HttpResponse:
    response = requests.request(**request.to_kwargs(), timeout=timeout)
    return HttpResponse(
        response.status_code,
        make_headers(dict(response.headers)),
        response.content,
        response.url,
    )


async def send_async(
    request: HttpRequest, timeout: Optional[float] = None
) -> HttpResponse:
    kwargs = request.to_kwargs()
    if timeout is not None:
        kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.request(**kwargs) as response:
        content = await response.read()
        return HttpResponse(
            response.status,
            CIMultiDictProxy(CIMultiDict(response.headers)),
            content,
            str(response.url),
        )
