"""Small helpers shared by the repository and build-run clients."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from artifactory_resource.exceptions import (
    FatalServerResponseError,
    FlakyServerResponseError,
    TransientTransferError,
)
from artifactory_resource.modules.artifactory.retry import FLAKY_STATUS_CODES

SAFE_PATH_CHARS = "/;=:@"


def encode_path(path: str) -> str:
    return quote(path, safe=SAFE_PATH_CHARS)


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{encode_path(path.lstrip('/'))}"


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    body = response.read().decode("utf-8", errors="replace")
    url = str(response.request.url)
    if response.status_code in FLAKY_STATUS_CODES:
        raise FlakyServerResponseError(response.status_code, url, body)
    raise FatalServerResponseError(response.status_code, url, body)


def send(client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    try:
        response = client.request(method, url, **kwargs)
    except httpx.TransportError as exc:
        raise TransientTransferError(url, str(exc)) from exc
    raise_for_status(response)
    return response
