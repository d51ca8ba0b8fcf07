"""Read the JSON request handed to a command on its input stream."""

from __future__ import annotations

import json
import os
import re
import threading
from typing import Any, Dict, Mapping, Optional, TextIO

from artifactory_resource.exceptions import InputTimeoutError, InvalidRequestError

DEFAULT_TIMEOUT = 1.0

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def resolve_placeholders(content: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Replace ``${NAME}`` and ``${NAME:default}`` with environment values; unknown names are kept."""
    environ = os.environ if environ is None else environ

    def replace(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        if name in environ:
            return environ[name]
        return default if default is not None else match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, content)


def read_request(
    stream: TextIO,
    timeout: float = DEFAULT_TIMEOUT,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Read and parse the request, failing if the stream has not been closed within ``timeout`` seconds."""
    result: Dict[str, Any] = {}

    def read() -> None:
        try:
            result["content"] = stream.read()
        except Exception as exc:  # noqa: BLE001 - re-raised on the calling thread
            result["error"] = exc

    reader = threading.Thread(target=read, name="request-reader", daemon=True)
    reader.start()
    reader.join(timeout)
    if reader.is_alive():
        raise InputTimeoutError(f"Timeout waiting for input after {timeout}s")
    if "error" in result:
        raise result["error"]
    content = resolve_placeholders(result.get("content") or "", environ)
    if not content.strip():
        raise InvalidRequestError("No request received on input")
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        raise InvalidRequestError(f"Request is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request must be a JSON object")
    return payload
