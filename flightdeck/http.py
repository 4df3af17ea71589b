"""HTTP client layer used by data preparation and PR annotation."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
import json
from typing import Any

import httpx

from ._version import __version__
from .constants import DEFAULT_TIMEOUT_SECONDS
from .exceptions import ContentError, HttpStatusError, NetworkError, RequestTimeoutError

_SHARED_CLIENT: ContextVar[httpx.Client | None] = ContextVar(
    "flightdeck_shared_client", default=None
)


def _build_headers(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    headers = {
        "User-Agent": f"baseline-flightdeck/{__version__}",
        "Accept": "application/json",
    }
    headers.update(extra or {})
    return headers


@contextmanager
def use_shared_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Iterator[httpx.Client]:
    """Provide a reusable HTTP client for all requests within a CLI run."""
    with httpx.Client(timeout=timeout, follow_redirects=True, headers=_build_headers()) as client:
        token = _SHARED_CLIENT.set(client)
        try:
            yield client
        finally:
            _SHARED_CLIENT.reset(token)


def _send(
    method: str,
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    payload: Any = None,
    expected: tuple[int, ...] = (200,),
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Send one request with a single retry on connection errors."""
    shared_client = _SHARED_CLIENT.get()
    request_headers = _build_headers(headers)
    retry_once = True
    while True:
        try:
            if shared_client is None or timeout != DEFAULT_TIMEOUT_SECONDS:
                with httpx.Client(
                    timeout=timeout, follow_redirects=True, headers=request_headers
                ) as client:
                    response = client.request(method, url, json=payload)
            else:
                response = shared_client.request(
                    method, url, json=payload, headers=request_headers
                )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(url) from exc
        except httpx.ConnectError as exc:
            if retry_once:
                retry_once = False
                continue
            raise NetworkError(url, cause=exc.__class__.__name__) from exc
        except httpx.RequestError as exc:
            raise NetworkError(url, cause=exc.__class__.__name__) from exc

        if response.status_code not in expected:
            raise HttpStatusError(response.status_code, str(response.url))

        body = response.text
        if not body.strip():
            raise ContentError(str(response.url))
        return body


def _parse_json_payload(raw: str, url: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ContentError(url) from exc


def fetch_json(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Any:
    """GET a JSON document."""
    return _parse_json_payload(_send("GET", url, timeout=timeout), url)


def post_json(
    url: str,
    payload: Mapping[str, Any],
    *,
    headers: Mapping[str, str] | None = None,
    method: str = "POST",
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """POST (or PATCH) a JSON body and decode the JSON response."""
    raw = _send(
        method,
        url,
        headers=headers,
        payload=dict(payload),
        expected=(200, 201),
        timeout=timeout,
    )
    return _parse_json_payload(raw, url)
