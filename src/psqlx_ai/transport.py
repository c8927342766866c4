from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

import httpx

from .errors import MalformedResponseError, TransportError
from .logging import get_logger

log = get_logger(__name__)

_BODY_EXCERPT_CHARS = 500


class JsonTransport(Protocol):
    """Send one JSON body, return the decoded JSON response or raise."""

    def post_json(self, url: str, *, headers: Iterable[tuple[str, str]], payload: Any) -> Any: ...


class HttpxTransport:
    """
    Blocking JSON-over-HTTP transport backed by httpx.Client.

    timeout_seconds=None disables the deadline entirely: the call runs until the
    upstream answers or the connection fails.
    """

    def __init__(self, *, client: httpx.Client | None = None, timeout_seconds: float | None = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def post_json(self, url: str, *, headers: Iterable[tuple[str, str]], payload: Any) -> Any:
        try:
            resp = self._client.post(url, headers=list(headers), json=payload)
        except httpx.TimeoutException as e:
            raise TransportError("Upstream request timed out.") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Upstream request failed: {e}") from e

        if not resp.is_success:
            body = resp.text[:_BODY_EXCERPT_CHARS]
            log.warning("completion_upstream_error", status_code=resp.status_code, body=body)
            raise TransportError(
                f"Upstream error {resp.status_code}: {body}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"Upstream response is not valid JSON: {e}") from e
