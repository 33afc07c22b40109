"""HTTP client port and adapters.

Provides HttpPort (Protocol) and three implementations:

- HttpxClient — real client backed by httpx
- NullHttpClient — answers 200 without touching the network (dry run)
- MockHttpClient — scriptable test double that records requests

Design decisions:

- The port speaks in :class:`HttpResponse` and :class:`TransportError`
  so the controller never depends on httpx types.
- A request either returns a response (any status code) or raises
  ``TransportError``.  Status interpretation belongs to the controller.
- The adapters accept a timeout, but the controller also wraps every
  call in ``asyncio.timeout()``; that outer deadline is authoritative.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import httpx

from meraghar._errors import TransportError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: bytes = b""

    @classmethod
    def from_json(cls, status_code: int, payload: object) -> HttpResponse:
        """Build a response whose body is *payload* encoded as JSON."""
        return cls(status_code=status_code, body=json.dumps(payload).encode())


# ---------------------------------------------------------------------------
# Port (Protocol)
# ---------------------------------------------------------------------------


@runtime_checkable
class HttpPort(Protocol):
    """Port contract for issuing a single GET request."""

    async def get(self, url: str, *, timeout: float) -> HttpResponse: ...


# ---------------------------------------------------------------------------
# Null adapter
# ---------------------------------------------------------------------------


@dataclass
class NullHttpClient:
    """Dry-run adapter: every request succeeds without network I/O."""

    async def get(self, url: str, *, timeout: float) -> HttpResponse:  # noqa: ARG002
        """Answer 200 with a ``{"dry_run": true}`` body."""
        logger.debug("NullHttpClient.get(%s) — not sent", url)
        return HttpResponse.from_json(200, {"dry_run": True})


# ---------------------------------------------------------------------------
# Mock / test-double adapter
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Scripted:
    result: HttpResponse | TransportError
    hold: bool = False


@dataclass
class MockHttpClient:
    """In-memory test double that records requests.

    Responses are served from a FIFO script; when the script is empty
    the ``default`` response is returned.  A scripted entry can be
    *held*: the request then blocks until :meth:`release` is called (or
    the caller cancels it), which is how tests simulate a device that
    never answers.
    """

    default: HttpResponse = field(default_factory=lambda: HttpResponse(200))
    requests: list[str] = field(default_factory=list)
    timeouts: list[float] = field(default_factory=list)
    _script: deque[_Scripted] = field(default_factory=deque, init=False, repr=False)
    _released: asyncio.Event = field(
        default_factory=asyncio.Event,
        init=False,
        repr=False,
    )

    # -- HttpPort methods --------------------------------------------------

    async def get(self, url: str, *, timeout: float) -> HttpResponse:
        """Record the request and serve the next scripted result."""
        self.requests.append(url)
        self.timeouts.append(timeout)
        entry = self._script.popleft() if self._script else _Scripted(self.default)
        if entry.hold:
            await self._released.wait()
        if isinstance(entry.result, TransportError):
            raise entry.result
        return entry.result

    # -- Test helpers -------------------------------------------------------

    def queue_response(
        self,
        status_code: int = 200,
        body: bytes | dict[str, object] = b"",
        *,
        hold: bool = False,
    ) -> None:
        """Script the next response.  A dict body is encoded as JSON."""
        if isinstance(body, dict):
            response = HttpResponse.from_json(status_code, body)
        else:
            response = HttpResponse(status_code, body)
        self._script.append(_Scripted(response, hold=hold))

    def queue_error(self, detail: str = "connection refused") -> None:
        """Script a transport failure for the next request."""
        self._script.append(_Scripted(TransportError(detail)))

    def queue_hang(self) -> None:
        """Script a request that blocks until released or cancelled."""
        self._script.append(_Scripted(self.default, hold=True))

    def release(self) -> None:
        """Let every held request complete."""
        self._released.set()

    @property
    def request_count(self) -> int:
        """Number of recorded requests."""
        return len(self.requests)

    def reset(self) -> None:
        """Clear recorded requests and the response script."""
        self.requests.clear()
        self.timeouts.clear()
        self._script.clear()
        self._released = asyncio.Event()


# ---------------------------------------------------------------------------
# Real adapter
# ---------------------------------------------------------------------------


@dataclass
class HttpxClient:
    """Production adapter backed by :class:`httpx.AsyncClient`.

    A fresh client is opened per request: commands are rare and the
    device endpoint may change between calls, so no connection pool is
    kept.  *transport* exists for tests (``httpx.MockTransport``).
    """

    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    async def get(self, url: str, *, timeout: float) -> HttpResponse:
        """Issue a GET and return the response.

        Raises:
            TransportError: On connection, DNS, protocol or timeout
                failures.  No exception is raised for non-2xx codes.
        """
        logger.debug("GET %s (timeout=%.1fs)", url, timeout)
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=timeout,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            msg = f"Request to {url} timed out after {timeout:g}s"
            raise TransportError(msg, url=url) from exc
        except httpx.RequestError as exc:
            msg = f"Request to {url} failed: {str(exc) or type(exc).__name__}"
            raise TransportError(msg, url=url) from exc

        logger.debug("GET %s -> %d", url, response.status_code)
        return HttpResponse(status_code=response.status_code, body=response.content)
