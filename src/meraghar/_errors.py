"""Exception hierarchy.

Exceptions are internal signals between layers.  The controller
catches them at its boundary and turns them into outcome values
(:mod:`meraghar._outcomes`), so callers of ``toggle()`` and
``query_status()`` never see them.

- :class:`InvalidEndpointError` — raised by the resolver; becomes
  ``ConfigurationError``.
- :class:`TransportError` — raised by HTTP adapters for connection
  failures; becomes ``NetworkError`` / ``Unreachable``.
- :class:`SettingsStoreError` — raised by the settings store for an
  unreadable or corrupt file.
"""

from __future__ import annotations


class MeraGharError(Exception):
    """Base class for all meraghar errors."""


class InvalidEndpointError(MeraGharError, ValueError):
    """Host, port or action cannot form a well-formed command URL."""


class TransportError(MeraGharError):
    """The request never produced an HTTP response.

    Args:
        detail: Human-readable cause (connection refused, DNS, ...).
        url: The URL that was being requested.
    """

    def __init__(self, detail: str, *, url: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.url = url


class SettingsStoreError(MeraGharError):
    """The persisted settings file cannot be read or parsed."""
