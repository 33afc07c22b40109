"""Command endpoint resolution.

Builds the URL for one device action::

    http://{host}:{port}/{action}

The composed string is returned verbatim.  ``httpx.URL`` is only used
to confirm that it parses; its normalised form is not returned
because it drops default ports (``:80``), and the device URL must
stay exactly as configured.

Resolution is pure.  The controller calls :func:`resolve` on every
operation, so a settings change takes effect on the next request.
"""

from __future__ import annotations

import re
from enum import StrEnum

import httpx

from meraghar._errors import InvalidEndpointError

_MAX_PORT = 65535

# RFC 3986 reg-name restricted to unreserved characters, or an IPv6 literal.
_HOST_RE = re.compile(r"^(?:[A-Za-z0-9._~-]+|\[[0-9A-Fa-f:.]+\])$")


class Action(StrEnum):
    """Path segment understood by the device firmware."""

    ON = "on"
    OFF = "off"
    STATUS = "status"

    @classmethod
    def for_target(cls, is_on: bool) -> Action:
        """Return the command that drives the device to *is_on*."""
        return cls.ON if is_on else cls.OFF


def _check_host(host: str) -> str:
    host = host.strip()
    if not host:
        msg = "Host must not be empty"
        raise InvalidEndpointError(msg)
    if not _HOST_RE.match(host):
        msg = f"Host {host!r} contains characters not allowed in a URL"
        raise InvalidEndpointError(msg)
    return host


def _check_port(port: str | int) -> str:
    if isinstance(port, bool):
        msg = f"Port must be a number, got {port!r}"
        raise InvalidEndpointError(msg)
    text = str(port).strip()
    if not (text.isascii() and text.isdigit()):
        msg = f"Port must be a number, got {text!r}"
        raise InvalidEndpointError(msg)
    number = int(text)
    if not 1 <= number <= _MAX_PORT:
        msg = f"Port {number} is outside 1-{_MAX_PORT}"
        raise InvalidEndpointError(msg)
    return text


def _check_action(action: Action | str) -> Action:
    try:
        return Action(action)
    except ValueError:
        choices = ", ".join(a.value for a in Action)
        msg = f"Unknown action {action!r}. Choose from: {choices}"
        raise InvalidEndpointError(msg) from None


def resolve(host: str, port: str | int, action: Action | str) -> str:
    """Build the command URL for *action* on ``host:port``.

    Args:
        host: Hostname or literal IP address (``[...]`` for IPv6).
        port: TCP port, as an int or the string the user typed.
        action: ``"on"``, ``"off"`` or ``"status"``.

    Returns:
        The URL, e.g. ``"http://10.37.55.116:80/on"``.

    Raises:
        InvalidEndpointError: If any part is empty, malformed or out
            of range, or the composed URL does not parse.
    """
    checked_host = _check_host(host)
    checked_port = _check_port(port)
    checked_action = _check_action(action)

    url = f"http://{checked_host}:{checked_port}/{checked_action.value}"
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        msg = f"Invalid endpoint {url!r}: {exc}"
        raise InvalidEndpointError(msg) from exc
    if not parsed.host:
        msg = f"Invalid endpoint {url!r}: missing host"
        raise InvalidEndpointError(msg)
    return url
