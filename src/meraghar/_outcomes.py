"""Outcome value objects returned by the controller.

Every operation returns exactly one outcome; nothing is raised across
the controller boundary.

``toggle()`` → :data:`ToggleOutcome`::

    Success(is_on, metadata)     device answered 200, state flipped
    Busy()                       a request is already in flight
    ConfigurationError(detail)   host/port cannot form a URL
    NetworkError(detail)         transport failure or timeout
    UnexpectedStatus(code)       device answered, but not 200

``query_status()`` → :data:`StatusOutcome`::

    Reachable(status_code, latency_s, metadata)
    Unreachable(detail)
    ConfigurationError(detail)

Each outcome serialises with ``to_dict()`` to
``{"outcome": "<kind>", ...fields}`` for CLI output and logs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class _Outcome:
    kind: ClassVar[str] = "outcome"
    ok: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dictionary tagged with the outcome kind."""
        return {"outcome": self.kind, **asdict(self)}


@dataclass(frozen=True, slots=True)
class Success(_Outcome):
    """The device confirmed the command; ``is_on`` is the new state."""

    kind: ClassVar[str] = "success"
    ok: ClassVar[bool] = True

    is_on: bool
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Busy(_Outcome):
    """Rejected: another toggle for the device is still in flight."""

    kind: ClassVar[str] = "busy"


@dataclass(frozen=True, slots=True)
class ConfigurationError(_Outcome):
    """Host or port is malformed; no request was attempted."""

    kind: ClassVar[str] = "configuration_error"

    detail: str


@dataclass(frozen=True, slots=True)
class NetworkError(_Outcome):
    """The request failed in transport or timed out."""

    kind: ClassVar[str] = "network_error"

    detail: str


@dataclass(frozen=True, slots=True)
class UnexpectedStatus(_Outcome):
    """The device answered with a status code other than 200."""

    kind: ClassVar[str] = "unexpected_status"

    code: int


@dataclass(frozen=True, slots=True)
class Reachable(_Outcome):
    """The status endpoint answered 200."""

    kind: ClassVar[str] = "reachable"
    ok: ClassVar[bool] = True

    status_code: int
    latency_s: float
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Unreachable(_Outcome):
    """The status endpoint could not be reached or did not answer 200."""

    kind: ClassVar[str] = "unreachable"

    detail: str


type ToggleOutcome = Success | Busy | ConfigurationError | NetworkError | UnexpectedStatus
"""Result of :meth:`DeviceController.toggle`."""

type StatusOutcome = Reachable | Unreachable | ConfigurationError
"""Result of :meth:`DeviceController.query_status`."""

type Outcome = ToggleOutcome | StatusOutcome
