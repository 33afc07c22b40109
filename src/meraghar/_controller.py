"""Device command/state controller.

:class:`DeviceController` owns one :class:`~meraghar._device.Device`
and turns "toggle it" into an HTTP request, waits for it with a
timeout, and reconciles the device state with the result.

State machine (``pending`` × ``is_on``)::

    {idle, off} --toggle--> {pending, off} --200--> {idle, on}
                                 |
                                 +--error/timeout/non-200--> {idle, off}

    {idle, on}  --toggle--> {pending, on}  --200--> {idle, off}
                                 |
                                 +--error/timeout/non-200--> {idle, on}

A toggle while ``pending`` returns :class:`~meraghar._outcomes.Busy`
without touching the network.  ``pending`` is checked and set with no
``await`` in between, so on a single event loop it is the only lock
needed.

The request runs as its own task under ``asyncio.timeout()``.  When
the deadline fires the task is cancelled, so a late response can never
reach the device record; the timeout outcome is final.

Host and port are passed to every call and resolved afresh, so
configuration edits apply to the next request.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from meraghar._clock import ClockPort, SystemClock
from meraghar._device import Device, DeviceSnapshot
from meraghar._endpoint import Action, resolve
from meraghar._errors import InvalidEndpointError, TransportError
from meraghar._http import HttpPort, HttpResponse
from meraghar._outcomes import (
    Busy,
    ConfigurationError,
    NetworkError,
    Outcome,
    Reachable,
    StatusOutcome,
    Success,
    ToggleOutcome,
    UnexpectedStatus,
    Unreachable,
)
from meraghar._settings import DEFAULT_TIMEOUT, DeviceSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

StateListener = Callable[[DeviceSnapshot], None]
"""Callback receiving the device snapshot after each state transition."""

OutcomeListener = Callable[[Outcome], None]
"""Callback receiving every toggle and status outcome."""

_HTTP_OK = 200


def _parse_metadata(body: bytes) -> dict[str, Any] | None:
    """Return *body* as a dict when it is a JSON object, else ``None``."""
    if not body.strip():
        return None
    try:
        data = json.loads(body)
    except ValueError:
        logger.debug("Ignoring non-JSON response body (%d bytes)", len(body))
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring JSON response body of type %s", type(data).__name__)
        return None
    return data


class DeviceController:
    """Single-device controller with single-flight toggling.

    Args:
        http: HTTP port used for every request.
        device: The device record to own.  A fresh ``"Fan"`` device
            (off, idle) is created when omitted.
        timeout: Seconds to wait for any request before reporting a
            network error.
        clock: Monotonic clock for status-probe latency.
    """

    def __init__(
        self,
        *,
        http: HttpPort,
        device: Device | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: ClockPort | None = None,
    ) -> None:
        if timeout <= 0:
            msg = f"timeout must be positive, got {timeout!r}"
            raise ValueError(msg)
        self._http = http
        self._device = device if device is not None else Device(name="Fan")
        self._timeout = timeout
        self._clock: ClockPort = clock if clock is not None else SystemClock()
        self._state_listeners: list[StateListener] = []
        self._outcome_listeners: list[OutcomeListener] = []

    @classmethod
    def from_settings(
        cls,
        settings: DeviceSettings,
        *,
        http: HttpPort,
        clock: ClockPort | None = None,
        is_on: bool = False,
    ) -> DeviceController:
        """Build a controller for the device described by *settings*.

        ``is_on`` seeds the confirmed state; it defaults to off because
        device state is never persisted.
        """
        device = Device(
            name=settings.name,
            kind=settings.kind,
            icon=settings.icon,
            is_on=is_on,
        )
        return cls(http=http, device=device, timeout=settings.timeout, clock=clock)

    # -- Read-only view -----------------------------------------------------

    @property
    def snapshot(self) -> DeviceSnapshot:
        """Frozen copy of the current device state."""
        return self._device.snapshot()

    @property
    def is_on(self) -> bool:
        return self._device.is_on

    @property
    def pending(self) -> bool:
        return self._device.pending

    @property
    def timeout(self) -> float:
        return self._timeout

    # -- Observers ----------------------------------------------------------

    def on_change(self, callback: StateListener) -> Callable[[], None]:
        """Register *callback* for ``{is_on, pending}`` transitions.

        Returns:
            A function that unregisters the callback.
        """
        self._state_listeners.append(callback)
        return lambda: self._discard(self._state_listeners, callback)

    def on_outcome(self, callback: OutcomeListener) -> Callable[[], None]:
        """Register *callback* for every operation outcome.

        Returns:
            A function that unregisters the callback.
        """
        self._outcome_listeners.append(callback)
        return lambda: self._discard(self._outcome_listeners, callback)

    # -- Operations ---------------------------------------------------------

    async def toggle(self, host: str, port: str | int) -> ToggleOutcome:
        """Ask the device for the opposite of its confirmed state.

        Returns exactly one outcome; never raises for device, network
        or configuration problems.  ``pending`` is ``False`` again by
        the time the outcome is returned or reported.
        """
        if self._device.pending:
            logger.info(
                "Toggle rejected: request already in flight",
                extra={"device": self._device.name},
            )
            return self._report(Busy())

        target = not self._device.is_on
        action = Action.for_target(target)
        try:
            url = resolve(host, port, action)
        except InvalidEndpointError as exc:
            return self._report(ConfigurationError(str(exc)))

        logger.info(
            "Sending %s to %s",
            action.value,
            url,
            extra={"device": self._device.name},
        )
        self._update(pending=True)
        try:
            result = await self._request(url)
        except BaseException:
            self._update(pending=False)
            raise

        outcome: ToggleOutcome
        match result:
            case HttpResponse(status_code=200, body=body):
                self._update(pending=False, is_on=target)
                outcome = Success(is_on=target, metadata=_parse_metadata(body))
            case HttpResponse(status_code=code):
                self._update(pending=False)
                outcome = UnexpectedStatus(code)
            case TransportError(detail=detail):
                self._update(pending=False)
                outcome = NetworkError(detail)
        return self._report(outcome)

    async def query_status(self, host: str, port: str | int) -> StatusOutcome:
        """Probe the device's status endpoint.

        Independent of :meth:`toggle`: it neither reads nor writes
        ``is_on``/``pending`` and may run while a toggle is in flight.
        """
        try:
            url = resolve(host, port, Action.STATUS)
        except InvalidEndpointError as exc:
            return self._report(ConfigurationError(str(exc)))

        logger.debug("Probing %s", url, extra={"device": self._device.name})
        started = self._clock.now()
        result = await self._request(url)
        latency = self._clock.now() - started

        outcome: StatusOutcome
        match result:
            case HttpResponse(status_code=200, body=body):
                outcome = Reachable(
                    status_code=_HTTP_OK,
                    latency_s=latency,
                    metadata=_parse_metadata(body),
                )
            case HttpResponse(status_code=code):
                outcome = Unreachable(f"{url} answered HTTP {code}")
            case TransportError(detail=detail):
                outcome = Unreachable(detail)
        return self._report(outcome)

    # -- Internal -----------------------------------------------------------

    async def _request(self, url: str) -> HttpResponse | TransportError:
        """Run one GET as a task, bounded by the controller timeout.

        Transport failures and the deadline are returned as a
        :class:`TransportError` value.  Any other exception propagates.
        """
        task = asyncio.create_task(self._http.get(url, timeout=self._timeout))
        try:
            async with asyncio.timeout(self._timeout):
                return await task
        except TimeoutError:
            msg = f"No response from {url} within {self._timeout:g}s"
            return TransportError(msg, url=url)
        except TransportError as exc:
            return exc

    def _update(self, *, pending: bool, is_on: bool | None = None) -> None:
        """Mutate the device record and notify state listeners."""
        before = (self._device.pending, self._device.is_on)
        self._device.pending = pending
        if is_on is not None:
            self._device.is_on = is_on
        if (self._device.pending, self._device.is_on) == before:
            return

        snapshot = self._device.snapshot()
        for cb in list(self._state_listeners):
            try:
                cb(snapshot)
            except Exception:
                logger.exception("Error in state listener %r", cb)

    def _report[T: Outcome](self, outcome: T) -> T:
        """Log *outcome*, fan it out to listeners and return it."""
        extra = {"device": self._device.name}
        if outcome.ok:
            logger.info("Outcome: %s", outcome, extra=extra)
        elif isinstance(outcome, Busy):
            logger.debug("Outcome: %s", outcome, extra=extra)
        else:
            logger.warning("Outcome: %s", outcome, extra=extra)

        for cb in list(self._outcome_listeners):
            try:
                cb(outcome)
            except Exception:
                logger.exception("Error in outcome listener %r", cb)
        return outcome

    @staticmethod
    def _discard(listeners: list[Any], callback: object) -> None:
        if callback in listeners:
            listeners.remove(callback)
