"""Device record and its read-only snapshot.

A :class:`Device` is the single mutable record owned by
:class:`~meraghar._controller.DeviceController`.  Two fields change
over its lifetime:

- ``is_on`` — the last *confirmed* outcome of a command.  It is only
  written after the device answered HTTP 200, never while a request
  is in flight.
- ``pending`` — ``True`` exactly while a controller-issued request has
  not resolved.  It doubles as the single-flight lock.

Everything else (``id``, ``name``, ``kind``, ``icon``) is fixed at
creation.  Collaborators never receive the record itself; they get a
frozen :class:`DeviceSnapshot`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum


class DeviceKind(StrEnum):
    """Appliance category.  Informational only."""

    LIGHT = "light"
    FAN = "fan"
    SWITCH = "switch"
    OUTLET = "outlet"


@dataclass(frozen=True, slots=True)
class DeviceSnapshot:
    """Immutable view of a device handed to observers and renderers."""

    id: uuid.UUID
    name: str
    kind: DeviceKind
    icon: str
    is_on: bool
    pending: bool

    @property
    def label(self) -> str:
        """Short status label as shown on the device card."""
        if self.pending:
            return "..."
        return "ON" if self.is_on else "OFF"

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-friendly dictionary."""
        return {
            "id": str(self.id),
            "name": self.name,
            "kind": self.kind.value,
            "icon": self.icon,
            "is_on": self.is_on,
            "pending": self.pending,
        }


@dataclass(slots=True)
class Device:
    """The controllable appliance.

    Only the controller mutates ``is_on`` and ``pending``; see the
    module docstring for their invariants.
    """

    name: str
    kind: DeviceKind = DeviceKind.FAN
    icon: str = "fan.fill"
    is_on: bool = False
    pending: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def snapshot(self) -> DeviceSnapshot:
        """Return a frozen copy of the current state."""
        return DeviceSnapshot(
            id=self.id,
            name=self.name,
            kind=self.kind,
            icon=self.icon,
            is_on=self.is_on,
            pending=self.pending,
        )
