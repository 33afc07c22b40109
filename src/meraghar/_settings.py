"""Application configuration via pydantic-settings.

Configuration is loaded from environment variables and/or ``.env``
files.  Every variable carries the ``MERAGHAR_`` prefix and nested
models use ``__`` as the delimiter, e.g.
``MERAGHAR_DEVICE__HOST=192.168.1.100``.

Two concerns are covered:

* **Device** — where the appliance lives and how long to wait for it.
* **Logging** — level, format, optional file sink, rotation.

``host`` and ``port`` are deliberately plain strings without
validation here.  They are checked by the endpoint resolver on every
call, so a bad value surfaces as a ``ConfigurationError`` outcome the
user can correct instead of a startup crash.

All durations are in **seconds**.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from meraghar._device import DeviceKind

DEFAULT_HOST = "10.37.55.116"
DEFAULT_PORT = "80"
DEFAULT_TIMEOUT = 5.0

# -------------------------------------------------------------------
# Sub-models (BaseModel, NOT BaseSettings — nested via composition)
# -------------------------------------------------------------------


class DeviceSettings(BaseModel):
    """The appliance endpoint and its presentation details.

    Environment variables (with ``__`` nesting)::

        MERAGHAR_DEVICE__HOST=192.168.1.100
        MERAGHAR_DEVICE__PORT=80
        MERAGHAR_DEVICE__TIMEOUT=5
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    host: str = Field(
        default=DEFAULT_HOST,
        description="Hostname or literal IP address of the device.",
    )
    port: str = Field(
        default=DEFAULT_PORT,
        description="TCP port of the device's HTTP server, as entered.",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=DEFAULT_TIMEOUT,
        description="Seconds to wait for a command or status response.",
    )
    name: str = Field(default="Fan", description="Label shown for the device.")
    kind: DeviceKind = Field(
        default=DeviceKind.FAN,
        description="Appliance category (informational).",
    )
    icon: str = Field(default="fan.fill", description="Presentation icon name.")
    auto_connect: bool = Field(
        default=True,
        description="Probe the device's status when an interactive session starts.",
    )
    notifications_enabled: bool = Field(
        default=True,
        description="Print every state transition in interactive sessions.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    ``format="json"`` emits one JSON object per line; ``"text"`` is a
    timestamped human-readable line for terminals.  When ``file`` is
    set, logs are also written to a size-rotated file.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format.",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path. ``None`` means stderr only.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description="Maximum log file size in megabytes before rotation.",
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Number of rotated log files to keep.",
    )


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root settings for meraghar.

    Example ``.env``::

        MERAGHAR_DEVICE__HOST=192.168.1.100
        MERAGHAR_DEVICE__PORT=8080
        MERAGHAR_LOGGING__LEVEL=DEBUG
        MERAGHAR_LOGGING__FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="MERAGHAR_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    device: DeviceSettings = Field(
        default_factory=DeviceSettings,
        description="Device endpoint settings.",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )
