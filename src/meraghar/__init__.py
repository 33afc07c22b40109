"""meraghar.

Toggle a networked appliance on or off over plain HTTP, with a
single-flight controller that only trusts confirmed responses.
"""

from importlib.metadata import PackageNotFoundError, version

from meraghar._clock import ClockPort, SystemClock
from meraghar._controller import (
    DeviceController,
    OutcomeListener,
    StateListener,
)
from meraghar._device import Device, DeviceKind, DeviceSnapshot
from meraghar._endpoint import Action, resolve
from meraghar._errors import (
    InvalidEndpointError,
    MeraGharError,
    SettingsStoreError,
    TransportError,
)
from meraghar._http import (
    HttpPort,
    HttpResponse,
    HttpxClient,
    MockHttpClient,
    NullHttpClient,
)
from meraghar._logging import JsonFormatter, TextFormatter, configure_logging
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
from meraghar._settings import DeviceSettings, LoggingSettings, Settings
from meraghar._store import SettingsStore

try:
    __version__ = version("meraghar")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Controller
    "DeviceController",
    "OutcomeListener",
    "StateListener",
    # Device
    "Device",
    "DeviceKind",
    "DeviceSnapshot",
    # Endpoint
    "Action",
    "resolve",
    # Outcomes
    "Busy",
    "ConfigurationError",
    "NetworkError",
    "Outcome",
    "Reachable",
    "StatusOutcome",
    "Success",
    "ToggleOutcome",
    "UnexpectedStatus",
    "Unreachable",
    # Errors
    "InvalidEndpointError",
    "MeraGharError",
    "SettingsStoreError",
    "TransportError",
    # HTTP
    "HttpPort",
    "HttpResponse",
    "HttpxClient",
    "MockHttpClient",
    "NullHttpClient",
    # Clock
    "ClockPort",
    "SystemClock",
    # Logging
    "JsonFormatter",
    "TextFormatter",
    "configure_logging",
    # Settings
    "DeviceSettings",
    "LoggingSettings",
    "Settings",
    "SettingsStore",
]
