"""Unit tests for the meraghar top-level public API surface.

Test Techniques Used:
    - Specification-based Testing: ``__all__`` completeness against the
      documented public API.
    - Importability: Every name in ``__all__`` resolves via ``getattr``.
"""

from __future__ import annotations

import meraghar
import meraghar.testing


class TestMeraGharPublicAPI:
    """All expected symbols are importable and listed in ``__all__``."""

    EXPECTED_NAMES = {
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
    }

    def test_all_contains_expected_symbols(self) -> None:
        """``__all__`` matches the documented public API exactly."""
        assert set(meraghar.__all__) == self.EXPECTED_NAMES

    def test_all_symbols_importable(self) -> None:
        """Every name in ``__all__`` resolves to an attribute on the module."""
        for name in meraghar.__all__:
            obj = getattr(meraghar, name, None)
            assert obj is not None, f"{name!r} listed in __all__ but not importable"

    def test_testing_namespace_exports(self) -> None:
        """``meraghar.testing`` re-exports the test doubles."""
        assert set(meraghar.testing.__all__) == {
            "FakeClock",
            "MockHttpClient",
            "NullHttpClient",
            "make_settings",
        }
