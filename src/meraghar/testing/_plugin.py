"""Pytest plugin providing shared fixtures for meraghar.

Registers ``mock_http``, ``fake_clock`` and ``controller`` fixtures.
Discovered through the ``pytest11`` entry point.

Imports of meraghar modules happen inside the fixtures so that they
run after ``pytest-cov`` has started tracing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from meraghar._controller import DeviceController
    from meraghar._http import MockHttpClient
    from meraghar.testing._clock import FakeClock


@pytest.fixture
def mock_http() -> MockHttpClient:
    """Fresh MockHttpClient answering 200 by default."""
    from meraghar._http import MockHttpClient

    return MockHttpClient()


@pytest.fixture
def fake_clock() -> FakeClock:
    """FakeClock starting at time 0."""
    from meraghar.testing._clock import FakeClock

    return FakeClock()


@pytest.fixture
def controller(mock_http: MockHttpClient, fake_clock: FakeClock) -> DeviceController:
    """DeviceController for an idle, off ``"Fan"`` wired to the test doubles.

    Uses a short 0.05 s timeout so timeout paths finish quickly.
    """
    from meraghar._controller import DeviceController
    from meraghar._device import Device

    return DeviceController(
        http=mock_http,
        device=Device(name="Fan"),
        timeout=0.05,
        clock=fake_clock,
    )
