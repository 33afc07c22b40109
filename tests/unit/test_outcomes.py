"""Unit tests for meraghar._outcomes — outcome value objects.

Test Techniques Used:
    - Specification-based Testing: serialisation schema per outcome
    - Equivalence Partitioning: ok vs failure outcomes
"""

from __future__ import annotations

import json
from dataclasses import FrozenInstanceError

import pytest

from meraghar._outcomes import (
    Busy,
    ConfigurationError,
    NetworkError,
    Reachable,
    Success,
    UnexpectedStatus,
    Unreachable,
)


class TestToDict:
    """to_dict() tags every outcome with its kind."""

    @pytest.mark.parametrize(
        ("outcome", "expected"),
        [
            (Success(is_on=True), {"outcome": "success", "is_on": True, "metadata": None}),
            (Busy(), {"outcome": "busy"}),
            (
                ConfigurationError("Host must not be empty"),
                {"outcome": "configuration_error", "detail": "Host must not be empty"},
            ),
            (NetworkError("refused"), {"outcome": "network_error", "detail": "refused"}),
            (UnexpectedStatus(404), {"outcome": "unexpected_status", "code": 404}),
            (
                Reachable(status_code=200, latency_s=0.1),
                {"outcome": "reachable", "status_code": 200, "latency_s": 0.1, "metadata": None},
            ),
            (Unreachable("timeout"), {"outcome": "unreachable", "detail": "timeout"}),
        ],
    )
    def test_schema(self, outcome: object, expected: dict[str, object]) -> None:
        """Each outcome serialises its fields plus the kind tag."""
        assert outcome.to_dict() == expected  # type: ignore[attr-defined]

    def test_metadata_is_json_serialisable(self) -> None:
        """Metadata from the device survives a JSON round trip."""
        outcome = Success(is_on=False, metadata={"state": "off", "rssi": -60})
        assert json.loads(json.dumps(outcome.to_dict()))["metadata"]["rssi"] == -60


class TestFlags:
    """ok flag and immutability."""

    def test_only_success_and_reachable_are_ok(self) -> None:
        """Success and Reachable are ok; everything else is not."""
        assert Success(is_on=True).ok
        assert Reachable(status_code=200, latency_s=0.0).ok
        for outcome in (
            Busy(),
            ConfigurationError("x"),
            NetworkError("x"),
            UnexpectedStatus(500),
            Unreachable("x"),
        ):
            assert not outcome.ok

    def test_frozen(self) -> None:
        """Outcomes reject assignment."""
        outcome = UnexpectedStatus(404)
        with pytest.raises(FrozenInstanceError):
            outcome.code = 200  # type: ignore[misc]

    def test_equality(self) -> None:
        """Outcomes compare by value."""
        assert NetworkError("x") == NetworkError("x")
        assert Busy() == Busy()
