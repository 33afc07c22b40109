"""Unit tests for meraghar._errors — exception hierarchy.

Test Techniques Used:
    - Specification-based Testing: class hierarchy and attributes
"""

from __future__ import annotations

import pytest

from meraghar._errors import (
    InvalidEndpointError,
    MeraGharError,
    SettingsStoreError,
    TransportError,
)


class TestHierarchy:
    """Every error derives from MeraGharError.

    Technique: Specification-based Testing.
    """

    @pytest.mark.parametrize(
        "exc_type",
        [InvalidEndpointError, SettingsStoreError, TransportError],
    )
    def test_base_class(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, MeraGharError)

    def test_invalid_endpoint_is_value_error(self) -> None:
        """Callers may catch resolver failures as ValueError."""
        with pytest.raises(ValueError, match="bad port"):
            raise InvalidEndpointError("bad port")


class TestTransportError:
    """TransportError carries the cause and URL.

    Technique: Specification-based Testing.
    """

    def test_detail_and_url(self) -> None:
        exc = TransportError("connection refused", url="http://10.37.55.116:80/on")
        assert exc.detail == "connection refused"
        assert exc.url == "http://10.37.55.116:80/on"
        assert str(exc) == "connection refused"

    def test_url_optional(self) -> None:
        assert TransportError("boom").url is None
