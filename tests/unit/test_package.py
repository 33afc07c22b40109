"""Smoke tests for meraghar package structure.

Test Techniques Used:
- Specification-based: Verify package imports and version metadata exist.
"""

import meraghar


class TestPackageStructure:
    """Verify the meraghar package is properly installed and importable."""

    def test_package_importable(self) -> None:
        """Package can be imported without error."""
        assert meraghar is not None

    def test_version_is_string(self) -> None:
        """Package exposes a non-empty version string."""
        assert isinstance(meraghar.__version__, str)
        assert len(meraghar.__version__) > 0
