"""Tests for command and argument parsing."""

import pytest

from mlradio.utils.parsers import parse_command, parse_percent


class TestParseCommand:
    """Tests for parse_command."""

    def test_command_and_args(self):
        """First word is the lowercased command, the rest are args."""
        assert parse_command("  PLAY KBS Classic FM ") == ("play", ["KBS", "Classic", "FM"])

    def test_empty_input(self):
        """Blank input yields an empty command."""
        assert parse_command("   ") == ("", [])

    def test_command_only(self):
        """A bare command has no args."""
        assert parse_command("stop") == ("stop", [])


class TestParsePercent:
    """Tests for parse_percent."""

    @pytest.mark.parametrize(
        "value,expected",
        [("30", 0.3), ("75%", 0.75), ("0", 0.0), ("100", 1.0), ("12.5", 0.125)],
    )
    def test_valid(self, value, expected):
        """0-100 (with optional %) maps to 0.0-1.0."""
        assert parse_percent(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["150", "-1", "loud", "", "%"])
    def test_invalid(self, value):
        """Out-of-range and non-numeric values are rejected."""
        assert parse_percent(value) is None
