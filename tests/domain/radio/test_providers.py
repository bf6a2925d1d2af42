"""Tests for station locator parsing."""

import pytest

from mlradio.domain.radio.exceptions import InvalidURLError, RadioError
from mlradio.domain.radio.providers import (
    ProviderKind,
    StreamLocator,
    is_http_url,
    parse_locator,
)


class TestParseLocator:
    """Tests for parse_locator."""

    @pytest.mark.parametrize(
        "url,kind,channel",
        [
            ("kbs://21", ProviderKind.KBS, "21"),
            ("kbs://24", ProviderKind.KBS, "24"),
            ("mbc://sfm", ProviderKind.MBC, "sfm"),
            ("mbc://chm", ProviderKind.MBC, "chm"),
            ("sbs://love", ProviderKind.SBS, "love"),
            ("sbs://power", ProviderKind.SBS, "power"),
            ("bbs://main", ProviderKind.BBS, "main"),
            ("ytn://main", ProviderKind.YTN, "main"),
            ("arirang://main", ProviderKind.ARIRANG, "main"),
        ],
    )
    def test_broadcaster_schemes(self, url: str, kind: ProviderKind, channel: str) -> None:
        """Broadcaster schemes parse into their kind and channel."""
        assert parse_locator(url) == StreamLocator(kind=kind, channel=channel)

    def test_scheme_is_case_insensitive(self) -> None:
        """KBS:// and kbs:// are the same provider."""
        assert parse_locator("KBS://22").kind is ProviderKind.KBS

    def test_http_url_is_direct(self) -> None:
        """Literal stream URLs keep the whole URL as the channel."""
        url = "https://n35a-e2.revma.ihrhls.com/zc181"
        locator = parse_locator(url)

        assert locator.kind is ProviderKind.DIRECT
        assert locator.channel == url

    def test_plain_http_is_direct(self) -> None:
        """http:// is accepted as well as https://."""
        assert parse_locator("http://radio.example.com:8000/live").kind is ProviderKind.DIRECT

    def test_fixed_stream_without_channel(self) -> None:
        """Fixed-stream providers don't need a channel."""
        assert parse_locator("ytn://").kind is ProviderKind.YTN

    @pytest.mark.parametrize("url", ["kbs://", "mbc://", "sbs:// "])
    def test_channel_provider_requires_channel(self, url: str) -> None:
        """KBS, MBC and SBS need a channel code."""
        with pytest.raises(InvalidURLError):
            parse_locator(url)

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "ftp://example.com/stream",
            "spotify://track/123",
            "https://",
            "http:///path-only",
        ],
    )
    def test_invalid_locators(self, url: str) -> None:
        """Empty, schemeless, unknown-scheme and hostless URLs are rejected."""
        with pytest.raises(InvalidURLError):
            parse_locator(url)

    def test_invalid_url_is_radio_error(self) -> None:
        """InvalidURLError can be caught as RadioError."""
        with pytest.raises(RadioError):
            parse_locator("unknown://x")


class TestIsHttpUrl:
    """Tests for is_http_url."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/live.m3u8", True),
            ("http://example.com", True),
            ("https://", False),
            ("kbs://21", False),
            ("example.com/stream", False),
            ("", False),
        ],
    )
    def test_is_http_url(self, url: str, expected: bool) -> None:
        """Only absolute http(s) URLs with a host qualify."""
        assert is_http_url(url) is expected
