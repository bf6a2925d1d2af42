"""Tests for broadcaster stream URL resolution."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mlradio.domain.radio.exceptions import InvalidURLError, NoStreamFoundError
from mlradio.domain.radio.models import Station, StationCategory
from mlradio.domain.radio.providers import ProviderKind, StreamLocator
from mlradio.domain.radio.stream_resolver import (
    ARIRANG_STREAM_URL,
    BBS_STREAM_URL,
    YTN_STREAM_URL,
    get_kbs_stream_url,
    get_mbc_stream_url,
    get_sbs_stream_url,
    resolve_locator,
    resolve_stream_url,
)

GET = "mlradio.domain.radio.stream_resolver.requests.get"


def json_response(payload) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def text_response(body: str) -> MagicMock:
    response = MagicMock()
    response.content = body.encode("utf-8")
    response.raise_for_status.return_value = None
    return response


def korean(url: str) -> Station:
    return Station(name="Test Korean", url=url, category=StationCategory.KOREAN)


class TestKbs:
    """Tests for the KBS landing API lookup."""

    def test_returns_first_service_url(self) -> None:
        """The first channel_item's service_url is the stream."""
        payload = {
            "channel_item": [
                {"service_url": "https://kbs.example.com/24/playlist.m3u8"},
                {"service_url": "https://kbs.example.com/other.m3u8"},
            ]
        }
        with patch(GET, return_value=json_response(payload)) as get:
            url = get_kbs_stream_url("24", timeout=5.0)

        assert url == "https://kbs.example.com/24/playlist.m3u8"
        get.assert_called_once_with(
            "https://cfpwwwapi.kbs.co.kr/api/v1/landing/live/channel_code/24",
            timeout=5.0,
        )

    def test_empty_channel_items(self) -> None:
        """An empty channel_item array yields no stream."""
        with patch(GET, return_value=json_response({"channel_item": []})):
            with pytest.raises(NoStreamFoundError):
                get_kbs_stream_url("21")

    def test_missing_service_url(self) -> None:
        """A channel item without service_url yields no stream."""
        with patch(GET, return_value=json_response({"channel_item": [{"title": "x"}]})):
            with pytest.raises(NoStreamFoundError):
                get_kbs_stream_url("21")

    def test_invalid_json(self) -> None:
        """A non-JSON body yields no stream."""
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")
        with patch(GET, return_value=response):
            with pytest.raises(NoStreamFoundError):
                get_kbs_stream_url("22")

    def test_http_error(self) -> None:
        """Non-2xx statuses become NoStreamFoundError."""
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503")
        with patch(GET, return_value=response):
            with pytest.raises(NoStreamFoundError):
                get_kbs_stream_url("23")


class TestMbcAndSbs:
    """Tests for the plain-text MBC and SBS endpoints."""

    def test_mbc_channel(self) -> None:
        """MBC returns the body as the URL, trimmed."""
        with patch(GET, return_value=text_response(" https://mbc.example.com/sfm\n")) as get:
            url = get_mbc_stream_url("sfm")

        assert url == "https://mbc.example.com/sfm"
        get.assert_called_once_with(
            "https://sminiplay.imbc.com/aacplay.ashx?agent=webapp&channel=sfm",
            timeout=None,
        )

    def test_mbc_all_that_music(self) -> None:
        """chm uses its own endpoint."""
        with patch(GET, return_value=text_response("https://mbc.example.com/chm")) as get:
            get_mbc_stream_url("chm")

        requested = get.call_args[0][0]
        assert requested.endswith("channel=chm")

    def test_sbs_channel(self) -> None:
        """SBS asks for the HLS variant of the channel."""
        with patch(GET, return_value=text_response("https://sbs.example.com/love.m3u8")) as get:
            url = get_sbs_stream_url("love")

        assert url == "https://sbs.example.com/love.m3u8"
        get.assert_called_once_with(
            "https://apis.sbs.co.kr/play-api/1.0/livestream/lovepc/lovefm?protocol=hls&ssl=Y",
            timeout=None,
        )

    @pytest.mark.parametrize("body", ["", "   \n"])
    def test_empty_body(self, body: str) -> None:
        """An empty body yields no stream."""
        with patch(GET, return_value=text_response(body)):
            with pytest.raises(NoStreamFoundError):
                get_sbs_stream_url("power")

    def test_transport_error(self) -> None:
        """Connection failures become NoStreamFoundError (single attempt)."""
        with patch(GET, side_effect=requests.ConnectionError("refused")) as get:
            with pytest.raises(NoStreamFoundError):
                get_mbc_stream_url("mfm")

        assert get.call_count == 1


class TestResolveLocator:
    """Dispatch over provider kinds."""

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (ProviderKind.BBS, BBS_STREAM_URL),
            (ProviderKind.YTN, YTN_STREAM_URL),
            (ProviderKind.ARIRANG, ARIRANG_STREAM_URL),
        ],
    )
    def test_fixed_streams_make_no_request(self, kind: ProviderKind, expected: str) -> None:
        """Fixed HLS providers resolve without network access."""
        with patch(GET) as get:
            assert resolve_locator(StreamLocator(kind=kind, channel="main")) == expected

        get.assert_not_called()

    def test_direct_url_passthrough(self) -> None:
        """DIRECT locators resolve to themselves."""
        url = "https://n10a-e2.revma.ihrhls.com/zc2815"
        assert resolve_locator(StreamLocator(kind=ProviderKind.DIRECT, channel=url)) == url

    def test_non_url_response_is_invalid(self) -> None:
        """A provider answering with something other than a URL is rejected."""
        with patch(GET, return_value=text_response("<html>maintenance</html>")):
            with pytest.raises(InvalidURLError):
                resolve_locator(StreamLocator(kind=ProviderKind.MBC, channel="sfm"))


class TestResolveStreamUrl:
    """End-to-end resolution from a Station."""

    def test_kbs_station(self) -> None:
        """kbs:// stations go through the KBS API."""
        payload = {"channel_item": [{"service_url": "https://kbs.example.com/21.m3u8"}]}
        with patch(GET, return_value=json_response(payload)):
            assert resolve_stream_url(korean("kbs://21")) == "https://kbs.example.com/21.m3u8"

    def test_international_station(self) -> None:
        """Literal URLs resolve unchanged."""
        station = Station(
            name="KISS FM 106.1",
            url="https://n35a-e2.revma.ihrhls.com/zc181",
            category=StationCategory.INTERNATIONAL,
        )
        assert resolve_stream_url(station) == station.url

    def test_unknown_scheme(self) -> None:
        """Unknown schemes raise InvalidURLError."""
        with pytest.raises(InvalidURLError):
            resolve_stream_url(korean("ebs://fm"))

    def test_timeout_is_forwarded(self) -> None:
        """The timeout reaches requests.get."""
        with patch(GET, return_value=text_response("https://sbs.example.com/p.m3u8")) as get:
            resolve_stream_url(korean("sbs://power"), timeout=3.0)

        assert get.call_args.kwargs["timeout"] == 3.0

    def test_no_caching(self) -> None:
        """Every resolution makes a fresh request."""
        with patch(GET, return_value=text_response("https://mbc.example.com/m")) as get:
            resolve_stream_url(korean("mbc://mfm"))
            resolve_stream_url(korean("mbc://mfm"))

        assert get.call_count == 2
