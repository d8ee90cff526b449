"""Tests for MusicInfoClient over httpx.MockTransport."""

import json
from datetime import date

import httpx
import pytest

from song_library.core.connectors import MusicInfoClient
from song_library.core.connectors.music_info import SongDetail
from song_library.core.errors import UpstreamBadRequestError, UpstreamError
from song_library.core.interfaces import MetadataLookupProtocol

BASE_URL = "http://music-info.test"


def make_client(handler) -> MusicInfoClient:
    return MusicInfoClient(BASE_URL, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.unit
class TestSongDetail:
    """Upstream body parsing."""

    @pytest.mark.parametrize("raw", ["16.07.2006", "2006-07-16", "2006-07-16T00:00:00Z"])
    def test_release_date_formats(self, raw):
        detail = SongDetail.model_validate({"releaseDate": raw})
        assert detail.release_date == date(2006, 7, 16)

    def test_snake_case_and_missing_date(self):
        assert SongDetail.model_validate({"release_date": "16.07.2006"}).release_date == date(2006, 7, 16)
        assert SongDetail.model_validate({"releaseDate": ""}).release_date is None
        assert SongDetail.model_validate({}).release_date is None

    def test_garbage_date_rejected(self):
        with pytest.raises(ValueError):
            SongDetail.model_validate({"releaseDate": "sometime in 2006"})


@pytest.mark.unit
class TestMusicInfoClient:
    """fetch() request shape and error mapping."""

    def test_implements_protocol(self):
        assert isinstance(MusicInfoClient(BASE_URL), MetadataLookupProtocol)

    def test_scheme_added(self):
        assert MusicInfoClient("music-info:8080/").base_url == "http://music-info:8080"

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        """Successful lookup.

        ЧТО ПРОВЕРЯЕМ:
            GET /info?group=&song= is sent; body becomes an unsaved Song
        """
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={
                "releaseDate": "16.07.2006",
                "text": "Ooh baby, don't you know I suffer?\n\nOoh baby, can you hear me moan?",
                "link": "https://www.youtube.com/watch?v=Xsp3_a-PMTw",
            })

        client = make_client(handler)
        song = await client.fetch("Supermassive Black Hole", "Muse")
        await client.client.aclose()

        assert seen["path"] == "/info"
        assert seen["params"] == {"group": "Muse", "song": "Supermassive Black Hole"}
        assert song.id is None
        assert song.name == "Supermassive Black Hole"
        assert song.group == "Muse"
        assert song.release_date == date(2006, 7, 16)
        assert song.link.endswith("Xsp3_a-PMTw")

    @pytest.mark.asyncio
    async def test_bad_request(self):
        client = make_client(lambda request: httpx.Response(400, text="unknown song"))

        with pytest.raises(UpstreamBadRequestError):
            await client.fetch("x", "y")

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Non-400 failure.

        ЧТО ПРОВЕРЯЕМ:
            500 -> UpstreamError that is not UpstreamBadRequestError
        """
        client = make_client(lambda request: httpx.Response(500))

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("x", "y")
        assert not isinstance(exc_info.value, UpstreamBadRequestError)
        assert exc_info.value.data["status_code"] == 500

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch("x", "y")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_undecodable_body(self):
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(UpstreamError):
            await client.fetch("x", "y")

    @pytest.mark.asyncio
    async def test_invalid_date_in_body(self):
        client = make_client(lambda request: httpx.Response(200, content=json.dumps({"releaseDate": "soon"})))

        with pytest.raises(UpstreamError):
            await client.fetch("x", "y")

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        client = MusicInfoClient(BASE_URL, client=http_client)

        await client.close()

        assert not http_client.is_closed
        await http_client.aclose()
