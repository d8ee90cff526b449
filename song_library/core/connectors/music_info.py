"""
MusicInfoClient - HTTP client for the external music metadata service.

GET {base_url}/info?group=<group>&song=<name> returns
{"name", "group", "releaseDate" (DD.MM.YYYY), "text", "link"}.
"""

from datetime import date, datetime
from typing import Optional

import httpx
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from song_library.common.logging import get_logger
from ..errors import UpstreamBadRequestError, UpstreamError
from ..models import Song
from ..monitoring import record_metadata_lookup

logger = get_logger(__name__)

RELEASE_DATE_FORMATS = ("%d.%m.%Y", "%Y-%m-%d")


class SongDetail(BaseModel):
    """Upstream response body."""
    name: str = ""
    group: str = ""
    text: str = ""
    link: str = ""
    release_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("releaseDate", "release_date")
    )

    @field_validator("release_date", mode="before")
    @classmethod
    def parse_release_date(cls, value):
        if value is None or value == "" or isinstance(value, date):
            return value or None
        if isinstance(value, str):
            for fmt in RELEASE_DATE_FORMATS:
                try:
                    return datetime.strptime(value, fmt).date()
                except ValueError:
                    continue
            # full ISO timestamps, e.g. 2006-07-16T00:00:00Z
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        raise ValueError(f"unsupported release date: {value!r}")


class MusicInfoClient:
    """
    Metadata lookup over HTTP.

    Implements MetadataLookupProtocol. The httpx client is owned by the
    caller when passed in, otherwise created here and closed by close().
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        if "://" not in self.base_url:
            self.base_url = f"http://{self.base_url}"
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self, name: str, group: str) -> Song:
        op = "MusicInfoClient.fetch"
        url = f"{self.base_url}/info"
        log = logger.bind(op=op, song_name=name, group_name=group)

        log.info("fetching song info from external API")
        try:
            response = await self.client.get(url, params={"group": group, "song": name})
        except httpx.HTTPError as e:
            record_metadata_lookup("error")
            raise UpstreamError(
                f"{op}: request failed: {e}", data={"op": op, "url": url}, cause=e
            ) from e

        if response.status_code == httpx.codes.BAD_REQUEST:
            record_metadata_lookup("bad_request")
            raise UpstreamBadRequestError(
                f"{op}: external API rejected the request",
                data={"op": op, "status_code": response.status_code, "body": response.text[:200]},
            )
        if response.status_code != httpx.codes.OK:
            record_metadata_lookup("error")
            raise UpstreamError(
                f"{op}: external API returned status {response.status_code}",
                data={"op": op, "status_code": response.status_code},
            )

        try:
            detail = SongDetail.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            record_metadata_lookup("error")
            raise UpstreamError(f"{op}: could not decode response: {e}", data={"op": op}, cause=e) from e

        record_metadata_lookup("ok")
        log.info("fetched song info from external API")

        return Song(
            name=detail.name or name,
            group=detail.group or group,
            text=detail.text,
            link=detail.link,
            release_date=detail.release_date,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
