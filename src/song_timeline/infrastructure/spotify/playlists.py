"""Spotify playlist import."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, Field, ValidationError

from song_timeline.application.interfaces.catalog_source import PlaylistSource
from song_timeline.config.settings import SpotifySettings
from song_timeline.domain.game.catalog import Track
from song_timeline.domain.shared.exceptions import CatalogImportError
from song_timeline.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

PAGE_SIZE: int = 100
UNKNOWN_ARTIST: str = "Unknown artist"

_BARE_ID = re.compile(r"^[A-Za-z0-9]{22}$")
_URI_PREFIX = "spotify:playlist:"


def extract_playlist_id(text: str | None) -> str | None:
    """Accept ``spotify:playlist:<id>``, a ``.../playlist/<id>`` link or a bare 22-char id."""
    if not text:
        return None
    text = text.strip()

    if text.startswith(_URI_PREFIX):
        return text.split(":")[2] or None

    parsed = urlparse(text)
    if parsed.scheme and parsed.netloc:
        parts = [p for p in parsed.path.split("/") if p]
        if "playlist" in parts:
            i = parts.index("playlist")
            if i + 1 < len(parts):
                return parts[i + 1]

    return text if _BARE_ID.match(text) else None


def release_year(release_date: str | None) -> int:
    """Year from ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``; 0 when it cannot be read."""
    head = (release_date or "")[:4]
    return int(head) if head.isdigit() else 0


class _Artist(BaseModel):
    name: str = ""


class _Album(BaseModel):
    release_date: str | None = None


class _TrackObject(BaseModel):
    id: str | None = None
    uri: str | None = None
    name: str = ""
    type: str | None = None
    is_playable: bool | None = None
    artists: list[_Artist] = Field(default_factory=list)
    album: _Album | None = None

    def is_importable(self) -> bool:
        return (
            self.type == "track"
            and self.is_playable is not False
            and bool(self.uri)
            and bool(self.id)
            and bool(self.name)
        )

    def to_domain(self) -> Track:
        artist = ", ".join(a.name for a in self.artists if a.name)
        return Track(
            id=self.id or "",
            uri=self.uri or "",
            title=self.name,
            artist=artist or UNKNOWN_ARTIST,
            year=release_year(self.album.release_date if self.album else None),
        )


class _PlaylistItem(BaseModel):
    track: _TrackObject | None = None


class _PlaylistPage(BaseModel):
    items: list[_PlaylistItem] = Field(default_factory=list)
    total: int | None = None


class SpotifyPlaylistSource(PlaylistSource):
    def __init__(self, client: httpx.AsyncClient, settings: SpotifySettings | None = None) -> None:
        self._client = client
        self._settings = settings or SpotifySettings()

    def parse_playlist_id(self, text: str) -> str | None:
        return extract_playlist_id(text)

    async def fetch_tracks(self, playlist_id: str, *, token: str, market: str) -> list[Track]:
        items = await self._fetch_items(playlist_id, token=token, market=market)

        seen_uris: set[str] = set()
        seen_ids: set[str] = set()
        tracks: list[Track] = []
        for item in items:
            obj = item.track
            if obj is None or not obj.is_importable():
                continue
            # Catalog keys must stay unique, so a relinked id seen twice is dropped too.
            if obj.uri in seen_uris or obj.id in seen_ids:
                continue
            try:
                track = obj.to_domain()
            except ValidationError as e:
                logger.warning(
                    LogTemplates.PLAYLIST_ITEM_SKIPPED, playlist_id, obj.id, e.error_count()
                )
                continue
            seen_uris.add(obj.uri or "")
            seen_ids.add(obj.id or "")
            tracks.append(track)
        return tracks

    async def _fetch_items(
        self, playlist_id: str, *, token: str, market: str
    ) -> list[_PlaylistItem]:
        url = f"{self._settings.api_base_url}/playlists/{playlist_id}/tracks"
        headers = {"Authorization": f"Bearer {token}"}

        collected: list[_PlaylistItem] = []
        offset = 0
        total: int | None = None
        while total is None or offset < total:
            try:
                response = await self._client.get(
                    url,
                    params={"limit": PAGE_SIZE, "offset": offset, "market": market},
                    headers=headers,
                    timeout=self._settings.request_timeout_s,
                )
            except httpx.HTTPError as e:
                raise CatalogImportError(
                    ErrorMessages.PLAYLIST_FETCH_FAILED.format(status=type(e).__name__)
                ) from e

            if response.is_error:
                raise CatalogImportError(
                    ErrorMessages.PLAYLIST_FETCH_FAILED.format(status=response.status_code),
                    status_code=response.status_code,
                )

            try:
                page = _PlaylistPage.model_validate(response.json())
            except ValueError as e:
                raise CatalogImportError(
                    ErrorMessages.PLAYLIST_FETCH_FAILED.format(status=response.status_code),
                    status_code=response.status_code,
                ) from e

            logger.debug(LogTemplates.PLAYLIST_PAGE_FETCHED, playlist_id, offset, len(page.items))
            collected.extend(page.items)
            if not page.items:
                break
            total = page.total if page.total is not None else offset + len(page.items)
            offset += PAGE_SIZE

        return collected
