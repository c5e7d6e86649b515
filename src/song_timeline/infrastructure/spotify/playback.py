"""Spotify Connect playback controller."""

from __future__ import annotations

import logging

import httpx

from song_timeline.application.interfaces.playback_controller import PlaybackController
from song_timeline.config.settings import SpotifySettings
from song_timeline.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class SpotifyPlaybackController(PlaybackController):
    def __init__(self, client: httpx.AsyncClient, settings: SpotifySettings | None = None) -> None:
        self._client = client
        self._settings = settings or SpotifySettings()

    async def play(self, *, device_id: str, token: str, track_uri: str) -> bool:
        headers = {"Authorization": f"Bearer {token}"}
        base = self._settings.api_base_url

        try:
            # Transfer without resuming so the previous queue never plays.
            transfer = await self._client.put(
                f"{base}/me/player",
                headers=headers,
                json={"device_ids": [device_id], "play": False},
                timeout=self._settings.request_timeout_s,
            )
            logger.debug(LogTemplates.PLAYBACK_TRANSFER_STATUS, device_id, transfer.status_code)

            response = await self._client.put(
                f"{base}/me/player/play",
                params={"device_id": device_id},
                headers=headers,
                json={"uris": [track_uri], "position_ms": 0},
                timeout=self._settings.request_timeout_s,
            )
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.PLAYBACK_REQUEST_ERROR, track_uri, e)
            return False

        logger.info(LogTemplates.PLAYBACK_STATUS, track_uri, response.status_code)
        return response.is_success
