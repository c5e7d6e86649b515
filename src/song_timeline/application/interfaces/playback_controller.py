"""Port interface for the music playback provider."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PlaybackController(ABC):
    """Starts a track on the host's playback device."""

    @abstractmethod
    async def play(self, *, device_id: str, token: str, track_uri: str) -> bool:
        """Transfer playback to ``device_id`` and start ``track_uri`` from the beginning.

        Returns:
            True when the provider accepted the play request. The caller
            decides what a rejected request means; nothing is retried.
        """
        ...
