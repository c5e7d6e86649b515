"""Port interface for playback credentials."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CredentialProvider(ABC):
    """Hands out a currently valid playback token for a room's host."""

    @abstractmethod
    async def ensure_fresh_credential(self, room_code: str) -> str:
        """Return a usable access token, refreshing it first when possible.

        Raises:
            CredentialUnavailableError: when the room's host has not authorised
                playback or the refresh produced no token.
        """
        ...

    @abstractmethod
    def store(self, room_code: str, access_token: str, refresh_token: str | None = None) -> None:
        """Keep the tokens the host obtained for ``room_code``, replacing earlier ones."""
        ...
