"""Per-room Spotify credentials with refresh-token renewal."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from song_timeline.application.interfaces.credential_provider import CredentialProvider
from song_timeline.config.settings import SpotifySettings
from song_timeline.domain.shared.exceptions import CredentialUnavailableError
from song_timeline.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


@dataclass
class StoredCredential:
    access_token: str
    refresh_token: str | None = None


class SpotifyCredentialProvider(CredentialProvider):
    """Keeps the host's tokens per room and renews the access token on demand.

    The authorization-code exchange happens outside this process; whoever
    completes it hands the resulting tokens over through :meth:`store`.
    """

    def __init__(self, client: httpx.AsyncClient, settings: SpotifySettings | None = None) -> None:
        self._client = client
        self._settings = settings or SpotifySettings()
        self._credentials: dict[str, StoredCredential] = {}

    def store(self, room_code: str, access_token: str, refresh_token: str | None = None) -> None:
        self._credentials[room_code] = StoredCredential(access_token, refresh_token)

    def forget(self, room_code: str) -> None:
        self._credentials.pop(room_code, None)

    def has_credential(self, room_code: str) -> bool:
        return room_code in self._credentials

    async def ensure_fresh_credential(self, room_code: str) -> str:
        credential = self._credentials.get(room_code)
        if credential is None:
            raise CredentialUnavailableError(
                room_code, ErrorMessages.NO_CREDENTIAL_STORED.format(room_code=room_code)
            )

        if credential.refresh_token and self._settings.has_client_credentials:
            await self._refresh(room_code, credential)

        if not credential.access_token:
            raise CredentialUnavailableError(room_code)
        return credential.access_token

    async def _refresh(self, room_code: str, credential: StoredCredential) -> None:
        """Renew the access token in place; on any failure the previous token stays."""
        try:
            response = await self._client.post(
                f"{self._settings.accounts_url}/api/token",
                data={"grant_type": "refresh_token", "refresh_token": credential.refresh_token},
                auth=(self._settings.client_id, self._settings.client_secret.get_secret_value()),
                timeout=self._settings.request_timeout_s,
            )
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.CREDENTIAL_REFRESH_ERROR, room_code, e)
            return

        if response.is_error:
            logger.warning(LogTemplates.CREDENTIAL_REFRESH_STATUS, room_code, response.status_code)
            return

        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            logger.warning(LogTemplates.CREDENTIAL_REFRESH_KEPT_OLD, room_code)
            return

        credential.access_token = access_token
        if payload.get("refresh_token"):
            credential.refresh_token = payload["refresh_token"]
        logger.info(LogTemplates.CREDENTIAL_REFRESHED, room_code)
