"""Game Application Service - serializes room actions and drives the collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.game.catalog import Catalog
from ...domain.game.events import (
    CatalogReplaced,
    GapReservationUpdated,
    HostDeclared,
    InterjectionWindowOpened,
    RoomSnapshot,
    RoundRevealed,
    RoundStarted,
    StateSnapshotPublished,
)
from ...domain.game.value_objects import GameRules
from ...domain.shared.exceptions import (
    BusinessRuleViolationError,
    CatalogImportError,
    CredentialUnavailableError,
    ValidationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates, ReplyMessages
from .game_models import CatalogImportResult, StartRoundResult

if TYPE_CHECKING:
    from ...domain.game.repository import RoomRepository
    from ...domain.game.services import RoundResult
    from ...domain.shared.events import EventBus
    from ..interfaces.catalog_source import PlaylistSource
    from ..interfaces.credential_provider import CredentialProvider
    from ..interfaces.playback_controller import PlaybackController

logger = logging.getLogger(__name__)


class GameApplicationService:
    """Runs every room action under that room's lock and publishes the resulting events.

    Network calls (credential refresh, playlist fetch, playback) happen
    outside the room lock; only the state update holds it.
    """

    def __init__(
        self,
        *,
        room_repository: RoomRepository,
        event_bus: EventBus,
        rules: GameRules,
        credential_provider: CredentialProvider,
        playback_controller: PlaybackController,
        playlist_source: PlaylistSource | None = None,
        default_market: str = "SE",
    ) -> None:
        self._rooms = room_repository
        self._bus = event_bus
        self._rules = rules
        self._credentials = credential_provider
        self._playback = playback_controller
        self._playlists = playlist_source
        self._default_market = default_market

    @property
    def rules(self) -> GameRules:
        return self._rules

    async def snapshot(self, room_code: str) -> RoomSnapshot:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            return RoomSnapshot.of(room)

    async def join(self, room_code: str, player_id: str, name: str) -> RoomSnapshot:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            returning = player_id in room.players
            room.add_player(player_id, name, starting_tokens=self._rules.starting_tokens)
            snapshot = RoomSnapshot.of(room)

        if returning:
            logger.info(LogTemplates.PLAYER_RENAMED, player_id, room_code, name)
        else:
            logger.info(LogTemplates.PLAYER_JOINED, player_id, name, room_code)
        await self._bus.publish(StateSnapshotPublished(room_code=room_code, snapshot=snapshot))
        return snapshot

    async def declare_host(self, room_code: str, player_id: str) -> None:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            room.declare_host(player_id)

        logger.info(LogTemplates.HOST_DECLARED, room_code, player_id)
        await self._bus.publish(HostDeclared(room_code=room_code, player_id=player_id))

    async def set_host_device(self, room_code: str, device_id: str) -> None:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            room.set_host_device(device_id)
        logger.info(LogTemplates.HOST_DEVICE_SET, room_code, device_id)

    async def set_host_credential(
        self,
        room_code: str,
        player_id: str,
        access_token: str,
        refresh_token: str | None = None,
    ) -> bool:
        """Hand over the tokens from the host's authorization.

        Once a host is declared only that identity may replace the credential.
        """
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            host_id = room.host.player_id
            if host_id is not None and host_id != player_id:
                logger.warning(LogTemplates.HOST_CREDENTIAL_REJECTED, room_code, player_id)
                return False
            self._credentials.store(room_code, access_token, refresh_token)

        logger.info(
            LogTemplates.HOST_CREDENTIAL_SET, room_code, player_id, refresh_token is not None
        )
        return True

    async def start_round(self, room_code: str) -> StartRoundResult:
        room = await self._rooms.get_or_create(room_code)
        token, token_error = await self._fresh_token(room_code)

        async with self._rooms.lock_for(room_code):
            if room.round is not None:
                logger.info(LogTemplates.ROUND_START_REJECTED, room_code, "round active")
                return StartRoundResult.rejected(ReplyMessages.ROUND_ALREADY_ACTIVE)

            started = room.start_round(self._rules)
            if started is None:
                logger.info(LogTemplates.ROUND_START_REJECTED, room_code, "no players")
                return StartRoundResult.rejected(ReplyMessages.NO_PLAYERS)

            track = started.track
            turn_player_id = started.turn_player_id
            device_id = room.host.device_id

        logger.info(LogTemplates.ROUND_STARTED, room_code, track.id, turn_player_id)
        await self._bus.publish(
            RoundStarted(room_code=room_code, track_id=track.id, turn_player_id=turn_player_id)
        )

        warning: str | None = None
        playback_started = False
        if device_id is None:
            logger.warning(LogTemplates.PLAYBACK_NO_DEVICE, room_code)
            warning = ReplyMessages.NO_PLAYBACK_DEVICE
        elif token is None:
            logger.warning(LogTemplates.PLAYBACK_NO_TOKEN, room_code, token_error)
            warning = ReplyMessages.NO_PLAYBACK_TOKEN
        else:
            playback_started = await self._playback.play(
                device_id=device_id, token=token, track_uri=track.uri
            )
            if not playback_started:
                logger.warning(LogTemplates.PLAYBACK_REJECTED, room_code)
                warning = ReplyMessages.PLAYBACK_FAILED

        return StartRoundResult(
            success=True,
            message=ReplyMessages.ROUND_STARTED,
            track=track,
            turn_player_id=turn_player_id,
            device_id=device_id,
            playback_started=playback_started,
            warning=warning,
        )

    async def lock_placement(
        self,
        room_code: str,
        player_id: str,
        insert_index: int,
        title_guess: str | None,
        artist_guess: str | None,
    ) -> bool:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            locked = room.lock_placement(player_id, insert_index, title_guess, artist_guess)
            current = room.round

        if not locked or current is None:
            logger.debug(LogTemplates.PLACEMENT_IGNORED, room_code, player_id)
            return False

        logger.info(
            LogTemplates.PLACEMENT_LOCKED,
            room_code,
            player_id,
            insert_index,
            current.title_guess_ok,
            current.artist_guess_ok,
        )
        await self._bus.publish(
            InterjectionWindowOpened(room_code=room_code, turn_player_id=current.turn_player_id)
        )
        return True

    async def reserve_gap(self, room_code: str, player_id: str, gap_index: int) -> bool:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            reserved = room.reserve_gap(player_id, gap_index, self._rules)

        if not reserved:
            logger.info(LogTemplates.GAP_REJECTED, room_code, gap_index, player_id)
            return False

        logger.info(LogTemplates.GAP_RESERVED, room_code, gap_index, player_id)
        await self._bus.publish(
            GapReservationUpdated(room_code=room_code, gap_index=gap_index, player_id=player_id)
        )
        return True

    async def reveal(self, room_code: str) -> RoundResult | None:
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            result = room.reveal()
            snapshot = RoomSnapshot.of(room)

        if result is None:
            logger.info(LogTemplates.REVEAL_WITHOUT_ROUND, room_code)
            return None

        logger.info(
            LogTemplates.ROUND_REVEALED,
            room_code,
            result.correct_gap_index,
            result.turn_player_correct,
            result.interjection_winner,
        )
        await self._bus.publish(RoundRevealed(room_code=room_code, result=result))
        await self._bus.publish(StateSnapshotPublished(room_code=room_code, snapshot=snapshot))
        return result

    async def replace_catalog(self, room_code: str, catalog: Catalog) -> None:
        """Swap a room's catalog; an in-flight round keeps its own snapshot."""
        room = await self._rooms.get_or_create(room_code)
        async with self._rooms.lock_for(room_code):
            room.replace_catalog(catalog)

        logger.info(LogTemplates.CATALOG_REPLACED, room_code, len(catalog))
        await self._bus.publish(CatalogReplaced(room_code=room_code, track_count=len(catalog)))

    async def import_playlist(
        self, room_code: str, playlist: str, market: str | None = None
    ) -> CatalogImportResult:
        """Fetch a playlist with the host's credential and make it the room's catalog.

        Nothing in the room changes unless at least one playable track comes back.
        """
        if self._playlists is None:
            return CatalogImportResult.failed(ErrorMessages.PLAYLIST_IMPORT_UNAVAILABLE)

        await self._rooms.get_or_create(room_code)
        token, token_error = await self._fresh_token(room_code)
        if token is None:
            logger.warning(LogTemplates.CATALOG_IMPORT_REJECTED, room_code, token_error)
            return CatalogImportResult.failed(token_error or ReplyMessages.NO_PLAYBACK_TOKEN)

        playlist_id = self._playlists.parse_playlist_id(playlist)
        if playlist_id is None:
            logger.warning(LogTemplates.CATALOG_IMPORT_REJECTED, room_code, playlist)
            return CatalogImportResult.failed(ErrorMessages.PLAYLIST_ID_UNPARSEABLE)

        try:
            tracks = await self._playlists.fetch_tracks(
                playlist_id, token=token, market=market or self._default_market
            )
            catalog = Catalog.from_tracks(tracks)
        except CatalogImportError as e:
            logger.warning(LogTemplates.CATALOG_IMPORT_REJECTED, room_code, e.message)
            return CatalogImportResult.failed(e.message)
        except ValidationError as e:
            logger.warning(LogTemplates.CATALOG_IMPORT_REJECTED, room_code, e.message)
            return CatalogImportResult.failed(e.message)
        except BusinessRuleViolationError:
            logger.warning(
                LogTemplates.CATALOG_IMPORT_REJECTED, room_code, ErrorMessages.PLAYLIST_NO_PLAYABLE_TRACKS
            )
            return CatalogImportResult.failed(ErrorMessages.PLAYLIST_NO_PLAYABLE_TRACKS)

        await self.replace_catalog(room_code, catalog)
        return CatalogImportResult(
            success=True,
            message=ReplyMessages.CATALOG_REPLACED.format(count=len(catalog)),
            count=len(catalog),
            sample=tracks[:5],
        )

    async def _fresh_token(self, room_code: str) -> tuple[str | None, str | None]:
        try:
            return await self._credentials.ensure_fresh_credential(room_code), None
        except CredentialUnavailableError as e:
            return None, e.message
