"""Routes parsed actions to the game service and shapes the replies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from song_timeline.application.commands.actions import (
    Action,
    ActionReply,
    DeclareHostAction,
    ImportPlaylistAction,
    JoinAction,
    LockPlacementAction,
    ReserveGapAction,
    RevealAction,
    SetHostCredentialAction,
    SetHostDeviceAction,
    StartRoundAction,
    parse_action,
)
from song_timeline.domain.shared.exceptions import DomainError
from song_timeline.domain.shared.messages import ErrorMessages, LogTemplates, ReplyMessages

if TYPE_CHECKING:
    from song_timeline.application.services.game_service import GameApplicationService

logger = logging.getLogger(__name__)

INVALID_ACTION = "invalid"


def _describe(error: PydanticValidationError) -> str:
    first = error.errors()[0] if error.error_count() else {}
    location = ".".join(str(part) for part in first.get("loc", ())) or "payload"
    return f"{location}: {first.get('msg', 'invalid')}"


class ActionDispatcher:
    """One entry point for every transport: text line in, :class:`ActionReply` out."""

    def __init__(self, game_service: GameApplicationService) -> None:
        self._game = game_service

    async def dispatch_line(self, line: str | bytes) -> ActionReply:
        try:
            action = parse_action(line)
        except PydanticValidationError as e:
            detail = _describe(e)
            logger.warning(LogTemplates.ACTION_MALFORMED, detail)
            return ActionReply(
                action=INVALID_ACTION,
                ok=False,
                message=ErrorMessages.MALFORMED_ACTION.format(detail=detail),
            )
        return await self.dispatch(action)

    async def dispatch(self, action: Action) -> ActionReply:
        try:
            return await self._route(action)
        except DomainError as e:
            logger.warning(LogTemplates.ACTION_FAILED, action.action, action.room, e.message)
            return ActionReply(action=action.action, room=action.room, ok=False, message=e.message)

    async def _route(self, action: Action) -> ActionReply:
        room = action.room
        match action:
            case JoinAction():
                snapshot = await self._game.join(room, action.player_id, action.name)
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=True,
                    message=ReplyMessages.JOINED.format(room=room),
                    data=snapshot.model_dump(mode="json"),
                )

            case DeclareHostAction():
                await self._game.declare_host(room, action.player_id)
                return ActionReply(
                    action=action.action, room=room, ok=True, message=ReplyMessages.HOST_DECLARED
                )

            case SetHostDeviceAction():
                await self._game.set_host_device(room, action.device_id)
                return ActionReply(
                    action=action.action, room=room, ok=True, message=ReplyMessages.DEVICE_SET
                )

            case SetHostCredentialAction():
                stored = await self._game.set_host_credential(
                    room, action.player_id, action.access_token, action.refresh_token
                )
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=stored,
                    message=(
                        ReplyMessages.HOST_CREDENTIAL_SET
                        if stored
                        else ReplyMessages.HOST_CREDENTIAL_REJECTED
                    ),
                )

            case StartRoundAction():
                started = await self._game.start_round(room)
                data = {}
                if started.success:
                    data = {
                        "turn_player_id": started.turn_player_id,
                        "playback_started": started.playback_started,
                        "warning": started.warning,
                    }
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=started.success,
                    message=started.message,
                    data=data,
                )

            case LockPlacementAction():
                locked = await self._game.lock_placement(
                    room,
                    action.player_id,
                    action.insert_index,
                    action.title_guess,
                    action.artist_guess,
                )
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=locked,
                    message=ReplyMessages.PLACEMENT_LOCKED if locked else ReplyMessages.PLACEMENT_IGNORED,
                )

            case ReserveGapAction():
                reserved = await self._game.reserve_gap(room, action.player_id, action.gap_index)
                template = ReplyMessages.GAP_RESERVED if reserved else ReplyMessages.GAP_REJECTED
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=reserved,
                    message=template.format(gap_index=action.gap_index),
                    data={"gap_index": action.gap_index},
                )

            case RevealAction():
                result = await self._game.reveal(room)
                if result is None:
                    return ActionReply(
                        action=action.action,
                        room=room,
                        ok=False,
                        message=ReplyMessages.NO_ACTIVE_ROUND,
                    )
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=True,
                    message=ReplyMessages.ROUND_REVEALED,
                    data=result.model_dump(mode="json"),
                )

            case ImportPlaylistAction():
                imported = await self._game.import_playlist(room, action.playlist, action.market)
                return ActionReply(
                    action=action.action,
                    room=room,
                    ok=imported.success,
                    message=imported.message,
                    data={
                        "count": imported.count,
                        "sample": [t.model_dump(mode="json") for t in imported.sample],
                    },
                )

            case _:
                raise TypeError(f"Unhandled action type: {type(action).__name__}")
