"""Domain events broadcast to the players of a room."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from song_timeline.domain.game.entities import Room
from song_timeline.domain.game.services import RoundResult
from song_timeline.domain.shared.events import DomainEvent
from song_timeline.domain.shared.types import (
    GapIndexInt,
    NonNegativeInt,
    PlayerIdStr,
    PlayerNameStr,
    ReleaseYear,
    RoomCodeStr,
    TrackIdStr,
)


class TimelineEntryView(BaseModel):
    model_config = ConfigDict(frozen=True)

    track_id: TrackIdStr
    year: ReleaseYear
    title: str
    artist: str


class PlayerView(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: PlayerNameStr
    score: NonNegativeInt
    tokens: NonNegativeInt
    timeline: list[TimelineEntryView] = Field(default_factory=list)


class RoomSnapshot(BaseModel):
    """Public state of a room as every player may see it."""

    model_config = ConfigDict(frozen=True)

    room_code: RoomCodeStr
    phase: str
    turn_player_id: PlayerIdStr | None = None
    reserved_gaps: dict[int, PlayerIdStr] = Field(default_factory=dict)
    players: dict[PlayerIdStr, PlayerView] = Field(default_factory=dict)

    @classmethod
    def of(cls, room: Room) -> RoomSnapshot:
        players = {
            player.id: PlayerView(
                name=player.name,
                score=player.score,
                tokens=player.tokens,
                timeline=[
                    TimelineEntryView(
                        track_id=track.id, year=track.year, title=track.title, artist=track.artist
                    )
                    for track in player.timeline
                ],
            )
            for player in room.players.values()
        }
        current = room.round
        return cls(
            room_code=room.code,
            phase=room.phase.value,
            turn_player_id=current.turn_player_id if current else None,
            reserved_gaps=dict(current.gap_reservations) if current else {},
            players=players,
        )


class RoomEvent(DomainEvent):
    """Base class for events addressed to everyone in one room."""

    room_code: RoomCodeStr


class StateSnapshotPublished(RoomEvent):
    snapshot: RoomSnapshot


class HostDeclared(RoomEvent):
    player_id: PlayerIdStr


class RoundStarted(RoomEvent):
    track_id: TrackIdStr
    turn_player_id: PlayerIdStr


class InterjectionWindowOpened(RoomEvent):
    turn_player_id: PlayerIdStr


class GapReservationUpdated(RoomEvent):
    gap_index: GapIndexInt
    player_id: PlayerIdStr


class RoundRevealed(RoomEvent):
    result: RoundResult


class CatalogReplaced(RoomEvent):
    track_count: NonNegativeInt
