"""
Game Domain Services

Scoring and gap arithmetic that spans the round and several players.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from song_timeline.domain.game.catalog import Track
from song_timeline.domain.shared.exceptions import EntityNotFoundError
from song_timeline.domain.shared.types import (
    GapIndexInt,
    NonNegativeInt,
    PlayerIdStr,
    TrackIdStr,
)

if TYPE_CHECKING:
    from song_timeline.domain.game.entities import Player, Round


def correct_gap(timeline: Sequence[Track], track: Track) -> int:
    """Index at which ``track`` keeps ``timeline`` sorted by year.

    Entries with the same year stay in front of the new track.
    """
    idx = 0
    while idx < len(timeline) and timeline[idx].year <= track.year:
        idx += 1
    return idx


def normalize_guess(text: str | None) -> str:
    return (text or "").strip().casefold()


def guess_matches(guess: str | None, truth: str) -> bool:
    normalized = normalize_guess(guess)
    return bool(normalized) and normalized == normalize_guess(truth)


class RoundResult(BaseModel):
    """Outcome of a revealed round."""

    model_config = ConfigDict(frozen=True, strict=True)

    track_id: TrackIdStr
    turn_player_id: PlayerIdStr
    correct_gap_index: GapIndexInt
    turn_player_correct: bool
    title_correct: bool = False
    artist_correct: bool = False
    points_awarded: NonNegativeInt = 0
    awarded_tokens: list[PlayerIdStr] = Field(default_factory=list)
    interjection_winner: PlayerIdStr | None = None
    winner_gap_index: GapIndexInt | None = None


class ScoringDomainService:
    """Applies the reveal rules to the turn player and the interjection winner."""

    PLACEMENT_POINTS: ClassVar[int] = 1
    TITLE_POINTS: ClassVar[int] = 1
    ARTIST_POINTS: ClassVar[int] = 1
    FULL_GUESS_TOKENS: ClassVar[int] = 1

    @classmethod
    def score(cls, round_: Round, players: Mapping[str, Player]) -> RoundResult:
        """Mutate the players' timelines, scores and tokens for a finished round.

        Args:
            round_: The active round being revealed.
            players: Every player of the room, keyed by id.

        Returns:
            The round summary broadcast to the room.
        """
        track = round_.track
        turn_player = players.get(round_.turn_player_id)
        if turn_player is None:
            raise EntityNotFoundError("Player", round_.turn_player_id)

        gap = correct_gap(turn_player.timeline, track)
        placed = round_.locked_index is not None and round_.locked_index == gap
        title_ok = round_.title_guess_ok
        artist_ok = round_.artist_guess_ok

        points = 0
        if placed:
            turn_player.insert_track(track, gap)
            points += cls.PLACEMENT_POINTS
        if title_ok:
            points += cls.TITLE_POINTS
        if artist_ok:
            points += cls.ARTIST_POINTS
        turn_player.score += points

        awarded_tokens: list[str] = []
        if title_ok and artist_ok:
            turn_player.tokens += cls.FULL_GUESS_TOKENS
            awarded_tokens.append(turn_player.id)

        winner_id = round_.gap_reservations.get(gap)
        winner_gap: int | None = None
        if winner_id is not None and winner_id in players:
            winner = players[winner_id]
            if winner_id == turn_player.id and placed:
                # already on this timeline from the placement above
                winner_gap = gap
            else:
                # the winner's own timeline decides where the track lands
                winner_gap = correct_gap(winner.timeline, track)
                winner.insert_track(track, winner_gap)
        else:
            winner_id = None

        return RoundResult(
            track_id=track.id,
            turn_player_id=turn_player.id,
            correct_gap_index=gap,
            turn_player_correct=placed,
            title_correct=title_ok,
            artist_correct=artist_ok,
            points_awarded=points,
            awarded_tokens=awarded_tokens,
            interjection_winner=winner_id,
            winner_gap_index=winner_gap,
        )
