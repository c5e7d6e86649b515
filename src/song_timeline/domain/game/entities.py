"""Core domain entities for the game bounded context."""

from __future__ import annotations

import logging
import random

from pydantic import BaseModel, ConfigDict, Field

from song_timeline.domain.game.catalog import Catalog, Track
from song_timeline.domain.game.deck import Deck
from song_timeline.domain.game.services import (
    RoundResult,
    ScoringDomainService,
    correct_gap,
    guess_matches,
)
from song_timeline.domain.game.value_objects import GameRules, RoundPhase, TurnPolicy
from song_timeline.domain.shared.exceptions import BusinessRuleViolationError
from song_timeline.domain.shared.messages import ErrorMessages
from song_timeline.domain.shared.types import (
    GapIndexInt,
    NonEmptyStr,
    NonNegativeInt,
    PlayerIdStr,
    PlayerNameStr,
    RoomCodeStr,
    UtcDatetimeField,
    utcnow,
)

logger = logging.getLogger(__name__)


class Player(BaseModel):
    """A participant and the timeline of tracks they have won."""

    model_config = ConfigDict(strict=True)

    id: PlayerIdStr
    name: PlayerNameStr
    score: NonNegativeInt = 0
    tokens: NonNegativeInt = 0
    timeline: list[Track] = Field(default_factory=list)
    joined_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def track_ids(self) -> list[str]:
        return [track.id for track in self.timeline]

    def insert_track(self, track: Track, index: int) -> None:
        """Insert ``track`` at ``index``, refusing any position that breaks year order."""
        before = self.timeline[index - 1] if 0 < index <= len(self.timeline) else None
        after = self.timeline[index] if 0 <= index < len(self.timeline) else None
        in_range = 0 <= index <= len(self.timeline)
        if (
            not in_range
            or (before is not None and before.year > track.year)
            or (after is not None and after.year < track.year)
        ):
            raise BusinessRuleViolationError(
                rule="TIMELINE_ORDER",
                message=ErrorMessages.TIMELINE_ORDER_BROKEN.format(track_id=track.id, index=index),
            )
        self.timeline.insert(index, track)


class Round(BaseModel):
    """One track reveal, from draw to reveal."""

    model_config = ConfigDict(strict=True)

    track: Track
    catalog: Catalog
    turn_player_id: PlayerIdStr
    locked_index: GapIndexInt | None = None
    interjection_open: bool = False
    title_guess_ok: bool = False
    artist_guess_ok: bool = False
    gap_reservations: dict[int, PlayerIdStr] = Field(default_factory=dict)
    started_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def phase(self) -> RoundPhase:
        if self.interjection_open:
            return RoundPhase.INTERJECTION_OPEN
        return RoundPhase.AWAITING_PLACEMENT

    @property
    def is_locked(self) -> bool:
        return self.locked_index is not None

    def reservations_held_by(self, player_id: str) -> int:
        return sum(1 for holder in self.gap_reservations.values() if holder == player_id)

    def lock(self, insert_index: int, title_ok: bool, artist_ok: bool) -> None:
        self.locked_index = insert_index
        self.title_guess_ok = title_ok
        self.artist_guess_ok = artist_ok
        self.interjection_open = True

    def reserve_gap(self, gap_index: int, player_id: str) -> bool:
        """First writer wins; an already claimed gap is never reassigned."""
        if gap_index in self.gap_reservations:
            return False
        self.gap_reservations[gap_index] = player_id
        return True


class HostBinding(BaseModel):
    """The playback-capable identity of a room and its target device."""

    model_config = ConfigDict(strict=True)

    player_id: PlayerIdStr | None = None
    device_id: NonEmptyStr | None = None


class Room(BaseModel):
    """Aggregate root holding the players, deck and active round of one game."""

    model_config = ConfigDict(strict=True)

    code: RoomCodeStr
    catalog: Catalog
    deck: Deck
    players: dict[PlayerIdStr, Player] = Field(default_factory=dict)
    round: Round | None = None
    host: HostBinding = Field(default_factory=HostBinding)
    last_turn_player_id: PlayerIdStr | None = None
    rounds_played: NonNegativeInt = 0
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @classmethod
    def open(cls, code: str, catalog: Catalog, rng: random.Random | None = None) -> Room:
        """Create an idle room with a freshly shuffled deck over ``catalog``."""
        return cls(code=code, catalog=catalog, deck=Deck.create(catalog.ids, rng))

    @property
    def phase(self) -> RoundPhase:
        if self.round is None:
            return RoundPhase.IDLE
        return self.round.phase

    @property
    def player_order(self) -> list[str]:
        """Player ids in join order."""
        return list(self.players)

    # === Players & host ===

    def add_player(self, player_id: str, name: str, starting_tokens: int = 0) -> Player:
        """Register a player; a returning identity keeps its state and takes the new name."""
        existing = self.players.get(player_id)
        if existing is not None:
            existing.name = name
            return existing

        player = Player(id=player_id, name=name, tokens=starting_tokens)
        self.players[player_id] = player
        return player

    def declare_host(self, player_id: str) -> None:
        self.host.player_id = player_id

    def set_host_device(self, device_id: str) -> None:
        self.host.device_id = device_id

    # === Catalog ===

    def replace_catalog(self, catalog: Catalog) -> None:
        """Swap in a new catalog snapshot and rebuild the deck from it.

        An in-flight round keeps the snapshot it was drawn from.
        """
        self.catalog = catalog
        self.deck.reset(catalog.ids)

    # === Round lifecycle ===

    def select_turn_player(self, policy: TurnPolicy) -> str | None:
        order = self.player_order
        if not order:
            return None
        if policy == TurnPolicy.FIRST_JOINED or self.last_turn_player_id not in self.players:
            return order[0]
        position = order.index(self.last_turn_player_id)
        return order[(position + 1) % len(order)]

    def start_round(self, rules: GameRules) -> Round | None:
        """Draw a track and open placement for the turn player.

        Returns None (and changes nothing) while a round is active or when
        nobody has joined yet.
        """
        if not self.phase.can_transition_to(RoundPhase.AWAITING_PLACEMENT):
            return None

        turn_player_id = self.select_turn_player(rules.turn_policy)
        if turn_player_id is None:
            return None

        track = self.catalog.get(self.deck.draw())
        self.round = Round(track=track, catalog=self.catalog, turn_player_id=turn_player_id)
        self.last_turn_player_id = turn_player_id
        return self.round

    def lock_placement(
        self,
        player_id: str,
        insert_index: int,
        title_guess: str | None,
        artist_guess: str | None,
    ) -> bool:
        """Record the turn player's placement and guesses, opening the interjection window.

        Anything other than the turn player's first lock is ignored.
        """
        current = self.round
        if current is None or current.is_locked or player_id != current.turn_player_id:
            return False

        timeline = self.players[current.turn_player_id].timeline
        if not 0 <= insert_index <= len(timeline):
            return False

        current.lock(
            insert_index,
            title_ok=guess_matches(title_guess, current.track.title),
            artist_ok=guess_matches(artist_guess, current.track.artist),
        )
        return True

    def reserve_gap(self, player_id: str, gap_index: int, rules: GameRules) -> bool:
        """Spend one token to claim ``gap_index`` of the turn player's timeline."""
        current = self.round
        if current is None or current.phase != RoundPhase.INTERJECTION_OPEN:
            return False

        turn_timeline = self.players[current.turn_player_id].timeline
        if not 0 <= gap_index <= len(turn_timeline):
            return False
        if gap_index in current.gap_reservations:
            return False

        player = self.players.get(player_id)
        if player is None or player.tokens <= 0:
            return False
        if player_id == current.turn_player_id and not rules.turn_player_may_interject:
            return False

        limit = rules.max_reservations_per_player
        if limit is not None and current.reservations_held_by(player_id) >= limit:
            return False

        if not current.reserve_gap(gap_index, player_id):
            return False
        player.tokens -= 1
        return True

    def reveal(self) -> RoundResult | None:
        """Score the active round and return to idle; None when there is nothing to reveal."""
        current = self.round
        if current is None:
            return None
        try:
            return ScoringDomainService.score(current, self.players)
        finally:
            self.round = None
            self.rounds_played += 1

    def correct_gap_for(self, player_id: str, track: Track) -> int:
        return correct_gap(self.players[player_id].timeline, track)
