"""Immutable value objects for the game bounded context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from song_timeline.domain.shared.types import NonNegativeInt, PositiveInt


class RoundPhase(Enum):
    """Phase of a room's round lifecycle.

    State transitions:
    - IDLE -> AWAITING_PLACEMENT (start round)
    - AWAITING_PLACEMENT -> INTERJECTION_OPEN (turn player locks a placement)
    - AWAITING_PLACEMENT -> IDLE (premature reveal)
    - INTERJECTION_OPEN -> IDLE (reveal)
    """

    IDLE = "idle"
    AWAITING_PLACEMENT = "awaiting_placement"
    INTERJECTION_OPEN = "interjection_open"

    def can_transition_to(self, target: RoundPhase) -> bool:
        """Check if transition to target phase is valid."""
        valid_transitions = {
            RoundPhase.IDLE: {RoundPhase.AWAITING_PLACEMENT},
            RoundPhase.AWAITING_PLACEMENT: {RoundPhase.INTERJECTION_OPEN, RoundPhase.IDLE},
            RoundPhase.INTERJECTION_OPEN: {RoundPhase.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def has_round(self) -> bool:
        return self != RoundPhase.IDLE


class TurnPolicy(Enum):
    """How the turn player is chosen when a round starts."""

    FIRST_JOINED = "first_joined"  # always the earliest player to join
    ROUND_ROBIN = "round_robin"  # next player after the previous turn player


class GameRules(BaseModel):
    """Tunable rules for a room's rounds."""

    model_config = ConfigDict(frozen=True, strict=True)

    turn_policy: TurnPolicy = TurnPolicy.FIRST_JOINED
    max_reservations_per_player: PositiveInt | None = None
    turn_player_may_interject: bool = False
    starting_tokens: NonNegativeInt = 0
