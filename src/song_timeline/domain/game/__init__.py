"""
Game Bounded Context

Domain logic for catalogs, decks, rooms, rounds, the gap auction and scoring.
"""

from song_timeline.domain.game.catalog import Catalog, Track
from song_timeline.domain.game.deck import Deck, shuffle_ids
from song_timeline.domain.game.entities import HostBinding, Player, Room, Round
from song_timeline.domain.game.repository import RoomRepository
from song_timeline.domain.game.services import RoundResult, ScoringDomainService, correct_gap
from song_timeline.domain.game.value_objects import GameRules, RoundPhase, TurnPolicy

__all__ = [
    # Entities
    "Track",
    "Catalog",
    "Deck",
    "Player",
    "Round",
    "Room",
    "HostBinding",
    # Value Objects
    "GameRules",
    "RoundPhase",
    "TurnPolicy",
    # Repository
    "RoomRepository",
    # Services
    "RoundResult",
    "ScoringDomainService",
    "correct_gap",
    "shuffle_ids",
]
