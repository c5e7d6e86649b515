# ruff: noqa: N999
"""
Domain Layer

Contains pure game logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- game/: Catalog, deck, room, round, auction and scoring logic
"""

from song_timeline.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
