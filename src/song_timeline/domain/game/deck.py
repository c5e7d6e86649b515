"""Per-room draw pile of catalog track ids."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from song_timeline.domain.shared.exceptions import InvalidOperationError
from song_timeline.domain.shared.messages import ErrorMessages, LogTemplates
from song_timeline.domain.shared.types import TrackIdStr

logger = logging.getLogger(__name__)


def shuffle_ids(ids: Iterable[str], rng: random.Random) -> list[str]:
    """Return a uniformly random permutation of ``ids`` (Fisher-Yates)."""
    pile = list(ids)
    for i in range(len(pile) - 1, 0, -1):
        j = rng.randint(0, i)
        pile[i], pile[j] = pile[j], pile[i]
    return pile


class Deck(BaseModel):
    """Shuffled pile of track ids; the end of ``remaining`` is the top card."""

    model_config = ConfigDict(strict=True)

    catalog_ids: tuple[TrackIdStr, ...] = Field(min_length=1)
    remaining: list[TrackIdStr] = Field(default_factory=list)

    _rng: random.Random = PrivateAttr(default_factory=random.Random)

    @classmethod
    def create(cls, ids: Sequence[str], rng: random.Random | None = None) -> Deck:
        deck = cls(catalog_ids=tuple(ids))
        if rng is not None:
            deck._rng = rng
        deck.remaining = shuffle_ids(deck.catalog_ids, deck._rng)
        return deck

    @property
    def remaining_count(self) -> int:
        return len(self.remaining)

    def draw(self) -> str:
        """Remove and return the top id, reshuffling the whole catalog when empty."""
        if not self.remaining:
            if not self.catalog_ids:
                raise InvalidOperationError(
                    operation="draw", current_state="empty", message=ErrorMessages.EMPTY_CATALOG
                )
            self.remaining = shuffle_ids(self.catalog_ids, self._rng)
            logger.info(LogTemplates.DECK_RESHUFFLED, len(self.remaining))
        return self.remaining.pop()

    def reset(self, ids: Sequence[str]) -> None:
        """Replace the catalog id set and reshuffle a full pile from it."""
        self.catalog_ids = tuple(ids)
        self.remaining = shuffle_ids(self.catalog_ids, self._rng)
