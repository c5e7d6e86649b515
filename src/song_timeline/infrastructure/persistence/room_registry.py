"""In-memory implementation of the room repository."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import defaultdict
from collections.abc import Callable

from song_timeline.domain.game.catalog import Catalog
from song_timeline.domain.game.entities import Room
from song_timeline.domain.game.repository import RoomRepository
from song_timeline.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

RngFactory = Callable[[str], random.Random]


def seeded_rng_factory(seed: int | None) -> RngFactory:
    """Build per-room generators; with a seed every room code gets a reproducible stream."""
    if seed is None:
        return lambda code: random.Random()
    return lambda code: random.Random(f"{seed}:{code}")


class InMemoryRoomRegistry(RoomRepository):
    """Process-lifetime registry of rooms; rooms are opened lazily and never evicted."""

    def __init__(self, default_catalog: Catalog, rng_factory: RngFactory | None = None) -> None:
        self._default_catalog = default_catalog
        self._rng_factory = rng_factory or seeded_rng_factory(None)
        self._rooms: dict[str, Room] = {}
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @property
    def default_catalog(self) -> Catalog:
        return self._default_catalog

    async def get(self, code: str) -> Room | None:
        return self._rooms.get(code)

    async def get_or_create(self, code: str) -> Room:
        room = self._rooms.get(code)
        if room is None:
            room = Room.open(code, self._default_catalog, self._rng_factory(code))
            self._rooms[code] = room
            logger.info(LogTemplates.ROOM_CREATED, code, room.deck.remaining_count)
        return room

    async def exists(self, code: str) -> bool:
        return code in self._rooms

    async def count(self) -> int:
        return len(self._rooms)

    async def codes(self) -> list[str]:
        return list(self._rooms)

    def lock_for(self, code: str) -> asyncio.Lock:
        return self._locks[code]
