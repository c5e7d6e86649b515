"""
Game Domain Repository Interfaces

Abstract base classes defining the contracts for room storage.
Implementations live in the infrastructure layer.
"""

import asyncio
from abc import ABC, abstractmethod

from song_timeline.domain.game.entities import Room


class RoomRepository(ABC):
    """Abstract registry of rooms keyed by room code.

    Exactly one Room exists per code. Callers serialize mutations of a room
    by holding the lock returned from :meth:`lock_for`.
    """

    @abstractmethod
    async def get(self, code: str) -> Room | None:
        """Retrieve a room by code.

        Args:
            code: The room code.

        Returns:
            The room if it exists, None otherwise.
        """
        ...

    @abstractmethod
    async def get_or_create(self, code: str) -> Room:
        """Get an existing room or open a new one.

        Args:
            code: The room code.

        Returns:
            The existing or newly created room.
        """
        ...

    @abstractmethod
    async def exists(self, code: str) -> bool:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def codes(self) -> list[str]:
        """Codes of every open room, in creation order."""
        ...

    @abstractmethod
    def lock_for(self, code: str) -> asyncio.Lock:
        """Get the mutual-exclusion lock guarding one room's state."""
        ...
