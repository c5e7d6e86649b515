"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (in-memory room registry)
- Catalog loading (JSON track lists)
- Spotify (credentials, playback, playlist import)
- Console transport (JSON lines over stdin/stdout)
"""

from song_timeline.infrastructure.catalog.json_source import JsonFileCatalogSource
from song_timeline.infrastructure.persistence.room_registry import InMemoryRoomRegistry

__all__ = [
    "InMemoryRoomRegistry",
    "JsonFileCatalogSource",
]
