"""Port interfaces for supplying catalogs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.game.catalog import Catalog, Track


class CatalogSource(ABC):
    """Supplies the catalog every new room starts from."""

    @abstractmethod
    async def load(self) -> "Catalog":
        ...


class PlaylistSource(ABC):
    """Turns an external playlist into catalog tracks."""

    @abstractmethod
    def parse_playlist_id(self, text: str) -> str | None:
        """Extract the provider's playlist id from a link, uri or bare id."""
        ...

    @abstractmethod
    async def fetch_tracks(self, playlist_id: str, *, token: str, market: str) -> list["Track"]:
        """Fetch the playable tracks of a playlist, deduplicated and in playlist order."""
        ...
