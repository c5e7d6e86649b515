"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the registry, adapters and services.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.commands.dispatcher import ActionDispatcher
    from ..application.interfaces.catalog_source import CatalogSource
    from ..application.services.game_service import GameApplicationService
    from ..domain.game.catalog import Catalog
    from ..domain.shared.events import EventBus
    from ..infrastructure.persistence.room_registry import InMemoryRoomRegistry
    from ..infrastructure.spotify.auth import SpotifyCredentialProvider
    from ..infrastructure.spotify.playback import SpotifyPlaybackController
    from ..infrastructure.spotify.playlists import SpotifyPlaylistSource
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The room registry
    needs the default catalog, so :meth:`initialize` must run before it is used.
    """

    settings: Settings

    _event_bus: EventBus | None = None
    _http_client: httpx.AsyncClient | None = None

    # Catalog and persistence
    _catalog_source: CatalogSource | None = None
    _default_catalog: Catalog | None = None
    _room_registry: InMemoryRoomRegistry | None = None

    # Spotify adapters
    _credential_provider: SpotifyCredentialProvider | None = None
    _playback_controller: SpotifyPlaybackController | None = None
    _playlist_source: SpotifyPlaylistSource | None = None

    # Application
    _game_service: GameApplicationService | None = None
    _dispatcher: ActionDispatcher | None = None

    # === Shared ===

    @property
    def event_bus(self) -> EventBus:
        """Get the container-owned event bus."""
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the HTTP client shared by the Spotify adapters."""
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(timeout=self.settings.spotify.request_timeout_s)
        return self._http_client

    # === Catalog & Rooms ===

    @property
    def catalog_source(self) -> CatalogSource:
        """Get the source of the default catalog."""
        if self._catalog_source is None:
            from ..infrastructure.catalog.json_source import JsonFileCatalogSource

            self._catalog_source = JsonFileCatalogSource(self.settings.game.catalog_path)
        return self._catalog_source

    @property
    def default_catalog(self) -> Catalog:
        if self._default_catalog is None:
            raise RuntimeError("Default catalog not loaded. Call initialize() first.")
        return self._default_catalog

    @property
    def room_registry(self) -> InMemoryRoomRegistry:
        """Get the room registry."""
        if self._room_registry is None:
            from ..infrastructure.persistence.room_registry import (
                InMemoryRoomRegistry,
                seeded_rng_factory,
            )

            self._room_registry = InMemoryRoomRegistry(
                self.default_catalog, seeded_rng_factory(self.settings.game.shuffle_seed)
            )
        return self._room_registry

    # === Spotify Adapters ===

    @property
    def credential_provider(self) -> SpotifyCredentialProvider:
        """Get the per-room credential store."""
        if self._credential_provider is None:
            from ..infrastructure.spotify.auth import SpotifyCredentialProvider

            self._credential_provider = SpotifyCredentialProvider(
                self.http_client, self.settings.spotify
            )
        return self._credential_provider

    @property
    def playback_controller(self) -> SpotifyPlaybackController:
        """Get the playback controller."""
        if self._playback_controller is None:
            from ..infrastructure.spotify.playback import SpotifyPlaybackController

            self._playback_controller = SpotifyPlaybackController(
                self.http_client, self.settings.spotify
            )
        return self._playback_controller

    @property
    def playlist_source(self) -> SpotifyPlaylistSource:
        """Get the playlist importer."""
        if self._playlist_source is None:
            from ..infrastructure.spotify.playlists import SpotifyPlaylistSource

            self._playlist_source = SpotifyPlaylistSource(self.http_client, self.settings.spotify)
        return self._playlist_source

    # === Application ===

    @property
    def game_service(self) -> GameApplicationService:
        """Get the game application service."""
        if self._game_service is None:
            from ..application.services.game_service import GameApplicationService

            self._game_service = GameApplicationService(
                room_repository=self.room_registry,
                event_bus=self.event_bus,
                rules=self.settings.game.to_rules(),
                credential_provider=self.credential_provider,
                playback_controller=self.playback_controller,
                playlist_source=self.playlist_source,
                default_market=self.settings.spotify.market,
            )
        return self._game_service

    @property
    def dispatcher(self) -> ActionDispatcher:
        """Get the action dispatcher."""
        if self._dispatcher is None:
            from ..application.commands.dispatcher import ActionDispatcher

            self._dispatcher = ActionDispatcher(self.game_service)
        return self._dispatcher

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Load the default catalog every new room starts from."""
        self._default_catalog = await self.catalog_source.load()
        logger.info(LogTemplates.CONTAINER_INITIALIZED, len(self._default_catalog))

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._event_bus is not None:
            self._event_bus.clear()

        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
