import json
import random
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from song_timeline.domain.game.catalog import Catalog, Track

# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def track_a():
    return Track(id="A", uri="spotify:track:aaa", title="Alpha", artist="Ann Artist", year=1990)


@pytest.fixture
def track_b():
    return Track(id="B", uri="spotify:track:bbb", title="Bravo", artist="Bob Band", year=2000)


@pytest.fixture
def track_c():
    return Track(id="C", uri="spotify:track:ccc", title="Charlie", artist="Cat Crew", year=2010)


@pytest.fixture
def abc_catalog(track_a, track_b, track_c):
    """Catalog with A (1990), B (2000) and C (2010)."""
    return Catalog.from_tracks([track_a, track_b, track_c])


@pytest.fixture
def catalog_file(tmp_path, track_a, track_b, track_c):
    """JSON catalog on disk holding the A/B/C tracks."""
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps([t.model_dump() for t in (track_a, track_b, track_c)]), encoding="utf-8"
    )
    return path


@pytest.fixture
def rng():
    """Seeded generator so shuffles are reproducible."""
    return random.Random(1234)


# ============================================================================
# Room Fixtures
# ============================================================================


@pytest.fixture
def room(abc_catalog, rng):
    """Idle room over the A/B/C catalog."""
    from song_timeline.domain.game.entities import Room

    return Room.open("ROOM", abc_catalog, rng)


@pytest.fixture
def scenario_room(room, track_a, track_c):
    """Room where p1 holds [A, C], p2 holds one token and B is the next draw."""
    p1 = room.add_player("p1", "Turn Player")
    p1.timeline = [track_a, track_c]
    p2 = room.add_player("p2", "Rival")
    p2.tokens = 1
    room.deck.remaining = ["B"]
    return room


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def room_registry(abc_catalog):
    from song_timeline.infrastructure.persistence.room_registry import (
        InMemoryRoomRegistry,
        seeded_rng_factory,
    )

    return InMemoryRoomRegistry(abc_catalog, seeded_rng_factory(7))


@pytest.fixture
def event_bus():
    from song_timeline.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture
def mock_credentials():
    mock = AsyncMock()
    mock.ensure_fresh_credential.return_value = "access-token"
    mock.store = MagicMock()
    return mock


@pytest.fixture
def mock_playback():
    mock = AsyncMock()
    mock.play.return_value = True
    return mock


@pytest.fixture
def mock_playlists():
    mock = MagicMock()
    mock.parse_playlist_id.return_value = "AbCdEfGhIjKlMnOpQrStUv"
    mock.fetch_tracks = AsyncMock(return_value=[])
    return mock


@pytest_asyncio.fixture
async def game_service(room_registry, event_bus, mock_credentials, mock_playback, mock_playlists):
    from song_timeline.application.services.game_service import GameApplicationService
    from song_timeline.domain.game.value_objects import GameRules

    return GameApplicationService(
        room_repository=room_registry,
        event_bus=event_bus,
        rules=GameRules(),
        credential_provider=mock_credentials,
        playback_controller=mock_playback,
        playlist_source=mock_playlists,
    )


@pytest.fixture
def recorded_events(event_bus):
    """Every event published on the bus, in publish order."""
    from song_timeline.domain.shared.events import DomainEvent

    events = []

    async def record(event):
        events.append(event)

    event_bus.subscribe(DomainEvent, record)
    return events
