"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the game is defined here once, so models
can simply annotate their fields::

    from song_timeline.domain.shared.types import PlayerIdStr, NonNegativeInt

    class MyModel(BaseModel):
        player_id: PlayerIdStr
        score: NonNegativeInt
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

ReleaseYear = Annotated[int, Field(ge=0, le=9999)]
"""Release year of a track; 0 means the year is unknown."""

GapIndexInt = Annotated[int, Field(ge=0)]
"""Zero-based insertion slot in a timeline (0 = before the earliest entry)."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackIdStr = Annotated[str, Field(min_length=1, max_length=128)]
"""Catalog key of a track."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

RoomCodeStr = Annotated[str, Field(min_length=1, max_length=32)]
"""Registry key of a room."""

PlayerIdStr = Annotated[str, Field(min_length=1, max_length=128)]
"""Opaque player identity handed over by the transport."""

PlayerNameStr = Annotated[str, Field(min_length=1, max_length=64)]
"""Display name shown to the other players."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    return datetime.now(UTC)
