"""Track records and immutable catalog snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

from song_timeline.domain.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from song_timeline.domain.shared.messages import ErrorMessages
from song_timeline.domain.shared.types import NonEmptyStr, ReleaseYear, TrackIdStr, TrackTitleStr


class Track(BaseModel):
    """Immutable value object representing a playable catalog track."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackIdStr
    uri: NonEmptyStr
    title: TrackTitleStr
    artist: NonEmptyStr
    year: ReleaseYear

    @property
    def display_title(self) -> str:
        return f"{self.artist} - {self.title} ({self.year})"


class Catalog(BaseModel):
    """Snapshot of the tracks a room can draw from.

    A catalog is never mutated: importing a playlist builds a new snapshot,
    and rounds keep a reference to the snapshot they were drawn from.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    tracks: dict[TrackIdStr, Track] = Field(min_length=1)

    @classmethod
    def from_tracks(cls, tracks: Iterable[Track]) -> Catalog:
        by_id: dict[str, Track] = {}
        for track in tracks:
            if track.id in by_id:
                raise ValidationError(
                    ErrorMessages.DUPLICATE_TRACK_ID.format(track_id=track.id), field="id"
                )
            by_id[track.id] = track

        if not by_id:
            raise BusinessRuleViolationError(rule="EMPTY_CATALOG", message=ErrorMessages.EMPTY_CATALOG)

        return cls(tracks=by_id)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self.tracks)

    def __len__(self) -> int:
        return len(self.tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self.tracks

    def all_tracks(self) -> Iterator[Track]:
        return iter(self.tracks.values())

    def get(self, track_id: str) -> Track:
        try:
            return self.tracks[track_id]
        except KeyError:
            raise EntityNotFoundError(
                "Track", track_id, ErrorMessages.UNKNOWN_TRACK_ID.format(track_id=track_id)
            ) from None
