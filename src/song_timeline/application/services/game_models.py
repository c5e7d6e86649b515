from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ...domain.game.catalog import Track
from ...domain.shared.types import NonNegativeInt


class StartRoundResult(BaseModel):
    """Result of starting a round, including what happened to playback."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    track: Track | None = None
    turn_player_id: str | None = None
    device_id: str | None = None
    playback_started: bool = False
    warning: str | None = None

    @classmethod
    def rejected(cls, message: str) -> StartRoundResult:
        return cls(success=False, message=message)


class CatalogImportResult(BaseModel):

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    count: NonNegativeInt = 0
    sample: list[Track] = Field(default_factory=list)

    @classmethod
    def failed(cls, message: str) -> CatalogImportResult:
        return cls(success=False, message=message)
