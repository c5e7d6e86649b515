"""Player and host actions, one per protocol message."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from song_timeline.domain.shared.types import (
    GapIndexInt,
    NonEmptyStr,
    PlayerIdStr,
    PlayerNameStr,
    RoomCodeStr,
)


class BaseAction(BaseModel):
    """Fields every action carries: the room it targets and the acting identity."""

    model_config = ConfigDict(frozen=True, strict=True)

    room: RoomCodeStr
    player_id: PlayerIdStr

    @field_validator("room", mode="before")
    @classmethod
    def _strip_room(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class JoinAction(BaseAction):
    action: Literal["join"] = "join"
    name: PlayerNameStr

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class DeclareHostAction(BaseAction):
    action: Literal["declare_host"] = "declare_host"


class SetHostDeviceAction(BaseAction):
    action: Literal["set_host_device"] = "set_host_device"
    device_id: NonEmptyStr


class SetHostCredentialAction(BaseAction):
    """Tokens from the host's completed authorization."""

    action: Literal["set_host_credential"] = "set_host_credential"
    access_token: NonEmptyStr
    refresh_token: str | None = None


class StartRoundAction(BaseAction):
    action: Literal["start_round"] = "start_round"


class LockPlacementAction(BaseAction):
    """The turn player's placement plus optional title/artist guesses."""

    action: Literal["lock_placement"] = "lock_placement"
    # Range is checked against the timeline by the room, so any int is accepted here.
    insert_index: int
    title_guess: str | None = None
    artist_guess: str | None = None


class ReserveGapAction(BaseAction):
    action: Literal["reserve_gap"] = "reserve_gap"
    gap_index: GapIndexInt


class RevealAction(BaseAction):
    action: Literal["reveal"] = "reveal"


class ImportPlaylistAction(BaseAction):
    action: Literal["import_playlist"] = "import_playlist"
    playlist: NonEmptyStr
    market: str | None = Field(default=None, min_length=2, max_length=2)


Action = Annotated[
    JoinAction
    | DeclareHostAction
    | SetHostDeviceAction
    | SetHostCredentialAction
    | StartRoundAction
    | LockPlacementAction
    | ReserveGapAction
    | RevealAction
    | ImportPlaylistAction,
    Field(discriminator="action"),
]

_ACTION_ADAPTER: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(line: str | bytes) -> Action:
    """Parse one JSON-encoded action.

    Raises:
        pydantic.ValidationError: if the payload is not valid JSON or matches no action.
    """
    return _ACTION_ADAPTER.validate_json(line)


class ActionReply(BaseModel):
    """Answer sent back to the caller of a single action."""

    model_config = ConfigDict(frozen=True)

    action: str
    room: str | None = None
    ok: bool
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)
