"""
Application Commands

Action messages sent by players and the host, and the dispatcher that
routes them to the game service. Actions represent intent to change
the state of a room.
"""

from song_timeline.application.commands.actions import (
    Action,
    ActionReply,
    DeclareHostAction,
    ImportPlaylistAction,
    JoinAction,
    LockPlacementAction,
    ReserveGapAction,
    RevealAction,
    SetHostCredentialAction,
    SetHostDeviceAction,
    StartRoundAction,
    parse_action,
)
from song_timeline.application.commands.dispatcher import ActionDispatcher

__all__ = [
    # Actions
    "Action",
    "JoinAction",
    "DeclareHostAction",
    "SetHostDeviceAction",
    "SetHostCredentialAction",
    "StartRoundAction",
    "LockPlacementAction",
    "ReserveGapAction",
    "RevealAction",
    "ImportPlaylistAction",
    "parse_action",
    # Dispatch
    "ActionReply",
    "ActionDispatcher",
]
