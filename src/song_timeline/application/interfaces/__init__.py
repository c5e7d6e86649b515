"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from song_timeline.application.interfaces.catalog_source import CatalogSource, PlaylistSource
from song_timeline.application.interfaces.credential_provider import CredentialProvider
from song_timeline.application.interfaces.playback_controller import PlaybackController

__all__ = [
    "CatalogSource",
    "PlaylistSource",
    "CredentialProvider",
    "PlaybackController",
]
