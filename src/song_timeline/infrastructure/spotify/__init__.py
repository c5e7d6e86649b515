"""Spotify Web API adapters: credentials, playback and playlist import."""

from song_timeline.infrastructure.spotify.auth import SpotifyCredentialProvider
from song_timeline.infrastructure.spotify.playback import SpotifyPlaybackController
from song_timeline.infrastructure.spotify.playlists import (
    SpotifyPlaylistSource,
    extract_playlist_id,
)

__all__ = [
    "SpotifyCredentialProvider",
    "SpotifyPlaybackController",
    "SpotifyPlaylistSource",
    "extract_playlist_id",
]
