"""Centralized message constants for error messages, validation, and replies."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Catalog Errors
    EMPTY_CATALOG = "Catalog must contain at least one track"
    DUPLICATE_TRACK_ID = "Duplicate track id '{track_id}' in catalog"
    UNKNOWN_TRACK_ID = "Track '{track_id}' is not in the catalog"
    CATALOG_FILE_INVALID = "Catalog file {path} must contain a JSON list of tracks"

    # Timeline Errors
    TIMELINE_ORDER_BROKEN = "Inserting '{track_id}' at {index} would break the year order"

    # Playlist Import Errors
    PLAYLIST_ID_UNPARSEABLE = "Could not parse playlist id from input"
    PLAYLIST_NO_PLAYABLE_TRACKS = "No playable tracks found for this market"
    PLAYLIST_FETCH_FAILED = "Playlist request failed with status {status}"
    PLAYLIST_IMPORT_UNAVAILABLE = "Playlist import is not configured"

    # Credential Errors
    NO_CREDENTIAL_STORED = "Host has not authorised playback for room '{room_code}'"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    CATALOG_PATH_MISSING = "Catalog file not found: {path}"

    # Protocol Errors
    MALFORMED_ACTION = "Malformed action: {detail}"


class ReplyMessages:
    """Human-readable messages returned to the acting player."""

    JOINED = "Joined room {room}"
    HOST_DECLARED = "You are now the host"
    DEVICE_SET = "Playback device registered"
    HOST_CREDENTIAL_SET = "Playback credential stored"
    HOST_CREDENTIAL_REJECTED = "Only the declared host can hand over a playback credential"
    ROUND_STARTED = "Round started"
    ROUND_ALREADY_ACTIVE = "A round is already in progress"
    NO_PLAYERS = "At least one player must join before a round can start"
    PLACEMENT_LOCKED = "Placement locked, interjection window open"
    PLACEMENT_IGNORED = "Placement ignored"
    GAP_RESERVED = "Gap {gap_index} reserved"
    GAP_REJECTED = "Gap {gap_index} could not be reserved"
    ROUND_REVEALED = "Round revealed"
    NO_ACTIVE_ROUND = "There is no active round to reveal"
    CATALOG_REPLACED = "Imported {count} tracks"
    NO_PLAYBACK_DEVICE = "No host device registered yet; the round continues without audio"
    NO_PLAYBACK_TOKEN = "No playback token available; the round continues without audio"
    PLAYBACK_FAILED = "Playback request was rejected; the round continues without audio"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting song-timeline session engine (environment=%s)"
    APP_STOPPED = "Session engine stopped"
    APP_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    APP_FATAL_ERROR = "Fatal error: %s"
    CONTAINER_INITIALIZED = "Container initialized with %d catalog tracks"
    CONTAINER_SHUTDOWN = "Container shut down"

    # Catalog
    CATALOG_LOADED = "Loaded %d tracks from %s"
    CATALOG_REPLACED = "Room %s catalog replaced with %d tracks"
    CATALOG_IMPORT_REJECTED = "Room %s catalog import rejected: %s"
    DECK_RESHUFFLED = "Deck exhausted, reshuffled %d catalog tracks"

    # Rooms
    ROOM_CREATED = "Created room %s with %d tracks in deck"
    PLAYER_JOINED = "Player %s (%s) joined room %s"
    PLAYER_RENAMED = "Player %s in room %s renamed to %s"
    HOST_DECLARED = "Room %s host is now %s"
    HOST_DEVICE_SET = "Room %s playback device set to %s"
    HOST_CREDENTIAL_SET = "Room %s received a playback credential from %s (refresh token: %s)"
    HOST_CREDENTIAL_REJECTED = "Room %s refused a playback credential from non-host %s"

    # Rounds
    ROUND_STARTED = "Room %s round started: track=%s turn=%s"
    ROUND_START_REJECTED = "Room %s start_round rejected: %s"
    PLACEMENT_LOCKED = "Room %s placement locked by %s at %d (title=%s artist=%s)"
    PLACEMENT_IGNORED = "Room %s placement from %s ignored"
    GAP_RESERVED = "Room %s gap %d reserved by %s"
    GAP_REJECTED = "Room %s gap %d reservation by %s rejected"
    ROUND_REVEALED = "Room %s revealed: correct_gap=%d turn_correct=%s winner=%s"
    REVEAL_WITHOUT_ROUND = "Room %s reveal ignored: no active round"

    # Playback
    PLAYBACK_NO_DEVICE = "Room %s has no host device registered yet"
    PLAYBACK_NO_TOKEN = "Room %s has no playback token: %s"
    PLAYBACK_STATUS = "Playback request for %s answered with status %d"
    PLAYBACK_TRANSFER_STATUS = "Device transfer to %s answered with status %d"
    PLAYBACK_REJECTED = "Room %s playback was not started"
    CREDENTIAL_REFRESHED = "Refreshed playback credential for room %s"
    CREDENTIAL_REFRESH_KEPT_OLD = "Refresh for room %s returned no access token, keeping previous"
    CREDENTIAL_REFRESH_STATUS = "Refresh for room %s answered with status %d"
    CREDENTIAL_REFRESH_ERROR = "Refresh for room %s failed: %s"
    PLAYBACK_REQUEST_ERROR = "Playback request for %s failed: %s"
    PLAYLIST_PAGE_FETCHED = "Fetched playlist %s page at offset %d (%d items)"
    PLAYLIST_ITEM_SKIPPED = "Skipped playlist %s item %s with %d invalid field(s)"

    # Event Bus
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"

    # Transport
    ACTION_MALFORMED = "Malformed action line: %s"
    ACTION_FAILED = "Action %s in room %s failed: %s"
    SESSION_ENDED = "Console session ended after %d actions"
