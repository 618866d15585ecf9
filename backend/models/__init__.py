"""Pydantic models for the cadence API."""

from backend.models.playlist import PlaylistAddTracksRequest, PlaylistCreateRequest, PlaylistUpdateRequest
from backend.models.queue import PlayPlaylistRequest, PlayTrackRequest, QueueAddRequest, SeekRequest
from backend.models.settings import AllSettings, SettingsUpdate
from backend.models.track import TrackCreateRequest

__all__ = [
    # Track models
    "TrackCreateRequest",
    # Playlist models
    "PlaylistCreateRequest",
    "PlaylistAddTracksRequest",
    "PlaylistUpdateRequest",
    # Player models
    "PlayTrackRequest",
    "PlayPlaylistRequest",
    "SeekRequest",
    "QueueAddRequest",
    # Settings models
    "AllSettings",
    "SettingsUpdate",
]
