"""Playlist models for the playlists API."""

from pydantic import BaseModel, Field


class PlaylistCreateRequest(BaseModel):
    """Request to create a new playlist."""

    name: str = Field(min_length=1, max_length=200)
    description: str | None = None


class PlaylistAddTracksRequest(BaseModel):
    """Request to append tracks to a playlist."""

    track_ids: list[str] = Field(min_length=1, description="Track IDs to add")


class PlaylistUpdateRequest(BaseModel):
    """Request to update playlist metadata."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
