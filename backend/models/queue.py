"""Request models for the player transport API."""

from pydantic import BaseModel, Field


class PlayTrackRequest(BaseModel):
    """Play a track, optionally in the context of a playlist or explicit track list."""

    track_id: str = Field(min_length=1)
    playlist_id: int | None = None
    track_ids: list[str] | None = None


class PlayPlaylistRequest(BaseModel):
    """Play a stored playlist from a given index."""

    start_index: int = Field(0, ge=0)


class SeekRequest(BaseModel):
    """Seek within the current track."""

    position_ms: int


class QueueAddRequest(BaseModel):
    """Append a track to the play queue."""

    track_id: str = Field(min_length=1)
