"""Track models for the catalog API."""

from core.models import TrackSource
from pydantic import BaseModel, Field


class TrackCreateRequest(BaseModel):
    """Request to add a track to the catalog."""

    id: str | None = Field(None, min_length=1, max_length=200, description="Generated when omitted")
    title: str = Field(min_length=1, max_length=500)
    artist: str | None = None
    album: str | None = None
    duration: int = Field(0, ge=0, description="Duration in seconds")
    uri: str = Field(min_length=1)
    cover_uri: str | None = None
    genre: str | None = None
    source: TrackSource = TrackSource.CATALOG
