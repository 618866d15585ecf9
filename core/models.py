"""Domain models for tracks and playback state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TrackSource(str, Enum):
    """Where a track came from."""

    CATALOG = "catalog"
    UPLOAD = "upload"


class RepeatMode(str, Enum):
    """Queue repeat behaviour at the end of a track or the queue."""

    OFF = "off"
    ALL = "all"
    ONE = "one"

    def next(self) -> "RepeatMode":
        """Cycle off -> all -> one -> off."""
        order = [RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE]
        return order[(order.index(self) + 1) % len(order)]


@dataclass(frozen=True)
class Track:
    """A playable track. Immutable once it is in a queue."""

    id: str
    title: str
    artist: str = ""
    album: str = ""
    duration: int = 0  # seconds
    uri: str = ""
    cover_uri: str = ""
    genre: str = ""
    source: TrackSource = TrackSource.CATALOG

    def __post_init__(self):
        if not self.id:
            raise ValueError("Track id must not be empty")
        if self.duration < 0:
            raise ValueError(f"Track duration must be >= 0, got {self.duration}")
        if not isinstance(self.source, TrackSource):
            object.__setattr__(self, "source", TrackSource(self.source))

    @property
    def is_upload(self) -> bool:
        return self.source is TrackSource.UPLOAD

    @property
    def display_name(self) -> str:
        return f"{self.artist or 'Unknown'} - {self.title or 'Unknown'}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        """Build a Track from an API payload or database row."""
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            artist=data.get("artist") or "",
            album=data.get("album") or "",
            duration=int(data.get("duration") or 0),
            uri=data.get("uri") or "",
            cover_uri=data.get("cover_uri") or "",
            genre=data.get("genre") or "",
            source=TrackSource(data.get("source") or TrackSource.CATALOG.value),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration,
            "uri": self.uri,
            "cover_uri": self.cover_uri,
            "genre": self.genre,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class AudioStatus:
    """Status reported by an audio backend. Times are in seconds.

    ``uri`` is the source the status was observed on; statuses for any other
    source than the one currently bound are stale.
    """

    playing: bool = False
    current_time_sec: float = 0.0
    duration_sec: float = 0.0
    did_just_finish: bool = False
    is_loaded: bool = False
    error: bool = False
    uri: str | None = None


@dataclass(frozen=True)
class PlaybackState:
    """Read-only snapshot of the controller. Times are in milliseconds."""

    current_track: Track | None = None
    current_index: int | None = None
    queue: tuple[Track, ...] = field(default_factory=tuple)
    is_playing: bool = False
    position: int = 0
    duration: int = 0
    is_shuffled: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    is_loading: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_track": self.current_track.to_dict() if self.current_track else None,
            "current_index": self.current_index,
            "queue": [track.to_dict() for track in self.queue],
            "is_playing": self.is_playing,
            "position": self.position,
            "duration": self.duration,
            "is_shuffled": self.is_shuffled,
            "repeat_mode": self.repeat_mode.value,
            "is_loading": self.is_loading,
        }
