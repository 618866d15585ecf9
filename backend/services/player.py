"""Process-wide playback controller for the API sidecar."""

from backend.services.database import DatabaseService
from core.audio import AudioBackend
from core.controls import PlaybackQueueController
from core.models import RepeatMode, Track
from typing import Any

# Global controller instance (initialized in main.py)
_player: PlaybackQueueController | None = None


def init_player(
    backend: AudioBackend,
    repeat_mode: str = RepeatMode.OFF.value,
    restart_threshold_ms: int = 3000,
) -> PlaybackQueueController:
    """Initialize the global controller around ``backend``."""
    global _player
    _player = PlaybackQueueController(
        backend,
        repeat_mode=RepeatMode(repeat_mode),
        restart_threshold_ms=restart_threshold_ms,
    )
    return _player


def get_player() -> PlaybackQueueController:
    """Get the global controller instance."""
    if _player is None:
        raise RuntimeError("Player not initialized. Call init_player() first.")
    return _player


def tracks_from_rows(rows: list[dict[str, Any]]) -> list[Track]:
    return [Track.from_dict(row) for row in rows]


def count_plays(player: PlaybackQueueController, db: DatabaseService) -> None:
    """Bump a track's play count each time the controller starts it."""
    player.add_track_listener(lambda track: db.increment_play_count(track.id))
