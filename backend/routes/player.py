"""Player transport routes for the cadence API."""

from backend.models.queue import PlayPlaylistRequest, PlayTrackRequest, QueueAddRequest, SeekRequest
from backend.services.database import DatabaseService, get_db
from backend.services.player import get_player, tracks_from_rows
from core.controls import PlaybackQueueController
from core.logging import log_api_request
from core.models import Track
from fastapi import APIRouter, Depends, HTTPException

router = APIRouter(prefix="/player", tags=["player"])


def _state(player: PlaybackQueueController) -> dict:
    return player.state.to_dict()


@router.get("/state")
async def get_playback_state(player: PlaybackQueueController = Depends(get_player)):
    """Get current playback state."""
    return _state(player)


@router.post("/play-track")
async def play_track(
    request: PlayTrackRequest,
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Play a track, queueing the given playlist or track list around it."""
    row = db.get_track_by_id(request.track_id)
    if not row:
        raise HTTPException(status_code=404, detail=f"Track with id {request.track_id} not found")

    playlist = None
    if request.playlist_id is not None:
        stored = db.get_playlist(request.playlist_id)
        if not stored:
            raise HTTPException(status_code=404, detail=f"Playlist with id {request.playlist_id} not found")
        playlist = tracks_from_rows(stored["tracks"])
    elif request.track_ids:
        playlist = tracks_from_rows(db.get_tracks_by_ids(request.track_ids))

    log_api_request("play_track", track_id=request.track_id, description=f"Play {row['title']}")
    player.play_track(Track.from_dict(row), playlist)
    return _state(player)


@router.post("/play-playlist/{playlist_id}")
async def play_playlist(
    playlist_id: int,
    request: PlayPlaylistRequest | None = None,
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Replace the queue with a stored playlist and start playing it."""
    stored = db.get_playlist(playlist_id)
    if not stored:
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")

    start_index = request.start_index if request else 0
    log_api_request("play_playlist", playlist_id=playlist_id, start_index=start_index)
    player.play_playlist(tracks_from_rows(stored["tracks"]), start_index)
    return _state(player)


@router.post("/toggle")
async def toggle_play_pause(player: PlaybackQueueController = Depends(get_player)):
    """Toggle between playing and paused."""
    player.toggle_play_pause()
    return _state(player)


@router.post("/seek")
async def seek(request: SeekRequest, player: PlaybackQueueController = Depends(get_player)):
    """Seek within the current track (milliseconds)."""
    player.seek_to(request.position_ms)
    return _state(player)


@router.post("/next")
async def next_track(player: PlaybackQueueController = Depends(get_player)):
    """Skip to next track."""
    player.play_next()
    return _state(player)


@router.post("/previous")
async def previous_track(player: PlaybackQueueController = Depends(get_player)):
    """Restart the current track or go to the previous one."""
    player.play_previous()
    return _state(player)


@router.post("/stop")
async def stop(player: PlaybackQueueController = Depends(get_player)):
    """Stop playback."""
    player.stop()
    return _state(player)


@router.post("/shuffle")
async def toggle_shuffle(
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Toggle shuffle mode."""
    db.set_setting("shuffle", player.toggle_shuffle())
    return _state(player)


@router.post("/repeat")
async def toggle_repeat(
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Cycle repeat mode (off, all, one)."""
    db.set_setting("repeat_mode", player.toggle_repeat().value)
    return _state(player)


@router.post("/queue")
async def add_to_queue(
    request: QueueAddRequest,
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Append a catalog track to the play queue."""
    row = db.get_track_by_id(request.track_id)
    if not row:
        raise HTTPException(status_code=404, detail=f"Track with id {request.track_id} not found")

    player.add_to_queue(Track.from_dict(row))
    return _state(player)
