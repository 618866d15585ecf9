"""Playlists routes for the cadence API."""

from backend.models.playlist import PlaylistAddTracksRequest, PlaylistCreateRequest, PlaylistUpdateRequest
from backend.services.database import DatabaseService, get_db
from fastapi import APIRouter, Depends, HTTPException

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.get("")
async def get_playlists(db: DatabaseService = Depends(get_db)):
    """Get all playlists."""
    return {"playlists": db.get_playlists()}


@router.post("", status_code=201)
async def create_playlist(request: PlaylistCreateRequest, db: DatabaseService = Depends(get_db)):
    """Create a new playlist."""
    playlist = db.create_playlist(request.name, request.description)
    if not playlist:
        raise HTTPException(status_code=409, detail=f"Playlist with name '{request.name}' already exists")
    return playlist


@router.get("/{playlist_id}")
async def get_playlist(playlist_id: int, db: DatabaseService = Depends(get_db)):
    """Get a playlist with its tracks."""
    playlist = db.get_playlist(playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")
    return playlist


@router.put("/{playlist_id}")
async def update_playlist(playlist_id: int, request: PlaylistUpdateRequest, db: DatabaseService = Depends(get_db)):
    """Rename a playlist or change its description."""
    if not db.get_playlist(playlist_id):
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")

    playlist = db.update_playlist(playlist_id, request.name, request.description)
    if not playlist:
        raise HTTPException(status_code=409, detail=f"Playlist with name '{request.name}' already exists")
    return playlist


@router.get("/{playlist_id}/tracks")
async def get_playlist_tracks(playlist_id: int, db: DatabaseService = Depends(get_db)):
    """Get a playlist's tracks in play order."""
    playlist = db.get_playlist(playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")
    return {"tracks": playlist["tracks"], "total": playlist["track_count"]}


@router.delete("/{playlist_id}", status_code=204)
async def delete_playlist(playlist_id: int, db: DatabaseService = Depends(get_db)):
    """Delete a playlist."""
    if not db.delete_playlist(playlist_id):
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")


@router.post("/{playlist_id}/tracks", status_code=201)
async def add_tracks_to_playlist(
    playlist_id: int,
    request: PlaylistAddTracksRequest,
    db: DatabaseService = Depends(get_db),
):
    """Append tracks to a playlist."""
    if not db.get_playlist(playlist_id):
        raise HTTPException(status_code=404, detail=f"Playlist with id {playlist_id} not found")

    added = db.add_tracks_to_playlist(playlist_id, request.track_ids)
    playlist = db.get_playlist(playlist_id)

    return {
        "added": added,
        "playlist_track_count": playlist["track_count"],
    }


@router.delete("/{playlist_id}/tracks/{track_id}", status_code=204)
async def remove_track_from_playlist(playlist_id: int, track_id: str, db: DatabaseService = Depends(get_db)):
    """Remove a track from a playlist."""
    if not db.remove_track_from_playlist(playlist_id, track_id):
        raise HTTPException(status_code=404, detail=f"Track {track_id} is not in playlist {playlist_id}")
