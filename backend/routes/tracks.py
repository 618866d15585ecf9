"""Track catalog routes for the cadence API."""

from backend.models.track import TrackCreateRequest
from backend.services.database import DatabaseService, get_db
from core.logging import log_api_request
from core.models import TrackSource
from fastapi import APIRouter, Depends, HTTPException, Query

router = APIRouter(prefix="/tracks", tags=["tracks"])


@router.get("")
async def get_tracks(
    search: str | None = None,
    source: TrackSource | None = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: DatabaseService = Depends(get_db),
):
    """List catalog tracks, optionally filtered by text and source."""
    tracks, total = db.get_all_tracks(search=search, source=source.value if source else None, limit=limit, offset=offset)
    return {"tracks": tracks, "total": total, "limit": limit, "offset": offset}


@router.get("/{track_id}")
async def get_track(track_id: str, db: DatabaseService = Depends(get_db)):
    """Get a single track."""
    track = db.get_track_by_id(track_id)
    if not track:
        raise HTTPException(status_code=404, detail=f"Track with id {track_id} not found")
    return track


@router.post("", status_code=201)
async def create_track(request: TrackCreateRequest, db: DatabaseService = Depends(get_db)):
    """Add a track to the catalog."""
    track = db.add_track(request.model_dump(mode="json"))
    if not track:
        raise HTTPException(status_code=409, detail=f"Track with id {request.id} already exists")
    log_api_request("create_track", track_id=track["id"], description=f"Added {track['title']}")
    return track


@router.delete("/{track_id}", status_code=204)
async def delete_track(track_id: str, db: DatabaseService = Depends(get_db)):
    """Remove a track from the catalog and from every playlist."""
    if not db.delete_track(track_id):
        raise HTTPException(status_code=404, detail=f"Track with id {track_id} not found")
