"""Settings routes for the cadence API."""

from backend.models.settings import AllSettings, SettingsUpdate
from backend.services.database import DatabaseService, get_db
from backend.services.player import get_player
from core.controls import PlaybackQueueController
from core.models import RepeatMode
from fastapi import APIRouter, Depends

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=AllSettings)
async def get_all_settings(db: DatabaseService = Depends(get_db)):
    """Get all player settings."""
    return db.get_all_settings()


@router.put("")
async def update_settings(
    request: SettingsUpdate,
    db: DatabaseService = Depends(get_db),
    player: PlaybackQueueController = Depends(get_player),
):
    """Bulk update settings. A new repeat mode applies to the live player too."""
    settings_dict = request.model_dump(exclude_none=True)
    updated = db.update_settings(settings_dict)

    if "repeat_mode" in settings_dict:
        player.set_repeat_mode(RepeatMode(settings_dict["repeat_mode"]))

    return {"updated": updated, "settings": db.get_all_settings()}
