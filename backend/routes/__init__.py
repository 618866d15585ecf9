"""API routes for the cadence backend."""

from backend.routes.player import router as player_router
from backend.routes.playlists import router as playlists_router
from backend.routes.settings import router as settings_router
from backend.routes.tracks import router as tracks_router

__all__ = [
    "player_router",
    "playlists_router",
    "settings_router",
    "tracks_router",
]
