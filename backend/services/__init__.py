"""Backend services for the cadence API sidecar."""

from backend.services.database import DatabaseService, get_db, init_db
from backend.services.player import count_plays, get_player, init_player

__all__ = ["DatabaseService", "count_plays", "get_db", "init_db", "get_player", "init_player"]
