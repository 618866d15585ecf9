from decouple import Csv, config
from pathlib import Path

APP_NAME = config('CADENCE_APP_NAME', default="cadence")

# Database Configuration
DB_PATH = config('CADENCE_DB_PATH', default=str(Path.home() / ".cadence" / "cadence.db"))

# API sidecar
API_HOST = config('CADENCE_API_HOST', default="127.0.0.1")
API_PORT = config('CADENCE_API_PORT', default=8765, cast=int)
API_CORS_ORIGINS = config('CADENCE_API_CORS_ORIGINS', default="*", cast=Csv())

# Logging
LOG_LEVEL = config('CADENCE_LOG_LEVEL', default="INFO")
LOG_FILE = config('CADENCE_LOG_FILE', default="")

# Playback
# "Previous" restarts the current track once playback is past this point
RESTART_THRESHOLD_MS = config('CADENCE_RESTART_THRESHOLD_MS', default=3000, cast=int)
VLC_ARGS = config('CADENCE_VLC_ARGS', default="--no-video --quiet", cast=lambda v: v.split())

REPEAT_MODES = ("off", "all", "one")
THEMES = ("light", "dark", "auto")

# Defaults for the persisted player settings
DEFAULT_SETTINGS = {
    "theme": "light",
    "auto_play": False,
    "repeat_mode": "off",
    "shuffle": False,
    "volume": 75,
}
