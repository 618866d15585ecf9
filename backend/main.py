"""FastAPI sidecar for the cadence player.

Exposes the playback controller, the track catalog, playlists and
player settings to UI clients.
"""

import time
from backend.routes.player import router as player_router
from backend.routes.playlists import router as playlists_router
from backend.routes.settings import router as settings_router
from backend.routes.tracks import router as tracks_router
from backend.services.database import get_db, init_db
from backend.services.player import count_plays, init_player
from config import API_CORS_ORIGINS, API_HOST, API_PORT, APP_NAME, DB_PATH, LOG_FILE, LOG_LEVEL, RESTART_THRESHOLD_MS, VLC_ARGS
from contextlib import asynccontextmanager
from core.audio import PlaybackError
from core.logging import app_logger, setup_logging
from eliot import log_message, start_action
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

__version__ = "0.1.0"

# Track startup time for health check
_start_time: float = 0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global _start_time
    _start_time = time.time()

    setup_logging(LOG_LEVEL, LOG_FILE or None)

    # libvlc is only needed once the server actually runs
    from core.vlc_backend import VLCAudioBackend

    with start_action(app_logger, "startup", db_path=DB_PATH):
        db = init_db(DB_PATH)
        backend = VLCAudioBackend(VLC_ARGS)
        player = init_player(
            backend,
            repeat_mode=db.get_setting("repeat_mode"),
            restart_threshold_ms=RESTART_THRESHOLD_MS,
        )
        count_plays(player, db)

    log_message(message_type="application_ready", message=f"{APP_NAME} backend v{__version__} started")

    yield

    backend.release()
    log_message(message_type="application_shutdown", message=f"{APP_NAME} backend shutting down")


app = FastAPI(
    title=f"{APP_NAME} Player API",
    description="REST API for the cadence playback queue",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=API_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tracks_router, prefix="/api")
app.include_router(playlists_router, prefix="/api")
app.include_router(player_router, prefix="/api")
app.include_router(settings_router, prefix="/api")


@app.exception_handler(PlaybackError)
async def playback_error_handler(request: Request, exc: PlaybackError):
    """Surface backend load failures as 502 Bad Gateway."""
    return JSONResponse(status_code=502, content={"detail": str(exc), "uri": exc.uri})


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    try:
        with get_db().get_connection() as conn:
            conn.cursor().execute("SELECT 1")
        db_status = "connected"
    except Exception:
        db_status = "error"

    uptime = int(time.time() - _start_time) if _start_time else 0

    return {
        "status": "healthy",
        "version": __version__,
        "database": db_status,
        "uptime_seconds": uptime,
    }


def run():
    """Entry point for running the server."""
    import uvicorn

    uvicorn.run("backend.main:app", host=API_HOST, port=API_PORT, reload=False, log_level="info")


if __name__ == "__main__":
    run()
