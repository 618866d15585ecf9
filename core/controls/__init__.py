from core.controls.player_core import DEFAULT_RESTART_THRESHOLD_MS, PlaybackQueueController

__all__ = ["DEFAULT_RESTART_THRESHOLD_MS", "PlaybackQueueController"]
