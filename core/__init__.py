"""Playback core: queue, controller and audio backends."""
