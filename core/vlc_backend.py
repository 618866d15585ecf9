"""AudioBackend implementation on top of python-vlc."""

import queue
import threading
import vlc
from core.audio import AudioBackend, PlaybackError
from core.logging import log_player_action, player_logger
from core.models import AudioStatus
from eliot import log_message, start_action

_STOP = object()


class VLCAudioBackend(AudioBackend):
    """Drive a libvlc media player.

    libvlc delivers events on its own thread and does not allow calling back
    into the player from there, so status updates are handed to a dispatcher
    thread before reaching the status callback.
    """

    def __init__(self, instance_args: list[str] | None = None, instance=None):
        super().__init__()
        self.player = instance if instance is not None else vlc.Instance(*(instance_args or []))
        self.media_player = self.player.media_player_new()
        self._uri: str | None = None
        self._loaded = False
        self._events: queue.Queue = queue.Queue()

        events = self.media_player.event_manager()
        events.event_attach(vlc.EventType.MediaPlayerPlaying, self._on_playing)
        events.event_attach(vlc.EventType.MediaPlayerPaused, self._on_state_change)
        events.event_attach(vlc.EventType.MediaPlayerTimeChanged, self._on_state_change)
        events.event_attach(vlc.EventType.MediaPlayerLengthChanged, self._on_state_change)
        events.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end_reached)
        events.event_attach(vlc.EventType.MediaPlayerEncounteredError, self._on_error)

        self._dispatcher = threading.Thread(target=self._dispatch_loop, name="vlc-status", daemon=True)
        self._dispatcher.start()

    # ==================== Commands ====================

    def bind(self, uri: str | None) -> None:
        with start_action(player_logger, "vlc_bind", uri=uri):
            # Statuses raised from here on belong to no source until the new one is set
            self._uri = None
            self.media_player.stop()
            self._loaded = False
            self._discard_pending()
            if uri is None:
                self.media_player.set_media(None)
                return
            if not uri:
                raise PlaybackError("Track has no playable URI", uri=uri)

            media = self.player.media_new(uri)
            if media is None:
                raise PlaybackError(f"Cannot open media: {uri}", uri=uri)
            self.media_player.set_media(media)
            self._uri = uri

            if self.media_player.play() == -1:
                raise PlaybackError(f"libvlc refused to play: {uri}", uri=uri)

    def play(self) -> None:
        if self.media_player.get_media() is not None:
            self.media_player.play()

    def pause(self) -> None:
        self.media_player.set_pause(1)

    def stop(self) -> None:
        self.media_player.stop()

    def seek_to(self, seconds: float) -> None:
        length = self.media_player.get_length()
        target = int(seconds * 1000)
        if length > 0:
            target = max(0, min(target, length))
        else:
            target = max(0, target)
        self.media_player.set_time(target)

    @property
    def status(self) -> AudioStatus:
        return self._snapshot()

    def release(self) -> None:
        """Release libvlc resources and stop the dispatcher."""
        self._events.put(_STOP)
        self._dispatcher.join(timeout=1.0)
        self.media_player.stop()
        self.media_player.set_media(None)
        self.media_player.release()
        self.player.release()
        log_player_action("vlc_cleanup", trigger_source="cleanup", description="VLC resources released")

    # ==================== libvlc events (libvlc thread) ====================

    def _on_playing(self, event):
        self._loaded = True
        self._events.put(self._snapshot())

    def _on_state_change(self, event):
        self._events.put(self._snapshot())

    def _on_end_reached(self, event):
        self._events.put(self._snapshot(did_just_finish=True))

    def _on_error(self, event):
        log_message(message_type="vlc_playback_error", uri=self._uri)
        self._loaded = False
        self._events.put(self._snapshot(error=True))

    # ==================== Dispatcher ====================

    def _snapshot(self, did_just_finish: bool = False, error: bool = False) -> AudioStatus:
        length_ms = self.media_player.get_length()
        time_ms = self.media_player.get_time()
        return AudioStatus(
            playing=bool(self.media_player.is_playing()) and not did_just_finish,
            current_time_sec=max(time_ms, 0) / 1000,
            duration_sec=max(length_ms, 0) / 1000,
            did_just_finish=did_just_finish,
            is_loaded=self._loaded,
            error=error,
            uri=self._uri,
        )

    def _discard_pending(self) -> None:
        """Drop queued statuses of the previously bound source."""
        while True:
            try:
                status = self._events.get_nowait()
            except queue.Empty:
                return
            if status is _STOP:
                self._events.put(_STOP)
                return

    def _dispatch_loop(self) -> None:
        while True:
            status = self._events.get()
            if status is _STOP:
                return
            try:
                self._emit(status)
            except PlaybackError as e:
                # Raised by an automatic advance; nobody else will see it
                log_message(message_type="vlc_dispatch_error", error=str(e), uri=e.uri)
