import random
import threading
from collections.abc import Callable
from core.audio import AudioBackend, PlaybackError
from core.logging import controls_logger, log_error, log_player_action
from core.models import AudioStatus, PlaybackState, RepeatMode, Track
from core.queue import PlayQueue
from eliot import log_message, start_action

DEFAULT_RESTART_THRESHOLD_MS = 3000

StateListener = Callable[[PlaybackState], None]
TrackListener = Callable[[Track], None]


class PlaybackQueueController:
    """Owns the play queue and transport state and drives an AudioBackend.

    All operations are serialized with a reentrant lock, since backends
    report status from their own threads.
    """

    def __init__(
        self,
        backend: AudioBackend,
        repeat_mode: RepeatMode = RepeatMode.OFF,
        restart_threshold_ms: int = DEFAULT_RESTART_THRESHOLD_MS,
        rng: random.Random | None = None,
    ):
        self.backend = backend
        self.queue = PlayQueue()
        self.current_track: Track | None = None
        self.is_playing = False
        self.is_loading = False
        self.position = 0  # milliseconds
        self.duration = 0  # milliseconds
        self.repeat_mode = repeat_mode
        self.restart_threshold_ms = restart_threshold_ms
        self._rng = rng or random.Random()
        self._bound_uri: str | None = None
        self._listeners: list[StateListener] = []
        self._track_listeners: list[TrackListener] = []
        self._lock = threading.RLock()

        self.backend.set_status_callback(self.handle_status)

    # ==================== State ====================

    @property
    def current_index(self) -> int | None:
        return self.queue.current_index if self.queue else None

    @property
    def is_shuffled(self) -> bool:
        return self.queue.is_shuffled

    @property
    def state(self) -> PlaybackState:
        """Snapshot of the current playback state."""
        with self._lock:
            return PlaybackState(
                current_track=self.current_track,
                current_index=self.current_index,
                queue=tuple(self.queue.items),
                is_playing=self.is_playing,
                position=self.position,
                duration=self.duration,
                is_shuffled=self.is_shuffled,
                repeat_mode=self.repeat_mode,
                is_loading=self.is_loading,
            )

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with a fresh snapshot after every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_track_listener(self, listener: TrackListener) -> None:
        """Register a callback invoked with each track that starts playing from the top."""
        self._track_listeners.append(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    # ==================== Queue population ====================

    def play_track(self, track: Track, playlist: list[Track] | None = None) -> None:
        """Play a track, optionally within the context of a playlist.

        The queue becomes ``playlist`` (or just ``[track]``); playback starts
        at the track's position in it, or at 0 if it is not there.
        """
        with self._lock, start_action(controls_logger, "play_track"):
            new_queue = list(playlist) if playlist else [track]
            self.queue.replace(new_queue)

            index = self.queue.index_of(track.id)
            if index < 0:
                log_player_action(
                    "play_track_not_in_playlist",
                    trigger_source="gui",
                    track_id=track.id,
                    description=f"{track.display_name} not in playlist, starting from the top",
                )
                index = 0

            self._load_track(self.queue.items[index], index)

    def play_playlist(self, tracks: list[Track], start_index: int = 0) -> None:
        """Replace the queue with ``tracks`` and play from ``start_index``."""
        if not tracks:
            return

        with self._lock, start_action(controls_logger, "play_playlist"):
            if not 0 <= start_index < len(tracks):
                start_index = 0
            self.queue.replace(tracks)
            self._load_track(tracks[start_index], start_index)

    def add_to_queue(self, track: Track) -> None:
        """Append a track to the end of the queue."""
        with self._lock:
            self.queue.append(track)
            log_player_action(
                "add_to_queue",
                trigger_source="gui",
                track=track.display_name,
                queue_size=len(self.queue),
            )
            self._notify()

    # ==================== Transport ====================

    def toggle_play_pause(self) -> None:
        """Toggle play/pause state."""
        with self._lock:
            if self._bound_uri is None:
                return

            track = self.current_track.display_name if self.current_track else "No track"
            with start_action(controls_logger, "play_pause"):
                log_player_action(
                    "play_pause_pressed",
                    trigger_source="gui",
                    old_state="playing" if self.is_playing else "paused",
                    new_state="paused" if self.is_playing else "playing",
                    track=track,
                )

                if self.is_playing:
                    self.backend.pause()
                    self.is_playing = False
                else:
                    self.backend.play()
                    self.is_playing = True
            self._notify()

    def seek_to(self, position_ms: int) -> None:
        """Seek within the current track.

        The position is passed through unclamped; the backend clamps.
        """
        with self._lock:
            if self._bound_uri is None:
                return

            log_player_action(
                "seek_operation",
                trigger_source="gui",
                old_position=self.position,
                new_position=position_ms,
                duration=self.duration,
            )
            self.backend.seek_to(position_ms / 1000)
            self.position = position_ms
            self._notify()

    def stop(self) -> None:
        """Stop playback, keeping the current track and queue."""
        with self._lock:
            if self._bound_uri is None:
                return

            with start_action(controls_logger, "stop_playback"):
                log_player_action(
                    "stop_playback",
                    trigger_source="gui",
                    was_playing=self.is_playing,
                    track=self.current_track.display_name if self.current_track else "",
                )
                self.backend.stop()
                self.is_playing = False
                self.position = 0
            self._notify()

    def play_next(self) -> None:
        """Play the next track in the queue."""
        with self._lock:
            if not self.queue:
                log_player_action(
                    "next_song_no_queue",
                    trigger_source="gui",
                    reason="queue_empty",
                    description="Next pressed but queue is empty",
                )
                return

            with start_action(controls_logger, "next_song"):
                next_index = self.queue.next_index(self.repeat_mode)
                if next_index is None:
                    log_player_action(
                        "next_song_at_end",
                        trigger_source="gui",
                        reason="last_song_and_repeat_off",
                        current_index=self.queue.current_index,
                    )
                    return

                self._load_track(self.queue.items[next_index], next_index)

    def play_previous(self) -> None:
        """Restart the current track, or go to the previous one near its start."""
        with self._lock:
            if not self.queue:
                log_player_action(
                    "previous_song_no_queue",
                    trigger_source="gui",
                    reason="queue_empty",
                    description="Previous pressed but queue is empty",
                )
                return

            with start_action(controls_logger, "previous_song"):
                if self.position > self.restart_threshold_ms:
                    log_player_action(
                        "previous_restarts_track",
                        trigger_source="gui",
                        position=self.position,
                        threshold=self.restart_threshold_ms,
                    )
                    self.backend.seek_to(0)
                    self.position = 0
                    self._notify()
                    return

                prev_index = self.queue.previous_index(self.repeat_mode)
                self._load_track(self.queue.items[prev_index], prev_index)

    # ==================== Modes ====================

    def toggle_shuffle(self) -> bool:
        """Toggle shuffle mode and return the new state.

        Enabling pins the current track first and shuffles the rest;
        disabling restores the original order around the current track.
        """
        with self._lock, start_action(controls_logger, "toggle_shuffle"):
            old_state = self.queue.is_shuffled
            if old_state:
                self.queue.unshuffle()
            else:
                self.queue.shuffle_keep_current(self._rng)

            log_player_action(
                "toggle_shuffle",
                trigger_source="gui",
                old_state=old_state,
                new_state=self.queue.is_shuffled,
                description=f"Shuffle mode {'enabled' if self.queue.is_shuffled else 'disabled'}",
            )
            self._notify()
            return self.queue.is_shuffled

    def toggle_repeat(self) -> RepeatMode:
        """Cycle the repeat mode (off -> all -> one -> off) and return it."""
        with self._lock:
            old_mode = self.repeat_mode
            self.repeat_mode = old_mode.next()
            log_player_action(
                "toggle_repeat",
                trigger_source="gui",
                old_state=old_mode.value,
                new_state=self.repeat_mode.value,
                description=f"Repeat mode {self.repeat_mode.value}",
            )
            self._notify()
            return self.repeat_mode

    def set_repeat_mode(self, mode: RepeatMode) -> None:
        """Set the repeat mode directly (restoring a saved preference)."""
        with self._lock:
            self.repeat_mode = RepeatMode(mode)
            self._notify()

    # ==================== Backend events ====================

    def handle_status(self, status: AudioStatus) -> None:
        """Apply a status update pushed by the backend."""
        with self._lock:
            if self._bound_uri is None:
                return
            if status.uri != self._bound_uri:
                log_message(message_type="status_update", event="stale_status_dropped", uri=status.uri)
                return

            if status.error:
                self._handle_source_error()
                return

            self.is_playing = status.playing
            self.position = int(status.current_time_sec * 1000)
            if status.duration_sec > 0:
                self.duration = int(status.duration_sec * 1000)
            if status.is_loaded and self.is_loading:
                self.is_loading = False
                log_message(message_type="status_update", event="track_ready", uri=self._bound_uri)

            if status.did_just_finish:
                self._handle_track_end()
            else:
                self._notify()

    def _handle_source_error(self) -> None:
        """The bound source failed after loading started (missing file, bad codec)."""
        error = PlaybackError(f"Cannot play {self._bound_uri}", uri=self._bound_uri)
        log_error(controls_logger, error, track_id=self.current_track.id if self.current_track else None, uri=error.uri)
        self.is_loading = False
        self.is_playing = False
        self._notify()

    def _handle_track_end(self) -> None:
        """Decide what plays after the current track finishes."""
        with start_action(controls_logger, "track_end"):
            if self.repeat_mode is RepeatMode.ONE:
                log_player_action("repeat_one_replay", trigger_source="automatic", track=self._track_name())
                self.backend.seek_to(0)
                self.backend.play()
                self.position = 0
                self.is_playing = True
            elif not self.queue.is_last():
                next_index = self.queue.current_index + 1
                self._load_track(self.queue.items[next_index], next_index, trigger_source="automatic")
                return
            elif self.repeat_mode is RepeatMode.ALL and self.queue:
                self._load_track(self.queue.items[0], 0, trigger_source="automatic")
                return
            else:
                log_player_action(
                    "end_of_queue",
                    trigger_source="automatic",
                    track=self._track_name(),
                    description="Reached end of queue, playback stopped",
                )
                self.is_playing = False
        self._notify()

    # ==================== Internals ====================

    def _load_track(self, track: Track, index: int, trigger_source: str = "gui") -> None:
        """Make ``track`` current and bind the backend to it (autoplays).

        ``is_loading`` stays set until the backend reports the source loaded.

        Raises:
            PlaybackError: If the backend cannot load the track's URI
        """
        self.current_track = track
        self.queue.current_index = index
        self.is_loading = True
        self.position = 0
        self.duration = track.duration * 1000

        with start_action(controls_logger, "play_file"):
            log_player_action(
                "playback_started",
                trigger_source=trigger_source,
                track=track.display_name,
                track_id=track.id,
                queue_position=f"{index + 1}/{len(self.queue)}",
                description=f"Started playing: {track.display_name}",
            )
            try:
                self._bound_uri = track.uri
                self.backend.bind(track.uri)
            except PlaybackError as e:
                log_error(controls_logger, e, track_id=track.id, uri=track.uri)
                self._bound_uri = None
                self.is_loading = False
                self.is_playing = False
                self._notify()
                raise

        self.is_playing = True
        for listener in list(self._track_listeners):
            listener(track)
        self._notify()

    def _track_name(self) -> str:
        return self.current_track.display_name if self.current_track else "No track"
