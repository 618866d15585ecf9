from core.audio import AudioBackend, PlaybackError
from core.models import AudioStatus


class MockAudioBackend(AudioBackend):
    """Mock AudioBackend for unit testing.

    Simulates an audio primitive without actual playback. Status updates are
    pushed synchronously to the registered callback, like a backend whose
    events were already marshalled onto the caller's thread.
    """

    def __init__(self, auto_ready: bool = True):
        super().__init__()
        self.auto_ready = auto_ready  # Report "loaded" as soon as a URI is bound
        self.fail_uris: set[str] = set()
        self.bound_uri = None
        self.bind_history: list[str | None] = []
        self.seek_history: list[float] = []
        self._playing = False
        self._time = 0.0  # seconds
        self._length = 180.0  # Default 3 minutes
        self._loaded = False

    def bind(self, uri):
        self.bind_history.append(uri)
        if uri in self.fail_uris:
            self.bound_uri = None
            self._loaded = False
            raise PlaybackError(f"Cannot open media: {uri}", uri=uri)

        self.bound_uri = uri
        self._time = 0.0
        self._loaded = False
        self._playing = uri is not None
        if uri is not None and self.auto_ready:
            self._ready()

    def play(self):
        self._playing = True

    def pause(self):
        self._playing = False

    def stop(self):
        self._playing = False
        self._time = 0.0

    def seek_to(self, seconds):
        self.seek_history.append(seconds)
        self._time = max(0.0, min(seconds, self._length))

    @property
    def status(self):
        return AudioStatus(
            playing=self._playing,
            current_time_sec=self._time,
            duration_sec=self._length if self._loaded else 0.0,
            is_loaded=self._loaded,
            uri=self.bound_uri,
        )

    # Test helper methods (not part of the AudioBackend interface)
    def _ready(self):
        """Report the bound source as loaded."""
        self._loaded = True
        self._emit(self.status)

    def _set_length(self, seconds):
        self._length = seconds

    def _simulate_playback(self, seconds):
        """Advance playback, reporting end of track when the length is reached."""
        if not self._playing or self.bound_uri is None:
            return
        self._time = min(self._time + seconds, self._length)
        if self._time >= self._length:
            self._finish()
        else:
            self._emit(self.status)

    def _finish(self):
        """Report that the bound track just finished."""
        self._playing = False
        self._time = self._length
        self._emit(
            AudioStatus(
                playing=False,
                current_time_sec=self._length,
                duration_sec=self._length,
                did_just_finish=True,
                is_loaded=True,
                uri=self.bound_uri,
            )
        )

    def _fail_source(self):
        """Report that the bound source failed after loading started."""
        self._playing = False
        self._loaded = False
        self._emit(AudioStatus(error=True, uri=self.bound_uri))
