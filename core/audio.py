"""Audio backend interface consumed by the playback controller."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from core.models import AudioStatus

StatusCallback = Callable[[AudioStatus], None]


class PlaybackError(Exception):
    """Raised when an audio backend cannot load or control a source."""

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message)
        self.uri = uri


class AudioBackend(ABC):
    """Platform audio primitive.

    Implementations own decoding and output. Binding a URI loads it and
    starts playback; status changes are pushed to the registered callback.
    """

    def __init__(self):
        self._status_callback: StatusCallback | None = None

    def set_status_callback(self, callback: StatusCallback | None) -> None:
        self._status_callback = callback

    def _emit(self, status: AudioStatus) -> None:
        if self._status_callback is not None:
            self._status_callback(status)

    @abstractmethod
    def bind(self, uri: str | None) -> None:
        """(Re)load a source and autoplay it; None unbinds.

        Raises:
            PlaybackError: If the source cannot be loaded
        """

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def seek_to(self, seconds: float) -> None:
        """Seek within the bound source. Clamping is up to the backend."""

    @property
    @abstractmethod
    def status(self) -> AudioStatus: ...
