from tests.mocks.audio_mock import MockAudioBackend
from tests.mocks.vlc_mock import (
    MockEventManager,
    MockEventType,
    MockInstance,
    MockMedia,
    MockMediaPlayer,
)

__all__ = [
    'MockAudioBackend',
    'MockEventManager',
    'MockEventType',
    'MockInstance',
    'MockMedia',
    'MockMediaPlayer',
]
