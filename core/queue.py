import random
from core.logging import log_queue_operation, queue_logger
from core.models import RepeatMode, Track
from eliot import start_action


class PlayQueue:
    """Ordered play queue with a lossless shuffle (in-memory, session-only).

    ``items`` is the order currently played; ``original_items`` is the
    pre-shuffle order, so shuffle can always be undone.
    """

    def __init__(self):
        self.items: list[Track] = []
        self.original_items: list[Track] = []
        self.current_index = 0
        self.is_shuffled = False

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    def replace(self, tracks: list[Track]) -> None:
        """Replace both orders with ``tracks``.

        The shuffle flag is left as is; the new contents start unshuffled.

        Args:
            tracks: New queue contents, in play order
        """
        log_queue_operation("replace", count=len(tracks), shuffle_flag=self.is_shuffled)

        self.items = list(tracks)
        self.original_items = list(tracks)
        self.current_index = 0

    def append(self, track: Track) -> None:
        """Append a track to the end of both orders.

        A track added while shuffled lands at the tail; it is not shuffled in.
        """
        log_queue_operation("append", track_id=track.id, queue_size=len(self.items))

        self.items.append(track)
        self.original_items.append(track)

    def current(self) -> Track | None:
        """Get the current track, or None if the queue is empty."""
        if 0 <= self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    def index_of(self, track_id: str, in_original: bool = False) -> int:
        """Find a track by id.

        Returns:
            Index of the first match, or -1 if not found
        """
        items = self.original_items if in_original else self.items
        for i, track in enumerate(items):
            if track.id == track_id:
                return i
        return -1

    def shuffle_keep_current(self, rng: random.Random | None = None) -> None:
        """Shuffle the queue, pinning the current track at position 0.

        The remaining tracks are Fisher-Yates shuffled and ``current_index``
        becomes 0. ``original_items`` is left untouched.

        Args:
            rng: Random source (defaults to the module-level generator)
        """
        rng = rng or random
        self.is_shuffled = True
        if not self.items:
            return

        with start_action(queue_logger, "shuffle_queue", count=len(self.items)):
            current = self.current()
            if current is None:
                current, self.current_index = self.items[0], 0
            rest = [t for i, t in enumerate(self.items) if i != self.current_index]

            for i in range(len(rest) - 1, 0, -1):
                j = rng.randint(0, i)
                rest[i], rest[j] = rest[j], rest[i]

            log_queue_operation("shuffle", count=len(self.items), pinned=current.id)

            self.items = [current, *rest]
            self.current_index = 0

    def unshuffle(self) -> None:
        """Restore the original order and relocate the current track by id."""
        current = self.current()
        self.items = list(self.original_items)
        self.is_shuffled = False

        if current is None:
            self.current_index = 0
            return

        index = self.index_of(current.id, in_original=True)
        self.current_index = index if index >= 0 else 0

        log_queue_operation("unshuffle", count=len(self.items), current_index=self.current_index)

    def next_index(self, repeat_mode: RepeatMode) -> int | None:
        """Get the index a manual "next" moves to.

        Returns:
            Next index, 0 when wrapping under repeat-all, or None to stay put
        """
        if not self.items:
            return None

        next_idx = self.current_index + 1
        if next_idx >= len(self.items):
            return 0 if repeat_mode is RepeatMode.ALL else None
        return next_idx

    def previous_index(self, repeat_mode: RepeatMode) -> int | None:
        """Get the index a manual "previous" moves to.

        Before the first track this wraps to the last under repeat-all,
        otherwise it clamps to 0.
        """
        if not self.items:
            return None

        prev_idx = self.current_index - 1
        if prev_idx < 0:
            prev_idx = len(self.items) - 1 if repeat_mode is RepeatMode.ALL else 0
        return prev_idx

    def is_last(self) -> bool:
        return self.current_index >= len(self.items) - 1
