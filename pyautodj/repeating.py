"""Bounded repetition of a decoded segment without re-reading or re-decoding it."""

from __future__ import annotations

import numpy as np

from pyautodj.audio import SegmentAudio


class RepeatingSource:
    """A source that plays a decoded buffer ``count`` times, then stops.

    The buffer is shared, never copied: every pass (and every copy of the
    source) reads the same array with its own cursor.
    """

    __slots__ = ("_buffer", "rate", "count", "count_remaining", "_position")

    def __init__(self, buffer: np.ndarray, rate: int, count: int) -> None:
        if count < 1:
            raise ValueError(f"Repeat count must be at least 1, got {count}.")
        self._buffer = buffer[:, np.newaxis] if buffer.ndim == 1 else buffer
        self.rate = rate
        self.count = count
        self.count_remaining = count
        self._position = 0

    @property
    def length(self) -> int:
        """Frames in a single pass."""
        return self._buffer.shape[0]

    def _current_pass_frames(self) -> int:
        return self.length - self._position

    def current_frame_len(self) -> int:
        """Frames left before the next boundary, looking past an exhausted pass."""
        remaining = self._current_pass_frames()
        if remaining == 0 and self.count_remaining > 1:
            return self.length
        return remaining

    @property
    def channels(self) -> int:
        return self._buffer.shape[1]

    @property
    def sample_rate(self) -> int:
        return self.rate

    @property
    def total_frames(self) -> int:
        return self.length * self.count

    @property
    def total_duration(self) -> float:
        return self.total_frames / self.rate

    def _rewind(self) -> bool:
        if self.count_remaining <= 1:
            return False
        self.count_remaining -= 1
        self._position = 0
        return True

    def read(self, frames: int) -> np.ndarray:
        """Returns up to ``frames`` frames, shape (n, channels); empty once exhausted."""
        chunks = []
        needed = frames
        while needed > 0:
            available = self._current_pass_frames()
            if available == 0:
                if not self._rewind() or self.length == 0:
                    break
                continue
            take = min(needed, available)
            chunks.append(self._buffer[self._position : self._position + take])
            self._position += take
            needed -= take

        if not chunks:
            return self._buffer[:0]
        if len(chunks) == 1:
            return chunks[0]
        return np.concatenate(chunks)

    def __iter__(self) -> RepeatingSource:
        return self

    def __next__(self) -> np.ndarray:
        if self._current_pass_frames() == 0 and (not self._rewind() or self.length == 0):
            raise StopIteration
        frame = self._buffer[self._position]
        self._position += 1
        return frame

    def copy(self) -> RepeatingSource:
        """Cheap clone: shares the decoded buffer, keeps an independent cursor and count."""
        clone = RepeatingSource.__new__(RepeatingSource)
        clone._buffer = self._buffer
        clone.rate = self.rate
        clone.count = self.count
        clone.count_remaining = self.count_remaining
        clone._position = self._position
        return clone

    __copy__ = copy


def repeat_with_count(audio: SegmentAudio, count: int) -> RepeatingSource:
    """Wraps a decoded segment so it plays ``count`` times in a row."""
    return RepeatingSource(audio.playback_audio, audio.rate, count)
