"""
Fade effects applied to decoded segments before they are queued.

Songs without an ending do not stop abruptly: their last segment is played
once more, fading into silence.
"""

from __future__ import annotations

import numpy as np

from pyautodj.audio import SegmentAudio
from pyautodj.constants import FADE_OUT_SECONDS


def fade_out(audio: np.ndarray, fade_length: int) -> np.ndarray:
    """Apply fade-out effect to audio."""
    if fade_length <= 0 or fade_length > len(audio):
        return audio

    result = audio.copy()
    fade_curve = np.linspace(1.0, 0.0, fade_length, dtype=audio.dtype)

    if len(audio.shape) == 1:
        result[-fade_length:] *= fade_curve
    else:
        # Broadcast the curve across all channels
        result[-fade_length:] *= fade_curve[:, np.newaxis]

    return result


def fade_to_silence(audio: SegmentAudio, seconds: float = FADE_OUT_SECONDS) -> SegmentAudio:
    """Crossfades the beginning of ``audio`` into silence over ``seconds``.

    The result is at most ``seconds`` long; a shorter segment fades over its
    whole length.
    """
    window = min(audio.seconds_to_samples(seconds), audio.length)
    faded = fade_out(audio.playback_audio[:window], window)
    return SegmentAudio(faded, audio.rate, name=f"{audio.name} (fade out)")
