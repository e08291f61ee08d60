import io
import os
import zipfile

import lazy_loader as lazy
import numpy as np

from pyautodj.catalog import Song
from pyautodj.exceptions import SegmentLoadError
from pyautodj.segments import SongSegment

librosa = lazy.load("librosa")


class SegmentAudio:
    """Decoded audio of a single song segment, ready for playback."""

    __slots__ = (
        "name",
        "rate",
        "playback_audio",
        "n_channels",
        "length",
    )

    def __init__(self, playback_audio: np.ndarray, rate: int, name: str = "") -> None:
        # Playback audio is always shaped (samples, channels)
        if playback_audio.ndim == 1:
            playback_audio = playback_audio[:, np.newaxis]
        self.name = name
        self.rate = rate
        self.playback_audio = playback_audio
        self.n_channels = playback_audio.shape[1]
        self.length = playback_audio.shape[0]

    @property
    def total_duration(self) -> float:
        return self.length / self.rate

    def seconds_to_samples(self, seconds: float) -> int:
        return int(round(seconds * self.rate))

    def __repr__(self) -> str:
        return f"SegmentAudio({self.name!r}, rate={self.rate}, channels={self.n_channels}, length={self.length})"


def segment_path(song: Song, segment: SongSegment) -> str:
    """Returns where a segment lives: a file path, or ``archive.zip:entry`` for archived songs."""
    if song.is_archive:
        return f"{song.location}:{segment.file_name}"
    return os.path.join(song.location, f"{song.id}_{segment.file_name}")


def _read_archive_entry(archive_path: str, segment: SongSegment) -> bytes:
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            if not info.is_dir() and os.path.basename(info.filename).split("_")[-1] == segment.file_name:
                return archive.read(info)
    raise KeyError(segment.file_name)


def read_segment_bytes(song: Song, segment: SongSegment) -> bytes:
    """Reads the raw, still encoded bytes of a segment from its file or archive."""
    try:
        if song.is_archive:
            return _read_archive_entry(song.location, segment)
        with open(segment_path(song, segment), "rb") as f:
            return f.read()
    except (OSError, KeyError, zipfile.BadZipFile) as e:
        raise SegmentLoadError(
            f'"{segment_path(song, segment)}" could not be read.'
        ) from e


def decode_segment(data: bytes, name: str = "") -> SegmentAudio:
    """Decodes encoded segment bytes into playback audio."""
    try:
        raw_audio, sr = librosa.load(io.BytesIO(data), sr=None, mono=False)
    except Exception as e:
        raise SegmentLoadError(
            f"{name} could not be loaded. Invalid audio data or unsupported format."
        ) from e

    if raw_audio.size == 0:
        raise SegmentLoadError(f'No audio data could be loaded from "{name}".')

    return SegmentAudio(np.atleast_2d(raw_audio).T, int(sr), name=name)


def load_segment(song: Song, segment: SongSegment) -> SegmentAudio:
    return decode_segment(read_segment_bytes(song, segment), name=segment_path(song, segment))
