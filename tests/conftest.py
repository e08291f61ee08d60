"""
Shared pytest fixtures for pyautodj tests.

Songs are described by file names only; nothing here touches real audio or an
output device.
"""

import random

import numpy as np
import pytest

from pyautodj.audio import SegmentAudio
from pyautodj.catalog import Song, build_catalog
from pyautodj.graph import build_transitions

SCENARIO_PATHS = [
    "songs/song_1_start.ogg",
    "songs/song_1_loop.ogg",
    "songs/song_1_end.ogg",
    "songs/song_2_start.ogg",
    "songs/song_2_loop0.ogg",
    "songs/song_2_loop1.ogg",
    "songs/song_2_end.ogg",
    "songs/y3_start.ogg",
    "songs/y3_loop0.ogg",
    "songs/y3_loop0-to-1.ogg",
    "songs/y3_loop1.ogg",
    "songs/y3_end.ogg",
    "songs/song_wav_start.wav",
    "songs/song_wav_loop.wav",
    "songs/song_wav_end.wav",
]


def build_song(paths: list[str]) -> Song:
    """Builds the catalog and graph for paths that all belong to one song."""
    songs = build_catalog(paths)
    build_transitions(songs)
    assert len(songs) == 1
    return next(iter(songs.values()))


def generate_song_paths(
    rng: random.Random,
    max_loop_count: int,
    has_end: bool,
    with_transitions: bool | None = None,
) -> list[str]:
    """Generates the file names of a random, well-formed song.

    A single loop is named ``loop``; several are ``loop0..loopN``. Songs with an
    ending get a global ``end``, or, when they have several loops and no
    dedicated transitions, sometimes a ``loop<N>-end`` for their last loop.
    """
    song_id = f"gen{rng.randrange(10_000)}"
    loop_count = rng.randint(1, max_loop_count)
    names = ["start"]
    if loop_count == 1:
        names.append("loop")
    else:
        names.extend(f"loop{i}" for i in range(loop_count))

    if with_transitions is None:
        with_transitions = rng.random() < 0.5
    has_transitions = False
    if with_transitions and loop_count > 1:
        wanted = rng.randint(1, loop_count * (loop_count - 1))
        pairs = [(f, t) for f in range(loop_count) for t in range(loop_count) if f != t]
        for f, t in rng.sample(pairs, min(wanted, len(pairs))):
            names.append(f"loop{f}-to-{t}")
        has_transitions = True

    if has_end:
        if loop_count > 1 and not has_transitions and rng.random() < 0.5:
            names.append(f"loop{loop_count - 1}-end")
        else:
            names.append("end")

    rng.shuffle(names)
    return [f"songs/{song_id}_{name}.ogg" for name in names]


@pytest.fixture
def scenario_songs():
    songs = build_catalog(SCENARIO_PATHS)
    build_transitions(songs)
    return songs


@pytest.fixture
def make_audio():
    def _make_audio(frames: int = 1000, channels: int = 1, rate: int = 44100) -> SegmentAudio:
        data = np.linspace(-1.0, 1.0, frames * channels, dtype=np.float32).reshape(frames, channels)
        return SegmentAudio(data, rate, name="test")

    return _make_audio
