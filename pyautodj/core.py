import logging
import random
from collections.abc import Iterable

from pyautodj.audio import load_segment
from pyautodj.catalog import PathLike, Song, build_catalog
from pyautodj.console import print_plan, rich_console
from pyautodj.constants import DEFAULT_MAX_REPEATS, MIN_REPEATS
from pyautodj.effects import fade_to_silence
from pyautodj.exceptions import InvalidMaxRepeatsError, InvalidSongError, UnknownSongError
from pyautodj.graph import build_transitions
from pyautodj.planner import make_plan
from pyautodj.playback import AudioSink
from pyautodj.repeating import repeat_with_count
from pyautodj.segments import SongSegment


def parse_max_repeats(value) -> int:
    """Validates the exclusive upper bound of loop repeat counts."""
    try:
        max_repeats = int(value)
    except (TypeError, ValueError):
        raise InvalidMaxRepeatsError(value) from None
    if max_repeats <= MIN_REPEATS:
        raise InvalidMaxRepeatsError(value)
    return max_repeats


class AutoDJ:
    """High-level API access to pyautodj's catalog, planner and player."""

    def __init__(
        self,
        paths: Iterable[PathLike],
        max_repeats: int = DEFAULT_MAX_REPEATS,
        rng: random.Random | None = None,
    ):
        """Builds the catalog and its transition graph from a path inventory.

        Args:
            paths: Segment files and song archives to build the catalog from.
            max_repeats: Exclusive upper bound of loop repeat counts.
            rng: Process-wide random source. Defaults to an unseeded one.
        """
        self.max_repeats = parse_max_repeats(max_repeats)
        self.rng = rng or random.Random()
        self.songs = build_catalog(paths)
        for song_id in sorted(self.songs):
            try:
                self.songs[song_id].validate()
            except InvalidSongError as e:
                logging.warning(f"{e}. Dropping.")
                del self.songs[song_id]
        build_transitions(self.songs)

    def song(self, song_id: str) -> Song:
        try:
            return self.songs[song_id]
        except KeyError:
            raise UnknownSongError(song_id) from None

    def choose_song(self, override: str | None = None) -> Song:
        if override is not None:
            return self.song(override)
        return self.songs[self.rng.choice(sorted(self.songs))]

    def make_plan(self, song: Song) -> list[SongSegment]:
        return make_plan(song, self.rng)

    def repeat_count(self, segment: SongSegment) -> int:
        if segment.is_loop:
            return self.rng.randint(MIN_REPEATS, self.max_repeats - 1)
        return 1

    def queue_song(self, song: Song, sink: AudioSink, debug_wait_each_segment: bool = False) -> list[SongSegment]:
        """Plans one playthrough of ``song`` and queues its segments on ``sink``.

        Returns:
            The plan that was queued.
        """
        rich_console.print(f"Now playing: [bold]{song.id}[/].")
        plan = self.make_plan(song)
        print_plan(song, plan)

        for segment in plan:
            audio = sink.conform(load_segment(song, segment))
            if debug_wait_each_segment:
                rich_console.print(f"[dim]Playing segment: {segment.id}.[/]")
            count = self.repeat_count(segment)
            if segment.is_loop:
                rich_console.print(f"Repeating [bold]{segment.id}[/] {count} times.")
            sink.append(repeat_with_count(audio, count))
            if debug_wait_each_segment:
                sink.sleep_until_end()

        if not song.has_end:
            last = sink.conform(load_segment(song, plan[-1]))
            sink.append(repeat_with_count(fade_to_silence(last), 1))

        return plan

    def play_forever(
        self,
        sink: AudioSink,
        override: str | None = None,
        debug_wait_each_segment: bool = False,
    ) -> None:
        """Plays random playthroughs back to back until the process is stopped."""
        if override is not None:
            self.song(override)
        while True:
            song = self.choose_song(override)
            self.queue_song(song, sink, debug_wait_each_segment=debug_wait_each_segment)
            sink.sleep_until_end()
