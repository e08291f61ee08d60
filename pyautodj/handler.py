from __future__ import annotations

import logging
import os
import random

from pyautodj.console import create_catalog_table, print_plan, print_status, rich_console
from pyautodj.constants import DEFAULT_MAX_REPEATS, DEFAULT_SONGS_DIR
from pyautodj.core import AutoDJ
from pyautodj.playback import AudioSink, check_output_device


class SongsDirHandler:
    """Builds an AutoDJ from the files of a songs directory and runs CLI actions on it."""

    def __init__(
        self,
        *,
        songs_dir: str = DEFAULT_SONGS_DIR,
        max_repeats: int | str = DEFAULT_MAX_REPEATS,
        seed: int | None = None,
        debug_wait_each_segment: bool = False,
        **kwargs,
    ):
        self.songs_dir = os.path.abspath(songs_dir)
        self.debug_wait_each_segment = debug_wait_each_segment
        paths = self.get_files_in_directory(self.songs_dir)
        logging.info(f'Scanning {len(paths)} files in "{self.songs_dir}".')
        self._autodj = AutoDJ(paths, max_repeats=max_repeats, rng=random.Random(seed))

    @property
    def autodj(self) -> AutoDJ:
        """Returns the handler's AutoDJ instance."""
        return self._autodj

    @staticmethod
    def get_files_in_directory(dir_path: str) -> list[str]:
        # Sorted so a seeded run sees the same enumeration order everywhere
        return sorted(
            os.path.join(dir_path, f)
            for f in os.listdir(dir_path)
            if os.path.isfile(os.path.join(dir_path, f))
        )

    def list_songs(self) -> None:
        rich_console.print(create_catalog_table(self.autodj.songs))

    def preview_plan(self, song_id: str) -> None:
        song = self.autodj.song(song_id)
        print_plan(song, self.autodj.make_plan(song))

    def play(self, override: str | None = None, device=None) -> None:
        if not self.autodj.songs:
            raise FileNotFoundError(f'No songs found in "{self.songs_dir}"')
        if override is not None:
            # Fail before touching the audio device
            self.autodj.song(override)
        check_output_device(device)
        print_status(f"Found {len(self.autodj.songs)} songs.", "success")
        rich_console.print("(Press [red]Ctrl+C[/] to stop playback.)")

        sink = AudioSink(device=device)
        try:
            self.autodj.play_forever(
                sink,
                override=override,
                debug_wait_each_segment=self.debug_wait_each_segment,
            )
        finally:
            sink.close()
