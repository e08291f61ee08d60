"""
Catalog building - groups a path inventory into songs.

Each plain segment file or song archive contributes segments to the song named
by its file name. Junk files in the songs directory are skipped with a warning;
two files resolving to the same song and segment abort the whole build.
"""

from __future__ import annotations

import logging
import os
import zipfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from pyautodj.constants import (
    END_SEGMENT,
    FIRST_NUMBERED_LOOP,
    LOOP_SEGMENT,
    START_SEGMENT,
)
from pyautodj.exceptions import (
    ArchiveReadError,
    DuplicateSegmentError,
    InvalidFileNameError,
    InvalidSongError,
    PathNotUnicodeError,
    UnrecognizedFormatError,
)
from pyautodj.segments import (
    FileType,
    SongSegment,
    detect_file_type,
    is_dedicated_transition,
    is_end,
    is_numbered_loop,
    parse_segment,
    song_id_from_archive_name,
    song_id_from_file_name,
    transition_target,
)

PathLike = str | bytes | os.PathLike


@dataclass
class Song:
    """A song and the segments it can be assembled from.

    ``location`` is the song archive for archived songs, and the directory
    holding the segment files otherwise.
    """

    id: str
    segments: dict[str, SongSegment] = field(default_factory=dict)
    has_end: bool = False
    has_global_ending: bool = False
    has_multiple_loops: bool = False
    has_dedicated_transitions: bool = False
    is_archive: bool = False
    location: str = ""

    def add_segment(self, segment: SongSegment) -> None:
        """Inserts a segment and updates the song-level flags.

        Raises:
            DuplicateSegmentError: if the song already has a segment with this id.
        """
        if segment.id in self.segments:
            raise DuplicateSegmentError(self.id, segment.id)

        if is_end(segment.id):
            self.has_end = True
        if segment.id == END_SEGMENT:
            self.has_global_ending = True
        if is_numbered_loop(segment.id):
            self.has_multiple_loops = True
        if is_dedicated_transition(segment.id):
            self.has_dedicated_transitions = True

        self.segments[segment.id] = segment

    @property
    def start(self) -> SongSegment:
        try:
            return self.segments[START_SEGMENT]
        except KeyError:
            raise InvalidSongError(f'song "{self.id}" has no "{START_SEGMENT}" segment') from None

    def validate(self) -> None:
        """Checks that the song has the segments its flags promise."""
        if START_SEGMENT not in self.segments:
            raise InvalidSongError(f'song "{self.id}" has no "{START_SEGMENT}" segment')

        first_loop = FIRST_NUMBERED_LOOP if self.has_multiple_loops else LOOP_SEGMENT
        if first_loop not in self.segments:
            raise InvalidSongError(f'song "{self.id}" has no "{first_loop}" segment')

        if self.has_end and not any(is_end(segment_id) for segment_id in self.segments):
            raise InvalidSongError(f'song "{self.id}" has no ending segment')

        for segment_id in self.segment_ids():
            if is_dedicated_transition(segment_id) and transition_target(segment_id) not in self.segments:
                raise InvalidSongError(
                    f'song "{self.id}" has no "{transition_target(segment_id)}" segment for "{segment_id}"'
                )

    def segment_ids(self) -> list[str]:
        return sorted(self.segments)


def decode_file_name(path: PathLike) -> str:
    """Returns the base name of ``path`` as text.

    Raises:
        PathNotUnicodeError: if the name is not valid Unicode.
    """
    path = os.fspath(path)
    name = os.path.basename(path)
    try:
        if isinstance(name, bytes):
            return name.decode("utf-8")
        # Undecodable bytes come back from os.listdir as lone surrogates
        name.encode("utf-8")
    except UnicodeError:
        raise PathNotUnicodeError(path) from None
    return name


def list_archive_entries(path: PathLike) -> list[str]:
    """Lists the file entries of a song archive, skipping directories."""
    try:
        with zipfile.ZipFile(path) as archive:
            return [info.filename for info in archive.infolist() if not info.is_dir()]
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveReadError(f'"{os.fsdecode(path)}" could not be read as a song archive') from e


def build_catalog(
    paths: Iterable[PathLike],
    list_archive: Callable[[PathLike], list[str]] = list_archive_entries,
) -> dict[str, Song]:
    """Builds one Song per distinct song id found in ``paths``.

    Args:
        paths: Plain segment files and/or song archives, in enumeration order.
        list_archive: Returns the entry names of a song archive.

    Returns:
        Mapping of song id to Song. Transitions are not built yet.

    Raises:
        DuplicateSegmentError: if two files resolve to the same song and segment.
        ArchiveReadError: if a song archive cannot be listed.
        InvalidSongError: if a song is both archived and stored as loose files.
    """
    songs: dict[str, Song] = {}

    for path in paths:
        try:
            file_name = decode_file_name(path)
            file_type = detect_file_type(file_name)
        except (PathNotUnicodeError, UnrecognizedFormatError) as e:
            logging.warning(f"{e}. Dropping.")
            continue

        location = os.fsdecode(path)

        if file_type is FileType.SEGMENT:
            try:
                song_id = song_id_from_file_name(file_name)
                segment = parse_segment(file_name)
            except (InvalidFileNameError, UnrecognizedFormatError) as e:
                logging.warning(f"{e}. Dropping.")
                continue
            song = songs.setdefault(
                song_id, Song(id=song_id, location=os.path.dirname(location))
            )
            if song.is_archive:
                raise InvalidSongError(f'song "{song_id}" has both an archive and loose segment files')
            song.add_segment(segment)
        else:
            try:
                song_id = song_id_from_archive_name(file_name)
            except InvalidFileNameError as e:
                logging.warning(f"{e}. Dropping.")
                continue
            logging.info(f"Encountered archive {song_id}.")
            if song_id in songs:
                raise InvalidSongError(f'song "{song_id}" has both an archive and loose segment files')
            song = songs[song_id] = Song(id=song_id, is_archive=True, location=location)
            for entry_name in list_archive(path):
                entry_name = os.path.basename(entry_name)
                try:
                    if detect_file_type(entry_name) is not FileType.SEGMENT:
                        raise UnrecognizedFormatError(entry_name)
                    segment = parse_segment(entry_name)
                except (InvalidFileNameError, UnrecognizedFormatError) as e:
                    logging.warning(f"{song_id}.zip: {e}. Dropping.")
                    continue
                song.add_segment(segment)

    for song in songs.values():
        logging.debug(f"Song {song.id}: {', '.join(song.segment_ids())}")
    logging.info(f"Found {len(songs)} songs.")

    return songs
