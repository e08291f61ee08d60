"""
Segment naming - file name parsing and segment id classification.

A plain segment file is named ``<song_id>_<segment_id>.<ext>``; a song archive
is ``<song_id>.zip`` and holds entries named ``<segment_id>.<ext>``.
Segment ids follow the grammar::

    start | end | loop | loop<N> | loop<N>-end | loop<F>-to-<T>
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from pyautodj.constants import (
    ARCHIVE_FORMAT,
    END_SEGMENT,
    LOOP_SEGMENT,
    SEGMENT_FORMATS,
    START_SEGMENT,
)
from pyautodj.exceptions import InvalidFileNameError, UnrecognizedFormatError

LOOP_PATTERN = re.compile(r"loop(\d+)?$")
DEDICATED_TRANSITION_PATTERN = re.compile(r"loop(\d+)-to-(\d+)")


class FileType(enum.Enum):
    SEGMENT = "segment"
    ARCHIVE = "archive"


class SegmentKind(enum.Enum):
    START = "start"
    LOOP = "loop"
    NUMBERED_LOOP = "numbered_loop"
    DEDICATED_TRANSITION = "dedicated_transition"
    END = "end"
    LOOP_END = "loop_end"
    UNKNOWN = "unknown"


# ============================================================================
# PREDICATES
# ============================================================================

def is_dedicated_transition(segment_id: str) -> bool:
    return DEDICATED_TRANSITION_PATTERN.search(segment_id) is not None


def is_loop(segment_id: str) -> bool:
    """True for ``loop`` and ``loop<N>``, never for a dedicated transition."""
    return (
        LOOP_PATTERN.search(segment_id) is not None
        and not is_dedicated_transition(segment_id)
    )


def is_numbered_loop(segment_id: str) -> bool:
    return segment_id != LOOP_SEGMENT and LOOP_PATTERN.search(segment_id) is not None


def is_end(segment_id: str) -> bool:
    return segment_id.endswith(END_SEGMENT)


def transition_target(segment_id: str) -> str:
    """Returns the loop a dedicated transition leads into, e.g. ``loop0-to-1`` -> ``loop1``."""
    match = DEDICATED_TRANSITION_PATTERN.search(segment_id)
    if match is None:
        raise ValueError(f'"{segment_id}" is not a dedicated transition')
    return f"{LOOP_SEGMENT}{match.group(2)}"


def classify(segment_id: str) -> SegmentKind:
    if segment_id == START_SEGMENT:
        return SegmentKind.START
    if segment_id == END_SEGMENT:
        return SegmentKind.END
    if is_dedicated_transition(segment_id):
        return SegmentKind.DEDICATED_TRANSITION
    if is_end(segment_id):
        return SegmentKind.LOOP_END
    if segment_id == LOOP_SEGMENT:
        return SegmentKind.LOOP
    if is_loop(segment_id):
        return SegmentKind.NUMBERED_LOOP
    return SegmentKind.UNKNOWN


@dataclass(frozen=True)
class SongSegment:
    """One playable audio unit of a song.

    ``allowed_transitions`` stays empty until the transition graph is built,
    after which the segment is replaced rather than mutated.
    """

    id: str
    format: str
    allowed_transitions: frozenset[str] = frozenset()
    kind: SegmentKind = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", classify(self.id))

    @property
    def is_loop(self) -> bool:
        return self.kind in (SegmentKind.LOOP, SegmentKind.NUMBERED_LOOP)

    @property
    def is_dedicated_transition(self) -> bool:
        return self.kind is SegmentKind.DEDICATED_TRANSITION

    @property
    def is_end(self) -> bool:
        return is_end(self.id)

    @property
    def file_name(self) -> str:
        return f"{self.id}.{self.format}"


# ============================================================================
# FILE NAMES
# ============================================================================

def _extension(file_name: str) -> str:
    return file_name.rsplit(".", 1)[-1]


def detect_file_type(file_name: str) -> FileType:
    extension = _extension(file_name)
    if extension in SEGMENT_FORMATS:
        return FileType.SEGMENT
    if extension == ARCHIVE_FORMAT:
        return FileType.ARCHIVE
    raise UnrecognizedFormatError(file_name)


def song_id_from_file_name(file_name: str) -> str:
    """Every underscore-delimited token except the last, e.g. ``song_1_start.ogg`` -> ``song_1``."""
    song_id = "_".join(file_name.split("_")[:-1])
    if not song_id:
        raise InvalidFileNameError(file_name)
    return song_id


def song_id_from_archive_name(file_name: str) -> str:
    song_id = file_name.split(".")[0]
    if not song_id:
        raise InvalidFileNameError(file_name)
    return song_id


def parse_segment(file_name: str) -> SongSegment:
    """Parses the segment id and format out of a segment file or archive entry name.

    Args:
        file_name: ``<song_id>_<segment_id>.<ext>`` or, inside an archive, ``<segment_id>.<ext>``.

    Returns:
        A SongSegment with no transitions.
    """
    segment_token = file_name.split("_")[-1]
    segment_id, _, segment_format = segment_token.partition(".")
    if not segment_id:
        raise InvalidFileNameError(file_name)
    if not segment_format:
        raise UnrecognizedFormatError(file_name)
    return SongSegment(id=segment_id, format=segment_format.split(".")[0])
