"""
Transition graph - which segment may follow which.

Runs once per song after the catalog is complete, so the song-level flags are
final. Every song's transitions are computed from a snapshot of its segments
and the segment map is replaced as a whole.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from pyautodj.catalog import Song
from pyautodj.constants import (
    END_SEGMENT,
    FIRST_NUMBERED_LOOP,
    LOOP_SEGMENT,
    START_SEGMENT,
)
from pyautodj.segments import SongSegment, transition_target


def allowed_transitions(
    song: Song,
    segment: SongSegment,
    snapshot: Mapping[str, SongSegment],
) -> frozenset[str]:
    """Computes the ids that may follow ``segment`` within ``song``."""
    if segment.is_dedicated_transition:
        return frozenset((transition_target(segment.id),))

    ends_globally = song.has_end and song.has_global_ending

    if song.has_multiple_loops and segment.is_loop:
        allowed = {END_SEGMENT} if ends_globally else set()
        for other in snapshot.values():
            if song.has_dedicated_transitions and other.is_dedicated_transition:
                if other.id.startswith(f"{segment.id}-to"):
                    allowed.add(other.id)
            elif not song.has_global_ending and other.id == f"{segment.id}-end":
                allowed.add(other.id)
            elif not song.has_dedicated_transitions and other.is_loop and other.id != segment.id:
                allowed.add(other.id)
        return frozenset(allowed)

    if segment.id == START_SEGMENT:
        return frozenset((FIRST_NUMBERED_LOOP if song.has_multiple_loops else LOOP_SEGMENT,))
    if segment.id == LOOP_SEGMENT and ends_globally:
        return frozenset((END_SEGMENT,))
    # Endings, and anything else the grammar does not know, lead nowhere
    return frozenset()


def build_song_transitions(song: Song) -> None:
    snapshot = dict(song.segments)
    song.segments = {
        segment_id: replace(
            segment, allowed_transitions=allowed_transitions(song, segment, snapshot)
        )
        for segment_id, segment in snapshot.items()
    }
    for segment_id in sorted(song.segments):
        logging.debug(
            f"{song.id}: {segment_id} -> {sorted(song.segments[segment_id].allowed_transitions)}"
        )


def build_transitions(songs: Mapping[str, Song]) -> None:
    """Builds the transition graph of every song in the catalog, in place."""
    for song in songs.values():
        build_song_transitions(song)
