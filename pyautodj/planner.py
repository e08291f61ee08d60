"""
Playback planning - a random walk over a song's transition graph.

The walk starts at ``start`` and stops on an ending, at a dead end, or once
the plan is long enough. Songs with an ending are steered towards one after
``ENDING_PLAN_LENGTH`` segments.
"""

from __future__ import annotations

import random

from pyautodj.catalog import Song
from pyautodj.constants import (
    END_SEGMENT,
    ENDING_PLAN_LENGTH,
    ENDLESS_PLAN_LENGTH,
    MAX_PLAN_STEPS,
)
from pyautodj.exceptions import InvalidSongError, PlanExceededStepLimitError
from pyautodj.segments import SongSegment


def _steer_towards_ending(candidates: list[str], available_ends: list[str]) -> list[str]:
    """Prefers endings, then segments leading to a loop-specific ending."""
    endings = [c for c in candidates if c.endswith(END_SEGMENT)]
    if endings:
        return endings
    leading_to_ending = [c for c in candidates if any(end.startswith(c) for end in available_ends)]
    return leading_to_ending or candidates


def _is_long_enough(song: Song, plan_length: int) -> bool:
    if song.has_end:
        return plan_length > ENDING_PLAN_LENGTH
    return plan_length > ENDLESS_PLAN_LENGTH


def make_plan(song: Song, rng: random.Random) -> list[SongSegment]:
    """Generates the segment order of a single playthrough.

    Args:
        song: A song whose transition graph has been built.
        rng: Random source; candidates are sorted first so a seeded source reproduces plans.

    Returns:
        Non-empty list of segments starting with ``start``.

    Raises:
        InvalidSongError: if the song has no ``start`` segment, or its graph leads to a missing one.
        PlanExceededStepLimitError: if the walk does not terminate within ``MAX_PLAN_STEPS``.
    """
    plan = [song.start]
    available_ends = sorted(s for s in song.segments if s.endswith(END_SEGMENT))

    for _ in range(MAX_PLAN_STEPS):
        candidates = sorted(plan[-1].allowed_transitions)
        if song.has_end and len(plan) > ENDING_PLAN_LENGTH:
            candidates = _steer_towards_ending(candidates, available_ends)
        if not candidates:
            return plan

        chosen_id = rng.choice(candidates)
        try:
            chosen = song.segments[chosen_id]
        except KeyError:
            raise InvalidSongError(
                f'song "{song.id}" has no "{chosen_id}" segment, reached from "{plan[-1].id}"'
            ) from None
        plan.append(chosen)

        if chosen.is_end:
            return plan
        if not _is_long_enough(song, len(plan)):
            continue
        if song.has_dedicated_transitions and chosen.is_dedicated_transition:
            # Let the transition resolve into its target loop first
            continue
        if song.has_end and song.has_global_ending:
            plan.append(song.segments[END_SEGMENT])
            return plan
        if not song.has_end:
            return plan

    raise PlanExceededStepLimitError(song.id, MAX_PLAN_STEPS)
