"""
Constants - naming grammar, planning limits and playback parameters.

Centralized so the planner, the catalog builder and the player agree on the
same numbers.
"""

from __future__ import annotations

# ============================================================================
# NAMING GRAMMAR
# ============================================================================

SEGMENT_FORMATS = ("wav", "ogg", "mp3", "flac")
ARCHIVE_FORMAT = "zip"

START_SEGMENT = "start"
END_SEGMENT = "end"
LOOP_SEGMENT = "loop"
FIRST_NUMBERED_LOOP = "loop0"

# ============================================================================
# PLANNING
# ============================================================================

MAX_PLAN_STEPS = 100  # Hard bound; exceeding it means the graph is broken
ENDING_PLAN_LENGTH = 7  # Songs with an ending start steering towards it past this length
ENDLESS_PLAN_LENGTH = 4  # Songs without an ending stop past this length

# ============================================================================
# PLAYBACK
# ============================================================================

MIN_REPEATS = 5  # Inclusive lower bound of loop repeat counts
DEFAULT_MAX_REPEATS = 13  # Exclusive upper bound of loop repeat counts
FADE_OUT_SECONDS = 8.0  # Fade-to-silence window for songs without an ending
DEFAULT_SONGS_DIR = "./songs"
