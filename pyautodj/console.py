"""
Console utilities and Rich formatting for pyautodj.

Provides the CLI output:
- Status messages
- Catalog tables
- Plan rendering
"""

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED

from pyautodj.catalog import Song
from pyautodj.segments import SegmentKind, SongSegment

# Module-level rich console instance
rich_console = Console()

# ============================================================================
# STYLES
# ============================================================================

STYLE_SUCCESS = Style(color="green", bold=True)
STYLE_ERROR = Style(color="red", bold=True)
STYLE_WARNING = Style(color="yellow")
STYLE_INFO = Style(color="cyan")
STYLE_DIM = Style(dim=True)

SEGMENT_STYLES = {
    SegmentKind.START: "green",
    SegmentKind.LOOP: "cyan",
    SegmentKind.NUMBERED_LOOP: "cyan",
    SegmentKind.DEDICATED_TRANSITION: "magenta",
    SegmentKind.END: "red",
    SegmentKind.LOOP_END: "red",
    SegmentKind.UNKNOWN: "dim",
}


# ============================================================================
# UI COMPONENTS
# ============================================================================

def print_status(message: str, status: str = "info"):
    """Print a styled status message."""
    icons = {
        "success": ("✓", STYLE_SUCCESS),
        "error": ("✗", STYLE_ERROR),
        "warning": ("⚠", STYLE_WARNING),
        "info": ("•", STYLE_INFO),
    }
    icon, style = icons.get(status, ("•", STYLE_INFO))
    rich_console.print(f"[{style.color}]{icon}[/] {message}")


def format_plan(plan: list[SongSegment]) -> Text:
    """Format a plan as a chain of colored segment ids."""
    text = Text()
    for idx, segment in enumerate(plan):
        if idx:
            text.append(" → ", style="dim")
        text.append(segment.id, style=SEGMENT_STYLES[segment.kind])
    return text


def print_plan(song: Song, plan: list[SongSegment]):
    text = Text(f"{song.id}: ", style="bold")
    text.append_text(format_plan(plan))
    rich_console.print(text)


def _flag(value: bool) -> str:
    return "[green]yes[/]" if value else "[dim]no[/]"


def create_catalog_table(songs: dict[str, Song]) -> Table:
    """Create a table describing every song and its transition graph."""
    table = Table(
        title=f"Songs ({len(songs)})",
        box=ROUNDED,
        header_style="bold cyan",
        border_style="dim",
        row_styles=["", "dim"],
    )
    table.add_column("Song", style="bold", no_wrap=True)
    table.add_column("Segments")
    table.add_column("Ending", justify="center")
    table.add_column("Global ending", justify="center")
    table.add_column("Multiple loops", justify="center")
    table.add_column("Transitions", justify="center")
    table.add_column("Archive", justify="center")

    for song_id in sorted(songs):
        song = songs[song_id]
        segments = Text()
        for idx, segment_id in enumerate(song.segment_ids()):
            segment = song.segments[segment_id]
            if idx:
                segments.append(", ")
            segments.append(segment_id, style=SEGMENT_STYLES[segment.kind])
            if segment.allowed_transitions:
                segments.append(f" → {{{', '.join(sorted(segment.allowed_transitions))}}}", style="dim")
        table.add_row(
            song_id,
            segments,
            _flag(song.has_end),
            _flag(song.has_global_ending),
            _flag(song.has_multiple_loops),
            _flag(song.has_dedicated_transitions),
            _flag(song.is_archive),
        )

    return table


# ============================================================================
# CLI HELP STYLING
# ============================================================================

_basic_options = ["--songs-dir"]
_playback_options = ["--max-repeats", "--seed", "--debug-wait-each-segment"]

_OPTION_GROUPS = {
    "pyautodj play": [
        {"name": "Basic options", "options": _basic_options},
        {"name": "Playback options", "options": _playback_options},
    ],
    "pyautodj plan": [
        {"name": "Basic options", "options": _basic_options + ["--seed"]},
    ],
    "pyautodj list": [
        {"name": "Basic options", "options": _basic_options},
    ],
}

_COMMAND_GROUPS = {
    "pyautodj": [
        {
            "name": "Play Commands",
            "commands": ["play"],
        },
        {
            "name": "Inspection Commands",
            "commands": ["list", "plan"],
        },
    ]
}
