import functools
import logging
import os
import sys
import warnings

import rich_click as click
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TimeElapsedColumn
from rich.traceback import install as rich_traceback_handler

from pyautodj import __version__
from pyautodj.console import _COMMAND_GROUPS, _OPTION_GROUPS, rich_console
from pyautodj.constants import DEFAULT_MAX_REPEATS, DEFAULT_SONGS_DIR
from pyautodj.handler import SongsDirHandler

# CLI --help styling
click.rich_click.OPTION_GROUPS = _OPTION_GROUPS
click.rich_click.COMMAND_GROUPS = _COMMAND_GROUPS
click.rich_click.USE_RICH_MARKUP = True
# End CLI styling


@click.group("pyautodj")
@click.option("--debug", "-d", is_flag=True, default=False, help="Enables debugging mode.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enables verbose logging output.")
@click.version_option(__version__, prog_name="pyautodj", message="%(prog)s %(version)s")
def cli_main(debug, verbose):
    """Plays music loops for random durations in random order."""
    # Store flags in environ instead of passing them as parameters
    if debug:
        os.environ["PAD_DEBUG"] = "1"
        warnings.simplefilter("default")
        rich_traceback_handler(console=rich_console, suppress=[click])
    else:
        warnings.filterwarnings("ignore")

    if verbose:
        os.environ["PAD_VERBOSE"] = "1"

    if verbose or debug:
        level = logging.DEBUG if debug else logging.INFO
        logging.basicConfig(format="%(message)s", level=level, handlers=[RichHandler(level=level, console=rich_console, rich_tracebacks=True, show_path=debug, show_time=False, tracebacks_suppress=[click])])
    else:
        logging.basicConfig(format="%(message)s", level=logging.WARNING, handlers=[RichHandler(level=logging.WARNING, console=rich_console, show_time=False, show_path=False)])


def common_songs_options(f):
    @click.option("--songs-dir", "-s", type=click.Path(exists=True, file_okay=False), default=DEFAULT_SONGS_DIR, show_default=True, help="Directory containing the song segments and song archives.")

    @functools.wraps(f)
    def wrapper_common_options(*args, **kwargs):
        return f(*args, **kwargs)

    return wrapper_common_options


@cli_main.command()
@click.argument("override", required=False, default=None)
@common_songs_options
@click.option("--max-repeats", type=str, default=str(DEFAULT_MAX_REPEATS), show_default=True, help="Sets the max number of loop repeats [dim](exclusive, must be greater than 5)[/].")
@click.option("--seed", type=int, default=None, help="Seed for the random source, to reproduce a session.")
@click.option("--debug-wait-each-segment", is_flag=True, default=False, help="Wait for each segment to finish before queueing the next, and print the segments as they are queued. [dim yellow](Causes small pauses between segments.)[/]")
def play(override, **kwargs):
    """Play random songs forever, or only OVERRIDE if given."""
    try:
        handler = build_handler(**kwargs)
        handler.play(override)
    except KeyboardInterrupt:
        rich_console.print("[dim]Playback interrupted by user.[/]")
    except Exception as e:
        exit_with_exception(e)


@cli_main.command("list")
@common_songs_options
def list_songs(**kwargs):
    """List the songs found in the songs directory and their transition graphs."""
    try:
        build_handler(**kwargs).list_songs()
    except Exception as e:
        exit_with_exception(e)


@cli_main.command()
@click.argument("song")
@common_songs_options
@click.option("--seed", type=int, default=None, help="Seed for the random source, to reproduce a plan.")
def plan(song, **kwargs):
    """Print a randomly generated playthrough of SONG without playing it."""
    try:
        build_handler(**kwargs).preview_plan(song)
    except Exception as e:
        exit_with_exception(e)


def build_handler(**kwargs) -> SongsDirHandler:
    with Progress(
        SpinnerColumn(),
        *Progress.get_default_columns(),
        TimeElapsedColumn(),
        console=rich_console,
        transient=True
    ) as progress:
        progress.add_task("Scanning songs", total=None)
        return SongsDirHandler(**kwargs)


def exit_with_exception(e: Exception):
    if "PAD_DEBUG" in os.environ:
        rich_console.print_exception(suppress=[click])
    else:
        logging.error(f"Error: {e}.")
    sys.exit(1)

if __name__ == "__main__":
    cli_main()
