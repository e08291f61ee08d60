class AutoDJError(Exception):
    """Base class for all errors raised by pyautodj."""


class NoOutputDeviceError(AutoDJError):
    """Raised when no audio output device is available."""

    def __init__(self) -> None:
        super().__init__("no output device is available")


class InvalidMaxRepeatsError(AutoDJError):
    """Raised when the max-repeats setting is not a usable upper bound."""

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"invalid value for max-repeats: {value!r}")


class UnrecognizedFormatError(AutoDJError):
    """Raised when a file is neither a known segment format nor an archive."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' - unrecognized song format. Only wav, flac, ogg, mp3 and zip are supported"
        )


class PathNotUnicodeError(AutoDJError):
    """Raised when a file name cannot be decoded to text."""

    def __init__(self, path=None) -> None:
        self.path = path
        super().__init__(
            "one or several files have non Unicode characters in their path or filename"
        )


class InvalidFileNameError(AutoDJError):
    """Raised when a file name does not follow the `<song>_<segment>.<ext>` convention."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"'{name}' - invalid file name. Files should be named in this format: song_1_start.ogg"
        )


class DuplicateSegmentError(AutoDJError):
    """Raised when two files resolve to the same song and segment."""

    def __init__(self, song_id: str, segment_id: str) -> None:
        self.song_id = song_id
        self.segment_id = segment_id
        super().__init__(
            f"found multiple segments with same ID: Song: {song_id} Segment: {segment_id}"
        )


class ArchiveReadError(AutoDJError):
    """Raised when a song archive cannot be opened or listed."""


class InvalidSongError(AutoDJError):
    """Raised when a song is missing the segments required to play it."""


class UnknownSongError(AutoDJError):
    """Raised when a requested song is not in the catalog."""

    def __init__(self, song_id: str) -> None:
        self.song_id = song_id
        super().__init__(f'song "{song_id}" was not found in the songs directory')


class PlanExceededStepLimitError(AutoDJError):
    """Raised when planning a song does not terminate within the step limit."""

    def __init__(self, song_id: str, steps: int) -> None:
        self.song_id = song_id
        self.steps = steps
        super().__init__(f'plan for "{song_id}" exceeded {steps} steps')


class SegmentLoadError(AutoDJError):
    """Raised when a segment cannot be read or decoded."""
