"""pyautodj - endless, procedurally assembled music from song segments."""

__version__ = "0.1.0"
