"""Logging configuration and helpers."""

import logging
from enum import StrEnum

from src import settings


class ConsoleColour(StrEnum):
    """ANSI escape sequences used by the colour formatter.

    <https://en.wikipedia.org/wiki/ANSI_escape_code#Select_Graphic_Rendition_parameters>
    """

    RESET = "\033[0m"
    BLACK = "\033[30m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    LIGHT_GREY = "\033[37m"
    HIGHLIGHT_RED = "\033[41m"
    BOLD = "\033[1m"


class PlainConsoleFormatter(logging.Formatter):
    """Console formatter without colour codes."""

    fmt = "{asctime} - {name} - {levelname} - {message}"

    def __init__(self) -> None:
        super().__init__(self.fmt, style="{", validate=True)


class ColourConsoleFormatter(PlainConsoleFormatter):
    """Console formatter that colours each line by level."""

    COLOURS = {
        logging.DEBUG: ConsoleColour.LIGHT_GREY,
        logging.INFO: ConsoleColour.BLUE,
        logging.WARNING: ConsoleColour.YELLOW,
        logging.ERROR: ConsoleColour.RED,
        logging.CRITICAL: ConsoleColour.BOLD + ConsoleColour.HIGHLIGHT_RED + ConsoleColour.BLACK,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then wrap it in the colour for its level."""
        colour = self.COLOURS.get(record.levelno, ConsoleColour.RESET)
        return f"{colour}{super().format(record)}{ConsoleColour.RESET}"


def build_stream_handler(level: str, colour: bool) -> logging.Handler:
    """Return a stderr handler using the formatter selected by `colour`."""
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColourConsoleFormatter() if colour else PlainConsoleFormatter())
    return handler


LOGGER = logging.getLogger(settings.LOGGER_NAME)
LOGGER.setLevel(settings.LOG_LEVEL)
LOGGER.addHandler(build_stream_handler(settings.LOG_LEVEL, settings.LOG_COLOUR_ENABLED))
