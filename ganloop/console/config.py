from dataclasses import dataclass
from enum import Enum


class TimeFormat(Enum):
    """strftime patterns for message timestamps."""
    DEFAULT = "%I:%M:%S %p"
    NO_AM_PM = "%I:%M:%S"
    TWENTY_FOUR_HOUR = "%H:%M:%S"
    TWENTY_FOUR_HOUR_NO_SECONDS = "%H:%M"


class ConsoleMode(Enum):
    """Where console output goes.

    NORMAL prints to the terminal, LOGGING appends plain text to a file,
    SILENT keeps only the progress bar and NULL prints nothing at all.
    """
    NORMAL = "normal"
    LOGGING = "logging"
    SILENT = "silent"
    NULL = "null"


class ColorSystem(Enum):
    AUTO = "auto"
    STANDARD = "standard"
    COLOR_256 = "256"
    TRUECOLOR = "truecolor"


@dataclass
class ConsoleConfig:
    """
    Settings for :class:`GLConsole`.

    :ivar mode: Output destination, see :class:`ConsoleMode`.
    :ivar use_colors: Emit color in NORMAL/SILENT mode.
    :ivar show_time: Prefix text messages with a timestamp.
    :ivar time_format: Timestamp pattern.
    :ivar timezone: IANA zone for timestamps, e.g. "UTC".
    :ivar log_file: File appended to in LOGGING mode (required there).
    :ivar color_system: Rich color system; None disables color.
    """
    mode: ConsoleMode = ConsoleMode.NORMAL
    show_time: bool = True
    time_format: TimeFormat = TimeFormat.TWENTY_FOUR_HOUR
    timezone: str = "UTC"
    log_file: str | None = None
    use_colors: bool = True
    color_system: ColorSystem | None = ColorSystem.TRUECOLOR
