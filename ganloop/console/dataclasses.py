import datetime
from dataclasses import dataclass
from typing import Literal

from pyfiglet import Figlet
from rich.console import RenderableType
from rich.style import Style

from .config import TimeFormat
from .themes import GLDarkTheme
from .utils import apply_style, calc_color_gradient

# message type -> (icon, default content style)
_DECORATIONS = {
    "notification": ("ⓘ", "notification.content"),
    "warning": ("⚠", "warning.content"),
    "error": ("ⓧ", "error.content"),
    "complete": ("✔", "complete.content"),
}


@dataclass
class ContentItem:
    """
    One message on its way to the console.

    ``str(item)`` gives the rich markup to print: a timestamp (when the
    console shows time and the item has one), the type's icon, then the
    content in the type's style. ``section`` items render as a figlet
    banner instead; ``renderable`` items carry a Rich object printed as is.

    :ivar type: Message kind.
    :ivar content: Text, may contain rich markup.
    :ivar style: Overrides the kind's default content style.
    :ivar time: Creation time in epoch seconds.
    :ivar renderable: Rich object for ``renderable`` items.
    """
    type: Literal["text", "section", "notification", "warning", "error", "complete", "renderable"]
    content: str = ""
    style: str | Style | None = None
    time: float | None = None
    renderable: RenderableType | None = None

    @property
    def is_renderable(self) -> bool:
        return self.renderable is not None

    def _timestamp(self) -> str:
        from .glconsole import GLConsole
        console = GLConsole()
        cfg = console.get_console_config()
        if self.time is None or not cfg.show_time:
            return ""
        when = datetime.datetime.fromtimestamp(self.time, tz=datetime.timezone.utc)
        when = when.astimezone(console.get_tz_info())
        pattern = cfg.time_format.value.replace(":", apply_style(":", "time.separator"))
        if cfg.time_format is TimeFormat.DEFAULT:
            pattern = pattern.replace("%p", apply_style("%p", "time.ampm"))
        return (apply_style("[", "time.brackets")
                + apply_style(when.strftime(pattern), "time.numbers")
                + apply_style("]", "time.brackets") + " ")

    def _banner(self) -> str:
        lines = Figlet(font="small").renderText(self.content).rstrip().splitlines()
        colors = calc_color_gradient(GLDarkTheme.GRADIENT_BEGIN, GLDarkTheme.GRADIENT_END, len(lines))
        return "\n".join(
            apply_style(line, colors[min(row, len(colors) - 1)]) for row, line in enumerate(lines)
        )

    def __str__(self) -> str:
        if self.type == "section":
            return self._banner()
        body = self.content
        if self.type in _DECORATIONS:
            icon, default_style = _DECORATIONS[self.type]
            body = (f"{apply_style(icon, f'{self.type}.icon')} "
                    f"{apply_style(body, str(self.style or default_style))}")
        elif self.style:
            body = apply_style(body, str(self.style))
        return self._timestamp() + body
