from .config import ConsoleConfig, ConsoleMode, ColorSystem, TimeFormat
from .themes import GLDarkTheme
from .utils import apply_style, calc_color_gradient, player_label
from .dataclasses import ContentItem
from .heatmap import heatmap_text
from .glconsole import GLConsole

__all__ = [
    "GLConsole",
    "ConsoleConfig",
    "ConsoleMode",
    "ColorSystem",
    "TimeFormat",
    "GLDarkTheme",
    "ContentItem",
    "heatmap_text",
    "apply_style",
    "calc_color_gradient",
    "player_label",
]
