from rich.style import Style
from rich.theme import Theme


class GLDarkTheme(Theme):
    """
    Dark theme for GANLoop terminal output.

    The raw palette lives in class attributes so the banner gradient can
    use hex values directly; ``__init__`` maps the semantic style names
    used in markup (``player.generator``, ``trend.up``, ``time.numbers``
    ...) onto it.

    :ivar GRADIENT_BEGIN: Top color of the figlet banner.
    :type GRADIENT_BEGIN: str
    :ivar GRADIENT_END: Bottom color of the figlet banner.
    :type GRADIENT_END: str
    """
    SKY = GRADIENT_BEGIN = '#6CB6EB'
    INK = '#4A72E8'
    TEAL = '#4FB8B0'
    LEAF = '#9BCB7A'
    SAND = '#E3C27D'
    CORAL = '#E5727A'
    AMBER = '#D9A05B'
    SLATE = '#8C929C'
    PLUM = '#7A4FA8'
    ORCHID = GRADIENT_END = '#C45BB4'
    ROSE = '#F0609E'

    def __init__(self):
        player_g = Style(color=self.LEAF, bold=True)
        player_d = Style(color=self.ORCHID, bold=True)
        muted = Style(color=self.SLATE)
        super().__init__({
            # Message types
            "notification.icon": Style(color=self.PLUM),
            "notification.content": Style(color=self.SKY),
            "complete.icon": Style(color=self.LEAF),
            "complete.content": Style(color=self.SKY),
            "warning.icon": Style(color=self.AMBER),
            "warning.content": Style(color=self.SAND),
            "error.icon": Style(color=self.CORAL, bold=True),
            "error.content": Style(color=self.CORAL),

            "rule.text": Style(color=self.AMBER),
            "rule.line": Style(color=self.SKY),

            "time.numbers": Style(color=self.AMBER),
            "time.separator": Style(color=self.SAND),
            "time.ampm": Style(color=self.SAND),
            "time.brackets": Style(color=self.PLUM),

            # Progress bar
            "bar.complete": Style(color=self.INK),
            "bar.finished": Style(color=self.LEAF),
            "bar.pulse": Style(color=self.ROSE),
            "progress.description": Style(color=self.INK),
            "progress.elapsed": Style(color=self.SAND),
            "progress.percentage": Style(color=self.INK),
            "progress.remaining": Style(color=self.ROSE),
            "progress.spinner": Style(color=self.ROSE),

            # Training output
            "player.generator": player_g,
            "player.discriminator": player_d,
            "metric.value": Style(color=self.TEAL),
            "metric.label": muted,
            "trend.up": Style(color=self.CORAL),
            "trend.down": Style(color=self.LEAF),
            "trend.flat": muted,
            "experiment": Style(color=self.SAND),
            "label": muted,
            "detail": Style(color=self.SLATE, italic=True),
            "path": Style(color=self.LEAF),
            "table.header": Style(color=self.SLATE, bold=True),
        })
