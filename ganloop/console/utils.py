"""Markup helpers shared by the console, sinks and handlers."""

from colour import Color

PLAYER_STYLES = {
    'generator': 'player.generator',
    'discriminator': 'player.discriminator',
}


def apply_style(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def player_label(player: str, text: str | None = None) -> str:
    """Markup for ``text`` (default: the player name) in that player's style."""
    return apply_style(text or player, PLAYER_STYLES.get(player, 'label'))


def calc_color_gradient(begin: str, end: str, steps: int) -> list[str]:
    """``steps`` hex colors evenly spaced from ``begin`` to ``end``."""
    if steps < 2:
        return [begin]
    return [c.hex_l.upper() for c in Color(begin).range_to(Color(end), steps)]
