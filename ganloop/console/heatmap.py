from rich.text import Text
from rich.style import Style
from rich.color import Color as RichColor


_BLOCK = "▀"


def _grey(level: float) -> RichColor:
    v = int(round(max(0.0, min(1.0, level)) * 255))
    return RichColor.from_rgb(v, v, v)


def heatmap_text(image, vmin: float | None = None, vmax: float | None = None) -> Text:
    """
    Render a 2-D array as a greyscale terminal heatmap.

    Two image rows share one text row: the upper half-block glyph takes the
    top pixel as foreground and the bottom pixel as background.

    :param image: Array-like of shape (H, W). Anything with ``tolist()``.
    :param vmin: Value mapped to black. Defaults to the image minimum.
    :param vmax: Value mapped to white. Defaults to the image maximum.
    """
    rows = image.tolist() if hasattr(image, "tolist") else [list(r) for r in image]
    if not rows:
        return Text("")
    flat = [v for row in rows for v in row]
    lo = min(flat) if vmin is None else vmin
    hi = max(flat) if vmax is None else vmax
    span = (hi - lo) or 1.0

    text = Text()
    for r in range(0, len(rows), 2):
        top = rows[r]
        bottom = rows[r + 1] if r + 1 < len(rows) else None
        for c, value in enumerate(top):
            bg = _grey((bottom[c] - lo) / span) if bottom is not None else None
            text.append(_BLOCK, style=Style(color=_grey((value - lo) / span), bgcolor=bg))
        text.append("\n")
    text.rstrip()
    return text
