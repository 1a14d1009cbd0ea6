"""Formatting and serialization helpers."""

_SUFFIXES = ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K"))


def format_human_readable(num: int) -> str:
    """``1_493_520 -> '1.49M'``; numbers below a thousand are left as is."""
    for scale, suffix in _SUFFIXES:
        if num >= scale:
            return f"{num / scale:.2f}{suffix}"
    return str(num)


def _json_default(obj):
    """``json.dumps`` fallback for tensors, arrays and enums."""
    if getattr(obj, 'ndim', None) == 0 and hasattr(obj, 'item'):
        return obj.item()
    if hasattr(obj, 'tolist'):
        return obj.tolist()
    if hasattr(obj, 'name') and hasattr(obj, 'value'):
        return obj.name
    return str(obj)
