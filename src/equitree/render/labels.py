"""Label wrapping for node boxes."""

from __future__ import annotations

ELLIPSIS = "…"


def wrap_label(text: str, max_chars: int, max_lines: int = 2) -> list[str]:
    """Greedy character-count wrap with truncation.

    Fills each line with up to *max_chars* characters. Characters, not
    words, are the unit: entity names are often CJK and have no spaces.
    If text remains after *max_lines* lines, the last line is cut short
    and ends with an ellipsis.

    Examples:
        >>> wrap_label("abcdefgh", 3)
        ['abc', 'de…']
        >>> wrap_label("abcdef", 3)
        ['abc', 'def']
    """
    if max_chars < 1 or max_lines < 1:
        raise ValueError("max_chars and max_lines must be at least 1")
    text = " ".join(text.split())
    if not text:
        return []

    lines = [text[i : i + max_chars] for i in range(0, len(text), max_chars)]
    if len(lines) <= max_lines:
        return lines

    kept = lines[:max_lines]
    kept[-1] = kept[-1][: max_chars - 1] + ELLIPSIS
    return kept


def format_percentage(value: float) -> str:
    """Format an ownership share for an edge label: 100 -> '100%', 33.5 -> '33.5%'."""
    if float(value).is_integer():
        return f"{int(value)}%"
    return f"{value:g}%"
