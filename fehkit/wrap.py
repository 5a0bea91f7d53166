"""Word wrapping of overlay text to a pixel width."""

from __future__ import annotations

from typing import Callable

Measure = Callable[[str], int]


def wrap_string(text: str, wrap_width: int, measure: Measure) -> list[str]:
    """Split ``text`` into lines no wider than ``wrap_width``.

    ``measure`` returns the rendered width of a string. A width of 0
    disables wrapping and only splits on newlines. A word too wide for
    the limit gets a line of its own and raises the limit to its width
    for the rest of the text.
    """
    lines = text.split("\n")
    if not wrap_width:
        return lines

    space_width = measure("M M") - 2 * measure("M")
    limit = wrap_width
    result: list[str] = []

    for paragraph in lines:
        if measure(paragraph) <= limit:
            result.append(paragraph)
            continue
        if paragraph in ("", " "):
            result.append(paragraph)
            continue

        line: str | None = None
        line_width = 0
        for word in (w for w in paragraph.split(" ") if w):
            word_width = measure(word)
            if line_width == 0:
                new_width = word_width
            else:
                new_width = line_width + space_width + word_width

            if new_width <= limit:
                line = f"{line} {word}" if line else word
                line_width = new_width
            elif line_width == 0:
                # A single word that does not fit: widen the limit to hold it.
                limit = word_width
                line = word
                line_width = new_width
            else:
                if line:
                    result.append(line)
                line = word
                line_width = word_width
        if line:
            result.append(line)

    return result