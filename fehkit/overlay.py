"""Text shown over images: captions, zoom and position labels, actions and info."""

from __future__ import annotations

import os
import stat

CAPTION_PLACEHOLDER = "Caption entry mode - Hit ESC to cancel"
INFO_FAILED = "Failed to run info command"
ACTIONS_HEADER = "defined actions:"
MAX_ACTIONS = 10
MAX_INFO_LINES = 128
MAX_INFO_LINE_LENGTH = 255


class CaptionEditor:
    """Text being typed in caption entry mode."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    @property
    def display_text(self) -> str:
        """What the overlay shows: the caption, or a hint while it is empty."""
        return self.text or CAPTION_PLACEHOLDER

    def type(self, char: str | int) -> bool:
        """Append an ASCII character; return whether it was accepted."""
        if isinstance(char, int):
            if not 0 <= char < 128:
                return False
            char = chr(char)
        if len(char) != 1:
            raise ValueError("type() expects exactly one character")
        if not char.isascii():
            return False
        self.text += char
        return True

    def newline(self) -> None:
        """Insert a line break into the caption."""
        self.text += "\n"

    def backspace(self) -> None:
        """Remove the last character, if there is one."""
        self.text = self.text[:-1]


def caption_filename(path: str, caption_path: str, create_dir: bool = False) -> str | None:
    """Path of the caption file belonging to the image at ``path``.

    The caption lives in ``<image dir>/<caption_path>/<image name>.txt``.
    If that directory is missing, None is returned unless ``create_dir``
    is set, in which case it is created.
    """
    head, sep, name = path.rpartition("/")
    directory = head if sep else "."
    caption_dir = f"{directory}/{caption_path}"

    try:
        mode = os.stat(caption_dir).st_mode
    except OSError:
        if not create_dir:
            return None
        os.mkdir(caption_dir, 0o755)
    else:
        if not stat.S_ISDIR(mode):
            raise NotADirectoryError(
                f"Caption directory ({caption_dir}) exists, but is not a directory."
            )

    return f"{directory}/{caption_path}/{name}.txt"


def read_caption(path: str, caption_path: str) -> str:
    """The caption of an image, or an empty string if it has none."""
    filename = caption_filename(path, caption_path, False)
    if filename is None:
        return ""
    try:
        with open(filename, encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError:
        return ""


def write_caption(path: str, caption_path: str, text: str) -> str:
    """Store ``text`` as the caption of an image; return the file written."""
    filename = caption_filename(path, caption_path, True)
    assert filename is not None
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(text)
    return filename


def zoom_label(zoom: float, width: int, height: int) -> str:
    """Zoom percentage and zoomed size, e.g. ``100%, 640x480``."""
    return "%.0f%%, %dx%d" % (zoom * 100, int(width * zoom), int(height * zoom))


def position_label(index: int, total: int) -> str | None:
    """``N of M`` for a 0-based index; None when there is only one file."""
    if total <= 1:
        return None
    return f"{index + 1} of {total}"


def action_lines(titles) -> list[str]:
    """Lines listing the defined actions; empty if none is defined."""
    entries = [
        f"{number}: {title}"
        for number, title in enumerate(list(titles)[:MAX_ACTIONS])
        if title
    ]
    if not entries:
        return []
    return [ACTIONS_HEADER, *entries]


def info_lines(output: str | None) -> list[str]:
    """Split info command output into overlay lines.

    None stands for a command that could not be run. Lines longer than
    255 characters are continued on the next line, and at most 128
    lines are kept.
    """
    if output is None:
        return [INFO_FAILED]
    lines: list[str] = []
    pos = 0
    while pos < len(output) and len(lines) < MAX_INFO_LINES:
        end = output.find("\n", pos)
        stop = len(output) if end == -1 else end + 1
        stop = min(stop, pos + MAX_INFO_LINE_LENGTH)
        chunk = output[pos:stop]
        pos = stop
        if chunk.endswith("\n"):
            chunk = chunk[:-1]
        lines.append(chunk)
    return lines