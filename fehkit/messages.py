"""Load-error messages, warnings and the verbose progress display."""

from __future__ import annotations

import enum
import errno
import os
import sys
from typing import TextIO

PACKAGE = "feh"


class LoadErrorKind(enum.Enum):
    """Which stage of loading an image failed."""

    IMLIB = "imlib"
    IMAGEMAGICK = "imagemagick"
    CURL = "curl"
    DCRAW = "dcraw"
    MAGICBYTES = "magicbytes"


_KIND_MESSAGES = {
    LoadErrorKind.IMAGEMAGICK: "{} - No ImageMagick loader for that file format",
    LoadErrorKind.CURL: "{} - libcurl was unable to retrieve the file",
    LoadErrorKind.DCRAW: "{} - Unable to open preview via dcraw",
    LoadErrorKind.MAGICBYTES: "{} - Does not look like an image (magic bytes missing)",
}

_ERRNO_MESSAGES = {
    errno.ENOENT: "{} - File does not exist",
    errno.EISDIR: "{} - Directory specified for image filename",
    errno.EACCES: "{} - No read access",
    errno.EPERM: "{} - No read access",
    errno.ENAMETOOLONG: "{} - Path specified is too long",
    errno.ENOTDIR: "{} - Path component is not a directory",
    errno.EFAULT: "{} - Path points outside address space",
    errno.ELOOP: "{} - Too many levels of symbolic links",
    errno.ENOMEM: "While loading {} - Out of memory",
    errno.EROFS: "{} - Cannot write to directory",
    errno.ENOSPC: "{} - Cannot write - out of disk space",
}

_NO_LOADER = "{} - No loader for that file format"
_INVALID_IMAGE = "{} - Invalid image file"


def load_error_message(
    filename: str,
    kind: LoadErrorKind = LoadErrorKind.IMLIB,
    detail: BaseException | None = None,
) -> str:
    """Describe why ``filename`` could not be loaded.

    For ``LoadErrorKind.IMLIB`` the message is chosen from ``detail``:
    ``None`` means no loader understood the file format, an ``OSError``
    is described by its errno, a ``MemoryError`` as out of memory and
    a ``ValueError`` or ``SyntaxError`` as an invalid image. Running
    out of file descriptors is fatal and raises ``RuntimeError``.
    """
    if isinstance(detail, OSError) and detail.errno in (errno.EMFILE, errno.ENFILE):
        raise RuntimeError(f"{filename} - Out of file descriptors while loading") from detail

    if kind is not LoadErrorKind.IMLIB:
        return _KIND_MESSAGES[kind].format(filename)

    if detail is None:
        return _NO_LOADER.format(filename)
    if isinstance(detail, MemoryError):
        return _ERRNO_MESSAGES[errno.ENOMEM].format(filename)
    if isinstance(detail, OSError) and detail.errno in _ERRNO_MESSAGES:
        return _ERRNO_MESSAGES[detail.errno].format(filename)
    if isinstance(detail, (ValueError, SyntaxError)):
        return _INVALID_IMAGE.format(filename)
    if isinstance(detail, OSError) and detail.errno is None:
        return _NO_LOADER.format(filename)
    return f"While loading {filename} - Unknown error ({detail})"


def warning_text(message: str, error: OSError | int | None = None) -> str:
    """Format a warning line; a trailing colon gets the system error appended."""
    text = f"{PACKAGE} WARNING: {message}"
    if message.endswith(":") and error is not None:
        code = error if isinstance(error, int) else error.errno
        reason = os.strerror(code) if code is not None else str(error)
        text += f" {reason}"
    return text


class StatusDisplay:
    """Verbose progress output: one character per file, 50 per line."""

    def __init__(self, total: int, stream: TextIO | None = None) -> None:
        self.total = total
        self.stream = stream if stream is not None else sys.stderr
        self._count = 0
        self._initial_total = 0
        self._reset_output = False

    def update(self, char: str) -> None:
        """Record one processed file, shown as ``char``."""
        out = self.stream
        if not self._initial_total:
            self._initial_total = self.total
        i = self._count
        if i:
            column = i % 50
            if self._reset_output:
                out.write(" " * (column + column // 10 + 7))
            if column == 0:
                percent = int(i / self._initial_total * 100) if self._initial_total else 0
                out.write(f" {i:5d}/{self._initial_total} ({self.total})\n[{percent:3d}%] ")
            elif i % 10 == 0 and not self._reset_output:
                out.write(" ")
            self._reset_output = False
        else:
            out.write("[  0%] ")
        out.write(char)
        out.flush()
        self._count += 1

    def error_printed(self) -> None:
        """Break the progress line before an error message and realign afterwards."""
        self.stream.write("\n")
        self.stream.flush()
        self._reset_output = True

    def finish(self) -> None:
        """End the progress line and start over."""
        self.stream.write("\n")
        self.stream.flush()
        self._count = 0
        self._initial_total = 0
        self._reset_output = False