"""List mode and the loadables / unloadables filters."""

from __future__ import annotations

import os
import sys
from typing import Iterable, TextIO

from fehkit.loader import ImageLoadError, load_image, path_is_url

HEADER = "NUM\tFORMAT\tWIDTH\tHEIGHT\tPIXELS\tSIZE\tALPHA\tFILENAME\n"
_UNITS = " kMGT"


def format_size(size: float) -> str:
    """A size in at most four characters with a decimal unit suffix."""
    unit = 0
    while size >= 1000 and unit < len(_UNITS) - 1:
        size /= 1000
        unit += 1
    return ("%3.0f%c" % (size, _UNITS[unit]))[:4]


def _has_alpha(image) -> bool:
    return image.mode in ("RGBA", "LA", "PA", "RGBa", "La") or "transparency" in image.info


def _file_size(path: str) -> int:
    if path_is_url(path):
        return 0
    try:
        return os.stat(path).st_size
    except OSError:
        return 0


def list_images(paths: Iterable[str], stream: TextIO | None = None) -> int:
    """Print a table describing every loadable image; return the exit status."""
    out = stream if stream is not None else sys.stdout
    out.write(HEADER)
    number = 0
    for path in paths:
        try:
            image = load_image(path)
        except ImageLoadError as exc:
            print(f"feh WARNING: {exc}", file=sys.stderr)
            continue
        with image:
            number += 1
            width, height = image.size
            fmt = (image.format or "").lower()
            alpha = "X" if _has_alpha(image) else "-"
        out.write(
            f"{number}\t{fmt}\t{width}\t{height}\t{format_size(width * height)}"
            f"\t{format_size(_file_size(path))}\t{alpha}\t{path}\n"
        )
    return 0


def loadables(paths: Iterable[str], loadable: bool = True, stream: TextIO | None = None) -> int:
    """Print the files that load (or, with ``loadable`` false, that do not).

    Returns 1 if any file fell on the other side, else 0.
    """
    out = stream if stream is not None else sys.stdout
    status = 0
    for path in paths:
        try:
            image = load_image(path)
        except ImageLoadError:
            ok = False
        else:
            image.close()
            ok = True
        if ok == loadable:
            out.write(path + "\n")
            out.flush()
        else:
            status = 1
    return status