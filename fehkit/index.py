"""Index and montage mode: a contact sheet of thumbnails in one image."""

from __future__ import annotations

import math
import os
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from fehkit.loader import ImageLoadError, load_image
from fehkit.messages import PACKAGE, LoadErrorKind, StatusDisplay, load_error_message, warning_text
from fehkit.wrap import wrap_string

DEFAULT_LIMIT_W = 800
_WHITE = (255, 255, 255, 255)
_NO_ALPHA_FORMATS = (".jpg", ".jpeg", ".jpe", ".bmp", ".ppm", ".pgm")


@dataclass
class IndexOptions:
    """Settings for building an index image."""

    thumb_w: int = 60
    thumb_h: int = 60
    limit_w: int = 0
    limit_h: int = 0
    aspect: bool = True
    stretch: bool = False
    alpha_level: int | None = None
    index_info: Callable[[str], str] | None = None
    font: str | None = None
    font_size: int = 11
    title: bool = False
    title_font: str | None = None
    bg_file: str | None = None
    output_file: str | None = None
    output_dir: str | None = None
    verbose: bool = False
    conversion_timeout: float = -1


def _warn(message: str) -> None:
    sys.stdout.flush()
    print(warning_text(message), file=sys.stderr)


def _load_font(path: str | None, size: int):
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            pass
    return ImageFont.load_default()


def _text_size(font, text: str) -> tuple[int, int]:
    width = math.ceil(font.getlength(text)) if text else 0
    try:
        ascent, descent = font.getmetrics()
        height = ascent + descent
    except AttributeError:
        height = font.getbbox("Wg")[3]
    return width, height


def _string_dim(path: str, font, options: IndexOptions) -> tuple[int, int]:
    """Width and height of the wrapped info text for one file."""
    if options.index_info is None:
        return 0, 0
    measure = lambda s: _text_size(font, s)[0]  # noqa: E731
    max_w = 0
    total_h = 0
    for line in wrap_string(options.index_info(path), options.thumb_w * 3, measure):
        line_w, line_h = _text_size(font, line)
        max_w = max(max_w, line_w)
        total_h += line_h + 2
    return max_w, total_h


def thumbnail_size(
    image_w: int,
    image_h: int,
    thumb_w: int,
    thumb_h: int,
    aspect: bool = True,
    stretch: bool = False,
) -> tuple[int, int]:
    """Size of the thumbnail drawn for an image of ``image_w`` x ``image_h``."""
    www, hhh = thumb_w, thumb_h
    if aspect:
        ratio = (image_w / image_h) / (www / hhh)
        if ratio > 1.0:
            hhh = int(thumb_h / ratio)
        elif ratio != 1.0:
            www = int(thumb_w * ratio)
    if not stretch and (www > image_w or hhh > image_h):
        www, hhh = image_w, image_h
    return www, hhh


def calculate_height(
    text_dims: Iterable[tuple[int, int]],
    width: int,
    thumb_w: int,
    thumb_h: int,
    tot_thumb_h: int,
) -> tuple[int, int]:
    """Height needed to lay out the files in rows of ``width`` pixels.

    ``text_dims`` holds the info text size of each file. Returns the
    height and the (possibly grown) total height of one thumbnail cell.
    """
    x = y = 0
    text_area_h = 0
    for fw, fh in text_dims:
        text_area_w = max(thumb_w, fw)
        if fh > text_area_h:
            text_area_h = fh + 5
            tot_thumb_h = thumb_h + text_area_h
        if text_area_w > thumb_w:
            text_area_w += 5
        if x > width - text_area_w:
            x = 0
            y += tot_thumb_h
        x += text_area_w
    return y + tot_thumb_h, tot_thumb_h


def calculate_width(
    text_dims: Iterable[tuple[int, int]],
    height: int,
    thumb_w: int,
    thumb_h: int,
    tot_thumb_h: int,
) -> tuple[int, int]:
    """Width needed to lay out the files in columns of ``height`` pixels.

    Returns the width and the total height of one thumbnail cell.
    """
    x = y = 0
    text_area_w = 0
    text_area_h = 0
    max_column_w = 0
    for fw, fh in text_dims:
        text_area_w = max(thumb_w, fw)
        if fh > text_area_h:
            text_area_h = fh + 5
            tot_thumb_h = thumb_h + text_area_h
        if text_area_w > thumb_w:
            text_area_w += 5
        max_column_w = max(max_column_w, text_area_w)
        if y > height - tot_thumb_h:
            y = 0
            x += max_column_w
            max_column_w = 0
        y += tot_thumb_h
    return x + text_area_w, tot_thumb_h


def index_title(num: int, w: int, h: int) -> str:
    """Title line drawn below the thumbnails."""
    return f"{PACKAGE} index - {num} thumbnails, {w} by {h} pixels"[:49]


def _save(image: Image.Image, options: IndexOptions, count: int) -> None:
    assert options.output_file is not None
    if options.output_dir:
        target = f"{options.output_dir}/{options.output_file}"
    else:
        target = options.output_file[:1023]
    to_save = image
    if os.path.splitext(target)[1].lower() in _NO_ALPHA_FORMATS:
        to_save = image.convert("RGB")
    try:
        to_save.save(target)
    except (OSError, ValueError, KeyError) as exc:
        detail = exc if isinstance(exc, OSError) and exc.errno else None
        _warn(load_error_message(target, LoadErrorKind.IMLIB, detail))
        return
    if options.verbose:
        tw, th = image.size
        print(f"{PACKAGE} - File saved as {target}", file=sys.stderr)
        print(
            f"    - Image is {tw}x{th} pixels and contains {count} thumbnails",
            file=sys.stderr,
        )


def build_index(
    paths: Sequence[str] | Iterable[str],
    options: IndexOptions | None = None,
) -> tuple[Image.Image, int]:
    """Render thumbnails of ``paths`` into one image.

    Returns the image and the number of thumbnails counted. The image is
    saved when ``options.output_file`` is set.
    """
    options = options if options is not None else IndexOptions()
    paths = list(paths)
    font = _load_font(options.font, options.font_size)
    title_font = _load_font(options.title_font, options.font_size)

    title_area_h = _text_size(title_font, "W")[1] + 4 if options.title else 0
    th = _text_size(font, "W")[1]
    _, fake_fh = _string_dim("foo", font, options)
    tot_thumb_h = options.thumb_h + fake_fh + 5

    trans_bg = options.bg_file == "trans"
    bg: Image.Image | None = None
    if options.bg_file and not trans_bg:
        try:
            bg = load_image(options.bg_file, options.conversion_timeout)
        except ImageLoadError as exc:
            _warn(str(exc))

    limit_w, limit_h = options.limit_w, options.limit_h
    if not limit_w and not limit_h:
        if bg is not None:
            limit_w, limit_h = bg.size
        else:
            limit_w = DEFAULT_LIMIT_W

    dims = [_string_dim(path, font, options) for path in paths]
    vertical = False
    if limit_w:
        w = limit_w
        h, tot_thumb_h = calculate_height(dims, w, options.thumb_w, options.thumb_h, tot_thumb_h)
        if limit_h:
            if h > limit_h:
                _warn(
                    f"The image size you specified ({limit_w}x{limit_h}) is not large\n"
                    f"enough to hold all {len(paths)} thumbnails. To fit all the thumbnails,\n"
                    "either decrease their size, choose a smaller font,\n"
                    f"or use a larger image (like {w}x{h})"
                )
            h = limit_h
    else:
        vertical = True
        h = limit_h
        w, tot_thumb_h = calculate_width(dims, h, options.thumb_w, options.thumb_h, tot_thumb_h)

    image_w, image_h = w, h + title_area_h
    try:
        main = Image.new("RGBA", (image_w, image_h), (0, 0, 0, 0 if trans_bg else 255))
    except MemoryError as exc:
        megabytes = image_w * image_h * 4 // (1024 * 1024)
        raise MemoryError(
            f"Failed to create {image_w}x{image_h} pixels ({megabytes} MB) index image."
        ) from exc
    if bg is not None:
        main.alpha_composite(bg.convert("RGBA").resize((w, h)))
        bg.close()
    draw = ImageDraw.Draw(main)
    measure = lambda s: _text_size(font, s)[0]  # noqa: E731

    status = StatusDisplay(len(paths)) if options.verbose else None
    count = 0
    x = y = 0
    max_column_w = 0
    for path, (fw, _) in zip(paths, dims):
        try:
            source = load_image(path, options.conversion_timeout)
        except ImageLoadError as exc:
            if status is not None:
                status.error_printed()
            _warn(str(exc))
            if status is not None:
                status.update("x")
            continue
        if status is not None:
            status.update(".")

        with source:
            ww, hh = source.size
            www, hhh = thumbnail_size(
                ww, hh, options.thumb_w, options.thumb_h, options.aspect, options.stretch
            )
            www, hhh = max(www, 1), max(hhh, 1)
            thumb = source.convert("RGBA").resize((www, hhh), Image.Resampling.LANCZOS)
        count += 1

        if options.alpha_level is not None:
            thumb.putalpha(options.alpha_level)

        text_area_w = options.thumb_w
        if options.index_info is not None:
            text_area_w = max(text_area_w, fw)
        if text_area_w > options.thumb_w:
            text_area_w += 5

        if vertical:
            max_column_w = max(max_column_w, text_area_w)
            if y > h - tot_thumb_h:
                y = 0
                x += max_column_w
                max_column_w = 0
            if x > w - text_area_w:
                break
        else:
            if x > w - text_area_w:
                x = 0
                y += tot_thumb_h
            if y > h - tot_thumb_h:
                break

        xxx = x + (text_area_w - www) // 2
        yyy = y
        if options.aspect:
            yyy += (options.thumb_h - hhh) // 2
        main.alpha_composite(thumb, (xxx, yyy))

        if options.index_info is not None:
            lines = wrap_string(options.index_info(path), options.thumb_w * 3, measure)
            for lineno, line in enumerate(lines):
                line_w = measure(line)
                draw.text(
                    (x + ((text_area_w - line_w) >> 1), y + options.thumb_h + lineno * (th + 2) + 2),
                    line,
                    font=font,
                    fill=_WHITE,
                )

        if vertical:
            y += tot_thumb_h
        else:
            x += text_area_w

    if options.verbose:
        sys.stderr.write("\n")

    if options.title:
        title = index_title(count, w, h)
        title_w, title_h = _text_size(title_font, title)
        draw.text(
            ((image_w - title_w) >> 1, image_h - title_h - 2),
            title,
            font=title_font,
            fill=_WHITE,
        )

    if options.output_file:
        _save(main, options, count)

    return main, count