"""Command line entry point."""

from __future__ import annotations

import argparse
import sys

from fehkit.index import IndexOptions, build_index
from fehkit.listing import list_images, loadables
from fehkit.messages import PACKAGE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PACKAGE, description="Image viewer tools.")
    modes = parser.add_argument_group("modes")
    modes.add_argument("-i", "--index", action="store_true", help="build an index image")
    modes.add_argument("-m", "--montage", action="store_true", help="build a montage image")
    modes.add_argument("-l", "--list", action="store_true", help="list image information")
    modes.add_argument("-U", "--loadable", action="store_true", help="print loadable files")
    modes.add_argument("-u", "--unloadable", action="store_true", help="print unloadable files")
    parser.add_argument("-V", "--verbose", action="store_true")
    parser.add_argument("-o", "--output", help="save the index image to this file")
    parser.add_argument("-j", "--output-dir", help="directory for output files")
    parser.add_argument("-y", "--thumb-width", type=int, default=60)
    parser.add_argument("-E", "--thumb-height", type=int, default=60)
    parser.add_argument("-W", "--limit-width", type=int, default=0)
    parser.add_argument("-H", "--limit-height", type=int, default=0)
    parser.add_argument("-s", "--stretch", action="store_true")
    parser.add_argument("--ignore-aspect", action="store_true")
    parser.add_argument("-a", "--alpha", type=int, help="thumbnail alpha level")
    parser.add_argument("-b", "--bg", help="background image, or 'trans'")
    parser.add_argument("-e", "--font", help="TrueType font file")
    parser.add_argument("--font-size", type=int, default=11)
    parser.add_argument("--title-font", help="draw a title with this font file")
    parser.add_argument("--title", action="store_true", help="draw a title line")
    parser.add_argument("--conversion-timeout", type=float, default=-1)
    parser.add_argument("files", nargs="*")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the selected mode; return the exit status."""
    args = _build_parser().parse_args(argv)

    if args.index or args.montage:
        options = IndexOptions(
            thumb_w=args.thumb_width,
            thumb_h=args.thumb_height,
            limit_w=args.limit_width,
            limit_h=args.limit_height,
            aspect=not args.ignore_aspect,
            stretch=args.stretch,
            alpha_level=args.alpha,
            font=args.font,
            font_size=args.font_size,
            title=args.title or bool(args.title_font),
            title_font=args.title_font,
            bg_file=args.bg,
            output_file=args.output,
            output_dir=args.output_dir,
            verbose=args.verbose,
            conversion_timeout=args.conversion_timeout,
        )
        image, _ = build_index(args.files, options)
        image.close()
        return 0
    if args.list:
        return list_images(args.files)
    if args.loadable:
        return loadables(args.files, True)
    if args.unloadable:
        return loadables(args.files, False)

    print(f"{PACKAGE} ERROR: Invalid option combination", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())