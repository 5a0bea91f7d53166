# fehkit

Tools for collections of images, from the command line and from Python:
list image properties, find out which files load and which do not, and
render index (contact) sheets of thumbnails. The package also holds the
key binding tables, terminal key decoding and overlay text helpers of an
image viewer.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
fehkit --help
```

One mode is chosen per run:

- `-l`, `--list`: print a tab-separated table with the columns
  `NUM FORMAT WIDTH HEIGHT PIXELS SIZE ALPHA FILENAME` for every file that
  loads. Files that do not load are reported on standard error.
- `-U`, `--loadable`: print the files that load. The exit status is 1 if
  any file did not load.
- `-u`, `--unloadable`: print the files that do not load. The exit status
  is 1 if any file did load.
- `-i`, `--index` or `-m`, `--montage`: render thumbnails of the files into
  one image. It is written only when `-o`/`--output` is given (inside
  `-j`/`--output-dir` if that is set).

Index options: `-y`/`--thumb-width` and `-E`/`--thumb-height` (60 each),
`-W`/`--limit-width` and `-H`/`--limit-height` (with neither, the
background image's size or a width of 800), `-s`/`--stretch` to enlarge
small images, `--ignore-aspect`, `-a`/`--alpha` for the thumbnail alpha
level, `-b`/`--bg` for a background image or `trans` for a transparent
background, `-e`/`--font` and `--font-size` for a TrueType font (Pillow's
default font otherwise), `--title` or `--title-font` to draw a title line,
`-V`/`--verbose` for a progress display, and `--conversion-timeout`.

Without a mode the command prints an error and exits with status 1.

```
fehkit -i -o sheet.png -y 100 -E 100 photos/*.jpg
fehkit -U downloads/*
```

## Library

- `fehkit.listing`: `list_images`, `loadables` and `format_size`.
- `fehkit.index`: `build_index` with `IndexOptions`, returning the Pillow
  image and the thumbnail count, plus the layout helpers `thumbnail_size`,
  `calculate_height`, `calculate_width` and `index_title`.
- `fehkit.loader`: `load_image` opens files with Pillow and downloads
  `http://`, `https://` and `ftp://` URLs. When no loader understands a file
  and `conversion_timeout` is not negative, it tries `dcraw` for camera raw
  files and ImageMagick's `convert` otherwise. `ConversionCache` remembers
  converted temporary files and deletes them on `clear()` or when used as a
  context manager. `ImageLoadError` is raised when an image cannot be loaded.
- `fehkit.keys`: `Modifier`, `KeyBinding`, `keysym_from_name`,
  `parse_key_spec` for specifications such as `C-S-Left`, and
  `default_bindings`.
- `fehkit.keyconfig`: `KeyBindings` and `load_bindings`, which applies the
  first readable `keys` file of `$XDG_CONFIG_HOME/feh/keys` (or
  `~/.config/feh/keys`) and `/etc/feh/keys`. Each line reads
  `action key1 key2 key3`; lines starting with `#` are skipped.
- `fehkit.keyinput`: `StdinDecoder` turns characters from a terminal,
  including arrow key escape sequences and Alt via `ESC`, into
  `(state, keysym)` events; `raw_terminal` is a context manager that puts a
  terminal into raw input mode and restores it afterwards.
- `fehkit.overlay`: caption files (`caption_filename`, `read_caption`,
  `write_caption`), `CaptionEditor`, and the text of the zoom, position,
  action and info overlays.
- `fehkit.wrap`: `wrap_string` wraps text to a pixel width using any
  measuring function.
- `fehkit.messages`: `load_error_message`, `warning_text`, `LoadErrorKind`
  and the progress `StatusDisplay`.
- `fehkit.md5`: a pure-Python MD5 (`MD5`, `md5_hexdigest`).

```python
from fehkit.md5 import md5_hexdigest

md5_hexdigest(b"abc")  # '900150983cd24fb0d6963f7d28e17f72'
```

## What it does not do

There is no image window: no slideshow, multi-window or thumbnail browsing
mode, no menus, and no setting of the desktop background. The key binding,
terminal input and overlay modules provide the tables and text for such a
viewer, but nothing in the package draws a window or dispatches its events.