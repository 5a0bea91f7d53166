"""Loading images from disk, URLs and external converters."""

from __future__ import annotations

import errno
import os
import shutil
import signal
import ssl
import subprocess
import sys
import tempfile
import urllib.error
import urllib.request

from PIL import Image, ImageOps, UnidentifiedImageError

from fehkit.messages import PACKAGE, LoadErrorKind, load_error_message, warning_text

NAME_MAX = 255
HTTP_TIMEOUT = 1800
TEMP_DIR = "/tmp"
USER_AGENT = PACKAGE
_URL_PREFIXES = ("http://", "https://", "ftp://")
_CURL_PREFIX = "feh_curl_"
_RANDOM_CHARS = 8


class ImageLoadError(Exception):
    """An image could not be loaded; the message says why."""

    def __init__(
        self,
        filename: str,
        kind: LoadErrorKind = LoadErrorKind.IMLIB,
        detail: BaseException | None = None,
    ) -> None:
        self.filename = filename
        self.kind = kind
        self.detail = detail
        super().__init__(load_error_message(filename, kind, detail))


class ConversionCache:
    """Maps original names (files or URLs) to converted temporary files."""

    def __init__(self) -> None:
        self._entries: dict[str, str | None] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __enter__(self) -> "ConversionCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.clear()

    def get(self, key: str) -> str | None:
        """The converted file for ``key``, or None."""
        return self._entries.get(key)

    def set(self, key: str, path: str | None) -> None:
        """Remember the converted file for ``key``."""
        self._entries[key] = path

    def discard(self, key: str) -> str | None:
        """Forget ``key`` so that it is converted again; return the old path."""
        return self._entries.pop(key, None)

    def clear(self) -> None:
        """Delete every cached temporary file and empty the cache."""
        for path in self._entries.values():
            if path:
                try:
                    os.unlink(path)
                except OSError:
                    pass
        self._entries.clear()


def _warn(message: str, error: OSError | int | None = None) -> None:
    sys.stdout.flush()
    print(warning_text(message, error), file=sys.stderr)


def path_is_url(path: str) -> bool:
    """Whether ``path`` names a remote resource rather than a local file."""
    return path.startswith(_URL_PREFIXES)


def temp_name_for(filename: str, directory: str) -> str:
    """Base path for a temporary copy of ``filename`` inside ``directory``."""
    basename = filename.rpartition("/")[2]
    name = os.path.join(directory, basename)
    if len(name) > NAME_MAX - 6:
        name = name[: NAME_MAX - 7]
    return name


def _mkstemp_for(filename: str) -> tuple[int, str]:
    base = temp_name_for(filename, TEMP_DIR)
    return tempfile.mkstemp(prefix=os.path.basename(base) + "_", dir=os.path.dirname(base))


def is_raw(filename: str) -> bool:
    """Whether dcraw recognises ``filename`` as a camera raw file."""
    try:
        result = subprocess.run(
            ["dcraw", "-i", filename],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0


def dcraw_convert(filename: str, timeout: float = -1, cache: ConversionCache | None = None) -> str | None:
    """Extract the embedded preview of a raw file; return the temporary file."""
    if cache is not None:
        hit = cache.get(filename)
        if hit is not None:
            return hit
    try:
        fd, sfn = _mkstemp_for(filename)
    except OSError:
        return None

    signaled = False
    try:
        try:
            proc = subprocess.Popen(["dcraw", "-c", "-e", filename], stdout=fd)
        except OSError:
            proc = None
        if proc is not None:
            try:
                proc.wait(timeout=timeout if timeout and timeout > 0 else None)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            signaled = proc.returncode < 0
    finally:
        os.close(fd)

    if signaled:
        try:
            os.unlink(sfn)
        except OSError:
            pass
        _warn(f"{filename} - Conversion took too long, skipping")
        return None

    if cache is not None:
        cache.set(filename, sfn)
    return sfn


def _remove_tempdir(filename: str, tempdir: str) -> None:
    try:
        entries = os.listdir(tempdir)
    except OSError as exc:
        _warn(f"{filename}: Cannot remove temporary ImageMagick files from {tempdir}:", exc)
        return
    for entry in entries:
        if entry.startswith("."):
            continue
        path = os.path.join(tempdir, entry)
        try:
            os.unlink(path)
        except OSError as exc:
            _warn(f"unlink {path}:", exc)
    try:
        os.rmdir(tempdir)
    except OSError as exc:
        _warn(f"rmdir {tempdir}:", exc)


def magick_convert(
    filename: str,
    timeout: float = -1,
    cache: ConversionCache | None = None,
    quiet: bool = False,
) -> str | None:
    """Convert ``filename`` to PNG with ImageMagick; return the temporary file."""
    if cache is not None:
        hit = cache.get(filename)
        if hit is not None:
            return hit
    try:
        fd, sfn = _mkstemp_for(filename)
    except OSError:
        return None

    env = dict(os.environ)
    tempdir = None
    if "MAGICK_TMPDIR" not in os.environ:
        try:
            tempdir = tempfile.mkdtemp(prefix=".feh-magick-tmp-", dir=TEMP_DIR)
        except OSError as exc:
            _warn(f"{filename}: ImageMagick may leave temporary files in /tmp. mkdtemp failed:", exc)
        else:
            env["MAGICK_TMPDIR"] = tempdir

    output = subprocess.DEVNULL if quiet else None
    result: str | None = sfn
    try:
        try:
            proc = subprocess.Popen(
                ["convert", filename, f"png:{sfn}"],
                stdin=subprocess.DEVNULL,
                stdout=output,
                stderr=output,
                start_new_session=True,
                env=env,
            )
        except OSError:
            proc = None
        if proc is not None:
            try:
                proc.wait(timeout=timeout if timeout and timeout > 0 else None)
            except subprocess.TimeoutExpired:
                try:
                    os.killpg(proc.pid, signal.SIGKILL)
                except OSError:
                    proc.kill()
                proc.wait()
                try:
                    os.unlink(sfn)
                except OSError:
                    pass
                result = None
                if not quiet:
                    _warn(f"{filename}: Conversion took too long, skipping")
    finally:
        os.close(fd)
        if tempdir is not None:
            _remove_tempdir(filename, tempdir)

    if result is not None and cache is not None:
        cache.set(filename, result)
    return result


def http_download(url: str, directory: str | None = None, cache: ConversionCache | None = None) -> str | None:
    """Download ``url`` into a temporary file in ``directory``; None on failure."""
    if cache is not None:
        hit = cache.get(url)
        if hit is not None:
            return hit

    target_dir = TEMP_DIR if directory is None else (directory or ".")
    basename = url.rpartition("/")[2]
    suffix = ("_" + basename)[: NAME_MAX - len(_CURL_PREFIX) - _RANDOM_CHARS]
    try:
        fd, sfn = tempfile.mkstemp(prefix=_CURL_PREFIX, suffix=suffix, dir=target_dir)
    except OSError as exc:
        _warn("open url: mkstemps failed:", exc)
        return None

    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    ca_bundle = os.environ.get("CURL_CA_BUNDLE")
    context = ssl.create_default_context(cafile=ca_bundle) if ca_bundle else None
    result: str | None = sfn
    try:
        with os.fdopen(fd, "wb") as out:
            with urllib.request.urlopen(request, timeout=HTTP_TIMEOUT, context=context) as response:
                shutil.copyfileobj(response, out)
    except (OSError, ValueError, urllib.error.URLError) as exc:
        _warn(f"open url: {exc}")
        try:
            os.unlink(sfn)
        except OSError:
            pass
        result = None

    if cache is not None:
        cache.set(url, result)
    return result


def should_ignore(
    size: tuple[int, int],
    min_size: tuple[int, int],
    max_size: tuple[int, int],
) -> bool:
    """Whether an image of ``size`` falls outside the allowed dimensions."""
    width, height = size
    min_w, min_h = min_size
    max_w, max_h = max_size
    return width < min_w or width > max_w or height < min_h or height > max_h


def _open(path: str) -> Image.Image:
    image = Image.open(path)
    try:
        image.load()
    except BaseException:
        image.close()
        raise
    return image


def load_image(
    path: str,
    conversion_timeout: float = -1,
    auto_rotate: bool = False,
    cache: ConversionCache | None = None,
) -> Image.Image:
    """Load an image from a file or URL, falling back to dcraw or ImageMagick.

    External converters are tried only when ``conversion_timeout`` is not
    negative and no loader understood the file. Raises ImageLoadError.
    """
    kind = LoadErrorKind.IMLIB
    detail: BaseException | None = None
    no_loader = False
    image: Image.Image | None = None
    tmpname: str | None = None

    if path_is_url(path):
        tmpname = http_download(path, None, cache)
        if tmpname is None:
            missing = FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
            raise ImageLoadError(path, LoadErrorKind.CURL, missing)
    else:
        try:
            image = _open(path)
        except UnidentifiedImageError:
            no_loader = True
        except (OSError, ValueError, SyntaxError, MemoryError) as exc:
            detail = exc

        if image is None and no_loader and conversion_timeout >= 0:
            if is_raw(path):
                tmpname = dcraw_convert(path, conversion_timeout, cache)
                if tmpname is None:
                    kind = LoadErrorKind.DCRAW
            else:
                tmpname = magick_convert(path, conversion_timeout, cache, False)
                if tmpname is None:
                    kind = LoadErrorKind.IMAGEMAGICK

    if tmpname is not None:
        try:
            image = _open(tmpname)
        except UnidentifiedImageError:
            detail = None
        except (OSError, ValueError, SyntaxError, MemoryError) as exc:
            detail = exc
        if cache is None:
            try:
                os.unlink(tmpname)
            except OSError:
                pass

    if image is None:
        raise ImageLoadError(path, kind, detail)

    if auto_rotate:
        fmt = image.format
        image = ImageOps.exif_transpose(image)
        image.format = fmt
    return image