import io

from PIL import Image
import pytest

from fehkit.listing import HEADER, format_size, list_images, loadables


@pytest.fixture
def good(tmp_path):
    path = tmp_path / "good.png"
    Image.new("RGBA", (40, 20)).save(path)
    return str(path)


@pytest.fixture
def bad(tmp_path):
    path = tmp_path / "bad.png"
    path.write_text("nope")
    return str(path)


def test_format_size_small():
    assert format_size(999) == "999 "


def test_format_size_units():
    assert format_size(1000) == "  1k"
    assert format_size(1000 ** 2) == "  1M"


def test_format_size_width_invariant():
    for value in (0, 5, 12345, 10 ** 7, 10 ** 13, 10 ** 16):
        assert len(format_size(value)) == 4


def test_list_images(good, bad):
    out = io.StringIO()
    assert list_images([good, bad], out) == 0
    lines = out.getvalue().splitlines(keepends=True)
    assert lines[0] == HEADER
    assert len(lines) == 2
    fields = lines[1].rstrip("\n").split("\t")
    assert fields[0] == "1"
    assert fields[1] == "png"
    assert fields[2:4] == ["40", "20"]
    assert fields[6] == "X"
    assert fields[7] == good


def test_loadables(good, bad):
    out = io.StringIO()
    assert loadables([good, bad], True, out) == 1
    assert out.getvalue() == good + "\n"


def test_unloadables(good, bad):
    out = io.StringIO()
    assert loadables([good, bad], False, out) == 1
    assert out.getvalue() == bad + "\n"


def test_loadables_all_good(good):
    out = io.StringIO()
    assert loadables([good], True, out) == 0
    assert out.getvalue() == good + "\n"