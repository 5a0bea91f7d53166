import pytest
from PIL import Image

from fehkit.index import (
    IndexOptions,
    build_index,
    calculate_height,
    calculate_width,
    index_title,
    thumbnail_size,
)


@pytest.fixture
def images(tmp_path):
    paths = []
    for n in range(3):
        path = tmp_path / f"img{n}.png"
        Image.new("RGB", (60, 60), (255, 0, 0)).save(path)
        paths.append(str(path))
    return paths


def test_thumbnail_size_square_keeps_thumb():
    assert thumbnail_size(120, 120, 60, 60, True, False) == (60, 60)


def test_thumbnail_size_no_enlarge_without_stretch():
    assert thumbnail_size(10, 10, 60, 60, True, False) == (10, 10)


def test_thumbnail_size_stretch_enlarges():
    assert thumbnail_size(10, 10, 60, 60, True, True) == (60, 60)


def test_thumbnail_size_keeps_aspect():
    www, hhh = thumbnail_size(400, 100, 60, 60, True, False)
    assert www == 60
    assert hhh < 60
    assert abs(www / hhh - 4) < 0.5


def test_thumbnail_size_ignores_aspect_when_disabled():
    assert thumbnail_size(400, 100, 60, 60, False, True) == (60, 60)


def test_calculate_height_single_row():
    h, tot = calculate_height([(0, 0)] * 3, 800, 60, 60, 65)
    assert tot == 65
    assert h == tot


def test_calculate_height_is_whole_rows_and_grows():
    previous = 0
    for n in range(1, 10):
        h, tot = calculate_height([(0, 0)] * n, 130, 60, 60, 65)
        assert h % tot == 0
        assert h >= previous
        previous = h
    assert previous > 65


def test_calculate_height_grows_cell_for_text():
    _, tot = calculate_height([(10, 20)], 800, 60, 60, 65)
    assert tot == 60 + 20 + 5


def test_calculate_width_single_file():
    w, tot = calculate_width([(0, 0)], 600, 60, 60, 65)
    assert w == 60
    assert tot == 65


def test_calculate_width_adds_columns():
    narrow, _ = calculate_width([(0, 0)] * 2, 600, 60, 60, 65)
    wide, _ = calculate_width([(0, 0)] * 20, 100, 60, 60, 65)
    assert wide > narrow


def test_index_title():
    assert index_title(3, 800, 600) == "feh index - 3 thumbnails, 800 by 600 pixels"


def test_build_index_layout(images):
    options = IndexOptions(limit_w=200)
    image, count = build_index(images, options)
    expected_h, _ = calculate_height([(0, 0)] * 3, 200, 60, 60, 65)
    assert count == 3
    assert image.size == (200, expected_h)
    assert image.getpixel((5, 5)) == (255, 0, 0, 255)
    assert image.getpixel((199, expected_h - 1)) == (0, 0, 0, 255)


def test_build_index_skips_unloadable(images, tmp_path, capsys):
    bad = tmp_path / "bad.txt"
    bad.write_text("not an image")
    _, count = build_index([images[0], str(bad), images[1]], IndexOptions(limit_w=200))
    assert count == 2
    assert "bad.txt" in capsys.readouterr().err


def test_build_index_transparent_with_alpha(images):
    options = IndexOptions(limit_w=200, bg_file="trans", alpha_level=100)
    image, _ = build_index(images, options)
    assert image.getpixel((5, 5)) == (255, 0, 0, 100)
    assert image.getpixel((199, 0))[3] == 0


def test_build_index_title_adds_height(images):
    plain, _ = build_index(images, IndexOptions(limit_w=200))
    titled, _ = build_index(images, IndexOptions(limit_w=200, title=True))
    assert titled.size[0] == plain.size[0]
    assert titled.size[1] > plain.size[1]


def test_build_index_saves_output(images, tmp_path):
    options = IndexOptions(limit_w=200, output_file="out.png", output_dir=str(tmp_path))
    image, _ = build_index(images, options)
    with Image.open(tmp_path / "out.png") as saved:
        assert saved.size == image.size


def test_build_index_vertical(images):
    image, count = build_index(images, IndexOptions(limit_h=300))
    assert count == 3
    assert image.size[1] == 300
    assert image.size[0] >= 60


def test_build_index_limit_height_warns(images, capsys):
    image, _ = build_index(images, IndexOptions(limit_w=60, limit_h=10))
    assert image.size == (60, 10)
    assert "is not large" in capsys.readouterr().err


def test_build_index_info_text_widens_cells(images):
    options = IndexOptions(limit_w=800, index_info=lambda p: "a fairly long caption text")
    image, count = build_index(images, options)
    plain, _ = build_index(images, IndexOptions(limit_w=800))
    assert count == 3
    assert image.size[1] > plain.size[1]


def test_build_index_verbose_status(images, capsys):
    build_index(images, IndexOptions(limit_w=200, verbose=True))
    assert "[  0%] " in capsys.readouterr().err