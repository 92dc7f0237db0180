"""Tests for image, formatting and dependency helpers."""

import sys
from pathlib import Path

import pytest
from PIL import Image

from jpeg_squeeze.utils.dependencies import check_comparator
from jpeg_squeeze.utils.format import human_size
from jpeg_squeeze.utils.image import clamp_quality, load_image, resize_image, roundtrip_jpeg, save_jpeg


@pytest.mark.parametrize("num_bytes, expected", [
    (0, "0.0B"),
    (1023, "1023.0B"),
    (1024, "1.0KB"),
    (1536, "1.5KB"),
    (5 * 1024 * 1024, "5.0MB"),
    (3 * 1024 ** 4, "3.0TB"),
])
def test_human_size(num_bytes: int, expected: str):
    assert human_size(num_bytes) == expected


def test_clamp_quality():
    assert clamp_quality(-1) == 1
    assert clamp_quality(0) == 1
    assert clamp_quality(57) == 57
    assert clamp_quality(120) == 100


def test_resize_derives_missing_dimension():
    img = Image.new("RGB", (200, 100), "white")
    assert resize_image(img, 50, 0).size == (50, 25)
    assert resize_image(img, 0, 20).size == (40, 20)
    assert resize_image(img, 30, 30).size == (30, 30)
    assert resize_image(img, 0, 0) is img


def test_load_image_flattens_alpha_on_white(tmp_path: Path):
    path = tmp_path / "transparent.png"
    Image.new("RGBA", (4, 4), (0, 0, 0, 0)).save(path)
    img = load_image(path)
    assert img.mode == "RGB"
    assert img.getpixel((0, 0)) == (255, 255, 255)


def test_load_image_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "missing.png")

    garbage = tmp_path / "garbage.png"
    garbage.write_bytes(b"not an image")
    with pytest.raises(ValueError, match="Cannot decode image"):
        load_image(garbage)


def test_roundtrip_and_save_jpeg(tmp_path: Path):
    img = Image.new("RGB", (16, 16), (200, 30, 30))
    decoded = roundtrip_jpeg(img, 90)
    assert decoded.size == img.size
    assert decoded.mode == "RGB"

    out = tmp_path / "nested" / "out.jpg"
    save_jpeg(img, out, 0)
    assert out.read_bytes()[:2] == b"\xff\xd8"


def test_check_comparator_resolves_executable():
    resolved = check_comparator([sys.executable, "-c", "print(0)"])
    assert Path(resolved[0]).name == Path(sys.executable).name
    assert resolved[1:] == ["-c", "print(0)"]


def test_check_comparator_missing():
    with pytest.raises(RuntimeError, match="Required tool not found"):
        check_comparator(["jpeg-squeeze-no-such-comparator"])
    with pytest.raises(RuntimeError):
        check_comparator([])
