"""Image decoding, resizing and JPEG encoding helpers."""

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MIN_QUALITY = 1
MAX_QUALITY = 100


def clamp_quality(quality: int) -> int:
    """Clamp a quality level to the range the JPEG codec accepts."""
    return max(MIN_QUALITY, min(MAX_QUALITY, quality))


def load_image(path: Path, background_rgb: tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
    """Decode an image file into an RGB image held in memory.

    Transparent images are composited onto ``background_rgb`` since JPEG has
    no alpha channel.
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file does not exist: {path}")

    try:
        with Image.open(path) as im:
            im.load()
            if im.mode in {"RGBA", "LA"} or (im.mode == "P" and "transparency" in im.info):
                bg = Image.new("RGBA", im.size, background_rgb + (255,))
                return Image.alpha_composite(bg, im.convert("RGBA")).convert("RGB")
            return im.convert("RGB")
    except UnidentifiedImageError as e:
        raise ValueError(f"Cannot decode image: {path}") from e


def resize_image(img: Image.Image, width: int, height: int) -> Image.Image:
    """Resize with Lanczos filtering.

    A zero dimension is derived from the other one to keep the aspect ratio;
    when both are zero the image is returned unchanged.
    """
    if width <= 0 and height <= 0:
        return img

    src_w, src_h = img.size
    if width <= 0:
        width = max(1, round(src_w * height / src_h))
    elif height <= 0:
        height = max(1, round(src_h * width / src_w))

    logger.debug(f"Resizing {src_w}x{src_h} -> {width}x{height}")
    return img.resize((width, height), Image.LANCZOS)


def roundtrip_jpeg(img: Image.Image, quality: int) -> Image.Image:
    """Encode to JPEG in memory at ``quality`` and decode the result.

    Safe to call concurrently on a shared image: ``Image.save`` stores the
    encoder options on the instance, so a private copy is encoded.
    """
    buffer = io.BytesIO()
    img.copy().save(buffer, format="JPEG", quality=clamp_quality(quality))
    buffer.seek(0)
    with Image.open(buffer) as decoded:
        decoded.load()
        return decoded.copy()


def save_jpeg(img: Image.Image, path: Path, quality: int) -> None:
    """Write the final JPEG output."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path, format="JPEG", quality=clamp_quality(quality))
