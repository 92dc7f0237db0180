"""Quality oracle: rate a candidate JPEG quality against a max-quality reference.

Each probe re-encodes the source image at the candidate quality, round-trips it
through the JPEG codec, stores the decoded pixels as a PNG and asks the
external comparator (butteraugli's ``compare_pngs`` by default) for a deviation
score against the reference PNG.
"""

import logging
import subprocess
import tempfile
from pathlib import Path

from PIL import Image

from jpeg_squeeze.models.config import SqueezeConfig
from jpeg_squeeze.utils.dependencies import check_comparator
from jpeg_squeeze.utils.image import MAX_QUALITY, clamp_quality, roundtrip_jpeg

TEMP_PREFIX = "_butter_"

logger = logging.getLogger(__name__)


class ComparatorError(RuntimeError):
    """The comparator exited non-zero, timed out or printed something that is not a score."""


def write_roundtrip_png(img: Image.Image, quality: int) -> Path:
    """Round-trip ``img`` through JPEG at ``quality`` and save it as a temp PNG.

    The file name carries the quality level plus a random token so concurrent
    probes never collide. The caller owns the returned file.
    """
    decoded = roundtrip_jpeg(img, quality)
    with tempfile.NamedTemporaryFile(prefix=f"{TEMP_PREFIX}{quality}_", suffix=".png", delete=False) as f:
        path = Path(f.name)
        try:
            decoded.save(f, format="PNG")
        except Exception:
            f.close()
            path.unlink(missing_ok=True)
            raise
    return path


def build_reference(img: Image.Image) -> Path:
    """Render the reference PNG at maximum quality."""
    return write_roundtrip_png(img, MAX_QUALITY)


def parse_score(stdout: str) -> float:
    text = stdout.strip()
    try:
        return float(text)
    except ValueError:
        raise ComparatorError(f"Could not parse comparator score from output: {text!r}")


class QualityOracle:
    """Maps a quality level to a pass/fail verdict against a fixed reference.

    Instances only hold read-only state, so ``evaluate`` may be called from
    many threads at once.
    """

    def __init__(self, config: SqueezeConfig, image: Image.Image, reference: Path):
        self._config = config
        self._image = image
        self._reference = reference
        self._command = check_comparator(config.comparator)

    @property
    def max_rating(self) -> float:
        return self._config.max_rating

    def compare(self, candidate: Path) -> float:
        """Run the comparator on (reference, candidate) and return its score."""
        cmd = [*self._command, str(self._reference), str(candidate)]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self._config.timeout, check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ComparatorError(
                f"Comparator timed out after {self._config.timeout}s: {' '.join(cmd)}"
            ) from e
        if result.returncode != 0:
            tail = "\n".join(result.stderr.strip().splitlines()[-20:])
            raise ComparatorError(
                f"Comparator failed with exit code {result.returncode}: {' '.join(cmd)}\n{tail}"
            )
        return parse_score(result.stdout)

    def score(self, quality: int) -> float:
        """Deviation score of ``quality`` versus the reference."""
        candidate = write_roundtrip_png(self._image, clamp_quality(quality))
        try:
            rating = self.compare(candidate)
        finally:
            candidate.unlink(missing_ok=True)
        logger.debug(f"quality={quality} score={rating:.4f}")
        return rating

    def evaluate(self, quality: int) -> bool:
        """True when ``quality`` is visually close enough to the reference."""
        return self.score(quality) < self.max_rating
