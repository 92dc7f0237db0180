"""Core logic for find-quality: smallest JPEG quality that stays visually lossless."""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from jpeg_squeeze.models.config import SqueezeConfig
from jpeg_squeeze.oracle.main import QualityOracle, build_reference
from jpeg_squeeze.search.main import kary_search
from jpeg_squeeze.utils.format import human_size
from jpeg_squeeze.utils.image import MAX_QUALITY, clamp_quality, load_image, resize_image, save_jpeg

logger = logging.getLogger(__name__)


def validate_paths(input_file: str, output: str, overwrite: bool) -> tuple[Path, Path]:
    """Check input and output paths before any image work starts."""
    input_path = Path(input_file)
    if not input_path.exists():
        raise FileNotFoundError(f"Input file does not exist: {input_file}")
    if not input_path.is_file():
        raise ValueError(f"Input path is not a file: {input_file}")

    output_path = Path(output)
    if output_path.exists() and not overwrite:
        raise FileExistsError(
            f"Output file already exists: {output}. Use --overwrite to replace."
        )
    return input_path, output_path


def find_quality(input_file: str, output: str, config: SqueezeConfig, overwrite: bool) -> int:
    """Search the lowest passing quality, write the JPEG and report sizes.

    Returns:
        The quality level used for the output file.
    """
    console = Console()
    stderr_console = Console(stderr=True)
    started = time.perf_counter()

    input_path, output_path = validate_paths(input_file, output, overwrite)

    img = load_image(input_path)
    img = resize_image(img, config.width, config.height)
    logger.info(f"Loaded {input_path.name} ({img.width}x{img.height}), max deviation {config.max_rating}")

    reference = build_reference(img)
    try:
        oracle = QualityOracle(config, img, reference)

        progress_columns = [
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("[cyan]{task.completed:.0f}[/cyan] probes"),
            TimeElapsedColumn(),
        ]
        # Ticking stops when the block exits, before the report below prints.
        with Progress(*progress_columns, console=stderr_console, transient=True) as progress:
            task = progress.add_task("Searching quality", total=None)

            def probe(q: int) -> bool:
                passed = oracle.evaluate(q)
                progress.update(task, advance=1)
                return passed

            def on_interval(start: int, end: int) -> None:
                progress.update(task, description=f"Searching quality ({start}, {end}]")

            # The search floor lets it return 0, which the codec encodes as 1.
            quality = clamp_quality(kary_search(MAX_QUALITY, config.cores, probe, on_interval=on_interval))
            save_jpeg(img, output_path, quality)
    finally:
        reference.unlink(missing_ok=True)

    elapsed = time.perf_counter() - started
    console.print(f"\nCompleted in {elapsed:.2f}s")
    console.print(f"Best JPG quality: {quality}")
    console.print(f"{input_file}: {human_size(input_path.stat().st_size)}", markup=False, highlight=False)
    console.print(f"{output}: {human_size(output_path.stat().st_size)}", markup=False, highlight=False)
    return quality


def main(input_file: str, output: str, config: SqueezeConfig, overwrite: bool) -> None:
    """Entry point called from cli.py."""
    find_quality(input_file, output, config, overwrite)
