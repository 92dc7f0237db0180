"""CLI command for find-quality."""

import os
import shlex
from typing import Optional

import typer

from jpeg_squeeze.find_quality.main import main
from jpeg_squeeze.models.config import DEFAULT_COMPARATOR, DEFAULT_MAX_RATING, SqueezeConfig
from jpeg_squeeze.utils.cli import cli_error_handler, setup_logging


@cli_error_handler
def find_quality(
    input_file: str = typer.Argument(..., help="Path to the image to process"),
    output: str = typer.Argument(..., help="Path to the output JPEG file"),
    max_rating: float = typer.Option(DEFAULT_MAX_RATING, "--max", help="Maximum deviation accepted by the comparator (default: 1.1)"),
    width: int = typer.Option(0, "--width", help="Width to resize to; omitting width or height keeps proportion"),
    height: int = typer.Option(0, "--height", help="Height to resize to; omitting width or height keeps proportion"),
    cores: int = typer.Option(os.cpu_count() or 2, "--cores", help="How many qualities to probe concurrently"),
    comparator: str = typer.Option(DEFAULT_COMPARATOR, "--comparator", help="Comparator command, called with <reference> <candidate>"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds allowed per comparator call"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite output file if it exists"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Find the lowest JPEG quality that stays visually lossless.

    Every probed quality is compared against a quality-100 rendering with an
    external perceptual comparator (butteraugli's compare_pngs by default);
    the image is then written at the smallest quality scoring below --max.
    """
    setup_logging(verbose)

    config = SqueezeConfig(
        max_rating=max_rating,
        width=width,
        height=height,
        cores=cores,
        comparator=shlex.split(comparator),
        timeout=timeout,
    )
    main(input_file=input_file, output=output, config=config, overwrite=overwrite)
