"""Console script for jpeg_squeeze."""

import typer

from jpeg_squeeze.find_quality.cli import find_quality

app = typer.Typer()

app.command("find-quality")(find_quality)


@app.command()
def version():
    """Display version information."""
    typer.echo("JPEG Squeeze v0.1.0")
    raise typer.Exit()


if __name__ == "__main__":
    app()
