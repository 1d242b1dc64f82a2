# src/formlens/cli.py
"""
formlens Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`. It
works offline, from an `AnalyzeDocument` response saved as JSON (for example
with `aws textract analyze-document --feature-types FORMS > page.json`), so
extraction and rendering can be checked without the HTTP server or AWS access.

Usage
-----
    # Print the pairs of a saved response as a table (or JSON)
    $ formlens extract page.json
    $ formlens extract page.json --json

    # Draw the pairs onto the page image
    $ formlens render page.png page.json --output page.annotated.png
"""

from __future__ import annotations

import json
import traceback
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from formlens.core.contracts.block import Block, BoundingBox, blocks_from_response
from formlens.core.contracts.pair import KeyValuePair, dump_pairs
from formlens.core.errors import UpstreamError
from formlens.pipelines.form_extraction import extract_pairs
from formlens.render.annotate import (
    decode_image,
    encode_png,
    load_label_font,
    render_annotations,
)

load_dotenv()

app = typer.Typer(
    help="formlens: rebuild form key/value pairs from document-analysis blocks.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _load_blocks(path: Path) -> list[Block]:
    """Read a saved analysis response (object with `Blocks`, or a bare list)."""
    with open(path, encoding="utf-8") as f:
        payload: Any = json.load(f)
    if not isinstance(payload, dict | list):
        raise ValueError(f"{path.name}: expected a JSON object or list of blocks")
    return blocks_from_response(payload)


def _format_box(box: BoundingBox | None) -> str:
    if box is None:
        return "-"
    return f"{box.top:.3f}, {box.left:.3f}"


def _render_table(pairs: list[KeyValuePair], title: str) -> None:
    """Print pairs as a Rich table in reading order."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="bold blue")
    table.add_column("Value", style="red")
    table.add_column("Key @ (top, left)", style="dim")
    table.add_column("Value @ (top, left)", style="dim")

    for i, pair in enumerate(pairs, start=1):
        table.add_row(
            str(i),
            pair.key,
            pair.value,
            _format_box(pair.key_bounding_box),
            _format_box(pair.value_bounding_box),
        )
    console.print(table)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #

BlocksArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Saved AnalyzeDocument response (JSON).",
    ),
]


@app.command()  # type: ignore[misc]
def extract(
    blocks_file: BlocksArg,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the pairs as the JSON list served by /analyze."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Extract key/value pairs from a saved analysis response.
    """
    try:
        pairs = extract_pairs(_load_blocks(blocks_file))
    except (OSError, ValueError) as e:
        console.print(f"[bold red]❌ Extraction Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if as_json:
        # Plain stdout so the output can be piped.
        typer.echo(dump_pairs(pairs, indent=2))
        return

    _render_table(pairs, title=blocks_file.name)
    console.print(f"[bold green]✅ {len(pairs)} pair(s)[/bold green]")


@app.command()  # type: ignore[misc]
def render(
    image_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Source page image (PNG, JPEG, ...).",
        ),
    ],
    blocks_file: BlocksArg,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the annotated PNG."),
    ] = Path("annotated.png"),
    font: Annotated[
        Path | None,
        typer.Option("--font", help="TrueType font for the labels (default: Pillow's)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Draw key (blue) and value (red) boxes from a saved response onto its image.
    """
    try:
        image = decode_image(image_file.read_bytes())
        pairs = extract_pairs(_load_blocks(blocks_file))
        annotated = render_annotations(image, pairs, font=load_label_font(font))
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(encode_png(annotated))
    except (OSError, ValueError, UpstreamError) as e:
        console.print(f"[bold red]❌ Render Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    console.print(
        Panel(
            f"{len(pairs)} pair(s) drawn on a {image.width}x{image.height} image\n"
            f"Saved to: [link=file://{output.resolve()}]{output}[/link]",
            title="Annotated",
            border_style="green",
        )
    )


if __name__ == "__main__":
    app()
