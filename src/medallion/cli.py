from __future__ import annotations

import logging
import pathlib
from dataclasses import replace

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from medallion._config import get_settings
from medallion._logging import configure_logging, timed
from medallion.io.obj import load_obj, save_obj
from medallion.medallion import build_medallion
from medallion.mesh import MeshAnalysis
from medallion.validation import IOFailure, ValidationError

console = Console()
app = typer.Typer(help="Generate medallion meshes and inspect OBJ output.")
logger = logging.getLogger(__name__)


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def _analysis_table(analysis: MeshAnalysis) -> Table:
    table = Table(show_header=False, box=None)
    table.add_row("Vertices", str(analysis.n_vertices))
    table.add_row("Faces", str(analysis.n_faces))
    table.add_row("Watertight", "yes" if analysis.is_watertight else "no")
    for issue in analysis.issues():
        table.add_row("[yellow]Issue[/yellow]", issue)
    return table


@app.command()
def build(
    output: pathlib.Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Path to the OBJ file that will be produced (defaults to the configured output).",
    ),
    thickness: float | None = typer.Option(None, min=0.0, help="Medal thickness."),
    impression: float | None = typer.Option(None, min=0.0, help="Depth of the recessed face."),
    top_text: str | None = typer.Option(None, "--top-text", help="Inscription along the upper arc."),
    bottom_text: str | None = typer.Option(None, "--bottom-text", help="Inscription along the lower arc."),
    sides: int | None = typer.Option(None, min=3, help="Segments used to approximate each circle."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    """
    Build the medallion and save it as an OBJ file.
    """

    configure_logging(logging.DEBUG if verbose else logging.INFO, console=console)

    settings = get_settings()
    overrides = {
        "thickness": thickness,
        "impression": impression,
        "top_text": top_text,
        "bottom_text": bottom_text,
        "sides": sides,
    }
    settings = replace(settings, **{key: value for key, value in overrides.items() if value is not None})

    target = output if output is not None else pathlib.Path(settings.output)
    final_output = target
    if target.exists() and not overwrite:
        final_output = _next_available_path(target)
        console.print(f"[yellow]Output {target} exists; writing to {final_output} instead.[/yellow]")

    try:
        medal = build_medallion(settings)
    except ValueError as exc:
        raise typer.BadParameter(f"Medallion generation failed: {exc}") from exc

    analysis = medal.analyze()
    if analysis.has_invalid_vertices:
        raise typer.BadParameter("Medallion generation produced non-finite vertices.")

    try:
        final_output.parent.mkdir(parents=True, exist_ok=True)
        with timed("Saving medal", logger):
            save_obj(medal, final_output)
    except OSError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(
        Panel(
            _analysis_table(analysis),
            title=f"Wrote [green]{final_output}[/green]",
            border_style="green",
        )
    )


@app.command()
def inspect(
    path: pathlib.Path = typer.Argument(..., help="OBJ file to analyse."),
) -> None:
    """
    Load an OBJ file and report its vertex/face counts and mesh issues.
    """

    if not path.exists():
        raise typer.BadParameter(f"File {path} does not exist.")
    try:
        model = load_obj(path)
    except (ValidationError, IOFailure) as exc:
        console.print(Panel.fit(str(exc), title="Unable to read OBJ", style="red"))
        raise typer.Exit(code=1) from exc

    analysis = model.analyze()
    style = "green" if not analysis.issues() else "yellow"
    console.print(Panel(_analysis_table(analysis), title=str(path), border_style=style))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
