"""Command line interface for the knotspline package."""
from __future__ import annotations

import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from .config import load_config
from .demo import run_demo
from .errors import SplineError
from .knot import EvalType
from .knotfile import read_knots, read_points, write_knots, write_samples
from .plotting import generate_plots
from .spline import Spline

logger = logging.getLogger(__name__)

app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})


def setup_logging(verbose: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Repeated calls only adjust the level and rebind the handler to the
    current ``sys.stderr``.
    """

    root = logging.getLogger("knotspline")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if root.handlers:
        for handler in root.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-7s: %(message)s"))
    root.addHandler(handler)


def _fail(exc: SplineError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=int(exc.code))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages to stderr."),
) -> None:
    """Cubic spline interpolation and evaluation tools."""

    setup_logging(verbose)


@app.command("int")
def interpolate_points(
    input_path: str = typer.Argument(..., metavar="FILE", help="Read x y points from FILE or '-' for stdin."),
    spline_type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help="Boundary conditions: y1|y2|y1-y2|natural|clamped|periodic|not-a-knot (default natural).",
    ),
    y1_0: Optional[float] = typer.Option(None, "--y1-0", help="First derivative at the first knot (y1, y1-y2)."),
    y1_n: Optional[float] = typer.Option(None, "--y1-n", help="First derivative at the last knot (y1, y1-y2)."),
    y2_0: Optional[float] = typer.Option(None, "--y2-0", help="Second derivative at the first knot (y2, y1-y2)."),
    y2_n: Optional[float] = typer.Option(None, "--y2-n", help="Second derivative at the last knot (y2, y1-y2)."),
    r_0: Optional[float] = typer.Option(
        None, "--r-0", help="Relative location of the first intermediate knot (y1-y2), in (0, 1)."
    ),
    r_n: Optional[float] = typer.Option(
        None, "--r-n", help="Relative location of the last intermediate knot (y1-y2), in (0, 1)."
    ),
    output: str = typer.Option("-", "--output", "-o", help="Write knots to this file or '-' for stdout."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON settings file."),
    override: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Override config keys, e.g. --set interpolation.type=clamped --set interpolation.y1_0=1",
    ),
) -> None:
    """Interpolate sample points with a cubic spline and write its knots."""

    settings = list(override or [])
    for key, value in (
        ("type", spline_type),
        ("y1_0", y1_0),
        ("y1_n", y1_n),
        ("y2_0", y2_0),
        ("y2_n", y2_n),
        ("r_0", r_0),
        ("r_n", r_n),
    ):
        if value is not None:
            settings.append(f"interpolation.{key}={value}")
    try:
        cfg = load_config(config_path, settings)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        points = read_points(input_path)
        spline = Spline.from_points(
            points, cfg.interpolation.spline_type, **cfg.interpolation.parameters()
        )
        count = write_knots(spline, output)
    except SplineError as exc:
        raise _fail(exc) from exc
    logger.debug("Interpolated %d points into %d knots", len(points), count)


@app.command("eval")
def evaluate_steps(
    input_path: str = typer.Argument(..., metavar="FILE", help="Read spline knots from FILE or '-' for stdin."),
    step_size: float = typer.Argument(..., metavar="STEP_SIZE", help="Distance between evaluated locations."),
    eval_type: str = typer.Option("base", "--type", "-t", help="Evaluation type: base|first|second."),
    output: str = typer.Option("-", "--output", "-o", help="Write x f(x) rows to this file or '-' for stdout."),
) -> None:
    """Evaluate a spline at equidistant locations starting from its first knot."""

    try:
        cfg = load_config(None, [f"evaluation.type={eval_type}", f"evaluation.step_size={step_size}"])
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    try:
        spline = read_knots(input_path)
        xs, values = _walk(spline, cfg.evaluation.step_size, cfg.evaluation.eval_type)
        write_samples(xs, values, output)
    except SplineError as exc:
        raise _fail(exc) from exc


def _walk(spline: Spline, step_size: float, eval_type: EvalType) -> Tuple[List[float], List[float]]:
    xs: List[float] = []
    values: List[float] = []
    x0 = x = spline.x_min
    index = 0
    while True:
        value, index = spline.evaluate_linear(x, eval_type, index)
        if math.isnan(value):
            break
        xs.append(x)
        values.append(value)
        x = x0 + step_size * len(xs)
    return xs, values


@app.command()
def segments(
    input_path: str = typer.Argument(..., metavar="FILE", help="Read spline knots from FILE or '-' for stdin."),
) -> None:
    """Print the polynomial coefficients a b c d x0 of every segment."""

    try:
        spline = read_knots(input_path)
    except SplineError as exc:
        raise _fail(exc) from exc
    for segment in spline.segments():
        typer.echo(segment.format())


@app.command()
def plot(
    input_path: str = typer.Argument(..., metavar="FILE", help="Read spline knots from FILE or '-' for stdin."),
    out_dir: Path = typer.Option(Path("spline_plots"), "--out", help="Target directory for the figure."),
    samples: int = typer.Option(250, "--samples", min=2, help="Number of evaluated locations."),
) -> None:
    """Plot a spline with its first and second derivative."""

    try:
        spline = read_knots(input_path)
    except SplineError as exc:
        raise _fail(exc) from exc
    try:
        figure_path = generate_plots(spline, out_dir, samples=samples)
    except (RuntimeError, ValueError) as exc:
        typer.echo(f"[warning] plotting skipped: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Plot written to {figure_path}")


@app.command()
def demo(
    out_dir: Path = typer.Option(Path("demo_output"), "--out", help="Target directory for demo output."),
) -> None:
    """Interpolate synthetic data with every boundary condition family."""

    run_demo(out_dir)
    typer.echo(f"Demo knots and samples written to {out_dir}")


def run() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    run()
