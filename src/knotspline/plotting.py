"""Plotting helpers for splines."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

import numpy as np

from .knot import EvalType, Point
from .spline import Spline


def generate_plots(
    spline: Spline,
    output_dir: Path,
    points: Optional[Sequence[Point]] = None,
    samples: int = 250,
    name: str = "spline",
) -> Path:
    """Render the spline and its first two derivatives into ``<name>.png``."""

    if spline.num_segments < 1:
        raise ValueError("spline needs at least two knots to be plotted")
    if samples < 2:
        raise ValueError("samples must be at least 2")
    plt = _require_matplotlib()
    output_dir.mkdir(parents=True, exist_ok=True)
    fig, axes = plt.subplots(1, 3, figsize=(18, 5))

    xs = np.linspace(spline.x_min, spline.x_max, samples)
    _plot_values(spline, xs, points, axes[0])
    _plot_derivative(spline, xs, EvalType.FIRST, axes[1])
    _plot_derivative(spline, xs, EvalType.SECOND, axes[2])

    fig.tight_layout()
    out_path = output_dir / f"{name}.png"
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return out_path


def _plot_values(spline: Spline, xs: np.ndarray, points: Optional[Sequence[Point]], ax) -> None:
    ax.plot(xs, spline.sample(xs), color="black", linestyle="-", label="spline")
    x_knots, y_knots, _ = spline.arrays()
    ax.scatter(x_knots, y_knots, color="red", marker="o", label="knots", zorder=3)
    if points:
        ax.scatter(
            [p.x for p in points],
            [p.y for p in points],
            color="navy",
            marker="x",
            label="samples",
            zorder=4,
        )
    ax.set_title("Spline")
    ax.set_xlabel("x")
    ax.set_ylabel("f(x)")
    ax.legend(loc="best")


def _plot_derivative(spline: Spline, xs: np.ndarray, eval_type: EvalType, ax) -> None:
    label = {
        EvalType.FIRST: "First derivative",
        EvalType.SECOND: "Second derivative",
    }[eval_type]
    ax.plot(xs, spline.sample(xs, eval_type), color="green", linestyle="-")
    x_knots, _, y2_knots = spline.arrays()
    if eval_type is EvalType.SECOND:
        ax.scatter(x_knots, y2_knots, color="red", marker="o", zorder=3)
    ax.axhline(0.0, color="black", linewidth=0.8, linestyle="--")
    ax.set_title(label)
    ax.set_xlabel("x")


def _require_matplotlib() -> Any:
    home_cache = Path.home() / ".cache" / "fontconfig"
    try:
        home_cache.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError("matplotlib cannot write font cache in this environment") from exc

    try:
        import matplotlib
        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("matplotlib is required for plotting; install knotspline[plot]") from exc
    except Exception as exc:  # pragma: no cover - environment issues
        raise RuntimeError(f"matplotlib initialisation failed: {exc}") from exc
    return plt
