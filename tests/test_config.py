from __future__ import annotations

from pathlib import Path

import pytest

from knotspline.config import SplineConfig, load_config
from knotspline.interpolation import SplineType
from knotspline.knot import EvalType


def test_defaults_without_file() -> None:
    cfg = load_config()

    assert isinstance(cfg, SplineConfig)
    assert cfg.interpolation.spline_type is SplineType.NATURAL
    assert cfg.interpolation.r_0 == 0.5
    assert cfg.evaluation.eval_type is EvalType.BASE
    assert cfg.evaluation.step_size == 0.1


def test_load_config_overrides(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(
        """
        {
          "interpolation": {"type": "y1", "y1_0": 1.5, "y1_n": -2},
          "evaluation": {"type": "first", "step_size": 0.25}
        }
        """,
        encoding="utf-8",
    )

    cfg = load_config(
        cfg_path,
        overrides=["interpolation.type=y1-y2", "interpolation.r_n=0.75", "evaluation.step_size=1e-2"],
    )

    assert cfg.interpolation.spline_type is SplineType.Y1_Y2
    assert cfg.interpolation.y1_0 == 1.5
    assert cfg.interpolation.y1_n == -2.0
    assert cfg.interpolation.r_n == 0.75
    assert cfg.evaluation.eval_type is EvalType.FIRST
    assert cfg.evaluation.step_size == 0.01
    assert cfg.interpolation.parameters()["r_n"] == 0.75


@pytest.mark.parametrize(
    "override",
    [
        "interpolation.type=quintic",
        "interpolation.r_0=1.0",
        "interpolation.r_n=0",
        "evaluation.type=third",
        "evaluation.step_size=0",
        "evaluation.step_size=-0.5",
        "evaluation.step_size=inf",
        "evaluation.step_size=nan",
        "missing_equals",
        "=1",
    ],
)
def test_invalid_settings_raise(override: str) -> None:
    with pytest.raises(ValueError):
        load_config(overrides=[override])


def test_config_file_must_hold_object(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_override_values_are_coerced() -> None:
    cfg = load_config(
        overrides=[
            "interpolation.type=Not-A-Knot",
            "interpolation.y1_0=2",
            "interpolation.y2_n=-1.5e1",
            "evaluation.type= second ",
        ]
    )

    assert cfg.interpolation.spline_type is SplineType.NOT_A_KNOT
    assert cfg.interpolation.y1_0 == 2.0
    assert isinstance(cfg.interpolation.y1_0, float)
    assert cfg.interpolation.y2_n == -15.0
    assert cfg.evaluation.eval_type is EvalType.SECOND
