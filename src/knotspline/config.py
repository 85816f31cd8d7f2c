from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Sequence

from .interpolation import SplineType
from .knot import EvalType


@dataclass
class InterpolationConfig:
    type: str = "natural"  # y1 | y2 | y1-y2 | natural | clamped | periodic | not-a-knot
    y1_0: float = 0.0
    y1_n: float = 0.0
    y2_0: float = 0.0
    y2_n: float = 0.0
    r_0: float = 0.5
    r_n: float = 0.5

    @property
    def spline_type(self) -> SplineType:
        try:
            return SplineType(self.type.lower())
        except ValueError as exc:
            choices = "|".join(member.value for member in SplineType)
            raise ValueError(f"Unsupported interpolation type '{self.type}' ({choices})") from exc

    def parameters(self) -> Dict[str, float]:
        return {
            "y1_0": self.y1_0,
            "y1_n": self.y1_n,
            "y2_0": self.y2_0,
            "y2_n": self.y2_n,
            "r_0": self.r_0,
            "r_n": self.r_n,
        }


@dataclass
class EvaluationConfig:
    type: str = "base"  # base | first | second
    step_size: float = 0.1

    @property
    def eval_type(self) -> EvalType:
        try:
            return EvalType(self.type.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported evaluation type '{self.type}' (base|first|second)") from exc


@dataclass
class SplineConfig:
    interpolation: InterpolationConfig = field(default_factory=InterpolationConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)

    def validate(self) -> "SplineConfig":
        _ = self.interpolation.spline_type, self.evaluation.eval_type
        for name in ("r_0", "r_n"):
            ratio = getattr(self.interpolation, name)
            if not 0.0 < ratio < 1.0:
                raise ValueError(f"interpolation.{name} must lie in (0, 1), got {ratio}")
        step_size = self.evaluation.step_size
        if not (math.isfinite(step_size) and step_size > 0.0):
            raise ValueError(f"evaluation.step_size must be positive and finite, got {step_size}")
        return self


def _load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {**base}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merged[key] = _merge(base[key], value)  # type: ignore[index]
        else:
            merged[key] = value
    return merged


def load_config(path: Path | str | None = None, overrides: Sequence[str] | None = None) -> SplineConfig:
    """
    Load spline tool settings from JSON (if given) and apply CLI-style overrides.

    Overrides are expressed as dotted `key=value` pairs, e.g.:
        ["interpolation.type=clamped", "evaluation.step_size=0.05"]
    """
    data = _load_json(Path(path)) if path is not None else {}
    override_data: Dict[str, Any] = {}
    for override in overrides or []:
        key, raw_value = _parse_override(override)
        _assign_nested(override_data, key, raw_value)
    merged = _merge(data, override_data)
    interp = merged.get("interpolation") or {}
    evaluation = merged.get("evaluation") or {}
    config = SplineConfig(
        interpolation=InterpolationConfig(
            type=str(interp.get("type", "natural")),
            y1_0=float(interp.get("y1_0", 0.0)),
            y1_n=float(interp.get("y1_n", 0.0)),
            y2_0=float(interp.get("y2_0", 0.0)),
            y2_n=float(interp.get("y2_n", 0.0)),
            r_0=float(interp.get("r_0", 0.5)),
            r_n=float(interp.get("r_n", 0.5)),
        ),
        evaluation=EvaluationConfig(
            type=str(evaluation.get("type", "base")),
            step_size=float(evaluation.get("step_size", 0.1)),
        ),
    )
    return config.validate()


def _parse_override(item: str) -> tuple[str, Any]:
    if "=" not in item:
        raise ValueError(f"Override '{item}' must use key=value syntax")
    key, raw_value = item.split("=", 1)
    key = key.strip()
    if not key:
        raise ValueError("Override key may not be empty")
    value = _coerce_value(raw_value.strip())
    return key, value


def _coerce_value(raw: str) -> Any:
    if raw.lower() in {"true", "false"}:
        return raw.lower() == "true"
    try:
        return float(raw)
    except ValueError:
        return raw


def _assign_nested(target: Dict[str, Any], dotted_key: str, value: Any) -> None:
    cursor = target
    parts = dotted_key.split(".")
    for part in parts[:-1]:
        cursor = cursor.setdefault(part, {})
    cursor[parts[-1]] = value
