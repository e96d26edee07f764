from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import fields
import logging
from pathlib import Path
import tomllib
from typing import Any

from forestaxis.errors import AxisConfigError
from forestaxis.types import AxisConfig, EffectRef, check_scale

LOGGER = logging.getLogger(__name__)

_FIELD_NAMES = frozenset(f.name for f in fields(AxisConfig))

# Keys as the browser widget serializes them.
_CAMEL_ALIASES = {
    "rangeMin": "range_min",
    "rangeMax": "range_max",
    "tickCount": "tick_count",
    "tickValues": "tick_values",
    "gridlineStyle": "gridline_style",
    "ciClipFactor": "ci_clip_factor",
    "includeNull": "include_null",
    "nullTick": "null_tick",
    "markerMargin": "marker_margin",
}


def default_null_value(scale: str) -> float:
    return 1.0 if check_scale(scale) == "log" else 0.0


def resolve_columns(
    point_col: str | None,
    lower_col: str | None,
    upper_col: str | None,
    effects: Sequence[EffectRef] = (),
) -> tuple[str, str, str]:
    """Primary point/lower/upper field names; unset ones come from the first effect."""
    if effects:
        first = effects[0]
        point_col = point_col or first.point_col
        lower_col = lower_col or first.lower_col
        upper_col = upper_col or first.upper_col
    if not point_col or not lower_col or not upper_col:
        raise AxisConfigError("point, lower and upper columns are required when no effects are given")
    return point_col, lower_col, upper_col


def axis_config_from_mapping(raw: Mapping[str, Any]) -> AxisConfig:
    values: dict[str, Any] = {}
    for key, value in raw.items():
        name = _CAMEL_ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            LOGGER.warning("ignoring unknown axis config key: %s", key)
            continue
        if name in values:
            raise AxisConfigError(f"axis config key given twice: {key}")
        values[name] = value

    tick_values = values.get("tick_values")
    if tick_values is not None and not isinstance(tick_values, (list, tuple)):
        raise AxisConfigError("tick_values must be a list of numbers")
    try:
        return AxisConfig(**values)
    except AxisConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise AxisConfigError(f"invalid axis config: {exc}") from exc


def load_axis_config(path: str | Path) -> AxisConfig:
    """Read an ``[axis]`` table from a TOML file (or the top level if absent)."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"axis config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("axis", raw)
    if not isinstance(table, dict):
        raise AxisConfigError("`axis` must be a table")
    return axis_config_from_mapping(table)
