from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
import math
from numbers import Real
from typing import Any

import numpy as np

from forestaxis.types import Row


try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def coerce_number(raw: Any) -> float | None:
    """Return ``raw`` as a finite float, or ``None`` when it cannot be plotted."""
    if raw is None or isinstance(raw, (bool, np.bool_, str, bytes, bytearray)):
        return None

    if torch is not None and isinstance(raw, torch.Tensor):
        if raw.ndim != 0:
            return None
        raw = raw.detach().cpu().item()
        if isinstance(raw, bool):
            return None
    elif isinstance(raw, np.ndarray):
        if raw.ndim != 0 or raw.dtype.kind not in {"i", "u", "f"}:
            return None
        raw = raw.item()

    if isinstance(raw, Decimal):
        try:
            value = float(raw)
        except (InvalidOperation, ValueError):
            return None
    elif isinstance(raw, Real):
        try:
            value = float(raw)
        except (OverflowError, TypeError, ValueError):
            return None
    else:
        return None

    if not math.isfinite(value):
        return None
    return value


def collect_values(
    rows: Iterable[Row],
    columns: Iterable[str],
    *,
    positive_only: bool = False,
) -> tuple[np.ndarray, int]:
    """Gather usable values of ``columns`` across ``rows``.

    Missing fields are skipped. Returns the values and the number of present
    entries that were rejected (non-numeric, NaN, or non-positive when
    ``positive_only``).
    """
    cols = [c for c in dict.fromkeys(columns) if c]
    out: list[float] = []
    rejected = 0
    for row in rows:
        meta = row.metadata
        for col in cols:
            if col not in meta:
                continue
            value = coerce_number(meta[col])
            if value is None or (positive_only and value <= 0.0):
                rejected += 1
                continue
            out.append(value)
    return np.asarray(out, dtype=np.float64), rejected
