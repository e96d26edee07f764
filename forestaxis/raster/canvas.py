from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 0)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def _blend(segment: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    rgb = np.asarray(color[0:3], dtype=np.float32)
    segment[..., :3] = (rgb * a + segment[..., :3].astype(np.float32) * (1.0 - a)).astype(np.uint8)
    segment[..., 3] = np.maximum(segment[..., 3], color[3])


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend(dst[y, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    _blend(dst[ya : yb + 1, x], color)


def draw_dashed_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, *, dash: int, gap: int) -> None:
    """Vertical line drawn as ``dash`` on / ``gap`` off pixel runs from the top."""
    if dash <= 0:
        return
    ya, yb = min(y0, y1), max(y0, y1)
    period = dash + max(0, gap)
    for start in range(ya, yb + 1, period):
        draw_vline(dst, x, start, min(yb, start + dash - 1), color)
