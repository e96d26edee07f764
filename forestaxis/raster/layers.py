from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass
class LayerCache:
    axis_key: tuple[Any, ...] | None = None
    axis_template: np.ndarray | None = None

    def invalidate(self) -> None:
        self.axis_key = None
        self.axis_template = None


@dataclass
class DirtyState:
    dirty: bool = False
    rect: tuple[int, int, int, int] | None = None

    def mark(self, rect: tuple[int, int, int, int]) -> None:
        self.dirty = True
        self.rect = rect

    def take(self) -> tuple[int, int, int, int] | None:
        if not self.dirty:
            return None
        rect = self.rect
        self.dirty = False
        self.rect = None
        return rect
