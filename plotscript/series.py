from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from plotscript.errors import InvalidData


def frozen_array(values: np.ndarray) -> np.ndarray:
    out = np.array(values, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class SeriesData:
    """Paired (x, y) samples, finite and read-only once constructed."""

    x: np.ndarray
    y: np.ndarray
    source_name: str | None = None

    def __post_init__(self) -> None:
        x = frozen_array(self.x)
        y = frozen_array(self.y)
        if x.ndim != 1 or y.ndim != 1:
            raise InvalidData("series x and y must be 1-D")
        if x.shape != y.shape:
            raise InvalidData(f"x and y length mismatch: {x.size} != {y.size}")
        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
            raise InvalidData("series contains non-finite values")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __len__(self) -> int:
        return int(self.x.size)

    @property
    def is_empty(self) -> bool:
        return self.x.size == 0
