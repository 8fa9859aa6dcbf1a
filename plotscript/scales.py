from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable

import numpy as np

from plotscript.values import Range, Scale


# Auto-range constants. Changing any of them changes emitted scripts.
PADDING_FRACTION = 0.05
DEGENERATE_MARGIN = 1.0
EMPTY_RANGE = (-1.0, 1.0)


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def union(self, other: "DataLimits") -> "DataLimits":
        return DataLimits(
            xmin=min(self.xmin, other.xmin),
            xmax=max(self.xmax, other.xmax),
            ymin=min(self.ymin, other.ymin),
            ymax=max(self.ymax, other.ymax),
        )

    def scaled(self, x_factor: float, y_factor: float) -> "DataLimits":
        """Limits of the data after multiplying x by ``x_factor`` and y by ``y_factor`` (both > 0)."""
        return DataLimits(
            xmin=self.xmin * x_factor,
            xmax=self.xmax * x_factor,
            ymin=self.ymin * y_factor,
            ymax=self.ymax * y_factor,
        )


BoundingBox = DataLimits


def compute_limits(x: np.ndarray, *columns: np.ndarray) -> DataLimits:
    """Min/max of ``x`` and of every y-like column, in one pass per column."""
    if x.size == 0:
        raise ValueError("cannot compute limits of an empty series")
    ymins = [float(np.min(c)) for c in columns if c.size]
    ymaxs = [float(np.max(c)) for c in columns if c.size]
    if not ymins:
        raise ValueError("cannot compute limits without y values")
    return DataLimits(xmin=float(np.min(x)), xmax=float(np.max(x)), ymin=min(ymins), ymax=max(ymaxs))


def union_limits(limits: Iterable[DataLimits]) -> DataLimits | None:
    out: DataLimits | None = None
    for item in limits:
        out = item if out is None else out.union(item)
    return out


def pad_span(vmin: float, vmax: float, *, padding: float = PADDING_FRACTION, margin: float = DEGENERATE_MARGIN) -> tuple[float, float]:
    if vmin == vmax:
        return (vmin - margin, vmax + margin)
    pad = (vmax - vmin) * padding
    return (vmin - pad, vmax + pad)


def auto_range(
    span: tuple[float, float] | None,
    scale: Scale,
    *,
    padding: float = PADDING_FRACTION,
    margin: float = DEGENERATE_MARGIN,
) -> tuple[float, float]:
    """Padded axis limits for a data span; log axes pad in log-base space.

    ``span`` must hold strictly positive values on a logarithmic axis.
    """
    if not scale.is_log:
        if span is None:
            return EMPTY_RANGE
        return pad_span(span[0], span[1], padding=padding, margin=margin)

    base = scale.base
    if span is None:
        return (1.0, base)
    lo = math.log(span[0], base)
    hi = math.log(span[1], base)
    plo, phi = pad_span(lo, hi, padding=padding, margin=1.0)
    return (base**plo, base**phi)


def resolve_range(
    explicit: Range | None,
    span: tuple[float, float] | None,
    scale: Scale,
    *,
    padding: float = PADDING_FRACTION,
    margin: float = DEGENERATE_MARGIN,
) -> tuple[float, float]:
    if explicit is not None and explicit.low is not None and explicit.high is not None:
        return (explicit.low, explicit.high)
    lo, hi = auto_range(span, scale, padding=padding, margin=margin)
    if explicit is not None:
        if explicit.low is not None:
            lo = explicit.low
        if explicit.high is not None:
            hi = explicit.high
    return (lo, hi)
