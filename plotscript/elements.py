from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

import numpy as np

from plotscript.adapters import coerce_1d, series_xy
from plotscript.errors import InvalidData
from plotscript.scales import DataLimits, compute_limits
from plotscript.series import SeriesData, frozen_array
from plotscript.values import Style, require_positive, require_text


YAxis = Literal["y", "y2"]
LineDraw = Literal["lines", "linespoints", "steps", "impulses"]
PointDraw = Literal["points", "dots"]


def _check_common(kind: str, style: Style, label: str | None, y_axis: str) -> None:
    if not isinstance(style, Style):
        raise InvalidData(f"{kind} style must be a Style, got {type(style).__name__}")
    if label is not None:
        require_text(label, f"{kind}.label")
    if y_axis not in ("y", "y2"):
        raise InvalidData(f"{kind}.y_axis must be 'y' or 'y2', got {y_axis!r}")


def _require_series(kind: str, data: SeriesData) -> None:
    if not isinstance(data, SeriesData):
        raise InvalidData(f"{kind} data must be SeriesData, got {type(data).__name__}")
    if data.is_empty:
        raise InvalidData(f"{kind} requires at least one point")


def _column(kind: str, name: str, values: Any, expected: int) -> np.ndarray:
    arr = frozen_array(coerce_1d(values, label=f"{kind}.{name}"))
    if arr.size != expected:
        raise InvalidData(f"{kind}.{name} length mismatch: {arr.size} != {expected}")
    return arr


@dataclass(frozen=True, eq=False)
class Line:
    data: SeriesData
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"
    draw: LineDraw = "lines"

    def __post_init__(self) -> None:
        _require_series("Line", self.data)
        _check_common("Line", self.style, self.label, self.y_axis)
        if self.draw not in ("lines", "linespoints", "steps", "impulses"):
            raise InvalidData(f"unsupported line draw mode: {self.draw}")

    def bounding_box(self) -> DataLimits:
        return compute_limits(self.data.x, self.data.y)


@dataclass(frozen=True, eq=False)
class Points:
    data: SeriesData
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"
    draw: PointDraw = "points"

    def __post_init__(self) -> None:
        _require_series("Points", self.data)
        _check_common("Points", self.style, self.label, self.y_axis)
        if self.draw not in ("points", "dots"):
            raise InvalidData(f"unsupported point draw mode: {self.draw}")

    def bounding_box(self) -> DataLimits:
        return compute_limits(self.data.x, self.data.y)


@dataclass(frozen=True, eq=False)
class FilledCurve:
    """Area between ``data.y`` and ``y2`` over ``data.x``."""

    data: SeriesData
    y2: np.ndarray
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"

    def __post_init__(self) -> None:
        _require_series("FilledCurve", self.data)
        _check_common("FilledCurve", self.style, self.label, self.y_axis)
        object.__setattr__(self, "y2", _column("FilledCurve", "y2", self.y2, len(self.data)))

    @classmethod
    def between(cls, x: Any, y1: Any, y2: Any, **kwargs: Any) -> "FilledCurve":
        return cls(data=series_xy(x, y1), y2=y2, **kwargs)

    def bounding_box(self) -> DataLimits:
        return compute_limits(self.data.x, self.data.y, self.y2)


@dataclass(frozen=True, eq=False)
class Bars:
    data: SeriesData
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"
    width: float = 0.8

    def __post_init__(self) -> None:
        _require_series("Bars", self.data)
        _check_common("Bars", self.style, self.label, self.y_axis)
        object.__setattr__(self, "width", require_positive(self.width, "Bars.width"))

    def bounding_box(self) -> DataLimits:
        half = self.width * 0.5
        limits = compute_limits(self.data.x, self.data.y)
        return DataLimits(
            xmin=limits.xmin - half,
            xmax=limits.xmax + half,
            ymin=min(limits.ymin, 0.0),
            ymax=max(limits.ymax, 0.0),
        )


@dataclass(frozen=True, eq=False)
class Histogram:
    """Pre-binned counts; ``edges`` has one more entry than ``counts``."""

    edges: np.ndarray
    counts: np.ndarray
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"

    def __post_init__(self) -> None:
        _check_common("Histogram", self.style, self.label, self.y_axis)
        edges = frozen_array(coerce_1d(self.edges, label="Histogram.edges"))
        counts = frozen_array(coerce_1d(self.counts, label="Histogram.counts"))
        if counts.size == 0:
            raise InvalidData("Histogram requires at least one bin")
        if edges.size != counts.size + 1:
            raise InvalidData(
                f"histogram needs len(edges) == len(counts) + 1, got {edges.size} edges for {counts.size} counts"
            )
        if np.any(np.diff(edges) <= 0):
            raise InvalidData("histogram bin edges must be strictly increasing")
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "counts", counts)

    @classmethod
    def from_samples(cls, samples: Any, bins: int | Any = 10, **kwargs: Any) -> "Histogram":
        values = coerce_1d(samples, label="Histogram.samples")
        if values.size == 0:
            raise InvalidData("Histogram requires at least one sample")
        counts, edges = np.histogram(values, bins=bins)
        return cls(edges=edges, counts=counts, **kwargs)

    @property
    def centers(self) -> np.ndarray:
        return (self.edges[:-1] + self.edges[1:]) * 0.5

    @property
    def widths(self) -> np.ndarray:
        return np.diff(self.edges)

    def bounding_box(self) -> DataLimits:
        return DataLimits(
            xmin=float(self.edges[0]),
            xmax=float(self.edges[-1]),
            ymin=min(float(np.min(self.counts)), 0.0),
            ymax=max(float(np.max(self.counts)), 0.0),
        )


@dataclass(frozen=True, eq=False)
class ErrorBars:
    """Values with non-negative error magnitudes below (``minus``) and above (``plus``)."""

    data: SeriesData
    minus: np.ndarray
    plus: np.ndarray
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"
    direction: Literal["x", "y"] = "y"
    joined: bool = False

    def __post_init__(self) -> None:
        _require_series("ErrorBars", self.data)
        _check_common("ErrorBars", self.style, self.label, self.y_axis)
        if self.direction not in ("x", "y"):
            raise InvalidData(f"error bar direction must be 'x' or 'y', got {self.direction!r}")
        n = len(self.data)
        minus = _column("ErrorBars", "minus", self.minus, n)
        plus = _column("ErrorBars", "plus", self.plus, n)
        if np.any(minus < 0) or np.any(plus < 0):
            raise InvalidData("error bar magnitudes must be >= 0")
        object.__setattr__(self, "minus", minus)
        object.__setattr__(self, "plus", plus)

    @classmethod
    def symmetric(cls, data: SeriesData, error: Any, **kwargs: Any) -> "ErrorBars":
        if isinstance(error, (int, float, np.number)):
            magnitude = np.full(len(data), float(error), dtype=np.float64)
        else:
            magnitude = coerce_1d(error, label="ErrorBars.error")
        return cls(data=data, minus=magnitude, plus=magnitude, **kwargs)

    @classmethod
    def from_bounds(cls, data: SeriesData, low: Any, high: Any, **kwargs: Any) -> "ErrorBars":
        direction = kwargs.get("direction", "y")
        center = data.x if direction == "x" else data.y
        n = len(data)
        low_arr = _column("ErrorBars", "low", low, n)
        high_arr = _column("ErrorBars", "high", high, n)
        return cls(data=data, minus=center - low_arr, plus=high_arr - center, **kwargs)

    @property
    def low(self) -> np.ndarray:
        return self._center - self.minus

    @property
    def high(self) -> np.ndarray:
        return self._center + self.plus

    @property
    def _center(self) -> np.ndarray:
        return self.data.x if self.direction == "x" else self.data.y

    def bounding_box(self) -> DataLimits:
        if self.direction == "x":
            return DataLimits(
                xmin=float(np.min(self.low)),
                xmax=float(np.max(self.high)),
                ymin=float(np.min(self.data.y)),
                ymax=float(np.max(self.data.y)),
            )
        return compute_limits(self.data.x, self.low, self.high)


@dataclass(frozen=True, eq=False)
class Candlesticks:
    x: np.ndarray
    box_min: np.ndarray
    whisker_min: np.ndarray
    whisker_max: np.ndarray
    box_max: np.ndarray
    style: Style = field(default_factory=Style)
    label: str | None = None
    y_axis: YAxis = "y"

    def __post_init__(self) -> None:
        _check_common("Candlesticks", self.style, self.label, self.y_axis)
        x = frozen_array(coerce_1d(self.x, label="Candlesticks.x"))
        if x.size == 0:
            raise InvalidData("Candlesticks requires at least one point")
        object.__setattr__(self, "x", x)
        for name in ("box_min", "whisker_min", "whisker_max", "box_max"):
            object.__setattr__(self, name, _column("Candlesticks", name, getattr(self, name), x.size))

    def bounding_box(self) -> DataLimits:
        return compute_limits(self.x, self.box_min, self.whisker_min, self.whisker_max, self.box_max)


PlotElement: TypeAlias = Line | Points | FilledCurve | Bars | Histogram | ErrorBars | Candlesticks

PLOT_ELEMENT_TYPES: tuple[type, ...] = (Line, Points, FilledCurve, Bars, Histogram, ErrorBars, Candlesticks)
