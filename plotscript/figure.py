from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal, Mapping, Sequence

from plotscript.adapters import normalize_xy, series_xy
from plotscript.elements import (
    PLOT_ELEMENT_TYPES,
    Bars,
    Candlesticks,
    ErrorBars,
    FilledCurve,
    Histogram,
    Line,
    PlotElement,
    Points,
)
from plotscript.errors import InvalidFigure, InvalidValue
from plotscript.scales import DEGENERATE_MARGIN, PADDING_FRACTION, DataLimits, resolve_range, union_limits
from plotscript.values import (
    GridLineStyle,
    Range,
    Scale,
    Style,
    TickFormat,
    TickLabels,
    require_positive,
    require_text,
)

LOGGER = logging.getLogger(__name__)

AxisName = Literal["x", "y", "y2"]
AXIS_NAMES: tuple[str, ...] = ("x", "y", "y2")


def _require_choice(value: object, choices: tuple[object, ...], field_name: str) -> None:
    if value not in choices:
        raise InvalidValue(f"{field_name} must be one of {choices}, got {value!r}")


@dataclass(frozen=True)
class Axis:
    label: str | None = None
    range: Range | None = None
    scale: Scale = field(default_factory=Scale.linear)
    tick_format: TickFormat = field(default_factory=TickFormat)
    tick_labels: TickLabels | None = None
    hidden: bool = False
    major_grid: bool = False
    minor_grid: bool = False
    scale_factor: float = 1.0

    def __post_init__(self) -> None:
        if self.label is not None:
            require_text(self.label, "Axis.label")
        if isinstance(self.range, tuple):
            object.__setattr__(self, "range", Range(*self.range))
        if self.range is not None and not isinstance(self.range, Range):
            raise InvalidValue(f"Axis.range must be a Range, got {self.range!r}")
        if not isinstance(self.scale, Scale):
            raise InvalidValue(f"Axis.scale must be a Scale, got {self.scale!r}")
        if not isinstance(self.tick_format, TickFormat):
            raise InvalidValue(f"Axis.tick_format must be a TickFormat, got {self.tick_format!r}")
        if self.tick_labels is not None and not isinstance(self.tick_labels, TickLabels):
            raise InvalidValue(f"Axis.tick_labels must be TickLabels, got {self.tick_labels!r}")
        object.__setattr__(self, "scale_factor", require_positive(self.scale_factor, "Axis.scale_factor"))


@dataclass(frozen=True)
class Legend:
    visible: bool = True
    placement: Literal["inside", "outside"] = "inside"
    vertical: Literal["top", "center", "bottom"] = "top"
    horizontal: Literal["left", "center", "right"] = "right"
    font_size: float | None = None
    boxed: bool = False
    title: str | None = None
    justification: Literal["left", "right"] | None = None
    order: Literal["text-sample", "sample-text"] | None = None
    stacked: Literal["vertical", "horizontal"] | None = None

    def __post_init__(self) -> None:
        _require_choice(self.placement, ("inside", "outside"), "Legend.placement")
        _require_choice(self.vertical, ("top", "center", "bottom"), "Legend.vertical")
        _require_choice(self.horizontal, ("left", "center", "right"), "Legend.horizontal")
        _require_choice(self.justification, (None, "left", "right"), "Legend.justification")
        _require_choice(self.order, (None, "text-sample", "sample-text"), "Legend.order")
        _require_choice(self.stacked, (None, "vertical", "horizontal"), "Legend.stacked")
        if self.font_size is not None:
            object.__setattr__(self, "font_size", require_positive(self.font_size, "Legend.font_size"))
        if self.title is not None:
            require_text(self.title, "Legend.title")


@dataclass(frozen=True)
class Grid:
    layer: Literal["default", "front", "back"] | None = None
    major: GridLineStyle = field(default_factory=GridLineStyle)
    minor: GridLineStyle = field(default_factory=GridLineStyle)

    def __post_init__(self) -> None:
        _require_choice(self.layer, (None, "default", "front", "back"), "Grid.layer")


class OutputFormat(str, Enum):
    PNG = "png"
    SVG = "svg"
    PDF = "pdf"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_path(cls, path: str | Path) -> "OutputFormat":
        suffix = Path(path).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError as exc:
            raise InvalidValue(f"cannot infer output format from path: {path}") from exc

    @classmethod
    def parse(cls, value: "OutputFormat | str") -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            raise InvalidValue(f"unsupported output format: {value!r}") from exc


@dataclass(frozen=True)
class OutputConfig:
    path: str | Path
    format: OutputFormat = OutputFormat.PNG
    width: int = 1280
    height: int = 720
    font: str | None = None
    font_size: float | None = None


@dataclass(frozen=True, eq=False)
class Panel:
    """One chart: its axes, ordered elements and the ranges resolved at finalize."""

    x: Axis
    y: Axis
    elements: tuple[PlotElement, ...]
    ranges: Mapping[str, tuple[float, float]]
    y2: Axis | None = None
    title: str | None = None
    legend: Legend = field(default_factory=Legend)
    grid: Grid | None = None

    def axis(self, name: str) -> Axis | None:
        if name not in AXIS_NAMES:
            raise InvalidValue(f"unknown axis: {name}")
        return getattr(self, name)

    def configured_axes(self) -> tuple[tuple[str, Axis], ...]:
        out: list[tuple[str, Axis]] = [("x", self.x), ("y", self.y)]
        if self.y2 is not None:
            out.append(("y2", self.y2))
        return tuple(out)


@dataclass(frozen=True, eq=False)
class Figure:
    output: OutputConfig
    panels: tuple[Panel, ...]
    layout: tuple[int, int] = (1, 1)
    title: str | None = None

    @property
    def is_multiplot(self) -> bool:
        return self.layout != (1, 1)

    @property
    def output_path(self) -> Path:
        return Path(self.output.path)


_AXIS_FIELDS = frozenset(f.name for f in fields(Axis))
_LEGEND_FIELDS = frozenset(f.name for f in fields(Legend))


class PanelBuilder:
    def __init__(self, title: str | None = None) -> None:
        if title is not None:
            require_text(title, "title")
        self._title = title
        self._axes: dict[str, Axis] = {"x": Axis(), "y": Axis()}
        self._legend = Legend()
        self._grid: Grid | None = None
        self._elements: list[PlotElement] = []

    @property
    def elements(self) -> tuple[PlotElement, ...]:
        return tuple(self._elements)

    def title(self, text: str | None) -> "PanelBuilder":
        if text is not None:
            require_text(text, "title")
        self._title = text
        return self

    def axis(self, name: AxisName, **overrides: Any) -> "PanelBuilder":
        if name not in AXIS_NAMES:
            raise InvalidFigure(f"unknown axis: {name!r}")
        unknown = sorted(set(overrides) - _AXIS_FIELDS)
        if unknown:
            raise InvalidFigure(f"unknown axis option(s): {', '.join(unknown)}")
        self._axes[name] = replace(self._axes.get(name, Axis()), **overrides)
        return self

    def legend(self, **overrides: Any) -> "PanelBuilder":
        unknown = sorted(set(overrides) - _LEGEND_FIELDS)
        if unknown:
            raise InvalidFigure(f"unknown legend option(s): {', '.join(unknown)}")
        self._legend = replace(self._legend, **overrides)
        return self

    def grid(
        self,
        *,
        layer: Literal["default", "front", "back"] | None = None,
        major: GridLineStyle | None = None,
        minor: GridLineStyle | None = None,
    ) -> "PanelBuilder":
        self._grid = Grid(layer=layer, major=major or GridLineStyle(), minor=minor or GridLineStyle())
        return self

    def add(self, element: PlotElement) -> "PanelBuilder":
        if not isinstance(element, PLOT_ELEMENT_TYPES):
            raise InvalidFigure(f"not a plot element: {type(element).__name__}")
        self._elements.append(element)
        return self

    def line(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        style: Style | None = None,
        draw: str = "lines",
        y_axis: str = "y",
    ) -> "PanelBuilder":
        series = normalize_xy(y=y, x=x, data=data)
        return self.add(Line(data=series, style=style or Style(), label=label, y_axis=y_axis, draw=draw))  # type: ignore[arg-type]

    def points(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        style: Style | None = None,
        draw: str = "points",
        y_axis: str = "y",
    ) -> "PanelBuilder":
        series = normalize_xy(y=y, x=x, data=data)
        return self.add(Points(data=series, style=style or Style(), label=label, y_axis=y_axis, draw=draw))  # type: ignore[arg-type]

    def bars(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        label: str | None = None,
        style: Style | None = None,
        width: float = 0.8,
        y_axis: str = "y",
    ) -> "PanelBuilder":
        series = normalize_xy(y=y, x=x, data=data)
        return self.add(Bars(data=series, style=style or Style(), label=label, y_axis=y_axis, width=width))  # type: ignore[arg-type]

    def filled_curve(
        self,
        x: Any,
        y1: Any,
        y2: Any,
        *,
        label: str | None = None,
        style: Style | None = None,
        y_axis: str = "y",
    ) -> "PanelBuilder":
        return self.add(FilledCurve(data=series_xy(x, y1), y2=y2, style=style or Style(), label=label, y_axis=y_axis))  # type: ignore[arg-type]

    def histogram(
        self,
        edges: Any = None,
        counts: Any = None,
        *,
        samples: Any = None,
        bins: int | Any = 10,
        label: str | None = None,
        style: Style | None = None,
        y_axis: str = "y",
    ) -> "PanelBuilder":
        kwargs: dict[str, Any] = {"style": style or Style(), "label": label, "y_axis": y_axis}
        if samples is not None:
            if edges is not None or counts is not None:
                raise InvalidFigure("histogram takes either samples or edges/counts, not both")
            return self.add(Histogram.from_samples(samples, bins=bins, **kwargs))
        return self.add(Histogram(edges=edges, counts=counts, **kwargs))

    def error_bars(
        self,
        y: Any = None,
        *,
        x: Any = None,
        error: Any = None,
        low: Any = None,
        high: Any = None,
        label: str | None = None,
        style: Style | None = None,
        direction: str = "y",
        joined: bool = False,
        y_axis: str = "y",
    ) -> "PanelBuilder":
        series = normalize_xy(y=y, x=x)
        kwargs: dict[str, Any] = {
            "style": style or Style(),
            "label": label,
            "direction": direction,
            "joined": joined,
            "y_axis": y_axis,
        }
        if error is not None:
            if low is not None or high is not None:
                raise InvalidFigure("error bars take either error or low/high, not both")
            return self.add(ErrorBars.symmetric(series, error, **kwargs))
        if low is None or high is None:
            raise InvalidFigure("error bars need error or both low and high")
        return self.add(ErrorBars.from_bounds(series, low, high, **kwargs))

    def candlesticks(
        self,
        x: Any,
        box_min: Any,
        whisker_min: Any,
        whisker_max: Any,
        box_max: Any,
        *,
        label: str | None = None,
        style: Style | None = None,
        y_axis: str = "y",
    ) -> "PanelBuilder":
        return self.add(
            Candlesticks(
                x=x,
                box_min=box_min,
                whisker_min=whisker_min,
                whisker_max=whisker_max,
                box_max=box_max,
                style=style or Style(),
                label=label,
                y_axis=y_axis,  # type: ignore[arg-type]
            )
        )

    def build(
        self,
        *,
        index: int = 0,
        padding: float = PADDING_FRACTION,
        margin: float = DEGENERATE_MARGIN,
    ) -> Panel:
        where = f"panel {index}"
        has_y2_axis = "y2" in self._axes
        y2_elements = [i for i, element in enumerate(self._elements) if element.y_axis == "y2"]
        if y2_elements and not has_y2_axis:
            raise InvalidFigure(
                f"{where}: element {y2_elements[0]} is assigned to the y2 axis but no y2 axis is configured"
            )
        if has_y2_axis and not y2_elements:
            raise InvalidFigure(f"{where}: a y2 axis is configured but no element is assigned to it")

        x_factor = self._axes["x"].scale_factor
        boxes = [
            element.bounding_box().scaled(x_factor, self._axes[element.y_axis].scale_factor)
            for element in self._elements
        ]
        spans: dict[str, tuple[float, float] | None] = {
            "x": _span(boxes, "x"),
            "y": _span([b for b, e in zip(boxes, self._elements) if e.y_axis == "y"], "y"),
            "y2": _span([b for b, e in zip(boxes, self._elements) if e.y_axis == "y2"], "y"),
        }

        ranges: dict[str, tuple[float, float]] = {}
        for name, axis in self._axes.items():
            span = spans[name]
            if axis.scale.is_log:
                _check_log_axis(where, name, axis, span)
            lo, hi = resolve_range(axis.range, span, axis.scale, padding=padding, margin=margin)
            if lo >= hi:
                raise InvalidFigure(f"{where}: {name} range collapses to [{lo}, {hi}]")
            ranges[name] = (lo, hi)
            if axis.range is None or not axis.range.is_complete:
                LOGGER.debug("%s: auto-ranged %s axis to [%r, %r]", where, name, lo, hi)

        return Panel(
            x=self._axes["x"],
            y=self._axes["y"],
            y2=self._axes.get("y2"),
            elements=tuple(self._elements),
            ranges=MappingProxyType(ranges),
            title=self._title,
            legend=self._legend,
            grid=self._grid,
        )


def _span(boxes: Sequence[DataLimits], dim: str) -> tuple[float, float] | None:
    merged = union_limits(boxes)
    if merged is None:
        return None
    if dim == "x":
        return (merged.xmin, merged.xmax)
    return (merged.ymin, merged.ymax)


def _check_log_axis(where: str, name: str, axis: Axis, span: tuple[float, float] | None) -> None:
    if axis.range is not None:
        for bound in (axis.range.low, axis.range.high):
            if bound is not None and bound <= 0:
                raise InvalidFigure(f"{where}: logarithmic {name} axis has non-positive bound {bound}")
    needs_data = axis.range is None or not axis.range.is_complete
    if needs_data and span is not None and span[0] <= 0:
        raise InvalidFigure(f"{where}: logarithmic {name} axis needs positive data, minimum is {span[0]}")


class FigureBuilder:
    def __init__(
        self,
        output: OutputConfig,
        *,
        padding: float = PADDING_FRACTION,
        degenerate_margin: float = DEGENERATE_MARGIN,
    ) -> None:
        self._output = output
        self._padding = padding
        self._margin = degenerate_margin
        self._single: PanelBuilder | None = None
        self._grid: tuple[int, int] | None = None
        self._grid_title: str | None = None
        self._children: list[PanelBuilder] = []

    @property
    def output(self) -> OutputConfig:
        return self._output

    def panel(self, title: str | None = None) -> PanelBuilder:
        if self._grid is not None:
            raise InvalidFigure("figure already configured for a subplot layout")
        if self._single is None:
            self._single = PanelBuilder(title=title)
        elif title is not None:
            self._single.title(title)
        return self._single

    def subplots(
        self,
        rows: int,
        cols: int,
        *,
        title: str | None = None,
        titles: Sequence[str] | None = None,
    ) -> list[PanelBuilder]:
        if rows <= 0 or cols <= 0:
            raise InvalidFigure("rows and cols must be > 0")
        if rows * cols < 2:
            raise InvalidFigure("subplot layout must include at least 2 panels")
        if self._single is not None or self._grid is not None:
            raise InvalidFigure("figure panels already initialized")
        if title is not None:
            require_text(title, "title")
        title_items: tuple[str, ...] = tuple(titles) if titles is not None else ()
        self._grid = (int(rows), int(cols))
        self._grid_title = title
        self._children = [
            PanelBuilder(title=title_items[idx] if idx < len(title_items) else None) for idx in range(rows * cols)
        ]
        return list(self._children)

    def finalize(self) -> Figure:
        output = _validate_output(self._output)
        if self._grid is not None:
            builders = self._children
            layout = self._grid
        else:
            builders = [self._single if self._single is not None else PanelBuilder()]
            layout = (1, 1)
        panels = tuple(
            builder.build(index=idx, padding=self._padding, margin=self._margin) for idx, builder in enumerate(builders)
        )
        return Figure(output=output, panels=panels, layout=layout, title=self._grid_title)


def _validate_output(output: OutputConfig) -> OutputConfig:
    if not isinstance(output, OutputConfig):
        raise InvalidFigure(f"output must be an OutputConfig, got {type(output).__name__}")
    path = str(output.path)
    if not path.strip():
        raise InvalidFigure("output path must be non-empty")
    try:
        require_text(path, "output path")
    except InvalidValue as exc:
        raise InvalidFigure(str(exc)) from exc
    for name in ("width", "height"):
        value = getattr(output, name)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise InvalidFigure(f"output {name} must be a positive integer, got {value!r}")
    font_size = output.font_size
    try:
        fmt = OutputFormat.parse(output.format)
        if output.font is not None:
            require_text(output.font, "output font")
        if font_size is not None:
            font_size = require_positive(font_size, "output font_size")
    except InvalidValue as exc:
        raise InvalidFigure(str(exc)) from exc
    return replace(output, format=fmt, font_size=font_size)
