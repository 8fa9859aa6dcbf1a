from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from plotscript.errors import UnsupportedStyle
from plotscript.values import PALETTE, Color, LinePattern, Marker, Style


@dataclass(frozen=True)
class StyleTable:
    """Lookup from abstract element kinds and style values to gnuplot codes.

    Element kinds are the draw-mode names used in plot clauses (``lines``,
    ``points``, ``boxes``...). Anything missing from the table is reported as
    ``UnsupportedStyle`` instead of falling back to an engine default.
    """

    styles: Mapping[str, str]
    attributes: Mapping[str, frozenset[str]]
    colors: Mapping[str, str] = field(default_factory=dict)
    dash_types: Mapping[LinePattern, int] = field(default_factory=dict)
    point_types: Mapping[Marker, int] = field(default_factory=dict)

    def style_for(self, kind: str) -> str:
        try:
            return self.styles[kind]
        except KeyError as exc:
            raise UnsupportedStyle(kind, "kind", kind) from exc

    def check_attributes(self, kind: str, style: Style) -> None:
        supported = self.attributes.get(kind, frozenset())
        for name in style.assigned_attributes():
            if name not in supported:
                raise UnsupportedStyle(kind, name)

    def color(self, kind: str, color: Color) -> str:
        if color.rgb is not None:
            return color.hex() or ""
        try:
            return self.colors[color.name or ""]
        except KeyError as exc:
            raise UnsupportedStyle(kind, "color", color.name) from exc

    def dash_type(self, kind: str, pattern: LinePattern) -> int:
        try:
            return self.dash_types[pattern]
        except KeyError as exc:
            raise UnsupportedStyle(kind, "line_pattern", pattern.value) from exc

    def point_type(self, kind: str, marker: Marker) -> int:
        try:
            return self.point_types[marker]
        except KeyError as exc:
            raise UnsupportedStyle(kind, "marker", marker.value) from exc


_LINE_ATTRS = frozenset({"color", "line_width", "line_pattern"})
_POINT_ATTRS = frozenset({"color", "marker", "point_size"})

GNUPLOT_STYLE_TABLE = StyleTable(
    styles={
        "lines": "lines",
        "linespoints": "linespoints",
        "steps": "steps",
        "impulses": "impulses",
        "points": "points",
        "dots": "dots",
        "filledcurves": "filledcurves",
        "boxes": "boxes",
        "xerrorbars": "xerrorbars",
        "yerrorbars": "yerrorbars",
        "xerrorlines": "xerrorlines",
        "yerrorlines": "yerrorlines",
        "candlesticks": "candlesticks",
    },
    attributes={
        "lines": _LINE_ATTRS,
        "linespoints": _LINE_ATTRS | _POINT_ATTRS,
        "steps": _LINE_ATTRS,
        "impulses": _LINE_ATTRS,
        "points": _POINT_ATTRS,
        "dots": frozenset({"color"}),
        "filledcurves": frozenset({"color", "opacity"}),
        "boxes": frozenset({"color", "opacity"}),
        "xerrorbars": _LINE_ATTRS | _POINT_ATTRS,
        "yerrorbars": _LINE_ATTRS | _POINT_ATTRS,
        "xerrorlines": _LINE_ATTRS | _POINT_ATTRS,
        "yerrorlines": _LINE_ATTRS | _POINT_ATTRS,
        "candlesticks": _LINE_ATTRS,
    },
    colors={name: name for name in PALETTE},
    dash_types={
        LinePattern.SOLID: 1,
        LinePattern.DASH: 2,
        LinePattern.DOT: 3,
        LinePattern.DOT_DASH: 4,
        LinePattern.DOT_DOT_DASH: 5,
    },
    point_types={
        Marker.PLUS: 1,
        Marker.X: 2,
        Marker.STAR: 3,
        Marker.SQUARE: 4,
        Marker.FILLED_SQUARE: 5,
        Marker.CIRCLE: 6,
        Marker.FILLED_CIRCLE: 7,
        Marker.TRIANGLE: 8,
        Marker.FILLED_TRIANGLE: 9,
    },
)
