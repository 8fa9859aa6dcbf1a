from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable, TypeAlias

import numpy as np

from plotscript.compile.quoting import format_number, quote
from plotscript.compile.style_table import GNUPLOT_STYLE_TABLE, StyleTable
from plotscript.elements import (
    Bars,
    Candlesticks,
    ErrorBars,
    FilledCurve,
    Histogram,
    Line,
    PlotElement,
    Points,
)
from plotscript.errors import InvalidFigure
from plotscript.figure import Axis, Figure, Grid, Legend, OutputConfig, OutputFormat, Panel
from plotscript.values import GridLineStyle, Style

LOGGER = logging.getLogger(__name__)

# Points per inch used to express pixel sizes on the pdfcairo terminal.
PDF_PX_PER_INCH = 72.0

_TERMINALS = {
    OutputFormat.PNG: "png",
    OutputFormat.SVG: "svg",
    OutputFormat.PDF: "pdfcairo",
}


@dataclass(frozen=True)
class Command:
    text: str


@dataclass(frozen=True)
class InlineData:
    """Rows of one ``'-'`` data source; the engine reads them up to ``e``."""

    rows: tuple[str, ...]

    def lines(self) -> tuple[str, ...]:
        return self.rows + ("e",)


Statement: TypeAlias = Command | InlineData


@dataclass(frozen=True)
class EmittedScript:
    statements: tuple[Statement, ...]
    output_path: Path

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(s.text for s in self.statements if isinstance(s, Command))

    @property
    def data_blocks(self) -> tuple[InlineData, ...]:
        return tuple(s for s in self.statements if isinstance(s, InlineData))

    def lines(self) -> list[str]:
        out: list[str] = []
        for statement in self.statements:
            if isinstance(statement, Command):
                out.append(statement.text)
            else:
                out.extend(statement.lines())
        return out

    def text(self) -> str:
        return "\n".join(self.lines()) + "\n"


@dataclass(frozen=True)
class _Clause:
    kind: str
    columns: int
    rows: tuple[str, ...]
    element: PlotElement


def emit_script(figure: Figure, *, style_table: StyleTable = GNUPLOT_STYLE_TABLE) -> EmittedScript:
    """Translate a finalized figure into an ordered gnuplot script."""
    if not isinstance(figure, Figure):
        raise InvalidFigure(f"emit_script expects a finalized Figure, got {type(figure).__name__}")
    statements: list[Statement] = [Command("set encoding utf8")]
    statements.append(Command(_terminal_command(figure.output)))
    statements.append(Command(f"set output {quote(str(figure.output.path), 'output path')}"))

    if figure.is_multiplot:
        rows, cols = figure.layout
        cmd = f"set multiplot layout {rows},{cols}"
        if figure.title is not None:
            cmd += f" title {quote(figure.title, 'figure title')}"
        statements.append(Command(cmd))

    for index, panel in enumerate(figure.panels):
        if index > 0:
            statements.append(Command("reset"))
        statements.extend(_panel_statements(panel, style_table))

    if figure.is_multiplot:
        statements.append(Command("unset multiplot"))
    statements.append(Command("unset output"))

    script = EmittedScript(statements=tuple(statements), output_path=figure.output_path)
    LOGGER.debug(
        "emitted %d statements (%d data blocks) for %s",
        len(script.statements),
        len(script.data_blocks),
        script.output_path,
    )
    return script


def _terminal_command(output: OutputConfig) -> str:
    terminal = _TERMINALS[output.format]
    if output.format is OutputFormat.PDF:
        size = f"{format_number(output.width / PDF_PX_PER_INCH)}in,{format_number(output.height / PDF_PX_PER_INCH)}in"
    else:
        size = f"{output.width},{output.height}"
    cmd = f"set terminal {terminal} size {size} noenhanced"
    if output.font is not None or output.font_size is not None:
        font = output.font or ""
        if output.font_size is not None:
            font += f",{format_number(output.font_size)}"
        cmd += f" font {quote(font, 'font')}"
    return cmd


def _panel_statements(panel: Panel, table: StyleTable) -> list[Statement]:
    out: list[Statement] = []
    if panel.title is not None:
        out.append(Command(f"set title {quote(panel.title, 'panel title')}"))
    for name, axis in panel.configured_axes():
        out.extend(Command(text) for text in _axis_commands(name, axis, panel.ranges[name]))
    out.append(Command(_key_command(panel.legend)))
    if panel.grid is not None:
        grid_cmd = _grid_style_command(panel.grid, table)
        if grid_cmd is not None:
            out.append(Command(grid_cmd))

    if not panel.elements:
        out.append(Command("plot NaN notitle"))
        return out

    clauses = [_clause(element, panel.x.scale_factor, _y_factor(panel, element)) for element in panel.elements]
    out.append(Command("plot " + ", ".join(_clause_text(c, table) for c in clauses)))
    out.extend(InlineData(rows=c.rows) for c in clauses)
    return out


def _axis_commands(name: str, axis: Axis, bounds: tuple[float, float]) -> list[str]:
    out: list[str] = []
    if axis.hidden:
        out.append(f"unset {name}tics")
    elif axis.tick_labels is not None:
        pairs = ", ".join(
            f"{quote(label, f'{name} tick label')} {format_number(pos)}"
            for pos, label in zip(axis.tick_labels.positions, axis.tick_labels.labels)
        )
        out.append(f"set {name}tics nomirror ({pairs})")
    else:
        out.append(f"set {name}tics nomirror")
    if axis.minor_grid:
        out.append(f"set m{name}tics")
    if axis.label is not None:
        out.append(f"set {name}label {quote(axis.label, f'{name} label')}")
    lo, hi = bounds
    out.append(f"set {name}range [{format_number(lo)}:{format_number(hi)}]")
    if axis.scale.is_log:
        out.append(f"set logscale {name} {format_number(axis.scale.base)}")
    if axis.tick_format.mode == "fixed":
        out.append(f"set format {name} '%.{axis.tick_format.precision}f'")
    elif axis.tick_format.mode == "scientific":
        out.append(f"set format {name} '%.{axis.tick_format.precision}e'")
    if axis.major_grid:
        out.append(f"set grid {name}tics")
    if axis.minor_grid:
        out.append(f"set grid m{name}tics")
    return out


def _key_command(legend: Legend) -> str:
    if not legend.visible:
        return "set key off"
    parts = ["set key on", legend.placement, legend.vertical, legend.horizontal]
    if legend.stacked is not None:
        parts.append(legend.stacked)
    if legend.justification is not None:
        parts.append("Left" if legend.justification == "left" else "Right")
    if legend.order is not None:
        parts.append("noreverse" if legend.order == "text-sample" else "reverse")
    if legend.boxed:
        parts.append("box")
    if legend.font_size is not None:
        parts.append(f"font ',{format_number(legend.font_size)}'")
    if legend.title is not None:
        parts.append(f"title {quote(legend.title, 'legend title')}")
    return " ".join(parts)


def _grid_style_command(grid: Grid, table: StyleTable) -> str | None:
    major = _grid_line_props(grid.major, table)
    minor = _grid_line_props(grid.minor, table)
    if grid.layer is None and not major and not minor:
        return None
    parts = ["set grid"]
    if grid.layer is not None:
        parts.append("layerdefault" if grid.layer == "default" else grid.layer)
    if minor and not major:
        # gnuplot only accepts minor properties after a major set.
        major = "lt 0"
    if major:
        parts.append(major)
    cmd = " ".join(parts)
    if minor:
        cmd += f", {minor}"
    return cmd


def _grid_line_props(line: GridLineStyle, table: StyleTable) -> str:
    parts: list[str] = []
    if line.line_pattern is not None:
        parts.append(f"dt {table.dash_type('grid', line.line_pattern)}")
    if line.line_width is not None:
        parts.append(f"lw {format_number(line.line_width)}")
    if line.color is not None:
        parts.append(f"lc rgb {quote(table.color('grid', line.color))}")
    return " ".join(parts)


def _clause(element: PlotElement, x_factor: float = 1.0, y_factor: float = 1.0) -> _Clause:
    def sx(column: Iterable[float]) -> np.ndarray:
        return np.asarray(column, dtype=np.float64) * x_factor

    def sy(column: Iterable[float]) -> np.ndarray:
        return np.asarray(column, dtype=np.float64) * y_factor

    if isinstance(element, (Line, Points)):
        return _Clause(element.draw, 2, _rows(sx(element.data.x), sy(element.data.y)), element)
    if isinstance(element, FilledCurve):
        return _Clause("filledcurves", 3, _rows(sx(element.data.x), sy(element.data.y), sy(element.y2)), element)
    if isinstance(element, Bars):
        widths = np.full(len(element.data), element.width, dtype=np.float64)
        return _Clause("boxes", 3, _rows(sx(element.data.x), sy(element.data.y), sx(widths)), element)
    if isinstance(element, Histogram):
        return _Clause("boxes", 3, _rows(sx(element.centers), sy(element.counts), sx(element.widths)), element)
    if isinstance(element, ErrorBars):
        kind = f"{element.direction}error{'lines' if element.joined else 'bars'}"
        # Bounds live on the axis the bars extend along.
        bound = sx if element.direction == "x" else sy
        rows = _rows(sx(element.data.x), sy(element.data.y), bound(element.low), bound(element.high))
        return _Clause(kind, 4, rows, element)
    if isinstance(element, Candlesticks):
        rows = _rows(
            sx(element.x),
            sy(element.box_min),
            sy(element.whisker_min),
            sy(element.whisker_max),
            sy(element.box_max),
        )
        return _Clause("candlesticks", 5, rows, element)
    raise InvalidFigure(f"unknown plot element: {type(element).__name__}")


def _y_factor(panel: Panel, element: PlotElement) -> float:
    axis = panel.axis(element.y_axis)
    if axis is None:
        raise InvalidFigure(f"element is assigned to the {element.y_axis} axis but the panel has none")
    return axis.scale_factor


def _clause_text(clause: _Clause, table: StyleTable) -> str:
    element = clause.element
    style_name = table.style_for(clause.kind)
    table.check_attributes(clause.kind, element.style)
    using = ":".join(str(i) for i in range(1, clause.columns + 1))
    axes = "x1y2" if element.y_axis == "y2" else "x1y1"
    parts = [f"'-' using {using} axes {axes} with {style_name}"]
    parts.extend(_style_options(clause.kind, element.style, table))
    if element.label is None:
        parts.append("notitle")
    else:
        parts.append(f"title {quote(element.label, 'element label')}")
    return " ".join(parts)


def _style_options(kind: str, style: Style, table: StyleTable) -> list[str]:
    out: list[str] = []
    assigned = style.assigned_attributes()
    if "line_pattern" in assigned:
        out.append(f"dt {table.dash_type(kind, style.line_pattern)}")
    if style.line_width is not None:
        out.append(f"lw {format_number(style.line_width)}")
    if style.color is not None:
        out.append(f"lc rgb {quote(table.color(kind, style.color))}")
    if style.marker is not None:
        out.append(f"pt {table.point_type(kind, style.marker)}")
    if style.point_size is not None:
        out.append(f"ps {format_number(style.point_size)}")
    if kind in ("filledcurves", "boxes"):
        border = " noborder" if kind == "filledcurves" else ""
        if style.opacity is None:
            out.append(f"fs solid 1.0{border}")
        else:
            out.append(f"fs transparent solid {format_number(style.opacity)}{border}")
    return out


def _rows(*columns: Iterable[float]) -> tuple[str, ...]:
    return tuple(" ".join(format_number(v) for v in row) for row in zip(*(np.asarray(c).tolist() for c in columns)))
