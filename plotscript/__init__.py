from plotscript.adapters import normalize_xy, series_xy, series_y
from plotscript.api import draw, figure
from plotscript.compile import GNUPLOT_STYLE_TABLE, EmittedScript, StyleTable, emit_script
from plotscript.elements import Bars, Candlesticks, ErrorBars, FilledCurve, Histogram, Line, PlotElement, Points
from plotscript.engine import Engine, EngineConfig, EngineVersion, GnuplotRunner, engine_version, load_engine_config, save_script
from plotscript.errors import (
    EngineError,
    EngineExecutionFailed,
    EngineNotFound,
    EngineOutputMissing,
    EngineTimeout,
    EngineVersionError,
    InvalidData,
    InvalidFigure,
    InvalidValue,
    PlotError,
    UnsupportedStyle,
)
from plotscript.figure import (
    Axis,
    Figure,
    FigureBuilder,
    Grid,
    Legend,
    OutputConfig,
    OutputFormat,
    Panel,
    PanelBuilder,
)
from plotscript.series import SeriesData
from plotscript.values import Color, GridLineStyle, LinePattern, Marker, Range, Scale, Style, TickFormat, TickLabels

__all__ = [
    "Axis",
    "Bars",
    "Candlesticks",
    "Color",
    "EmittedScript",
    "Engine",
    "EngineConfig",
    "EngineError",
    "EngineExecutionFailed",
    "EngineNotFound",
    "EngineOutputMissing",
    "EngineTimeout",
    "EngineVersion",
    "EngineVersionError",
    "ErrorBars",
    "Figure",
    "FigureBuilder",
    "FilledCurve",
    "GNUPLOT_STYLE_TABLE",
    "GnuplotRunner",
    "Grid",
    "GridLineStyle",
    "Histogram",
    "InvalidData",
    "InvalidFigure",
    "InvalidValue",
    "Legend",
    "Line",
    "LinePattern",
    "Marker",
    "OutputConfig",
    "OutputFormat",
    "Panel",
    "PanelBuilder",
    "PlotElement",
    "PlotError",
    "Points",
    "Range",
    "Scale",
    "SeriesData",
    "Style",
    "StyleTable",
    "TickFormat",
    "TickLabels",
    "UnsupportedStyle",
    "draw",
    "emit_script",
    "engine_version",
    "figure",
    "load_engine_config",
    "normalize_xy",
    "save_script",
    "series_xy",
    "series_y",
]
