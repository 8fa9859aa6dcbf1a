from __future__ import annotations

from pathlib import Path

from plotscript.compile.gnuplot import emit_script
from plotscript.compile.style_table import GNUPLOT_STYLE_TABLE, StyleTable
from plotscript.engine.base import Engine
from plotscript.errors import InvalidFigure
from plotscript.figure import Figure, FigureBuilder, OutputConfig, OutputFormat

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_ASPECT_RATIO = 16.0 / 9.0


def figure(
    path: str | Path,
    *,
    format: OutputFormat | str | None = None,
    width: int | None = None,
    height: int | None = None,
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    font: str | None = None,
    font_size: float | None = None,
) -> FigureBuilder:
    if aspect_ratio <= 0:
        raise InvalidFigure("aspect_ratio must be > 0")
    if width is None and height is None:
        width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
    elif width is None and height is not None:
        if height <= 0:
            raise InvalidFigure("height must be > 0")
        width = max(1, int(round(height * aspect_ratio)))
    elif width is not None and height is None:
        if width <= 0:
            raise InvalidFigure("width must be > 0")
        height = max(1, int(round(width / aspect_ratio)))
    assert width is not None and height is not None

    fmt = OutputFormat.from_path(path) if format is None else OutputFormat.parse(format)
    output = OutputConfig(path=path, format=fmt, width=width, height=height, font=font, font_size=font_size)
    return FigureBuilder(output)


def draw(figure: Figure, engine: Engine, *, style_table: StyleTable = GNUPLOT_STYLE_TABLE) -> Path:
    """Emit ``figure`` and hand the script to ``engine``; emission errors surface before any spawn."""
    script = emit_script(figure, style_table=style_table)
    return engine.run(script)
