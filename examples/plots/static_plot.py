from __future__ import annotations

import logging
from pathlib import Path
import sys

import numpy as np

from plotscript import Color, EngineConfig, GnuplotRunner, Marker, Style, draw, figure


def build(path: Path):
    data = np.asarray(
        [2.0, 2.4, 2.1, 3.0, 2.8, 3.2, 3.6, 3.1, 3.9, 4.3, 4.0, 4.7, 4.5, 4.9, 5.2, 5.0, 5.5, 5.8, 5.4, 6.1],
        dtype=np.float64,
    )
    fig = figure(path, width=960)
    fig.panel("Static 1-D Plot").axis("x", label="index").axis("y", label="value", major_grid=True).line(
        data, label="trend", style=Style(color=Color.from_rgb(255, 170, 70), line_width=1.5)
    ).points(data, label="samples", style=Style(color=Color.from_rgb(90, 190, 255), marker=Marker.FILLED_CIRCLE))
    return fig.finalize()


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.DEBUG)
    out = Path(argv[1]) if len(argv) > 1 else Path("static_plot.png")
    written = draw(build(out), GnuplotRunner(EngineConfig.from_env()))
    print(written)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
