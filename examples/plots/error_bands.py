from __future__ import annotations

import logging
from pathlib import Path
import sys

import numpy as np

from plotscript import Color, GnuplotRunner, LinePattern, Style, draw, figure, load_engine_config
from plotscript.engine import EngineConfig


def build(path: Path):
    x = np.linspace(0.0, 2.0 * np.pi, 25)
    y = np.sin(x)
    spread = 0.1 + 0.05 * np.abs(np.cos(x))

    fig = figure(path, width=1280, height=720)
    fig.panel("Sine with error bands").axis("x", label="phase (rad)").axis("y", label="amplitude").legend(
        placement="outside", horizontal="right", boxed=True, title="series"
    ).filled_curve(
        x, y - 2 * spread, y + 2 * spread, label="2 sigma", style=Style(color=Color.named("gray"), opacity=0.3)
    ).error_bars(
        y, x=x, error=spread, label="measured", style=Style(color=Color.named("blue"))
    ).line(
        y, x=x, label="model", style=Style(color=Color.named("red"), line_pattern=LinePattern.DASH)
    )
    return fig.finalize()


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)
    out = Path(argv[1]) if len(argv) > 1 else Path("error_bands.svg")
    config_path = Path(argv[2]) if len(argv) > 2 else None
    config = load_engine_config(config_path) if config_path is not None else EngineConfig.from_env()
    print(draw(build(out), GnuplotRunner(config)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
