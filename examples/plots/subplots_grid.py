from __future__ import annotations

import logging
from pathlib import Path
import sys

import numpy as np

from plotscript import EngineConfig, GnuplotRunner, Range, Scale, TickFormat, draw, emit_script, figure, save_script


def build(path: Path):
    rng = np.random.default_rng(7)
    samples = rng.normal(loc=10.0, scale=2.0, size=500)
    x = np.arange(1, 13, dtype=np.float64)
    revenue = np.asarray([12, 14, 13, 17, 19, 22, 21, 25, 24, 28, 31, 30], dtype=np.float64)
    growth = np.cumprod(np.full(12, 1.4))

    fig = figure(path, width=1600, height=900)
    bars, dist, growth_panel, candles = fig.subplots(
        2, 2, title="Quarterly overview", titles=("Revenue", "Latency", "Growth", "Daily range")
    )
    bars.bars(revenue, x=x, width=0.6, label="revenue").line(
        np.cumsum(revenue) / x, x=x, label="running mean", y_axis="y2"
    ).axis("y2", label="mean").axis("y", range=Range(low=0.0))
    dist.histogram(samples=samples, bins=20, label="requests").axis("x", label="ms")
    growth_panel.line(growth, x=x, draw="linespoints").axis(
        "y", scale=Scale.logarithmic(), tick_format=TickFormat("scientific", 1)
    )
    candles.candlesticks(
        x=[1, 2, 3, 4],
        box_min=[10, 11, 9, 12],
        whisker_min=[8, 9, 7, 10],
        whisker_max=[15, 14, 13, 16],
        box_max=[13, 12, 11, 15],
        label="price",
    ).legend(visible=False)
    return fig.finalize()


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO)
    out = Path(argv[1]) if len(argv) > 1 else Path("subplots_grid.png")
    finalized = build(out)
    save_script(emit_script(finalized), out.with_suffix(".gp"))
    print(draw(finalized, GnuplotRunner(EngineConfig.from_env())))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
