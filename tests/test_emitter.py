from __future__ import annotations

from pathlib import Path
import unittest

from plotscript import (
    Candlesticks,
    Color,
    EmittedScript,
    InvalidFigure,
    InvalidValue,
    LinePattern,
    Marker,
    Range,
    Scale,
    Style,
    StyleTable,
    TickFormat,
    TickLabels,
    UnsupportedStyle,
    draw,
    emit_script,
    figure,
)
from plotscript.compile.quoting import format_number, quote
from plotscript.values import GridLineStyle


class RecordingEngine:
    def __init__(self) -> None:
        self.scripts: list[EmittedScript] = []

    def run(self, script: EmittedScript) -> Path:
        self.scripts.append(script)
        return script.output_path


def _plot_command(script: EmittedScript) -> str:
    plots = [c for c in script.commands if c.startswith("plot ")]
    assert len(plots) == 1, plots
    return plots[0]


class QuotingTests(unittest.TestCase):
    def test_quote_doubles_single_quotes(self) -> None:
        self.assertEqual(quote("it's"), "'it''s'")
        self.assertEqual(quote(""), "''")
        self.assertEqual(quote('say "hi" $x @y'), "'say \"hi\" $x @y'")
        with self.assertRaises(InvalidValue):
            quote("two\nlines")

    def test_format_number_round_trips(self) -> None:
        self.assertEqual(format_number(1), "1.0")
        self.assertEqual(format_number(0.1), "0.1")
        self.assertEqual(format_number(-0.0), "0.0")
        self.assertEqual(format_number(1e20), "1e+20")
        for value in (1.0 / 3.0, 2.0**-40, 123456789.123456789, -7.25):
            self.assertEqual(float(format_number(value)), value)
        with self.assertRaises(InvalidValue):
            format_number(float("inf"))
        with self.assertRaises(InvalidValue):
            format_number(float("nan"))


class EmitterTests(unittest.TestCase):
    def test_single_panel_script_text(self) -> None:
        fig = figure("out.png", width=800, height=600)
        fig.panel("Demo").axis("x", label="time").axis("y", label="value", range=Range(0.0, 10.0)).line(
            x=[0.0, 5.0, 10.0],
            y=[1.0, 4.0, 9.0],
            label="sq",
            style=Style(color=Color.named("red"), line_width=2.0),
        )
        script = emit_script(fig.finalize())
        expected = "\n".join(
            [
                "set encoding utf8",
                "set terminal png size 800,600 noenhanced",
                "set output 'out.png'",
                "set title 'Demo'",
                "set xtics nomirror",
                "set xlabel 'time'",
                "set xrange [-0.5:10.5]",
                "set ytics nomirror",
                "set ylabel 'value'",
                "set yrange [0.0:10.0]",
                "set key on inside top right",
                "plot '-' using 1:2 axes x1y1 with lines lw 2.0 lc rgb 'red' title 'sq'",
                "0.0 1.0",
                "5.0 4.0",
                "10.0 9.0",
                "e",
                "unset output",
            ]
        )
        self.assertEqual(script.text(), expected + "\n")
        self.assertEqual(script.output_path, Path("out.png"))
        self.assertEqual(len(script.data_blocks), 1)

    def test_emission_is_deterministic(self) -> None:
        fig = figure("out.svg")
        fig.panel().line([3.0, 1.0, 2.0]).points(x=[2.0, 0.0], y=[1.0, 1.0]).legend(visible=False)
        finalized = fig.finalize()
        self.assertEqual(emit_script(finalized).text(), emit_script(finalized).text())

    def test_data_rows_keep_index_order(self) -> None:
        fig = figure("out.png")
        fig.panel().line(x=[3.0, 1.0, 2.0, 1.0], y=[0.0, 1.0, 2.0, 1.0])
        block = emit_script(fig.finalize()).data_blocks[0]
        self.assertEqual(block.rows, ("3.0 0.0", "1.0 1.0", "2.0 2.0", "1.0 1.0"))
        self.assertEqual(block.lines()[-1], "e")

    def test_text_is_quoted(self) -> None:
        fig = figure("/tmp/o'brien.png")
        fig.panel("it's").line([1.0, 2.0], label="a 'b'")
        script = emit_script(fig.finalize())
        self.assertIn("set output '/tmp/o''brien.png'", script.commands)
        self.assertIn("set title 'it''s'", script.commands)
        self.assertTrue(_plot_command(script).endswith("title 'a ''b'''"))

    def test_style_options_are_ordered(self) -> None:
        fig = figure("out.png")
        style = Style(
            color=Color.from_rgb(255, 0, 0),
            line_width=1.5,
            line_pattern=LinePattern.DASH,
            marker=Marker.CIRCLE,
            point_size=2.0,
        )
        fig.panel().line([1.0, 2.0], draw="linespoints", style=style, label="a")
        self.assertEqual(
            _plot_command(emit_script(fig.finalize())),
            "plot '-' using 1:2 axes x1y1 with linespoints dt 2 lw 1.5 lc rgb '#ff0000' pt 6 ps 2.0 title 'a'",
        )

    def test_dual_axis_emission(self) -> None:
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0], label="left").line([10.0, 20.0], label="right", y_axis="y2").axis(
            "y2", label="right axis"
        )
        script = emit_script(fig.finalize())
        commands = script.commands
        self.assertIn("set y2tics nomirror", commands)
        self.assertIn("set y2label 'right axis'", commands)
        self.assertIn("set y2range [9.5:20.5]", commands)
        self.assertLess(commands.index("set ytics nomirror"), commands.index("set y2tics nomirror"))
        plot = _plot_command(script)
        self.assertIn("axes x1y1 with lines title 'left'", plot)
        self.assertIn("axes x1y2 with lines title 'right'", plot)
        self.assertEqual(len(script.data_blocks), 2)

    def test_element_columns(self) -> None:
        fig = figure("out.png")
        panel = fig.panel()
        panel.histogram([0.0, 1.0, 3.0], [2.0, 5.0])
        panel.error_bars(x=[0.0, 1.0], y=[1.0, 2.0], error=0.5)
        panel.error_bars(x=[0.0, 1.0], y=[1.0, 2.0], error=0.5, direction="x", joined=True)
        panel.filled_curve([0.0, 1.0], [1.0, 2.0], [0.0, 0.5], style=Style(color=Color.named("blue"), opacity=0.3))
        panel.bars(x=[0.0, 1.0], y=[3.0, 4.0], width=0.5)
        panel.add(Candlesticks(x=[1.0], box_min=[2.0], whisker_min=[1.0], whisker_max=[5.0], box_max=[4.0]))
        script = emit_script(fig.finalize())
        clauses = _plot_command(script)[len("plot ") :].split(", ")
        self.assertEqual(
            clauses,
            [
                "'-' using 1:2:3 axes x1y1 with boxes fs solid 1.0 notitle",
                "'-' using 1:2:3:4 axes x1y1 with yerrorbars notitle",
                "'-' using 1:2:3:4 axes x1y1 with xerrorlines notitle",
                "'-' using 1:2:3 axes x1y1 with filledcurves lc rgb 'blue' fs transparent solid 0.3 noborder notitle",
                "'-' using 1:2:3 axes x1y1 with boxes fs solid 1.0 notitle",
                "'-' using 1:2:3:4:5 axes x1y1 with candlesticks notitle",
            ],
        )
        blocks = script.data_blocks
        self.assertEqual(blocks[0].rows, ("0.5 2.0 1.0", "2.0 5.0 2.0"))
        self.assertEqual(blocks[1].rows, ("0.0 1.0 0.5 1.5", "1.0 2.0 1.5 2.5"))
        self.assertEqual(blocks[2].rows, ("0.0 1.0 -0.5 0.5", "1.0 2.0 0.5 1.5"))
        self.assertEqual(blocks[3].rows, ("0.0 1.0 0.0", "1.0 2.0 0.5"))
        self.assertEqual(blocks[4].rows, ("0.0 3.0 0.5", "1.0 4.0 0.5"))
        self.assertEqual(blocks[5].rows, ("1.0 2.0 1.0 5.0 4.0",))

    def test_scale_factor_multiplies_data_columns(self) -> None:
        fig = figure("out.png")
        panel = fig.panel()
        panel.line(x=[1.0, 2.0], y=[10.0, 20.0]).axis("x", scale_factor=2.0).axis("y", scale_factor=0.5)
        panel.bars(x=[1.0, 2.0], y=[4.0, 8.0], width=0.5)
        panel.error_bars(x=[1.0, 2.0], y=[4.0, 8.0], error=0.25, direction="x")
        panel.line([1.0, 3.0], y_axis="y2").axis("y2", scale_factor=4.0, range=Range(0.0, 16.0))
        script = emit_script(fig.finalize())
        blocks = script.data_blocks
        self.assertEqual(blocks[0].rows, ("2.0 5.0", "4.0 10.0"))
        self.assertEqual(blocks[1].rows, ("2.0 2.0 1.0", "4.0 4.0 1.0"))
        self.assertEqual(blocks[2].rows, ("2.0 2.0 1.5 2.5", "4.0 4.0 3.5 4.5"))
        self.assertEqual(blocks[3].rows, ("0.0 4.0", "2.0 12.0"))
        # Explicit bounds are taken as given; only the data is scaled.
        self.assertIn("set y2range [0.0:16.0]", script.commands)
        self.assertIn("set yrange [-0.5:10.5]", script.commands)

    def test_axis_commands_follow_pinned_order(self) -> None:
        fig = figure("out.png")
        fig.panel().line([1.0, 10.0, 100.0]).axis(
            "y", label="log", scale=Scale.logarithmic(), tick_format=TickFormat("fixed", 1)
        ).axis("x", hidden=True, tick_format=TickFormat("scientific", 3))
        commands = list(emit_script(fig.finalize()).commands)
        y_cmds = [c for c in commands if c.startswith(("set ytics", "set ylabel", "set yrange", "set logscale y", "set format y"))]
        self.assertEqual(y_cmds[0], "set ytics nomirror")
        self.assertEqual(y_cmds[1], "set ylabel 'log'")
        self.assertTrue(y_cmds[2].startswith("set yrange ["))
        self.assertEqual(y_cmds[3:], ["set logscale y 10.0", "set format y '%.1f'"])
        self.assertIn("unset xtics", commands)
        self.assertIn("set format x '%.3e'", commands)
        self.assertLess(commands.index("set format x '%.3e'"), commands.index("set ytics nomirror"))

    def test_tick_labels(self) -> None:
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0]).axis("x", tick_labels=TickLabels.from_pairs([(0, "zero"), (1, "one's")]))
        self.assertIn("set xtics nomirror ('zero' 0.0, 'one''s' 1.0)", emit_script(fig.finalize()).commands)

    def test_legend_commands(self) -> None:
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0]).legend(visible=False)
        self.assertIn("set key off", emit_script(fig.finalize()).commands)

        fig = figure("out.png")
        fig.panel().line([1.0, 2.0]).legend(
            placement="outside",
            vertical="bottom",
            horizontal="left",
            stacked="horizontal",
            justification="left",
            order="sample-text",
            boxed=True,
            font_size=9,
            title="Series",
        )
        self.assertIn(
            "set key on outside bottom left horizontal Left reverse box font ',9.0' title 'Series'",
            emit_script(fig.finalize()).commands,
        )

    def test_grid_commands(self) -> None:
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0]).axis("x", major_grid=True, minor_grid=True).grid(
            layer="front",
            major=GridLineStyle(line_width=2.0),
            minor=GridLineStyle(line_width=0.5, color=Color.named("blue")),
        )
        commands = list(emit_script(fig.finalize()).commands)
        for expected in ("set mxtics", "set grid xtics", "set grid mxtics", "set grid front lw 2.0, lw 0.5 lc rgb 'blue'"):
            self.assertIn(expected, commands)
        self.assertLess(commands.index("set key on inside top right"), commands.index("set grid front lw 2.0, lw 0.5 lc rgb 'blue'"))

        fig = figure("out.png")
        fig.panel().line([1.0, 2.0]).grid(minor=GridLineStyle(line_pattern=LinePattern.DOT))
        self.assertIn("set grid lt 0, dt 3", emit_script(fig.finalize()).commands)

    def test_terminals(self) -> None:
        script = emit_script(figure("out.pdf", width=720, height=360).finalize())
        self.assertIn("set terminal pdfcairo size 10.0in,5.0in noenhanced", script.commands)
        script = emit_script(figure("out.png", width=800, height=600, font="Arial", font_size=12).finalize())
        self.assertIn("set terminal png size 800,600 noenhanced font 'Arial,12.0'", script.commands)
        script = emit_script(figure("out.svg", width=640, height=480).finalize())
        self.assertIn("set terminal svg size 640,480 noenhanced", script.commands)

    def test_multiplot_layout(self) -> None:
        fig = figure("grid.svg", width=640, height=480)
        left, right = fig.subplots(1, 2, title="Grid")
        left.line([1.0, 2.0])
        right.title("empty")
        script = emit_script(fig.finalize())
        commands = script.commands
        self.assertEqual(commands[3], "set multiplot layout 1,2 title 'Grid'")
        self.assertEqual(commands.count("reset"), 1)
        self.assertLess(commands.index("reset"), commands.index("set title 'empty'"))
        self.assertEqual(commands[-2:], ("unset multiplot", "unset output"))
        self.assertEqual(commands.count("plot NaN notitle"), 1)
        self.assertEqual(len(script.data_blocks), 1)

    def test_empty_figure_plots_nan(self) -> None:
        script = emit_script(figure("out.png").finalize())
        self.assertIn("plot NaN notitle", script.commands)
        self.assertIn("set xrange [-1.0:1.0]", script.commands)
        self.assertEqual(script.data_blocks, ())

    def test_requires_finalized_figure(self) -> None:
        with self.assertRaises(InvalidFigure):
            emit_script(figure("out.png"))  # type: ignore[arg-type]


class StyleTableTests(unittest.TestCase):
    def test_unsupported_attribute_fails_before_engine_runs(self) -> None:
        engine = RecordingEngine()
        fig = figure("out.png")
        fig.panel().points([1.0, 2.0], style=Style(line_pattern=LinePattern.DASH))
        with self.assertRaises(UnsupportedStyle) as ctx:
            draw(fig.finalize(), engine)
        self.assertEqual(engine.scripts, [])
        self.assertEqual(ctx.exception.kind, "points")
        self.assertEqual(ctx.exception.attribute, "line_pattern")

    def test_bars_do_not_take_markers(self) -> None:
        fig = figure("out.png")
        fig.panel().bars([1.0, 2.0], style=Style(marker=Marker.STAR))
        with self.assertRaises(UnsupportedStyle):
            emit_script(fig.finalize())

    def test_custom_table_without_mapping_fails(self) -> None:
        table = StyleTable(styles={"lines": "lines"}, attributes={"lines": frozenset({"color"})})
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0], style=Style(color=Color.named("red")))
        with self.assertRaises(UnsupportedStyle) as ctx:
            emit_script(fig.finalize(), style_table=table)
        self.assertEqual(ctx.exception.value, "red")

        fig = figure("out.png")
        fig.panel().line([1.0, 2.0], draw="steps")
        with self.assertRaises(UnsupportedStyle):
            emit_script(fig.finalize(), style_table=table)

    def test_draw_hands_script_to_engine(self) -> None:
        engine = RecordingEngine()
        fig = figure("out.png")
        fig.panel().line([1.0, 2.0])
        self.assertEqual(draw(fig.finalize(), engine), Path("out.png"))
        self.assertEqual(len(engine.scripts), 1)


if __name__ == "__main__":
    unittest.main()
