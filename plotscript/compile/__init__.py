from plotscript.compile.gnuplot import Command, EmittedScript, InlineData, Statement, emit_script
from plotscript.compile.quoting import format_number, quote
from plotscript.compile.style_table import GNUPLOT_STYLE_TABLE, StyleTable

__all__ = [
    "Command",
    "EmittedScript",
    "GNUPLOT_STYLE_TABLE",
    "InlineData",
    "Statement",
    "StyleTable",
    "emit_script",
    "format_number",
    "quote",
]
