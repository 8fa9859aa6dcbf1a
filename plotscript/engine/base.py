from __future__ import annotations

from pathlib import Path
from typing import Protocol

from plotscript.compile.gnuplot import EmittedScript


class Engine(Protocol):
    def run(self, script: EmittedScript) -> Path:
        ...
