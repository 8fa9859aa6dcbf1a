from __future__ import annotations

from pathlib import Path


class PlotError(Exception):
    """Base class for every failure raised by plotscript."""


class InvalidValue(PlotError, ValueError):
    """A primitive value violates its constraints (range, size, color, text)."""


class InvalidData(PlotError, ValueError):
    """Series data does not fit the shape required by a plot element."""


class InvalidFigure(PlotError, ValueError):
    """A figure failed structural validation at finalize time."""


class UnsupportedStyle(PlotError, ValueError):
    """The style table has no mapping for a style/element combination."""

    def __init__(self, kind: str, attribute: str, value: object | None = None) -> None:
        self.kind = kind
        self.attribute = attribute
        self.value = value
        if value is None:
            message = f"style attribute `{attribute}` is not supported for `{kind}` elements"
        else:
            message = f"no `{attribute}` mapping for {value!r} (element kind `{kind}`)"
        super().__init__(message)


class EngineError(PlotError, RuntimeError):
    """The external plotting engine could not produce the requested output."""


class EngineNotFound(EngineError):
    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"plotting engine not found: {command}")


class EngineExecutionFailed(EngineError):
    def __init__(self, returncode: int | None, stderr: str, *, message: str | None = None) -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip()
        if message is None:
            message = f"plotting engine exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EngineTimeout(EngineExecutionFailed):
    def __init__(self, timeout_s: float, stderr: str = "") -> None:
        self.timeout_s = timeout_s
        super().__init__(None, stderr, message=f"plotting engine timed out after {timeout_s:g}s")


class EngineOutputMissing(EngineError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"plotting engine exited cleanly but wrote no output at {path}")


class EngineVersionError(EngineError):
    """The engine's `--version` output could not be parsed."""
