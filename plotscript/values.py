from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Literal, Sequence

from plotscript.errors import InvalidValue


PALETTE: tuple[str, ...] = (
    "black",
    "blue",
    "cyan",
    "dark-violet",
    "forest-green",
    "gold",
    "gray",
    "green",
    "magenta",
    "red",
    "white",
    "yellow",
)

# Characters that cannot appear inside a single-quoted engine string.
_FORBIDDEN_TEXT_CHARS = {"\n": "line break", "\r": "carriage return", "\x00": "NUL"}


def require_text(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidValue(f"{field_name} must be a string, got {type(value).__name__}")
    for char, name in _FORBIDDEN_TEXT_CHARS.items():
        if char in value:
            raise InvalidValue(f"{field_name} contains a {name}, which cannot be quoted: {value!r}")
    return value


def require_finite(value: object, field_name: str) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidValue(f"{field_name} must be a number, got {value!r}") from exc
    if not math.isfinite(out):
        raise InvalidValue(f"{field_name} must be finite, got {value!r}")
    return out


def require_positive(value: object, field_name: str) -> float:
    out = require_finite(value, field_name)
    if out <= 0:
        raise InvalidValue(f"{field_name} must be > 0, got {value!r}")
    return out


@dataclass(frozen=True)
class Scale:
    kind: Literal["linear", "logarithmic"] = "linear"
    base: float = 10.0

    def __post_init__(self) -> None:
        if self.kind not in ("linear", "logarithmic"):
            raise InvalidValue(f"unsupported scale kind: {self.kind}")
        base = require_finite(self.base, "Scale.base")
        if self.kind == "logarithmic" and base <= 1.0:
            raise InvalidValue(f"logarithmic scale base must be > 1, got {self.base!r}")
        object.__setattr__(self, "base", base)

    @classmethod
    def linear(cls) -> "Scale":
        return cls("linear")

    @classmethod
    def logarithmic(cls, base: float = 10.0) -> "Scale":
        return cls("logarithmic", base)

    @property
    def is_log(self) -> bool:
        return self.kind == "logarithmic"


@dataclass(frozen=True)
class Range:
    """Axis limits; a bound left as ``None`` is filled in by auto-ranging."""

    low: float | None = None
    high: float | None = None

    def __post_init__(self) -> None:
        if self.low is not None:
            object.__setattr__(self, "low", require_finite(self.low, "Range.low"))
        if self.high is not None:
            object.__setattr__(self, "high", require_finite(self.high, "Range.high"))
        if self.low is not None and self.high is not None and self.low >= self.high:
            raise InvalidValue(f"range low must be < high, got [{self.low}, {self.high}]")

    @property
    def is_complete(self) -> bool:
        return self.low is not None and self.high is not None


@dataclass(frozen=True)
class TickFormat:
    mode: Literal["auto", "fixed", "scientific"] = "auto"
    precision: int = 2

    def __post_init__(self) -> None:
        if self.mode not in ("auto", "fixed", "scientific"):
            raise InvalidValue(f"unsupported tick format mode: {self.mode}")
        if not isinstance(self.precision, int) or isinstance(self.precision, bool) or self.precision < 0:
            raise InvalidValue(f"tick precision must be a non-negative integer, got {self.precision!r}")


@dataclass(frozen=True)
class TickLabels:
    positions: tuple[float, ...]
    labels: tuple[str, ...]

    def __post_init__(self) -> None:
        positions = tuple(require_finite(p, "TickLabels.positions") for p in self.positions)
        labels = tuple(require_text(label, "TickLabels.labels") for label in self.labels)
        if len(positions) != len(labels):
            raise InvalidValue(f"tick positions/labels length mismatch: {len(positions)} != {len(labels)}")
        if not positions:
            raise InvalidValue("tick labels must not be empty")
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "labels", labels)

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[float, str]]) -> "TickLabels":
        return cls(positions=tuple(p for p, _ in pairs), labels=tuple(label for _, label in pairs))


@dataclass(frozen=True)
class Color:
    name: str | None = None
    rgb: tuple[int, int, int] | None = None

    def __post_init__(self) -> None:
        if (self.name is None) == (self.rgb is None):
            raise InvalidValue("color needs exactly one of a palette name or an rgb triple")
        if self.name is not None and self.name not in PALETTE:
            raise InvalidValue(f"unknown palette color: {self.name!r}")
        if self.rgb is not None:
            if len(self.rgb) != 3:
                raise InvalidValue(f"rgb color needs 3 channels, got {self.rgb!r}")
            for channel in self.rgb:
                if not isinstance(channel, int) or isinstance(channel, bool) or channel < 0 or channel > 255:
                    raise InvalidValue(f"rgb channels must be ints in 0..255, got {self.rgb!r}")
            object.__setattr__(self, "rgb", tuple(self.rgb))

    @classmethod
    def named(cls, name: str) -> "Color":
        return cls(name=name)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        return cls(rgb=(r, g, b))

    def hex(self) -> str | None:
        if self.rgb is None:
            return None
        r, g, b = self.rgb
        return f"#{r:02x}{g:02x}{b:02x}"


class LinePattern(str, Enum):
    SOLID = "solid"
    DASH = "dash"
    DOT = "dot"
    DOT_DASH = "dot-dash"
    DOT_DOT_DASH = "dot-dot-dash"


class Marker(str, Enum):
    PLUS = "plus"
    X = "x"
    STAR = "star"
    SQUARE = "square"
    FILLED_SQUARE = "filled-square"
    CIRCLE = "circle"
    FILLED_CIRCLE = "filled-circle"
    TRIANGLE = "triangle"
    FILLED_TRIANGLE = "filled-triangle"


@dataclass(frozen=True)
class Style:
    color: Color | None = None
    line_width: float | None = None
    point_size: float | None = None
    line_pattern: LinePattern = LinePattern.SOLID
    marker: Marker | None = None
    opacity: float | None = None

    def __post_init__(self) -> None:
        if self.color is not None and not isinstance(self.color, Color):
            raise InvalidValue(f"Style.color must be a Color, got {self.color!r}")
        if self.line_width is not None:
            object.__setattr__(self, "line_width", require_positive(self.line_width, "Style.line_width"))
        if self.point_size is not None:
            object.__setattr__(self, "point_size", require_positive(self.point_size, "Style.point_size"))
        if not isinstance(self.line_pattern, LinePattern):
            raise InvalidValue(f"line_pattern must be a LinePattern, got {self.line_pattern!r}")
        if self.marker is not None and not isinstance(self.marker, Marker):
            raise InvalidValue(f"marker must be a Marker, got {self.marker!r}")
        if self.opacity is not None:
            opacity = require_finite(self.opacity, "Style.opacity")
            if opacity < 0.0 or opacity > 1.0:
                raise InvalidValue(f"opacity must be in [0, 1], got {self.opacity!r}")
            object.__setattr__(self, "opacity", opacity)

    def assigned_attributes(self) -> tuple[str, ...]:
        """Names of the attributes that differ from the engine defaults."""
        out: list[str] = []
        if self.color is not None:
            out.append("color")
        if self.line_width is not None:
            out.append("line_width")
        if self.line_pattern is not LinePattern.SOLID:
            out.append("line_pattern")
        if self.marker is not None:
            out.append("marker")
        if self.point_size is not None:
            out.append("point_size")
        if self.opacity is not None:
            out.append("opacity")
        return tuple(out)


@dataclass(frozen=True)
class GridLineStyle:
    line_width: float | None = None
    color: Color | None = None
    line_pattern: LinePattern | None = None

    def __post_init__(self) -> None:
        if self.line_width is not None:
            object.__setattr__(self, "line_width", require_positive(self.line_width, "GridLineStyle.line_width"))
        if self.color is not None and not isinstance(self.color, Color):
            raise InvalidValue(f"GridLineStyle.color must be a Color, got {self.color!r}")
        if self.line_pattern is not None and not isinstance(self.line_pattern, LinePattern):
            raise InvalidValue(f"GridLineStyle.line_pattern must be a LinePattern, got {self.line_pattern!r}")
