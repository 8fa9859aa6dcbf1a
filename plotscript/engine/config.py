from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import shlex
import tomllib
from typing import Mapping

from plotscript.errors import InvalidValue

COMMAND_ENV_VAR = "PLOTSCRIPT_GNUPLOT"
TIMEOUT_ENV_VAR = "PLOTSCRIPT_TIMEOUT_S"


@dataclass(frozen=True)
class EngineConfig:
    command: tuple[str, ...] = ("gnuplot",)
    timeout_s: float | None = None
    kill_grace_s: float = 2.0

    def __post_init__(self) -> None:
        command = tuple(self.command)
        if not command or any(not isinstance(part, str) or not part for part in command):
            raise InvalidValue("engine command must be a non-empty sequence of non-empty strings")
        object.__setattr__(self, "command", command)
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise InvalidValue(f"timeout_s must be > 0, got {self.timeout_s!r}")
        if self.kill_grace_s < 0:
            raise InvalidValue(f"kill_grace_s must be >= 0, got {self.kill_grace_s!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        raw_command = env.get(COMMAND_ENV_VAR, "").strip()
        if raw_command:
            kwargs["command"] = tuple(shlex.split(raw_command))
        raw_timeout = env.get(TIMEOUT_ENV_VAR, "").strip()
        if raw_timeout:
            try:
                kwargs["timeout_s"] = float(raw_timeout)
            except ValueError as exc:
                raise InvalidValue(f"{TIMEOUT_ENV_VAR} must be a number, got {raw_timeout!r}") from exc
        return cls(**kwargs)  # type: ignore[arg-type]


def load_engine_config(path: str | Path) -> EngineConfig:
    """Read the ``[engine]`` table of a TOML file; missing keys keep their defaults."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"engine config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("engine", {})
    if not isinstance(table, dict):
        raise InvalidValue("[engine] must be a table")
    unknown = sorted(set(table) - {"command", "timeout_s", "kill_grace_s"})
    if unknown:
        raise InvalidValue(f"unknown [engine] key(s): {', '.join(unknown)}")

    kwargs: dict[str, object] = {}
    if "command" in table:
        kwargs["command"] = _coerce_command(table["command"])
    for name in ("timeout_s", "kill_grace_s"):
        if name in table:
            kwargs[name] = _coerce_seconds(table[name], name)
    return EngineConfig(**kwargs)  # type: ignore[arg-type]


def _coerce_command(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if not isinstance(value, list):
        raise InvalidValue("engine.command must be a string or a list of strings")
    out: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise InvalidValue("engine.command entries must be strings")
        out.append(item)
    return tuple(out)


def _coerce_seconds(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidValue(f"engine.{field_name} must be a number")
    return float(value)
