from __future__ import annotations

from dataclasses import dataclass
import logging
import re
import shutil
import subprocess

from plotscript.engine.config import EngineConfig
from plotscript.errors import EngineExecutionFailed, EngineNotFound, EngineTimeout, EngineVersionError

LOGGER = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^gnuplot (\d+)\.(\d+) patchlevel (\S+)")


@dataclass(frozen=True)
class EngineVersion:
    major: int
    minor: int
    patch: str


def parse_version(text: str) -> EngineVersion:
    match = _VERSION_RE.match(text.strip())
    if match is None:
        raise EngineVersionError(f"unrecognized gnuplot version string: {text!r}")
    return EngineVersion(major=int(match.group(1)), minor=int(match.group(2)), patch=match.group(3))


def engine_version(config: EngineConfig | None = None) -> EngineVersion:
    cfg = config if config is not None else EngineConfig()
    executable = shutil.which(cfg.command[0])
    if executable is None:
        raise EngineNotFound(cfg.command[0])
    argv = [executable, *cfg.command[1:], "--version"]
    try:
        result = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=cfg.timeout_s,
        )
    except subprocess.TimeoutExpired as exc:
        assert cfg.timeout_s is not None
        raise EngineTimeout(cfg.timeout_s) from exc
    except FileNotFoundError as exc:
        raise EngineNotFound(argv[0]) from exc
    except OSError as exc:
        raise EngineExecutionFailed(None, str(exc)) from exc
    if result.returncode != 0:
        raise EngineExecutionFailed(result.returncode, result.stderr)
    version = parse_version(result.stdout)
    LOGGER.debug("gnuplot version %s.%s patchlevel %s", version.major, version.minor, version.patch)
    return version
