from __future__ import annotations

import logging
from pathlib import Path
import shutil
import subprocess
import tempfile

from plotscript.compile.gnuplot import EmittedScript
from plotscript.engine.config import EngineConfig
from plotscript.errors import EngineExecutionFailed, EngineNotFound, EngineOutputMissing, EngineTimeout

LOGGER = logging.getLogger(__name__)

SCRIPT_FILENAME = "figure.gp"


class GnuplotRunner:
    """Runs emitted scripts through an external gnuplot process, one child per call."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config if config is not None else EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def resolve_command(self) -> list[str]:
        command = self._config.command
        executable = shutil.which(command[0])
        if executable is None:
            raise EngineNotFound(command[0])
        return [executable, *command[1:]]

    def run(self, script: EmittedScript) -> Path:
        argv = self.resolve_command()
        output = Path(script.output_path)
        if output.is_file():
            # A leftover file from an earlier run must not pass the output check.
            output.unlink()

        with tempfile.TemporaryDirectory(prefix="plotscript-") as tmp:
            script_path = Path(tmp) / SCRIPT_FILENAME
            script_path.write_text(script.text(), encoding="utf-8")
            returncode, stderr = self._execute([*argv, str(script_path)])

        if returncode != 0:
            raise EngineExecutionFailed(returncode, stderr)
        if not output.is_file() or output.stat().st_size == 0:
            raise EngineOutputMissing(output)
        if stderr.strip():
            LOGGER.warning("gnuplot reported on stderr while writing %s: %s", output, stderr.strip())
        return output

    def _execute(self, argv: list[str]) -> tuple[int, str]:
        LOGGER.debug("spawning %s", argv)
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as exc:
            # Also raised when the executable exists but its interpreter does not.
            raise EngineNotFound(argv[0]) from exc
        except OSError as exc:
            raise EngineExecutionFailed(None, str(exc)) from exc
        try:
            _, stderr = proc.communicate(timeout=self._config.timeout_s)
        except subprocess.TimeoutExpired:
            stderr = self._stop(proc)
            assert self._config.timeout_s is not None
            raise EngineTimeout(self._config.timeout_s, stderr) from None
        except BaseException:
            self._stop(proc)
            raise
        LOGGER.debug("gnuplot pid %s exited with status %s", proc.pid, proc.returncode)
        return proc.returncode, stderr or ""

    def _stop(self, proc: subprocess.Popen[str]) -> str:
        stderr: str | None = ""
        if proc.poll() is None:
            proc.terminate()
            try:
                _, stderr = proc.communicate(timeout=self._config.kill_grace_s)
            except subprocess.TimeoutExpired:
                proc.kill()
                _, stderr = proc.communicate()
        else:
            _, stderr = proc.communicate()
        LOGGER.debug("stopped gnuplot pid %s (status %s)", proc.pid, proc.returncode)
        return stderr or ""


def save_script(script: EmittedScript, path: str | Path) -> Path:
    """Write the script text so it can be run by hand with ``gnuplot <path>``."""
    target = Path(path)
    target.write_text(script.text(), encoding="utf-8")
    return target
