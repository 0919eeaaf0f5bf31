"""Run one ffmpeg invocation as a child process."""
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from transcoder.conversion.exceptions import EngineExecutionError, EngineLaunchError

logger = logging.getLogger("transcoder.runner")


def run_ffmpeg(args: Sequence[str], binary: str = "ffmpeg", cwd: Optional[Path] = None) -> None:
    """
    Run `binary` with `args`. Returns None on exit code 0.

    stdin is closed, stdout discarded, stderr collected in full as diagnostics.
    Raises EngineLaunchError if the process cannot start and EngineExecutionError
    on a non-zero exit.
    """
    cmd = [binary, *args]
    logger.debug("Running: %s", shlex.join(cmd))
    try:
        result = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            cwd=str(cwd) if cwd else None,
        )
    except OSError as e:
        logger.error("Could not start %s: %s", binary, e)
        raise EngineLaunchError(f"Failed to start {binary}: {e}") from e
    if result.returncode != 0:
        error = EngineExecutionError(result.returncode, result.stderr or "", binary=binary)
        logger.error("%s exited with code %s. Log:\n%s", binary, result.returncode, error.tail())
        raise error
