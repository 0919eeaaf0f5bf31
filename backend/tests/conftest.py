"""Shared fixtures: isolated directories and a fake ffmpeg runner."""
import threading
from pathlib import Path

import pytest

from transcoder.config import Settings
from transcoder.conversion.exceptions import EngineExecutionError


class FakeRunner:
    """
    Stands in for run_ffmpeg. Records every argv and writes the invocation's
    output file (the last argument), or raises on the call number `fail_at`.
    """

    def __init__(self, fail_at=None, error=None, partial=False):
        self.fail_at = fail_at
        # Write a truncated output before failing, like an interrupted encode
        self.partial = partial
        self.error = error
        self.calls = []
        self.binaries = []
        self.cwds = []
        self._lock = threading.Lock()

    def __call__(self, args, binary="ffmpeg", cwd=None):
        with self._lock:
            self.calls.append(list(args))
            self.binaries.append(binary)
            self.cwds.append(cwd)
            call_number = len(self.calls)
        if call_number == self.fail_at:
            if self.partial:
                Path(args[-1]).write_bytes(b"conv")
            raise self.error or EngineExecutionError(1, "Invalid data found when processing input\n")
        Path(args[-1]).write_bytes(b"converted")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        input_dir=tmp_path / "uploads",
        output_dir=tmp_path / "converted",
        work_dir=tmp_path,
        ffmpeg_binary="ffmpeg",
        max_workers=2,
        default_crf=23,
    )


@pytest.fixture
def make_input(settings):
    """Write a fake source file into the input directory and return its path."""

    def _make(name="clip.mov"):
        settings.input_dir.mkdir(parents=True, exist_ok=True)
        path = settings.input_dir / name
        path.write_bytes(b"source media")
        return path

    return _make


@pytest.fixture
def runner():
    return FakeRunner()
