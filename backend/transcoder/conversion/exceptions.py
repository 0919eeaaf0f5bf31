class ConversionError(Exception):
    """Base error for a conversion task."""


class InputMissingError(ConversionError):
    """Raised when the source file cannot be accessed before any engine run."""


class EngineError(ConversionError):
    """Base for ffmpeg failures; the runner logs these itself."""


class EngineLaunchError(EngineError):
    """Raised when the ffmpeg process could not be started."""


class EngineExecutionError(EngineError):
    """Raised when ffmpeg started but exited with a non-zero code."""

    def __init__(self, exit_code: int, diagnostics: str, binary: str = "ffmpeg"):
        self.exit_code = exit_code
        self.diagnostics = diagnostics.strip() or "Unknown"
        super().__init__(f"{binary} exited with code {exit_code}: {self.diagnostics}")

    def tail(self, lines: int = 10) -> str:
        """Last few diagnostic lines, for log output."""
        return "\n".join(self.diagnostics.splitlines()[-lines:])
