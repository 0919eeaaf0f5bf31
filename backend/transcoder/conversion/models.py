"""Conversion request/plan/result models."""
import math
import time
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Any, Optional, Union

from transcoder.config import SUPPORTED_FORMATS

Number = Union[int, float]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_crf(value: Any) -> Optional[Number]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid crf: {value!r}")
    try:
        crf = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid crf: {value!r}") from None
    if not math.isfinite(crf):
        raise ValueError(f"Invalid crf: {value!r}")
    return int(crf) if crf.is_integer() else crf


@dataclass(frozen=True)
class ConversionRequest:
    input_file: str
    format: str
    resolution: Optional[str] = None
    crf: Optional[Number] = None
    bitrate: Optional[str] = None
    # Diagnostic timing only; not part of the request's identity.
    started_at: float = field(default_factory=time.monotonic, compare=False)

    def __post_init__(self):
        name = PurePath(self.input_file)
        if name.is_absolute() or ".." in name.parts:
            raise ValueError(f"inputFile must be relative to the input directory: {self.input_file}")

    @property
    def output_name(self) -> str:
        """Input base name with its last extension replaced by the target format."""
        return f"{PurePath(self.input_file).stem}.{self.format}"

    @classmethod
    def from_payload(cls, payload: dict) -> "ConversionRequest":
        """Parse the wire shape (camelCase or snake_case keys). Raises ValueError."""
        input_file = _optional_str(payload.get("inputFile", payload.get("input_file")))
        if not input_file:
            raise ValueError("inputFile is required")
        fmt = (_optional_str(payload.get("format")) or "").lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported output format: {fmt or '(none)'}")
        return cls(
            input_file=input_file,
            format=fmt,
            resolution=_optional_str(payload.get("resolution")),
            crf=_parse_crf(payload.get("crf")),
            bitrate=_optional_str(payload.get("bitrate")),
        )


@dataclass(frozen=True)
class EngineInvocation:
    """One ffmpeg run: argv (binary excluded) and the file it must produce."""

    args: tuple[str, ...]
    output_path: Path
    label: str = "convert"


@dataclass(frozen=True)
class PipelinePlan:
    invocations: tuple[EngineInvocation, ...]
    output_path: Path
    # Set for the GIF pipeline only
    palette_path: Optional[Path] = None
    temp_path: Optional[Path] = None

    @property
    def is_two_stage(self) -> bool:
        return self.palette_path is not None


@dataclass(frozen=True)
class TaskResult:
    """Terminal value of a task: exactly one of output_name / error is set."""

    output_name: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, output_name: str) -> "TaskResult":
        return cls(output_name=output_name)

    @classmethod
    def failed(cls, error: str) -> "TaskResult":
        return cls(error=error)

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "outputName": self.output_name}
        return {"error": self.error}
