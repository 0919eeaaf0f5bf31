"""ffmpeg argument construction per output format. Pure functions, no I/O."""
import re
from pathlib import Path
from typing import Optional

from transcoder.config import (
    ANIMATED_IMAGE_FORMATS,
    AUDIO_FORMATS,
    GIF_BAYER_SCALE,
    GIF_DEFAULT_WIDTH,
    GIF_FPS,
    GIF_MAX_COLORS,
    MP3_AUDIO_BITRATE,
    STREAMING_VIDEO_FORMATS,
)
from transcoder.conversion.models import ConversionRequest, EngineInvocation, Number, PipelinePlan

FRAME_SIZE = re.compile(r"\d+x\d+")
PALETTE_USE = f"paletteuse=dither=bayer:bayer_scale={GIF_BAYER_SCALE}:diff_mode=rectangle"


def _scale_expr(resolution: str) -> str:
    """'1280x720' -> '1280:720'; ffmpeg scale expressions like '-1:720' pass through."""
    return resolution.strip().replace("x", ":", 1)


def _format_crf(crf: Optional[Number], default: int) -> str:
    value = default if crf is None else crf
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def gif_artifact_paths(output_dir: Path, task_id: str) -> tuple[Path, Path]:
    """(palette, temporary gif) paths, namespaced by task id."""
    return output_dir / f"{task_id}_palette.png", output_dir / f"{task_id}_temp.gif"


def _build_gif_plan(request: ConversionRequest, input_path: Path, output_dir: Path, task_id: str) -> PipelinePlan:
    palette_path, temp_path = gif_artifact_paths(output_dir, task_id)
    if request.resolution:
        scale = f"scale={_scale_expr(request.resolution)}:flags=lanczos"
    else:
        scale = f"scale={GIF_DEFAULT_WIDTH}:-1:flags=lanczos"

    palette = EngineInvocation(
        args=(
            "-y", "-i", str(input_path),
            "-vf", f"fps={GIF_FPS},{scale},palettegen=max_colors={GIF_MAX_COLORS}",
            str(palette_path),
        ),
        output_path=palette_path,
        label="palette",
    )

    if request.resolution:
        graph = f"[0:v]{scale}[scaled];[scaled][1:v]{PALETTE_USE}"
    else:
        graph = f"[0:v][1:v]{PALETTE_USE}"
    encode_args = ["-y", "-i", str(input_path), "-i", str(palette_path), "-filter_complex", graph]
    if request.bitrate:
        # Only approximate for GIF, passed through as requested
        encode_args += ["-b:v", request.bitrate]
    encode_args.append(str(temp_path))
    encode = EngineInvocation(args=tuple(encode_args), output_path=temp_path, label="encode")

    return PipelinePlan(
        invocations=(palette, encode),
        output_path=output_dir / request.output_name,
        palette_path=palette_path,
        temp_path=temp_path,
    )


def _build_single_plan(request: ConversionRequest, input_path: Path, output_dir: Path, default_crf: int) -> PipelinePlan:
    output_path = output_dir / request.output_name
    fmt = request.format
    args = ["-y", "-i", str(input_path)]
    if request.resolution:
        resolution = request.resolution.strip()
        if FRAME_SIZE.fullmatch(resolution):
            args += ["-s", resolution]
        else:
            # -s only takes WxH; expressions like -1:720 go through the scale filter
            args += ["-vf", f"scale={_scale_expr(resolution)}"]
    if request.bitrate:
        args += ["-b:v", request.bitrate]

    if fmt in STREAMING_VIDEO_FORMATS:
        args += ["-preset", "fast", "-crf", _format_crf(request.crf, default_crf)]
    elif fmt in AUDIO_FORMATS:
        args.append("-vn")
        if fmt == "mp3":
            args += ["-b:a", MP3_AUDIO_BITRATE]
    else:
        args += ["-crf", _format_crf(request.crf, default_crf)]

    args.append(str(output_path))
    return PipelinePlan(
        invocations=(EngineInvocation(args=tuple(args), output_path=output_path),),
        output_path=output_path,
    )


def build_plan(
    request: ConversionRequest,
    input_path: Path,
    output_dir: Path,
    task_id: str,
    default_crf: int = 23,
) -> PipelinePlan:
    """
    Translate a request into the ffmpeg runs that produce its output.

    GIF gets two runs (palettegen, then paletteuse); every other format gets one.
    The result depends only on the arguments, so identical inputs give identical argv.
    """
    if request.format in ANIMATED_IMAGE_FORMATS:
        return _build_gif_plan(request, input_path, output_dir, task_id)
    return _build_single_plan(request, input_path, output_dir, default_crf)
