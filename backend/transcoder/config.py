"""Application configuration. Loads from environment and .env file."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Load .env from cwd, then backend/.env, then project root .env
load_dotenv()
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")

# Output formats, grouped by the argument policy they get
ANIMATED_IMAGE_FORMATS = {"gif"}
STREAMING_VIDEO_FORMATS = {"mp4", "webm"}
AUDIO_FORMATS = {"mp3", "wav", "aac", "flac"}
GENERIC_FORMATS = {"mkv", "mov", "avi"}
SUPPORTED_FORMATS = ANIMATED_IMAGE_FORMATS | STREAMING_VIDEO_FORMATS | AUDIO_FORMATS | GENERIC_FORMATS

# GIF pipeline (palettegen + paletteuse)
GIF_FPS = 10
GIF_DEFAULT_WIDTH = 320
GIF_MAX_COLORS = 256
GIF_BAYER_SCALE = 5
MP3_AUDIO_BITRATE = "128k"

# Server (for uvicorn)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
# CORS: comma-separated origins, e.g. "http://localhost:5173,http://127.0.0.1:5173"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("transcoder")


def _default_workers() -> int:
    return min(32, (os.cpu_count() or 4) + 4)


@dataclass(frozen=True)
class Settings:
    """Conversion paths and engine options, passed explicitly to the service."""

    input_dir: Path = BASE_DIR / "uploads"
    output_dir: Path = BASE_DIR / "converted"
    work_dir: Path = BASE_DIR
    ffmpeg_binary: str = "ffmpeg"
    max_workers: int = 4
    default_crf: int = 23

    @classmethod
    def from_env(cls) -> "Settings":
        # Directories are created by each task on demand, not here.
        return cls(
            input_dir=Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads"))).resolve(),
            output_dir=Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "converted"))).resolve(),
            work_dir=Path(os.getenv("WORK_DIR", str(BASE_DIR))).resolve(),
            ffmpeg_binary=os.getenv("FFMPEG_BINARY", "ffmpeg"),
            max_workers=int(os.getenv("MAX_WORKERS", str(_default_workers()))),
            default_crf=int(os.getenv("DEFAULT_CRF", "23")),
        )
