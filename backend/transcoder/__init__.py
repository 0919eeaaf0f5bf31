"""Single-file media conversion driven by ffmpeg."""

__version__ = "1.0.0"
