"""downscaler - batch-transcode a video tree to HEVC with per-directory scaling."""

__version__ = "0.1.0"
