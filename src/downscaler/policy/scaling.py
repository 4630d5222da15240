"""Scale filter construction.

The encoder receives a filter that caps the output height without ever
upscaling, letting the width follow the aspect ratio rounded to an even
value (required by most video encoders).
"""

from __future__ import annotations

import math


def build_scale_filter(height: int | None, algorithm: str | None = None) -> str | None:
    """Build the ffmpeg ``-vf`` scale expression for a resolved height.

    Args:
        height: Maximum output height, or None for no scaling.
        algorithm: Optional scaling algorithm (e.g. 'lanczos').

    Returns:
        Filter expression, or None when no scaling is wanted.
    """
    if height is None:
        return None
    scale_filter = f"scale=-2:'min({height},ih)'"
    if algorithm:
        scale_filter += f":flags={algorithm}"
    return scale_filter


def _round_even(value: float) -> int:
    # Nearest even integer, halves rounding up
    return max(2, int(math.floor(value / 2 + 0.5)) * 2)


def compute_output_dimensions(
    source_width: int,
    source_height: int,
    target_height: int | None,
) -> tuple[int, int]:
    """Compute the dimensions the scale filter produces.

    Mirrors ``scale=-2:'min(H,ih)'``: the height is capped at the target
    (never raised above the source), the width keeps the aspect ratio and
    is rounded to the nearest even integer.

    Args:
        source_width: Source width in pixels.
        source_height: Source height in pixels.
        target_height: Resolved maximum height, or None for no scaling.

    Returns:
        Tuple of (width, height).

    Raises:
        ValueError: If any dimension is not positive.
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            f"Source dimensions must be positive, got {source_width}x{source_height}"
        )
    if target_height is not None and target_height <= 0:
        raise ValueError(f"Target height must be positive, got {target_height}")

    out_height = source_height
    if target_height is not None:
        out_height = min(target_height, source_height)

    out_width = _round_even(source_width * out_height / source_height)
    return out_width, out_height
