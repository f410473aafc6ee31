"""Color matrix engine.

Turns the four adjustment sliders into a single 4x5 affine color matrix,
stored row-major as a flat list of 20 floats. A renderer applies it per pixel:

    out[row] = sum(m[row*5 + k] * in[k] for k in 0..3) + m[row*5 + 4]

Channels are R, G, B, A normalized to [0, 1]. Renderers working on 0-255
channels must pass the matrix through `to_byte_range` first.
"""

from __future__ import annotations

from collections.abc import Sequence

# Perceptual luma weights used for desaturation.
LUMA_R = 0.213
LUMA_G = 0.715
LUMA_B = 0.072

# Brightness 1.0 lifts every color channel by half the normalized range.
BRIGHTNESS_OFFSET_SCALE = 0.5

ROWS = 4
COLS = 5

IDENTITY: tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 1.0, 0.0,
)  # fmt: skip


def saturation_matrix(s: float) -> list[float]:
    """Luminance-preserving blend between grayscale (s=0) and full color (s=1)."""
    inv = 1.0 - s
    r = LUMA_R * inv
    g = LUMA_G * inv
    b = LUMA_B * inv
    return [
        r + s, g,     b,     0.0, 0.0,
        r,     g + s, b,     0.0, 0.0,
        r,     g,     b + s, 0.0, 0.0,
        0.0,   0.0,   0.0,   1.0, 0.0,
    ]  # fmt: skip


def scale_offset_matrix(brightness: float, contrast: float, exposure: float) -> list[float]:
    """Diagonal gain from contrast and exposure (in stops) plus a brightness offset."""
    scale = (contrast + 1.0) * (2.0**exposure)
    offset = brightness * BRIGHTNESS_OFFSET_SCALE
    return [
        scale, 0.0,   0.0,   0.0, offset,
        0.0,   scale, 0.0,   0.0, offset,
        0.0,   0.0,   scale, 0.0, offset,
        0.0,   0.0,   0.0,   1.0, 0.0,
    ]  # fmt: skip


def compose(a: Sequence[float], b: Sequence[float]) -> list[float]:
    """Compose two affine color matrices so that `b` is applied first, then `a`.

    Each matrix is treated as a 5x5 with an implicit last row [0, 0, 0, 0, 1].
    """
    result = [0.0] * (ROWS * COLS)
    for row in range(ROWS):
        for col in range(COLS):
            val = 0.0
            for k in range(ROWS):
                val += a[row * COLS + k] * b[k * COLS + col]
            if col == COLS - 1:
                val += a[row * COLS + COLS - 1]
            result[row * COLS + col] = val
    return result


def color_matrix(
    brightness: float, contrast: float, exposure: float, saturation: float
) -> list[float]:
    """Combined form: saturation first, then contrast/exposure/brightness."""
    return compose(
        scale_offset_matrix(brightness, contrast, exposure),
        saturation_matrix(saturation),
    )


def reduced_color_matrix(brightness: float, contrast: float, exposure: float) -> list[float]:
    """Reduced form: saturation fixed at identity, no composition step."""
    return scale_offset_matrix(brightness, contrast, exposure)


def apply_matrix(
    matrix: Sequence[float], rgba: Sequence[float]
) -> tuple[float, float, float, float]:
    """Apply `matrix` to a single RGBA color."""
    out = []
    for row in range(ROWS):
        base = row * COLS
        val = matrix[base + 4]
        for k in range(ROWS):
            val += matrix[base + k] * rgba[k]
        out.append(val)
    return out[0], out[1], out[2], out[3]


def to_byte_range(matrix: Sequence[float]) -> list[float]:
    """Rescale the offset column for renderers whose channels span 0-255."""
    result = list(matrix)
    for row in range(ROWS):
        result[row * COLS + COLS - 1] *= 255.0
    return result
