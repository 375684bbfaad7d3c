"""
Pixel layout and color mapping for the Mandelbrot renderer.

Rendered frames are 32-bit BGRA, one byte per channel, with the alpha
byte always fully opaque. Escape-time values are shaded on a single
gradient: black -> red, proportional to the smooth iteration count.

The shading functions are Numba JIT-compiled so the render kernel in
compute.py can call them per pixel without leaving nopython mode.
"""

from numba import jit


BYTES_PER_PIXEL = 4

# Channel offsets inside one BGRA pixel
BLUE = 0
GREEN = 1
RED = 2
ALPHA = 3

OPAQUE = 255


@jit(nopython=True, cache=True)
def color_scale(max_iterations):
    """Scale factor mapping a smooth iteration count onto 0..255."""
    return 255.0 / max_iterations


@jit(nopython=True, cache=True)
def shade(smooth, scale):
    """
    Map a smooth iteration count to the red channel byte.

    Args:
        smooth: Smooth (fractional) iteration count
        scale: Value returned by color_scale() for the current max_iter

    Returns:
        round(scale * smooth), clamped to [0, 255]
    """
    value = scale * smooth
    if value <= 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value + 0.5)


@jit(nopython=True, cache=True)
def write_pixel(buffer, offset, red):
    """Write one opaque red-gradient pixel at a byte offset of a flat buffer."""
    buffer[offset + BLUE] = 0
    buffer[offset + GREEN] = 0
    buffer[offset + RED] = red
    buffer[offset + ALPHA] = OPAQUE
