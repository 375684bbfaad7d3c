"""
Mandelbrot computation functions using Numba JIT compilation.

This module contains the performance-critical code of the viewer:
- Escape-time iteration of z² + c for a single point
- Smooth (continuous) iteration counts to avoid color banding
- The row-parallel render kernel that fills a BGRA byte buffer

The kernel walks each row left to right, advancing the complex position
by one horizontal stepping delta per pixel. Rows are independent and
are distributed over the Numba worker threads with prange; every row
writes its own disjoint byte range of the target buffer.
"""

import math

import numpy as np
from numba import jit, prange

from .colormaps import BYTES_PER_PIXEL, color_scale, shade, write_pixel


DEFAULT_MAX_ITERATIONS = 100

ESCAPE_RADIUS = 2.0
ESCAPE_RADIUS_SQUARED = ESCAPE_RADIUS * ESCAPE_RADIUS

# Interior policies: how points that never escape are shaded
INTERIOR_BLACK = 0  # smooth = 0
INTERIOR_FULL = 1   # smooth = max_iterations


@jit(nopython=True, cache=True)
def iterate(c, max_iterations):
    """
    Run the escape-time iteration z -> z² + c starting from z = 0.

    The count is incremented once per update, including the update that
    escapes, so an escaping point returns a count in [1, max_iterations)
    and a point that never escapes returns max_iterations after
    max_iterations - 1 updates.

    Args:
        c: Point in the complex plane
        max_iterations: Iteration cap (>= 1)

    Returns:
        (count, final_z)
    """
    z = 0j
    count = 1
    while count < max_iterations:
        z = z * z + c
        if z.real * z.real + z.imag * z.imag >= ESCAPE_RADIUS_SQUARED:
            break
        count += 1
    return count, z


@jit(nopython=True, cache=True)
def smooth_iterations(count, z, max_iterations, interior):
    """
    Convert an integer escape count to a continuous value.

    Escaped points use count - log2(log2(|z|)); since |z| >= 2 after an
    escape the correction is never negative. Far outside the escape
    disc the correction can exceed the count, so finite results are
    clamped at zero. If |z| overflowed the result is -inf and is
    returned as is, for the render kernel to report.

    Args:
        count: Iteration count returned by iterate()
        z: Final z returned by iterate()
        max_iterations: Iteration cap used for iterate()
        interior: INTERIOR_BLACK or INTERIOR_FULL

    Returns:
        Smooth iteration count as float64
    """
    if count < max_iterations:
        smooth = count - math.log2(math.log2(abs(z)))
        if smooth < 0.0 and math.isfinite(smooth):
            smooth = 0.0
        return smooth
    if interior == INTERIOR_FULL:
        return float(max_iterations)
    return 0.0


@jit(nopython=True, parallel=True, cache=True)
def render_rows(buffer, width, height, stride, top_left, delta_real,
                delta_imaginary, max_iterations, interior):
    """
    Render the Mandelbrot set into a flat BGRA byte buffer.

    Args:
        buffer: 1-D uint8 array of at least stride * height bytes
        width, height: Image dimensions in pixels
        stride: Bytes per row
        top_left: Complex value of pixel (0, 0)
        delta_real: Complex step between horizontally adjacent pixels
        delta_imaginary: Complex step between vertically adjacent pixels
        max_iterations: Iteration cap
        interior: INTERIOR_BLACK or INTERIOR_FULL

    Returns:
        Number of pixels whose smooth value was not finite
    """
    scale = color_scale(max_iterations)
    non_finite = np.zeros(height, dtype=np.int64)

    for y in prange(height):
        position = top_left + y * delta_imaginary
        offset = y * stride
        for x in range(width):
            count, z = iterate(position, max_iterations)
            smooth = smooth_iterations(count, z, max_iterations, interior)
            if not math.isfinite(smooth):
                non_finite[y] += 1
            write_pixel(buffer, offset, shade(smooth, scale))
            offset += BYTES_PER_PIXEL
            position += delta_real

    return non_finite.sum()


def warmup_jit():
    """
    Warm up JIT compilation with a tiny dummy buffer.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real render.
    """
    width, height = 4, 3
    dummy = np.zeros(width * height * BYTES_PER_PIXEL, dtype=np.uint8)
    render_rows(dummy, width, height, width * BYTES_PER_PIXEL,
                complex(-2.0, 1.0), complex(1.0, 0.0), complex(0.0, -1.0),
                10, INTERIOR_BLACK)
