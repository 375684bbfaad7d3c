"""
Synchronous, row-parallel Mandelbrot renderer.

A render pass fans the rows of the target buffer out over the Numba
worker threads and returns once every row is written. There is no
background computation: the caller owns sequencing, and must not
mutate the viewport while a pass is running.

The module-level render() function is the raw entry point taking a
flat byte buffer plus its geometry; MandelbrotRenderer wraps it with
the settings of a viewer session and works on PixelBuffer/Viewport
objects.
"""

import time

import numba
import numpy as np

from .buffer import BufferContractError
from .colormaps import BYTES_PER_PIXEL
from .compute import (
    DEFAULT_MAX_ITERATIONS,
    INTERIOR_BLACK,
    INTERIOR_FULL,
    render_rows,
)
from .util.logging_setup import get_logger

logger = get_logger(__name__)


def available_threads():
    """Number of worker threads the Numba threading layer was started with."""
    return numba.config.NUMBA_NUM_THREADS


def resolve_threads(threads):
    """
    Pick the degree of parallelism for a render pass.

    Args:
        threads: Requested thread count, or None for all available threads

    Returns:
        Thread count in [1, available_threads()]
    """
    available = available_threads()
    if threads is None:
        return available
    if threads < 1:
        raise ValueError(f"threads must be >= 1, got {threads}")
    return min(int(threads), available)


def check_buffer(buffer, width, height, stride):
    """
    Verify that a buffer can hold a width x height image with the given stride.

    Raises:
        BufferContractError: On any mismatch
    """
    if not isinstance(buffer, np.ndarray) or buffer.dtype != np.uint8 or buffer.ndim != 1:
        raise BufferContractError("Render target must be a 1-D uint8 numpy array")
    if not buffer.flags.c_contiguous or not buffer.flags.writeable:
        raise BufferContractError("Render target must be contiguous and writeable")
    if stride < width * BYTES_PER_PIXEL:
        raise BufferContractError(
            f"Stride {stride} is smaller than width * {BYTES_PER_PIXEL} "
            f"({width * BYTES_PER_PIXEL})"
        )
    if stride * height > buffer.size:
        raise BufferContractError(
            f"{width}x{height} image with stride {stride} needs {stride * height} "
            f"bytes, buffer has {buffer.size}"
        )


def render(buffer, width, height, stride, window, steps,
           max_iterations=DEFAULT_MAX_ITERATIONS, threads=None,
           interior=INTERIOR_BLACK, check_finite=__debug__):
    """
    Fill every pixel of a BGRA buffer with the Mandelbrot set.

    Args:
        buffer: Flat uint8 numpy array, written in place
        width, height: Image dimensions in pixels
        stride: Bytes per row
        window: viewport.Window; pixel (0, 0) renders window.top_left
        steps: viewport.Steps for the same window and dimensions
        max_iterations: Iteration cap for this pass
        threads: Degree of parallelism (None = all worker threads)
        interior: INTERIOR_BLACK or INTERIOR_FULL
        check_finite: Raise if any smooth value came out NaN or infinite

    Raises:
        BufferContractError: If the buffer does not match the geometry
        ValueError: If max_iterations or threads is below 1
        FloatingPointError: If check_finite is set and a value was not finite
    """
    if width <= 0 or height <= 0:
        logger.debug("Skipping render of %sx%s image", width, height)
        return
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    if interior not in (INTERIOR_BLACK, INTERIOR_FULL):
        raise ValueError(f"Unknown interior policy: {interior}")
    check_buffer(buffer, width, height, stride)

    n_threads = resolve_threads(threads)
    previous = numba.get_num_threads()
    numba.set_num_threads(n_threads)
    try:
        non_finite = render_rows(
            buffer, width, height, stride,
            complex(window.top_left), complex(steps.delta_real),
            complex(steps.delta_imaginary), int(max_iterations), interior,
        )
    finally:
        numba.set_num_threads(previous)

    if check_finite and non_finite:
        raise FloatingPointError(
            f"{non_finite} pixels produced a non-finite smooth iteration count"
        )


class MandelbrotRenderer:
    """
    Renders a Viewport into a PixelBuffer with session-wide settings.

    Usage:
        renderer = MandelbrotRenderer(max_iterations=256)
        renderer.render(pixels, viewport)

    Attributes:
        max_iterations: Iteration cap
        threads: Degree of parallelism (None = all worker threads)
        interior: INTERIOR_BLACK or INTERIOR_FULL
        check_finite: Treat non-finite smooth values as fatal
        last_render_seconds: Duration of the most recent pass
    """

    def __init__(self, max_iterations=DEFAULT_MAX_ITERATIONS, threads=None,
                 interior=INTERIOR_BLACK, check_finite=__debug__):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self.max_iterations = max_iterations
        self.threads = threads
        self.interior = interior
        self.check_finite = check_finite
        self.last_render_seconds = None

    def render(self, pixels, viewport):
        """Render the viewport's window into pixels (blocking)."""
        start = time.perf_counter()
        render(
            pixels.data, pixels.width, pixels.height, pixels.stride,
            viewport.window, viewport.steps,
            max_iterations=self.max_iterations,
            threads=self.threads,
            interior=self.interior,
            check_finite=self.check_finite,
        )
        self.last_render_seconds = time.perf_counter() - start
        logger.debug(
            "Rendered %sx%s max_iter=%s threads=%s in %.3fs window=%s",
            pixels.width, pixels.height, self.max_iterations,
            resolve_threads(self.threads), self.last_render_seconds,
            viewport.window,
        )

    def update_settings(self, max_iterations=None, interior=None):
        """
        Update rendering settings.

        Args:
            max_iterations: New iteration cap (or None to keep current)
            interior: New interior policy (or None to keep current)

        Returns:
            True if any setting changed, False otherwise
        """
        changed = False
        if max_iterations is not None and max_iterations != self.max_iterations:
            if max_iterations < 1:
                raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
            self.max_iterations = max_iterations
            changed = True
        if interior is not None and interior != self.interior:
            if interior not in (INTERIOR_BLACK, INTERIOR_FULL):
                raise ValueError(f"Unknown interior policy: {interior}")
            self.interior = interior
            changed = True
        return changed
