"""
Viewport: the rectangle of the complex plane mapped onto the pixel grid.

The window is described by its top-left and bottom-right corners. The
imaginary axis decreases downward on screen, so the top-left corner has
the smaller real part and the larger imaginary part.

Per-pixel stepping deltas are derived from the window and the pixel
dimensions:
    delta_real      = ((bottom_right - top_left).real / (width - 1)) + 0j
    delta_imaginary = 0 + ((bottom_right - top_left).imag / (height - 1))j

Pixel (x, y) therefore maps to top_left + x * delta_real + y * delta_imaginary,
with pixel (0, 0) on the top-left corner and pixel (width-1, height-1)
on the bottom-right corner.
"""

import math
from typing import NamedTuple

from .util.logging_setup import get_logger

logger = get_logger(__name__)


# Default view bounds (classic Mandelbrot overview)
DEFAULT_TOP_LEFT = complex(-2.0, 1.0)
DEFAULT_BOTTOM_RIGHT = complex(1.0, -1.0)


class Window(NamedTuple):
    """Visible rectangle of the complex plane."""
    top_left: complex
    bottom_right: complex


class Steps(NamedTuple):
    """Complex-plane distance covered by one pixel along each axis."""
    delta_real: complex
    delta_imaginary: complex


class Viewport:
    """
    Owns the current complex-plane window and its stepping deltas.

    Pan and zoom mutate the window in place. Callers must not mutate a
    viewport while a render pass that reads it is in flight.

    Usage:
        viewport = Viewport()
        viewport.recompute_steps(800, 600)
        viewport.zoom((400, 300), 0.5, 800, 600)   # zoom in around the center
        viewport.pan(-20, 0)                       # move 20 pixels left
    """

    def __init__(self, top_left=DEFAULT_TOP_LEFT, bottom_right=DEFAULT_BOTTOM_RIGHT):
        self.top_left = DEFAULT_TOP_LEFT
        self.bottom_right = DEFAULT_BOTTOM_RIGHT
        self.delta_real = 0j
        self.delta_imaginary = 0j
        self.reset(top_left, bottom_right)

    def __repr__(self):
        return (f"Viewport(top_left={self.top_left!r}, "
                f"bottom_right={self.bottom_right!r})")

    @property
    def window(self):
        return Window(self.top_left, self.bottom_right)

    @property
    def steps(self):
        return Steps(self.delta_real, self.delta_imaginary)

    @property
    def span(self):
        """(real extent, imaginary extent) of the window, both positive."""
        return (self.bottom_right.real - self.top_left.real,
                self.top_left.imag - self.bottom_right.imag)

    @property
    def center(self):
        return (self.top_left + self.bottom_right) / 2

    def reset(self, top_left=DEFAULT_TOP_LEFT, bottom_right=DEFAULT_BOTTOM_RIGHT):
        """
        Replace the window with the given rectangle.

        Stepping deltas are left as they are; call recompute_steps()
        once the pixel dimensions are known.

        Raises:
            ValueError: If the corners are not ordered top-left / bottom-right
        """
        top_left = complex(top_left)
        bottom_right = complex(bottom_right)
        if not (top_left.real < bottom_right.real and top_left.imag > bottom_right.imag):
            raise ValueError(
                f"Window corners out of order: top_left={top_left}, "
                f"bottom_right={bottom_right}"
            )
        self.top_left = top_left
        self.bottom_right = bottom_right

    def recompute_steps(self, width, height):
        """
        Derive the stepping deltas for a width x height pixel grid.

        Returns:
            True if the deltas were updated, False for grids with a single
            row or column (or none), which leave the deltas untouched
        """
        if width <= 1 or height <= 1:
            logger.debug("Skipping step recompute for %sx%s grid", width, height)
            return False
        diagonal = self.bottom_right - self.top_left
        self.delta_real = complex(diagonal.real / (width - 1), 0.0)
        self.delta_imaginary = complex(0.0, diagonal.imag / (height - 1))
        return True

    def pan(self, pixel_dx, pixel_dy):
        """
        Translate the window by a screen-space offset in pixels.

        Positive pixel_dx moves the window towards larger real values,
        positive pixel_dy moves it downward (towards smaller imaginary
        values). Stepping deltas are unchanged by a translation.

        Returns:
            False if both offsets are zero (nothing to do), True otherwise
        """
        if pixel_dx == 0 and pixel_dy == 0:
            return False
        offset = pixel_dx * self.delta_real + pixel_dy * self.delta_imaginary
        self.top_left += offset
        self.bottom_right += offset
        return True

    def zoom(self, focal_pixel, factor, width, height):
        """
        Scale the window around a focal pixel.

        The complex value under the focal pixel stays fixed. A factor
        below 1 shrinks the window (zoom in), above 1 grows it (zoom out).
        Negative factors are refused: they would swap the corners and
        break the top-left / bottom-right ordering of the window.

        Args:
            focal_pixel: (x, y) pixel position, relative to (0, 0)-(width, height)
            factor: Scale applied to the window size
            width, height: Current pixel dimensions

        Returns:
            True if the window changed, False for degenerate dimensions

        Raises:
            ValueError: If factor is not a positive finite number
        """
        if not (math.isfinite(factor) and factor > 0):
            raise ValueError(f"Zoom factor must be positive and finite, got {factor}")
        if width <= 0 or height <= 0:
            logger.debug("Ignoring zoom on %sx%s display", width, height)
            return False

        fx = focal_pixel[0] / width
        fy = focal_pixel[1] / height
        tl = self.top_left
        br = self.bottom_right
        focus = complex(tl.real + fx * (br.real - tl.real),
                        tl.imag + fy * (br.imag - tl.imag))

        self.top_left = (tl - focus) * factor + focus
        self.bottom_right = (br - focus) * factor + focus
        self.recompute_steps(width, height)
        return True

    def pixel_to_complex(self, x, y):
        """Complex value rendered at pixel (x, y) with the current steps."""
        return self.top_left + x * self.delta_real + y * self.delta_imaginary
