"""
Pixel buffer ownership.

The BufferManager is the single owner of the BGRA byte buffer that the
renderer draws into. It hands the renderer a mutable view for the
duration of a render pass and the display a read-only view afterwards.
A change of display size always produces a new buffer; buffers are
never resized in place.
"""

import numpy as np

from .colormaps import BYTES_PER_PIXEL
from .util.logging_setup import get_logger

logger = get_logger(__name__)


class BufferContractError(ValueError):
    """A buffer does not match the dimensions it was described with."""


class PixelBuffer:
    """
    Flat, row-major BGRA byte buffer.

    Attributes:
        data: 1-D uint8 numpy array of stride * height bytes
        width, height: Dimensions in pixels
        stride: Bytes per row (width * 4)
    """

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise BufferContractError(f"Cannot allocate a {width}x{height} pixel buffer")
        self.width = width
        self.height = height
        self.stride = width * BYTES_PER_PIXEL
        self.data = np.zeros(self.stride * height, dtype=np.uint8)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height}, stride={self.stride})"

    @property
    def nbytes(self):
        return self.data.nbytes

    def offset(self, row, col):
        """Byte offset of pixel (col, row), bounds-checked."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Pixel (x={col}, y={row}) outside {self.width}x{self.height} buffer"
            )
        return row * self.stride + col * BYTES_PER_PIXEL

    def pixel(self, row, col):
        """Return the (b, g, r, a) bytes of one pixel."""
        start = self.offset(row, col)
        return tuple(int(v) for v in self.data[start:start + BYTES_PER_PIXEL])

    def as_array(self):
        """View the buffer as a (height, width, 4) array of BGRA pixels."""
        rows = self.data.reshape(self.height, self.stride)
        return rows[:, :self.width * BYTES_PER_PIXEL].reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )

    def readonly(self):
        """Read-only memoryview over the bytes, top row first."""
        view = self.data.view()
        view.flags.writeable = False
        return memoryview(view)


class BufferManager:
    """
    Owns the current PixelBuffer and reallocates it on size changes.

    Usage:
        buffers = BufferManager()
        pixels = buffers.ensure_buffer(800, 600)
        if pixels is None:
            ...  # display not ready yet
    """

    def __init__(self):
        self._buffer = None

    @property
    def buffer(self):
        """The current buffer, or None if none is allocated."""
        return self._buffer

    def ensure_buffer(self, width, height):
        """
        Return a buffer of exactly width x height pixels.

        The existing buffer is returned unchanged if its dimensions match;
        otherwise a new one is allocated and the old one discarded.

        Returns:
            PixelBuffer, or None if width or height is not positive
        """
        if width <= 0 or height <= 0:
            logger.debug("Display %sx%s not ready, no buffer", width, height)
            return None
        current = self._buffer
        if current is not None and current.width == width and current.height == height:
            return current
        self._buffer = PixelBuffer(width, height)
        logger.debug("Allocated %r (%s bytes)", self._buffer, self._buffer.nbytes)
        return self._buffer

    def invalidate(self):
        """Drop the current buffer; the next ensure_buffer() reallocates."""
        self._buffer = None
