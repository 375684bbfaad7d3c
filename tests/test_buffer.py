import numpy as np
import pytest

from brotview.buffer import BufferContractError, BufferManager, PixelBuffer


def test_buffer_geometry():
    pixels = PixelBuffer(400, 300)
    assert pixels.stride == 1600
    assert pixels.nbytes == 400 * 4 * 300
    assert pixels.data.dtype == np.uint8
    assert pixels.data.ndim == 1


def test_offset_is_row_major_and_bounds_checked():
    pixels = PixelBuffer(5, 4)
    assert pixels.offset(0, 0) == 0
    assert pixels.offset(1, 0) == 20
    assert pixels.offset(3, 4) == 3 * 20 + 16
    with pytest.raises(IndexError):
        pixels.offset(4, 0)
    with pytest.raises(IndexError):
        pixels.offset(0, 5)
    with pytest.raises(IndexError):
        pixels.offset(-1, 0)


def test_pixel_and_array_views_share_storage():
    pixels = PixelBuffer(3, 2)
    pixels.as_array()[1, 2] = (10, 20, 30, 255)
    assert pixels.pixel(1, 2) == (10, 20, 30, 255)
    start = pixels.offset(1, 2)
    assert list(pixels.data[start:start + 4]) == [10, 20, 30, 255]


def test_readonly_view():
    pixels = PixelBuffer(2, 2)
    view = pixels.readonly()
    assert view.readonly
    assert len(view) == pixels.nbytes
    pixels.data[0] = 42
    assert view[0] == 42


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
def test_cannot_allocate_empty_buffer(width, height):
    with pytest.raises(BufferContractError):
        PixelBuffer(width, height)


def test_manager_reuses_buffer_with_same_dimensions():
    buffers = BufferManager()
    first = buffers.ensure_buffer(64, 48)
    assert buffers.ensure_buffer(64, 48) is first
    assert buffers.buffer is first


def test_manager_reallocates_on_size_change():
    buffers = BufferManager()
    first = buffers.ensure_buffer(64, 48)
    second = buffers.ensure_buffer(65, 48)
    assert second is not first
    assert (second.width, second.height, second.stride) == (65, 48, 260)


def test_invalidate_forces_reallocation():
    buffers = BufferManager()
    first = buffers.ensure_buffer(8, 8)
    buffers.invalidate()
    assert buffers.buffer is None
    assert buffers.ensure_buffer(8, 8) is not first


@pytest.mark.parametrize("width,height", [(0, 0), (0, 10), (10, 0), (-3, -3)])
def test_not_ready_for_degenerate_sizes(width, height):
    buffers = BufferManager()
    existing = buffers.ensure_buffer(4, 4)
    assert buffers.ensure_buffer(width, height) is None
    assert buffers.buffer is existing
