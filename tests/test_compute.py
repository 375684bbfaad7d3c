import math

import numpy as np
import pytest

from brotview.colormaps import color_scale, shade
from brotview.compute import (
    INTERIOR_BLACK,
    INTERIOR_FULL,
    iterate,
    render_rows,
    smooth_iterations,
)


@pytest.mark.parametrize("c", [2.5 + 0j, -3 + 0j, 0 + 2.1j, 1.5 + 1.5j, -100 - 100j])
def test_points_outside_radius_two_escape_on_first_update(c):
    count, z = iterate(c, 100)
    assert count == 1
    assert z == c


def test_origin_never_escapes():
    count, z = iterate(0j, 100)
    assert count == 100
    assert z == 0j


def test_count_reaches_cap_for_interior_points():
    # -1 is a period-2 point, -0.5 lies in the main cardioid
    for c in (-1 + 0j, -0.5 + 0j, -0.1 + 0.1j):
        count, _ = iterate(c, 255)
        assert count == 255


def test_cap_of_one_performs_no_updates():
    assert iterate(5 + 5j, 1) == (1, 0j)


def test_known_escape_count():
    # 1 -> 2 -> 5: |z|^2 = 4 after the second update
    count, z = iterate(1 + 0j, 100)
    assert count == 2
    assert z == 2 + 0j


def test_iterate_is_deterministic():
    c = -0.743643887037151 + 0.13182590420533j
    assert iterate(c, 500) == iterate(c, 500)


@pytest.mark.parametrize("c", [0.5 + 0j, 1 + 1j, -0.75 + 0.1j, 0.26 + 0j, -2 + 1j, 50 + 50j, 1e6 + 0j])
def test_smooth_value_is_bounded_by_count_for_escaped_points(c):
    count, z = iterate(c, 100)
    assert count < 100
    smooth = smooth_iterations(count, z, 100, INTERIOR_BLACK)
    assert 0.0 <= smooth <= count


def test_smooth_value_matches_formula():
    count, z = iterate(-2 + 1j, 100)
    expected = count - math.log2(math.log2(abs(z)))
    assert smooth_iterations(count, z, 100, INTERIOR_BLACK) == pytest.approx(expected)


def test_interior_policy():
    count, z = iterate(0j, 100)
    assert smooth_iterations(count, z, 100, INTERIOR_BLACK) == 0.0
    assert smooth_iterations(count, z, 100, INTERIOR_FULL) == 100.0


def test_overflowed_modulus_is_not_clamped():
    count, z = iterate(complex(1.5e308, 1.5e308), 100)
    assert count == 1
    assert smooth_iterations(count, z, 100, INTERIOR_BLACK) == -math.inf


def test_shade_rounds_and_clamps():
    scale = color_scale(100)
    assert shade(0.0, scale) == 0
    assert shade(-3.0, scale) == 0
    assert shade(100.0, scale) == 255
    assert shade(1000.0, scale) == 255
    assert shade(20.0, scale) == 51
    assert shade(0.78, scale) == 2


def test_render_rows_writes_bgra_pixels():
    width, height = 3, 3
    stride = width * 4
    buffer = np.zeros(stride * height, dtype=np.uint8)
    non_finite = render_rows(buffer, width, height, stride,
                             complex(-2, 1), complex(1.5, 0), complex(0, -1),
                             100, INTERIOR_FULL)
    assert non_finite == 0
    pixels = buffer.reshape(height, width, 4)
    assert (pixels[:, :, 0] == 0).all()
    assert (pixels[:, :, 1] == 0).all()
    assert (pixels[:, :, 3] == 255).all()
    # center pixel is -0.5 + 0i, inside the set, full red under INTERIOR_FULL
    assert pixels[1, 1, 2] == 255


def test_render_rows_leaves_bytes_past_the_row_alone():
    width, height, stride = 2, 2, 12
    buffer = np.full(stride * height, 7, dtype=np.uint8)
    render_rows(buffer, width, height, stride,
                complex(-2, 1), complex(3, 0), complex(0, -2), 50, INTERIOR_BLACK)
    rows = buffer.reshape(height, stride)
    assert (rows[:, 8:] == 7).all()
    assert (rows[:, 3:8:4] == 255).all()
