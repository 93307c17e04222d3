"""Shared builders for synthetic masks and contours."""

import numpy as np
import pytest

from object_corners.types.contours import Point


def make_rect_contour(left, top, right, bottom):
    """Clockwise rectangle perimeter (inclusive bounds) starting at the top-left pixel."""
    contour = []
    for x in range(left, right + 1):
        contour.append(Point(x, top))
    for y in range(top + 1, bottom + 1):
        contour.append(Point(right, y))
    for x in range(right - 1, left - 1, -1):
        contour.append(Point(x, bottom))
    for y in range(bottom - 1, top, -1):
        contour.append(Point(left, y))
    return contour


def make_rect_mask(height, width, left, top, right, bottom):
    """uint8 mask with a filled rectangle (inclusive bounds) set to 255."""
    mask = np.zeros((height, width), dtype=np.uint8)
    mask[top:bottom + 1, left:right + 1] = 255
    return mask


def assert_cyclically_connected(contour):
    n = len(contour)
    for i in range(n):
        p = contour[i]
        q = contour[(i + 1) % n]
        dx = abs(p.x - q.x)
        dy = abs(p.y - q.y)
        assert dx <= 1 and dy <= 1, f'{p} and {q} are not neighbours'
        assert (dx, dy) != (0, 0), f'{p} repeated'


@pytest.fixture
def rect_contour():
    """16-point perimeter of the 5x5 rectangle spanning (2, 3)..(6, 7)."""
    return make_rect_contour(2, 3, 6, 7)


@pytest.fixture
def rect_corners():
    return [Point(2, 3), Point(6, 3), Point(6, 7), Point(2, 7)]


@pytest.fixture
def disc_mask():
    """Filled disc of radius 12 centred in a 40x40 image."""
    yy, xx = np.mgrid[0:40, 0:40]
    mask = np.zeros((40, 40), dtype=np.uint8)
    mask[(xx - 20) ** 2 + (yy - 19) ** 2 <= 12 ** 2] = 255
    return mask


@pytest.fixture
def l_shape_mask():
    mask = np.zeros((20, 20), dtype=np.uint8)
    mask[3:16, 4:8] = 255
    mask[12:16, 4:15] = 255
    return mask
