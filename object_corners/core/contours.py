"""
Ordered contour tracing over a boundary mask.

The tracer walks the single 8-connected boundary component with Moore-neighbour
tracing and returns a clockwise (image coordinates, y down) cyclic sequence of
pixels starting at the top-most, then left-most pixel.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from ..errors import ContourInvariantError, ContourPreconditionError
from ..types.contours import Point
from .boundary import DX8, DY8, FOREGROUND, as_single_channel_mask

logger = logging.getLogger(__name__)

WEST = 4


def direction_from_delta(dx: int, dy: int) -> int:
    """
    Map an 8-neighbour offset to its clockwise direction index.

    Returns:
        int: 0..7 (E, SE, S, SW, W, NW, N, NE), or -1 if not an 8-neighbour offset
    """
    for d in range(8):
        if DX8[d] == dx and DY8[d] == dy:
            return d
    return -1


def is_eight_neighbor(p: Sequence[int], q: Sequence[int]) -> bool:
    dx = abs(p[0] - q[0])
    dy = abs(p[1] - q[1])
    return dx <= 1 and dy <= 1 and (dx != 0 or dy != 0)


def signed_area2(points: Sequence[Sequence[int]]) -> int:
    """
    Doubled signed area of a closed polygon (shoelace formula).

    In image coordinates (y down) a positive value means clockwise traversal.
    Python integers do not overflow, so the sum is exact.
    """
    n = len(points)
    if n < 3:
        return 0
    area2 = 0
    for i in range(n):
        px, py = points[i]
        qx, qy = points[(i + 1) % n]
        area2 += int(px) * int(qy) - int(qx) * int(py)
    return area2


def rotate_to_min_yx(points: Sequence[Point]) -> List[Point]:
    """Rotate a cyclic sequence so that the point with minimal (y, x) comes first."""
    if not points:
        return []
    best = min(range(len(points)), key=lambda i: (points[i][1], points[i][0]))
    return list(points[best:]) + list(points[:best])


def count_components(contour_mask: np.ndarray) -> int:
    """Number of 8-connected foreground components in a boundary mask."""
    binary = (contour_mask == FOREGROUND).astype(np.uint8)
    num_labels, _ = cv2.connectedComponents(binary, connectivity=8)
    # Label 0 is the background.
    return num_labels - 1


def _find_start(is_fg: List[List[bool]], width: int, height: int) -> Optional[Point]:
    # is_fg is padded by one pixel on every side.
    for y in range(height):
        row = is_fg[y + 1]
        for x in range(width):
            if row[x + 1]:
                return Point(x, y)
    return None


def extract_contour(contour_mask: np.ndarray) -> List[Point]:
    """
    Trace the ordered contour of a boundary mask.

    Args:
        contour_mask: Single-channel boundary mask (as produced by build_contour_mask)
            containing at most one 8-connected component

    Returns:
        List[Point]: Clockwise contour starting at min (y, x), without repeating
        the first point; empty if the mask has no foreground pixels

    Raises:
        ContourPreconditionError: If the mask is not single-channel or holds more
            than one boundary component
        ContourInvariantError: If tracing does not close within width*height + 8 steps
    """
    mask = as_single_channel_mask(contour_mask)
    height, width = mask.shape

    padded = np.pad(mask == FOREGROUND, 1, mode='constant', constant_values=False)
    is_fg = padded.tolist()

    start = _find_start(is_fg, width, height)
    if start is None:
        return []

    components = count_components(mask)
    if components > 1:
        raise ContourPreconditionError(
            f'Boundary mask must contain a single 8-connected component, found {components}'
        )

    def fg(x: int, y: int) -> bool:
        return is_fg[y + 1][x + 1]

    # Degenerate: a lone pixel.
    if not any(fg(start.x + DX8[k], start.y + DY8[k]) for k in range(8)):
        return [start]

    def step(p: Point, back: Tuple[int, int]) -> Tuple[Point, Tuple[int, int]]:
        dir_back = direction_from_delta(back[0] - p.x, back[1] - p.y)
        if dir_back < 0:
            dir_back = WEST
        first_dir = (dir_back + 1) & 7
        for t in range(8):
            d = (first_dir + t) & 7
            nx = p.x + DX8[d]
            ny = p.y + DY8[d]
            if fg(nx, ny):
                # New backtrack: the neighbour just before d in clockwise order.
                prev_d = (d + 7) & 7
                return Point(nx, ny), (p.x + DX8[prev_d], p.y + DY8[prev_d])
        return p, back

    contour = [start]
    # The backtrack of the start lies to its west, possibly outside the image.
    current, back = step(start, (start.x - 1, start.y))
    contour.append(current)

    safety_limit = width * height + 8
    while True:
        if len(contour) >= safety_limit:
            raise ContourInvariantError(
                f'Contour tracing did not close within {safety_limit} steps (start={start})'
            )
        nxt, back = step(current, back)
        if nxt == start:
            break
        contour.append(nxt)
        current = nxt

    if signed_area2(contour) < 0:
        contour.reverse()

    contour = rotate_to_min_yx(contour)

    for p in contour:
        if not (0 <= p.x < width and 0 <= p.y < height):
            raise ContourInvariantError(f'Traced point {p} lies outside the {width}x{height} mask')

    logger.debug(f'Traced contour of {len(contour)} points starting at {contour[0]}')
    return contour
