"""
Contour simplification and splitting into sides.

simplify_contour removes the least significant vertex one at a time until the
requested number of vertices is left. The significance of a vertex is its squared
distance to the line through its two surviving neighbours. Vertices live in a
cyclic doubly-linked list over the original indices (``prev``/``next`` arrays plus
an ``alive`` flag), and candidates are kept in a heap. A heap entry carries the
version of its vertex at push time; when a neighbour is removed the vertex gets a
new version and a fresh entry, and the old one is discarded when popped.
"""

import heapq
import logging
import math
from typing import Dict, List, Sequence, Tuple

from ..errors import ContourInvariantError, ContourPreconditionError
from ..types.contours import Point

logger = logging.getLogger(__name__)


def dist2_point_to_line(p: Sequence[int], a: Sequence[int], b: Sequence[int]) -> float:
    """
    Squared distance from ``p`` to the line through ``a`` and ``b``.

    If ``a`` and ``b`` coincide, the squared distance from ``p`` to ``a`` is returned.
    """
    vx = int(b[0]) - int(a[0])
    vy = int(b[1]) - int(a[1])
    wx = int(p[0]) - int(a[0])
    wy = int(p[1]) - int(a[1])

    vv = vx * vx + vy * vy
    if vv == 0:
        return float(wx * wx + wy * wy)

    cross = vx * wy - vy * wx
    return float(cross * cross) / float(vv)


def simplify_contour(contour: Sequence[Point], target_vertex_count: int) -> List[Point]:
    """
    Reduce a cyclic contour to ``target_vertex_count`` of its own points.

    Args:
        contour: Ordered cyclic contour
        target_vertex_count: Number of vertices to keep (>= 0)

    Returns:
        List[Point]: The surviving points in original cyclic order, starting from
        the lowest surviving original index. Empty if the target is 0 or the contour
        is empty; a copy of the contour if it already has at most the target size.
    """
    if target_vertex_count < 0:
        raise ContourPreconditionError(
            f'target_vertex_count must be non-negative, got {target_vertex_count}'
        )
    n = len(contour)
    if target_vertex_count == 0 or n == 0:
        return []
    if n <= target_vertex_count:
        return list(contour)

    prev = [(i - 1) % n for i in range(n)]
    nxt = [(i + 1) % n for i in range(n)]
    alive = [True] * n
    version = [0] * n

    def compute_cost(i: int) -> float:
        a = prev[i]
        b = nxt[i]
        if not alive[i] or not alive[a] or not alive[b]:
            return math.inf
        return dist2_point_to_line(contour[i], contour[a], contour[b])

    # Entries are (cost, index, version); equal costs pop the lower index first.
    heap: List[Tuple[float, int, int]] = [(compute_cost(i), i, 0) for i in range(n)]
    heapq.heapify(heap)

    alive_count = n
    stale = 0
    while alive_count > target_vertex_count:
        if not heap:
            raise ContourInvariantError(
                f'Priority queue exhausted with {alive_count} vertices left (target {target_vertex_count})'
            )
        _, i, ver = heapq.heappop(heap)
        if not alive[i] or ver != version[i]:
            stale += 1
            continue

        a = prev[i]
        b = nxt[i]

        alive[i] = False
        alive_count -= 1
        nxt[a] = b
        prev[b] = a

        version[a] += 1
        version[b] += 1
        heapq.heappush(heap, (compute_cost(a), a, version[a]))
        heapq.heappush(heap, (compute_cost(b), b, version[b]))

    start = next((i for i in range(n) if alive[i]), -1)
    if start < 0:
        raise ContourInvariantError('No surviving vertex left after simplification')

    simplified = []
    cur = start
    while True:
        simplified.append(contour[cur])
        cur = nxt[cur]
        if cur == start:
            break

    logger.debug(
        f'Simplified contour from {n} to {len(simplified)} vertices ({stale} stale heap entries skipped)'
    )
    return simplified


def split_contour_by_corners(
    contour: Sequence[Point], corners: Sequence[Point]
) -> List[List[Point]]:
    """
    Split a cyclic contour into sides between consecutive corners.

    Args:
        contour: Ordered cyclic contour
        corners: Corner points, each present in the contour (order does not matter)

    Returns:
        List[List[Point]]: One side per pair of consecutive corners (in contour
        order, wrapping around), each running from one corner to the next inclusive

    Raises:
        ContourPreconditionError: If a corner is not on the contour or fewer than
            two distinct corners are given
    """
    if not contour:
        return []

    n = len(contour)

    # First occurrence of each point.
    index_of: Dict[Tuple[int, int], int] = {}
    for i, p in enumerate(contour):
        index_of.setdefault(tuple(p), i)

    corner_indices = set()
    for c in corners:
        idx = index_of.get(tuple(c))
        if idx is None:
            raise ContourPreconditionError(f'Corner {tuple(c)} is not a point of the contour')
        corner_indices.add(idx)

    sorted_indices = sorted(corner_indices)
    if len(sorted_indices) < 2:
        raise ContourPreconditionError(
            f'At least 2 distinct corners are required, got {len(sorted_indices)}'
        )

    m = len(sorted_indices)
    sides = []
    for k in range(m):
        i = sorted_indices[k]
        j = sorted_indices[(k + 1) % m]
        if i < j:
            side = list(contour[i:j + 1])
        else:
            side = list(contour[i:]) + list(contour[:j + 1])
        sides.append(side)

    return sides
