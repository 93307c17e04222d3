"""
Boundary extraction for binary object masks.

A boundary pixel is a foreground pixel that touches the background (or the
image edge) through at least one of its 8 neighbours.
"""

import logging

import numpy as np

from ..errors import ContourPreconditionError

logger = logging.getLogger(__name__)

FOREGROUND = 255
BACKGROUND = 0

# Clockwise neighbour order in image coordinates (y down):
# 0:E, 1:SE, 2:S, 3:SW, 4:W, 5:NW, 6:N, 7:NE
DX8 = (1, 1, 0, -1, -1, -1, 0, 1)
DY8 = (0, 1, 1, 1, 0, -1, -1, -1)


def as_single_channel_mask(mask: np.ndarray) -> np.ndarray:
    """
    Return ``mask`` as a 2D uint8 array with 255 for foreground.

    Args:
        mask: (H, W) or (H, W, 1) array. Boolean masks are mapped True -> 255.

    Returns:
        np.ndarray: 2D view (or converted copy for boolean input)

    Raises:
        ContourPreconditionError: If the mask is not single-channel.
    """
    mask = np.asarray(mask)
    if mask.ndim == 3 and mask.shape[2] == 1:
        mask = mask[:, :, 0]
    if mask.ndim != 2:
        raise ContourPreconditionError(
            f'Expected a single-channel mask, got array of shape {mask.shape}'
        )
    if mask.dtype == bool:
        mask = np.where(mask, FOREGROUND, BACKGROUND).astype(np.uint8)
    return mask


def build_contour_mask(object_mask: np.ndarray) -> np.ndarray:
    """
    Build the 1-pixel boundary mask of an object mask.

    Args:
        object_mask: Single-channel mask, foreground == 255

    Returns:
        np.ndarray: uint8 mask of the same size with boundary pixels set to 255
    """
    mask = as_single_channel_mask(object_mask)
    height, width = mask.shape

    is_fg = mask == FOREGROUND
    # Out-of-bounds neighbours count as background.
    padded = np.pad(is_fg, 1, mode='constant', constant_values=False)

    interior = is_fg.copy()
    for dx, dy in zip(DX8, DY8):
        interior &= padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]

    boundary = is_fg & ~interior
    contour_mask = np.zeros((height, width), dtype=np.uint8)
    contour_mask[boundary] = FOREGROUND

    logger.debug(
        f'Boundary mask {width}x{height}: {int(boundary.sum())} of {int(is_fg.sum())} foreground pixels'
    )
    return contour_mask
