"""
Image-to-mask helpers that feed the contour algorithms.

Covers image loading, grayscale conversion, background thresholding from the
image border, morphological smoothing and splitting a mask into objects.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List

import cv2
import numpy as np
from PIL import Image

from ..errors import ContourInvariantError, ContourPreconditionError
from ..types.contours import Point
from .boundary import BACKGROUND, FOREGROUND, as_single_channel_mask

logger = logging.getLogger(__name__)


@dataclass
class SplitObject:
    """One connected object cut out of the full mask"""
    label: int
    offset: Point  # top-left corner of the crop in the full image
    area: int
    image: np.ndarray  # cropped grayscale image
    mask: np.ndarray  # cropped mask holding only this object


def load_image(path: str) -> np.ndarray:
    """
    Load an image file as an RGB uint8 array.

    Args:
        path: Path to the image

    Returns:
        np.ndarray: (H, W, 3) uint8 array
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f'Image not found: {path}')
    with Image.open(path) as img:
        return np.array(img.convert('RGB'))


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a gray, RGB or RGBA image to a float32 (H, W) intensity array."""
    image = np.asarray(image)
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    if image.ndim == 2:
        return image.astype(np.float32)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image.astype(np.float32), cv2.COLOR_RGB2GRAY)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image.astype(np.float32), cv2.COLOR_RGBA2GRAY)
    raise ContourPreconditionError(f'Unsupported image shape {image.shape}')


def border_intensities(gray: np.ndarray) -> np.ndarray:
    """
    Collect the intensities of all pixels on the image border.

    Each border pixel is taken exactly once, so for W, H >= 2 the result has
    2W + 2H - 4 values.
    """
    height, width = gray.shape[:2]
    if height < 2 or width < 2:
        values = gray.reshape(-1)
    else:
        values = np.concatenate([
            gray[0, :],
            gray[height - 1, :],
            gray[1:height - 1, 0],
            gray[1:height - 1, width - 1],
        ])
        expected = 2 * width + 2 * height - 4
        if values.size != expected:
            raise ContourInvariantError(
                f'Expected {expected} border intensities, got {values.size}'
            )
    return values


def summary_stats(values: np.ndarray) -> Dict[str, Any]:
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return {'count': 0}
    return {
        'count': int(values.size),
        'min': float(values.min()),
        'max': float(values.max()),
        'mean': float(values.mean()),
        'median': float(np.median(values)),
    }


def estimate_background_threshold(
    gray: np.ndarray, percentile: float = 90.0, ratio: float = 1.5
) -> float:
    """
    Estimate the foreground threshold from the image border.

    The border is assumed to be background; the threshold is ``ratio`` times the
    given percentile of the border intensities.
    """
    values = border_intensities(gray)
    logger.info(f'Border intensities: {summary_stats(values)}')
    return float(ratio * np.percentile(values, percentile))


def threshold_mask(gray: np.ndarray, threshold: float) -> np.ndarray:
    """Mark pixels brighter than ``threshold`` as foreground (255)."""
    mask = np.full(gray.shape[:2], BACKGROUND, dtype=np.uint8)
    mask[gray > threshold] = FOREGROUND
    return mask


def foreground_percent(mask: np.ndarray) -> float:
    mask = as_single_channel_mask(mask)
    if mask.size == 0:
        return 0.0
    return 100.0 * float(np.count_nonzero(mask == FOREGROUND)) / mask.size


def _square_kernel(strength: int) -> np.ndarray:
    size = 2 * strength + 1
    return np.ones((size, size), dtype=np.uint8)


def dilate(mask: np.ndarray, strength: int) -> np.ndarray:
    """Grow the foreground by ``strength`` pixels (square neighbourhood)."""
    mask = as_single_channel_mask(mask)
    if strength <= 0:
        return mask.copy()
    return cv2.dilate(mask, _square_kernel(strength), borderType=cv2.BORDER_CONSTANT, borderValue=0)


def erode(mask: np.ndarray, strength: int) -> np.ndarray:
    """Shrink the foreground by ``strength`` pixels (square neighbourhood)."""
    mask = as_single_channel_mask(mask)
    if strength <= 0:
        return mask.copy()
    return cv2.erode(mask, _square_kernel(strength), borderType=cv2.BORDER_CONSTANT, borderValue=0)


def smooth_mask(mask: np.ndarray, strength: int = 3) -> Dict[str, np.ndarray]:
    """
    Smooth a mask with a closing followed by an opening.

    Returns:
        Dict[str, np.ndarray]: Every intermediate stage keyed by name, the final
        mask under ``'smoothed'``
    """
    dilated = dilate(mask, strength)
    dilated_eroded = erode(dilated, strength)
    dilated_eroded_eroded = erode(dilated_eroded, strength)
    smoothed = dilate(dilated_eroded_eroded, strength)
    return {
        'dilated': dilated,
        'dilated_eroded': dilated_eroded,
        'dilated_eroded_eroded': dilated_eroded_eroded,
        'smoothed': smoothed,
    }


def fill_mask_holes(mask: np.ndarray) -> np.ndarray:
    """Fill every hole of the mask so each object has a single outer boundary."""
    mask = as_single_channel_mask(mask)
    binary = (mask == FOREGROUND).astype(np.uint8)
    contours_found, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    filled = np.zeros_like(binary)
    if contours_found:
        cv2.drawContours(filled, contours_found, -1, color=FOREGROUND, thickness=cv2.FILLED)
    return filled


def split_objects(
    gray: np.ndarray, mask: np.ndarray, min_area: int = 0
) -> List[SplitObject]:
    """
    Split a mask into its 8-connected objects.

    Args:
        gray: Grayscale image of the same size as the mask
        mask: Foreground mask (255)
        min_area: Objects with fewer pixels are dropped

    Returns:
        List[SplitObject]: Objects in label order, each cropped to its bounding box
    """
    mask = as_single_channel_mask(mask)
    if gray.shape[:2] != mask.shape:
        raise ContourPreconditionError(
            f'Image shape {gray.shape[:2]} does not match mask shape {mask.shape}'
        )

    binary = (mask == FOREGROUND).astype(np.uint8)
    num_labels, labels, stats, _ = cv2.connectedComponentsWithStats(binary, connectivity=8)

    objects = []
    for label in range(1, num_labels):
        x = int(stats[label, cv2.CC_STAT_LEFT])
        y = int(stats[label, cv2.CC_STAT_TOP])
        w = int(stats[label, cv2.CC_STAT_WIDTH])
        h = int(stats[label, cv2.CC_STAT_HEIGHT])
        area = int(stats[label, cv2.CC_STAT_AREA])
        if area < min_area:
            logger.debug(f'Dropping object {label} with area {area} < {min_area}')
            continue

        crop_labels = labels[y:y + h, x:x + w]
        obj_mask = np.where(crop_labels == label, FOREGROUND, BACKGROUND).astype(np.uint8)
        objects.append(SplitObject(
            label=label,
            offset=Point(x, y),
            area=area,
            image=gray[y:y + h, x:x + w].copy(),
            mask=obj_mask,
        ))
    return objects
