"""
End-to-end corner detection for objects photographed on a dark background.

Processing Steps:
1. Grayscale conversion
2. Background threshold estimated from the image border
3. Thresholding and morphological smoothing of the foreground mask
4. Splitting the mask into 8-connected objects
5. Per object: boundary mask, ordered contour, corner simplification and
   splitting of the contour into sides
"""

import logging
import os
import time
from typing import List, Optional

import numpy as np

from ..config import PipelineConfig
from ..types.contours import ObjectContourInfo
from ..visualization import (draw_contour_order, draw_corners, draw_sides,
                             dump_image)
from .boundary import build_contour_mask
from .contours import extract_contour
from .segmentation import (SplitObject, estimate_background_threshold,
                           fill_mask_holes, foreground_percent, smooth_mask,
                           split_objects, threshold_mask, to_grayscale)
from .simplification import simplify_contour, split_contour_by_corners

logger = logging.getLogger(__name__)


def _dump(config: PipelineConfig, name: str, image) -> None:
    if not config.debug_dir:
        return
    dump_image(os.path.join(config.debug_dir, name), image)


def process_object(
    obj: SplitObject, config: PipelineConfig, index: int = 0
) -> ObjectContourInfo:
    """
    Find the corners and sides of a single split object.

    Args:
        obj: Object cut out by split_objects
        config: Pipeline configuration
        index: Position of the object, used for debug output paths

    Returns:
        ObjectContourInfo: Contour, corners and sides in object coordinates, corner
        vertices in image coordinates
    """
    obj_dir = os.path.join('objects', f'object{index}')
    _dump(config, os.path.join(obj_dir, '01_image.jpg'), obj.image)
    _dump(config, os.path.join(obj_dir, '02_mask.png'), obj.mask)

    mask = fill_mask_holes(obj.mask) if config.fill_holes else obj.mask
    contour_mask = build_contour_mask(mask)
    _dump(config, os.path.join(obj_dir, '03_mask_contour.png'), contour_mask)

    contour = extract_contour(contour_mask)
    corners = simplify_contour(contour, config.corner_count)
    if len(corners) != config.corner_count:
        logger.warning(
            f'Object {obj.label}: contour of {len(contour)} points gave {len(corners)} corners '
            f'instead of {config.corner_count}'
        )

    info: ObjectContourInfo = {
        'id': obj.label,
        'offset': obj.offset,
        'area': obj.area,
        'contour': contour,
        'corners': corners,
        'vertices': [
            {'x': int(c.x + obj.offset.x), 'y': int(c.y + obj.offset.y)} for c in corners
        ],
    }
    if len(set(corners)) >= 2:
        info['sides'] = split_contour_by_corners(contour, corners)

    if config.debug_dir:
        shape = obj.mask.shape
        _dump(config, os.path.join(obj_dir, '04_mask_contour_clockwise.jpg'),
              draw_contour_order(shape, contour))
        _dump(config, os.path.join(obj_dir, '05_corners_visualization.jpg'),
              draw_corners(shape, corners))
        _dump(config, os.path.join(obj_dir, '06_sides.jpg'),
              draw_sides(shape, info.get('sides', []), seed=config.random_seed))

    return info


def detect_object_corners(
    image: np.ndarray, config: Optional[PipelineConfig] = None
) -> List[ObjectContourInfo]:
    """
    Detect every bright object in an image and reduce its outline to corners.

    Example:
        image = object_corners.load_image('photo.jpg')
        objects = object_corners.detect_object_corners(
            image, PipelineConfig(corner_count=4, morphology_strength=3)
        )
        for obj in objects:
            print(obj['id'], obj['vertices'])

    Args:
        image (np.ndarray): Gray, RGB or RGBA image
        config (PipelineConfig): Pipeline configuration (default: PipelineConfig())

    Returns:
        List[ObjectContourInfo]: One entry per object, in connected-component label order
    """
    config = (config or PipelineConfig()).validate()
    total_start = time.perf_counter()

    _dump(config, '00_input.jpg', image)

    gray = to_grayscale(image)
    _dump(config, '01_grayscale.jpg', gray)

    threshold = estimate_background_threshold(
        gray, percentile=config.border_percentile, ratio=config.threshold_ratio
    )
    logger.info(f'Background threshold={threshold:.2f}')

    mask = threshold_mask(gray, threshold)
    logger.info(f'Thresholded background: {100.0 - foreground_percent(mask):.1f}%')
    _dump(config, '02_is_foreground_mask.png', mask)

    start = time.perf_counter()
    stages = smooth_mask(mask, config.morphology_strength)
    logger.info(f'Full morphology in {time.perf_counter() - start:.3f} sec')
    _dump(config, '03_is_foreground_dilated.png', stages['dilated'])
    _dump(config, '04_is_foreground_dilated_eroded.png', stages['dilated_eroded'])
    _dump(config, '05_is_foreground_dilated_eroded_eroded.png', stages['dilated_eroded_eroded'])
    _dump(config, '06_is_foreground_dilated_eroded_eroded_dilated.png', stages['smoothed'])

    objects = split_objects(gray, stages['smoothed'], min_area=config.min_object_area)
    logger.info(f'{len(objects)} objects extracted')

    results = []
    for index, obj in enumerate(objects):
        info = process_object(obj, config, index=index)
        logger.info(
            f'Object {info["id"]} at {tuple(obj.offset)}: {len(info["contour"])} contour points, '
            f'corners {[(v["x"], v["y"]) for v in info["vertices"]]}'
        )
        results.append(info)

    logger.info(f'Processed in {time.perf_counter() - total_start:.3f} sec')
    return results
