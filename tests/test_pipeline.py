"""Integration tests for detect_object_corners.

Tests:
    - Two rectangles on a dark background give two 4-corner objects
    - Sides follow the rectangle edges
    - Small objects dropped by area
    - One-pixel streaks abort tracing unless dropped by area
    - Hole filling keeps the boundary a single curve
    - Debug images written when a debug directory is configured
"""

import numpy as np
import pytest

from object_corners import PipelineConfig, detect_object_corners
from object_corners.errors import ContourInvariantError, ContourPreconditionError
from object_corners.types.contours import Point


def _image_with_rectangles(rects, shape=(60, 80)):
    image = np.zeros((shape[0], shape[1], 3), dtype=np.uint8)
    for left, top, right, bottom in rects:
        image[top:bottom + 1, left:right + 1] = (200, 180, 160)
    return image


@pytest.fixture
def two_rectangles():
    return _image_with_rectangles([(10, 10, 29, 19), (40, 30, 69, 49)])


def test_detects_rectangle_corners(two_rectangles):
    objects = detect_object_corners(two_rectangles, PipelineConfig(morphology_strength=1))

    assert len(objects) == 2
    assert objects[0]['vertices'] == [
        {'x': 10, 'y': 10}, {'x': 29, 'y': 10}, {'x': 29, 'y': 19}, {'x': 10, 'y': 19}
    ]
    assert objects[1]['vertices'] == [
        {'x': 40, 'y': 30}, {'x': 69, 'y': 30}, {'x': 69, 'y': 49}, {'x': 40, 'y': 49}
    ]
    assert objects[0]['offset'] == Point(10, 10)
    assert objects[0]['corners'] == [Point(0, 0), Point(19, 0), Point(19, 9), Point(0, 9)]
    assert objects[0]['area'] == 200


def test_sides_follow_rectangle_edges(two_rectangles):
    objects = detect_object_corners(two_rectangles, PipelineConfig(morphology_strength=1))

    first = objects[0]
    assert [len(side) for side in first['sides']] == [20, 10, 20, 10]
    assert len(first['contour']) == 2 * 20 + 2 * 10 - 4
    assert all(p.y == 0 for p in first['sides'][0])
    assert all(p.x == 19 for p in first['sides'][1])


def test_corner_count_from_config(two_rectangles):
    objects = detect_object_corners(
        two_rectangles, PipelineConfig(morphology_strength=0, corner_count=2)
    )
    for info in objects:
        assert len(info['corners']) == 2
        assert len(info['sides']) == 2


def test_small_objects_dropped():
    image = _image_with_rectangles([(10, 10, 29, 19), (50, 50, 52, 52)])

    assert len(detect_object_corners(image, PipelineConfig(morphology_strength=1))) == 2
    objects = detect_object_corners(
        image, PipelineConfig(morphology_strength=1, min_object_area=50)
    )
    assert len(objects) == 1
    assert objects[0]['area'] == 200


def test_thin_streak_without_morphology():
    image = np.zeros((40, 60, 3), dtype=np.uint8)
    image[5:20, 5:20] = 200
    image[30, 5:50] = 200

    with pytest.raises(ContourInvariantError):
        detect_object_corners(image, PipelineConfig(morphology_strength=0))

    objects = detect_object_corners(
        image, PipelineConfig(morphology_strength=0, min_object_area=50)
    )
    assert len(objects) == 1
    assert objects[0]['area'] == 225
    assert objects[0]['vertices'] == [
        {'x': 5, 'y': 5}, {'x': 19, 'y': 5}, {'x': 19, 'y': 19}, {'x': 5, 'y': 19}
    ]


def test_holes_filled_before_tracing():
    image = _image_with_rectangles([(10, 10, 39, 39)])
    image[20:30, 20:30] = 0

    objects = detect_object_corners(image, PipelineConfig(morphology_strength=0))
    assert len(objects) == 1
    assert objects[0]['vertices'] == [
        {'x': 10, 'y': 10}, {'x': 39, 'y': 10}, {'x': 39, 'y': 39}, {'x': 10, 'y': 39}
    ]

    with pytest.raises(ContourPreconditionError):
        detect_object_corners(image, PipelineConfig(morphology_strength=0, fill_holes=False))


def test_empty_image_gives_no_objects():
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    assert detect_object_corners(image) == []


def test_invalid_config_rejected(two_rectangles):
    with pytest.raises(ContourPreconditionError):
        detect_object_corners(two_rectangles, PipelineConfig(corner_count=1))


def test_debug_images_written(two_rectangles, tmp_path):
    config = PipelineConfig(morphology_strength=1, debug_dir=str(tmp_path))
    detect_object_corners(two_rectangles, config)

    for name in ['00_input.jpg', '01_grayscale.jpg', '02_is_foreground_mask.png',
                 '06_is_foreground_dilated_eroded_eroded_dilated.png']:
        assert (tmp_path / name).is_file()
    for index in (0, 1):
        obj_dir = tmp_path / 'objects' / f'object{index}'
        for name in ['01_image.jpg', '02_mask.png', '03_mask_contour.png',
                     '04_mask_contour_clockwise.jpg', '05_corners_visualization.jpg',
                     '06_sides.jpg']:
            assert (obj_dir / name).is_file()
