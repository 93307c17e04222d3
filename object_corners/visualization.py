"""
Visualization module for contour and corner detection results.

This module provides functions to draw traced contours, corners and sides,
and to save intermediate images for debugging.
"""

import os
from typing import List, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .types.contours import ObjectContourInfo, Point


def draw_contour_order(shape: Tuple[int, int], contour: Sequence[Point]) -> np.ndarray:
    """
    Paint contour pixels with a brightness that grows along the contour.

    Makes the traversal direction visible: the first pixel is black, the last one
    almost white.

    Args:
        shape: (height, width) of the canvas
        contour: Ordered contour

    Returns:
        np.ndarray: float32 canvas in the 0..255 range
    """
    canvas = np.zeros(shape[:2], dtype=np.float32)
    n = len(contour)
    for i, (x, y) in enumerate(contour):
        canvas[y, x] = i * 255.0 / n
    return canvas


def draw_corners(
    shape: Tuple[int, int], corners: Sequence[Point], radius: int = 10
) -> np.ndarray:
    """Draw every corner as a filled disc of value 255 on a black float32 canvas."""
    canvas = np.zeros(shape[:2], dtype=np.float32)
    for x, y in corners:
        cv2.circle(canvas, (int(x), int(y)), radius, 255.0, -1)
    return canvas


def draw_sides(
    shape: Tuple[int, int], sides: Sequence[Sequence[Point]], seed: int = 2391
) -> np.ndarray:
    """
    Draw each side of an object in its own random colour.

    Args:
        shape: (height, width) of the canvas
        sides: Point sequences as returned by split_contour_by_corners
        seed: Seed of the colour generator, so the same sides get the same colours

    Returns:
        np.ndarray: (H, W, 3) uint8 RGB canvas
    """
    canvas = np.zeros((shape[0], shape[1], 3), dtype=np.uint8)
    rng = np.random.default_rng(seed)
    for side in sides:
        color = rng.integers(0, 256, size=3).astype(np.uint8)
        for x, y in side:
            canvas[y, x] = color
    return canvas


def visualize_objects(
    image: np.ndarray,
    objects: List[ObjectContourInfo],
    vertex_size: int = 4,
    font_size: int = 20,
    show_vertex_count: bool = True,
) -> Image.Image:
    """
    Draw the corner polygon of every object on the image.

    Args:
        image: Source image (gray or RGB array)
        objects: Result of detect_object_corners
        vertex_size: Radius of the corner markers
        font_size: Font size of the vertex count text
        show_vertex_count: Whether to print the number of corners at the polygon centre

    Returns:
        Image.Image: Visualized image
    """
    vis_array = np.asarray(image)
    if vis_array.ndim == 2:
        vis_array = np.stack([vis_array] * 3, axis=-1)
    vis_array = np.clip(vis_array, 0, 255).astype(np.uint8).copy()

    labels = []
    for info in objects:
        vertices = info['vertices']
        if not vertices:
            continue
        polygon = np.array([[v['x'], v['y']] for v in vertices], dtype=np.int32)
        cv2.polylines(vis_array, [polygon], isClosed=True, color=(0, 255, 0), thickness=2)
        for pt in polygon:
            cv2.circle(vis_array, (int(pt[0]), int(pt[1])), vertex_size, (255, 0, 0), -1)
        cx, cy = polygon.mean(axis=0)
        labels.append(((int(cx), int(cy)), str(len(vertices))))

    vis_image = Image.fromarray(vis_array)
    if not show_vertex_count or not labels:
        return vis_image

    draw = ImageDraw.Draw(vis_image)
    try:
        font = ImageFont.truetype('DejaVuSans.ttf', font_size)
    except OSError:
        font = ImageFont.load_default()

    for (cx, cy), label in labels:
        left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
        origin = (cx - (right - left) // 2 - left, cy - (bottom - top) // 2 - top)
        box = draw.textbbox(origin, label, font=font)
        # White box one pixel wider than the label on each side.
        draw.rectangle([box[0] - 1, box[1] - 1, box[2] + 1, box[3] + 1], fill=(255, 255, 255))
        draw.text(origin, label, fill=(255, 0, 0), font=font)

    return vis_image


def dump_image(path: str, image: np.ndarray) -> None:
    """
    Save an array as an image, creating parent directories.

    Float arrays are clipped to 0..255 before conversion to uint8.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if isinstance(image, Image.Image):
        image.save(path)
        return

    array = np.asarray(image)
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[:, :, 0]
    Image.fromarray(array).save(path)
