"""
Object Corners Package

A package for tracing the boundary of binary-masked objects and reducing it to
a small polygon of corners, split into sides.
"""

__version__ = '0.1.0'

from object_corners.config import PipelineConfig
from object_corners.core.boundary import FOREGROUND, build_contour_mask
from object_corners.core.contours import extract_contour
from object_corners.core.pipeline import detect_object_corners
from object_corners.core.segmentation import load_image
from object_corners.core.simplification import (simplify_contour,
                                                split_contour_by_corners)
from object_corners.errors import (ContourInvariantError,
                                   ContourPreconditionError)
from object_corners.types.contours import Point
from object_corners.visualization import visualize_objects
