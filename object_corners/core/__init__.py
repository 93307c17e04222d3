"""
Core functionality for the Object Corners package.

This module contains the boundary extraction, contour tracing and contour
simplification algorithms, plus the pipeline that runs them on images.
"""

from object_corners.core.boundary import build_contour_mask
from object_corners.core.contours import extract_contour
from object_corners.core.simplification import (simplify_contour,
                                                split_contour_by_corners)
