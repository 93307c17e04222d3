"""
Basic usage example for the object_corners package.

This script detects the bright objects of a photo taken on a dark background,
finds the corners of each object and saves a visualization.
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

import object_corners
from object_corners import PipelineConfig

load_dotenv(override=True)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Find the corners and sides of objects in an image using object_corners.'
    )

    parser.add_argument(
        '-i', '--image',
        help='Path to the input image',
        default='data/00_photo_six_parts_downscaled_x4.jpg'
    )

    parser.add_argument(
        '-o', '--output',
        default='detected_corners_output.jpg',
        help='Path to save the output visualization image'
    )

    parser.add_argument(
        '-c', '--corner-count',
        type=int,
        help='Number of corners to keep per object (default: 4)'
    )

    parser.add_argument(
        '-s', '--morphology-strength',
        type=int,
        help='Radius of the dilation/erosion kernel (default: 3)'
    )

    parser.add_argument(
        '-d', '--debug-dir',
        help='Directory for intermediate debug images'
    )

    parser.add_argument(
        '--min-object-area',
        type=int,
        help='Drop objects with fewer pixels'
    )

    parser.add_argument(
        '--no-fill-holes',
        action='store_true',
        help='Do not fill holes of object masks before tracing'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Run corner detection on a single image."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    if not os.path.exists(args.image):
        logger.error(f'Image file not found at {args.image}')
        logger.error('Please provide a valid image path with --image option')
        return 1

    try:
        config = PipelineConfig.from_env().with_overrides(
            corner_count=args.corner_count,
            morphology_strength=args.morphology_strength,
            debug_dir=args.debug_dir,
            min_object_area=args.min_object_area,
            fill_holes=False if args.no_fill_holes else None,
        )

        logger.info(f'Processing image: {args.image}')
        image = object_corners.load_image(args.image)
        objects = object_corners.detect_object_corners(image, config)

        for info in objects:
            corners = [(v['x'], v['y']) for v in info['vertices']]
            side_lengths = [len(side) for side in info.get('sides', [])]
            logger.info(f'Object {info["id"]}: corners={corners}, side lengths={side_lengths}')

        vis_image = object_corners.visualize_objects(image, objects)
        vis_image.save(args.output)
        logger.info(f'Visualization saved to {args.output}')
    except Exception as e:
        logger.exception(f'Error: {e}')
        return 2

    return 0


if __name__ == '__main__':
    sys.exit(main())
