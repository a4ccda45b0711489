"""
Command Line Interface for gallery generation.
"""

import argparse
import logging
import os
from typing import List, Optional

from .builder import GalleryBuilder
from .build_progress import BuildProgress
from .config import (
    DEFAULT_MAX_IMAGE_PIXELS,
    GalleryConfig,
    SizePolicy,
    format_geometry,
    parse_geometry,
)
from .errors import GalleryError
from .reporter import Reporter

DEFAULTS = SizePolicy()


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('gallerygen')


def geometry(value: str):
    """argparse type for WxH options."""
    try:
        return parse_geometry(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def get_config(args: argparse.Namespace) -> GalleryConfig:
    """Build the gallery configuration from CLI arguments."""
    sizes = SizePolicy(
        min_thumb=args.min_thumb,
        max_thumb=args.max_thumb,
        max_full=args.max_full,
        quality=args.quality,
        auto_orient=not args.no_orient,
        keep_unmodified=args.keep_unmodified,
        srgb=not args.no_srgb,
    )
    config = GalleryConfig(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        name=args.name,
        index_url=args.index,
        sizes=sizes,
        time_sort=not args.no_time_sort,
        auto_panorama=not args.no_panorama,
        slim=args.slim,
        keep_originals=args.include_originals,
        download=not args.no_download,
        max_image_pixels=args.max_pixels or None,
    )
    if args.jobs is not None:
        config.workers = args.jobs
    return config


def cmd_build(args: argparse.Namespace) -> int:
    """Execute a gallery build."""
    logger = setup_logging(args.verbose)

    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    logger.info(f"Input: {config.input_dir}")
    logger.info(f"Output: {config.output_dir}")
    logger.info(
        f"Sizes: full {format_geometry(config.sizes.max_full)}, "
        f"thumb {format_geometry(config.sizes.min_thumb)}-{format_geometry(config.sizes.max_thumb)}, "
        f"quality {config.sizes.quality}"
    )
    if config.slim:
        logger.info("Slim mode: no originals or download archive")

    try:
        builder = GalleryBuilder(config, logger=logger)

        progress = None
        if not args.quiet:
            progress = BuildProgress(show_files=args.show_files, logger=logger)

        manifest = builder.build(progress=progress)

        if not args.quiet:
            print()
            Reporter().report_summary(manifest, builder.stats)

        return 0

    except GalleryError as e:
        logger.error(f"Build failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Build failed: {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='gallerygen',
        description='Build a static photo gallery from a directory of images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output layout:
  imgs/     full-size images          thumbs/   thumbnails
  blurs/    blurred placeholders      files/    kept originals
  data.json gallery manifest          <name>.zip download archive

Originals are kept for panoramas (wide, above-average, uncropped images)
unless -p is given; -i keeps all of them and -s keeps none.
"""
    )

    parser.add_argument('input_dir', help='Directory of source images')
    parser.add_argument('output_dir', help='Gallery output directory')
    parser.add_argument('name', nargs='?', help='Album name')

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    parser.add_argument('--show-files', action='store_true',
                        help='Print each file as processed')

    output_group = parser.add_argument_group('Output')
    output_group.add_argument('-s', '--slim', action='store_true',
                              help='Slim output (no original files and downloads)')
    output_group.add_argument('-i', '--include-originals', action='store_true',
                              help='Include all original files')
    output_group.add_argument('-k', '--keep-unmodified', action='store_true',
                              help='Do not modify originals, copy them verbatim')
    output_group.add_argument('-p', '--no-panorama', action='store_true',
                              help='Do not automatically include full-sized panoramas')
    output_group.add_argument('-d', '--no-download', action='store_true',
                              help='Do not generate a full album download')
    output_group.add_argument('-t', '--no-time-sort', action='store_true',
                              help='Do not time-sort images')
    output_group.add_argument('--index', metavar='URL',
                              help='URL location for the index/back button')

    image_group = parser.add_argument_group('Images')
    image_group.add_argument('-o', '--no-orient', action='store_true',
                             help='Do not auto-orient images')
    image_group.add_argument('--no-srgb', action='store_true',
                             help='Do not remap color profiles to sRGB')
    image_group.add_argument('--max-full', type=geometry, metavar='WxH', default=DEFAULTS.max_full,
                             help=f'Maximum full image size (default: {format_geometry(DEFAULTS.max_full)})')
    image_group.add_argument('--max-thumb', type=geometry, metavar='WxH', default=DEFAULTS.max_thumb,
                             help=f'Thumbnail size (default: {format_geometry(DEFAULTS.max_thumb)})')
    image_group.add_argument('--min-thumb', type=geometry, metavar='WxH', default=DEFAULTS.min_thumb,
                             help=f'Minimum thumbnail coverage (default: {format_geometry(DEFAULTS.min_thumb)})')
    image_group.add_argument('--quality', type=int, metavar='Q', default=DEFAULTS.quality,
                             help=f'Preview image quality 0-100 (default: {DEFAULTS.quality})')
    image_group.add_argument('-j', '--jobs', type=int, metavar='N',
                             help=f'Parallel workers (default: {os.cpu_count() or 1})')
    image_group.add_argument('--max-pixels', type=int, metavar='N', default=DEFAULT_MAX_IMAGE_PIXELS,
                             help=f'Largest source image in pixels, 0 for no limit '
                                  f'(default: {DEFAULT_MAX_IMAGE_PIXELS})')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    return cmd_build(parsed_args)
