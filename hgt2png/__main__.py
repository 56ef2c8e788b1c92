#!/usr/bin/env python3

import sys
import argparse

from .constants import DIM
from .errors import ConversionError
from .generate import generate_tiles, generate_image
from .imagetools import PCAL_LINEAR, SCAL_UNIT_RADIAN, read_calibration
from .logger import logger, set_verbose


def _generate_tiles(ns: argparse.Namespace):
    if (ns.rows is None) != (ns.cols is None):
        logger.error('ROWS and COLS must be passed together.')
        sys.exit(1)

    generate_tiles(
        ns.source,
        ns.width,
        ns.height,
        rows=ns.rows or 1,
        cols=ns.cols or 1,
        output_directory=ns.output_directory,
        strict=ns.strict,
        footprints=ns.footprints,
    )


def _generate_image(ns: argparse.Namespace):
    generate_image(ns.source, ns.width, ns.height, ns.output, strict=ns.strict)


def _inspect(ns: argparse.Namespace):
    try:
        scale, calibration = read_calibration(ns.image)
    except OSError as e:
        logger.error('Could not read "%s" (%s).', ns.image, e.strerror)
        sys.exit(1)
    except ValueError as e:
        logger.error('Could not read "%s" (%s).', ns.image, e)
        sys.exit(1)

    if scale is None:
        logger.info('sCAL: none')
    else:
        unit = 'radians' if scale.unit == SCAL_UNIT_RADIAN else 'meters'
        logger.info('sCAL: %g x %g %s', scale.x, scale.y, unit)

    if calibration is None:
        logger.info('pCAL: none')
    elif calibration.equation == PCAL_LINEAR and len(calibration.parameters) == 2:
        offset, span = calibration.parameters
        logger.info('pCAL: "%s" %s = %s + %s * (value - %d) / %d',
                    calibration.description,
                    calibration.unit,
                    offset,
                    span,
                    calibration.x0,
                    calibration.x1 - calibration.x0,
                    )
    else:
        logger.info('pCAL: "%s" %s, equation %d over [%d, %d], parameters %s',
                    calibration.description,
                    calibration.unit,
                    calibration.equation,
                    calibration.x0,
                    calibration.x1,
                    ', '.join(calibration.parameters),
                    )


def _add_raster_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('source', type=str, help='HGT file, named after its cell, e.g. N37W122.hgt')
    parser.add_argument('width', type=int, help=F'Raster width in samples, e.g. {DIM}')
    parser.add_argument('height', type=int, help=F'Raster height in samples, e.g. {DIM}')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='hgt2png')

    parser.description = 'Convert SRTM .hgt rasters to calibrated 16 bit grayscale PNG images.'

    parser.add_argument('--verbose', '-v', help='Show verbose logging.', action='store_true', default=False)

    sub = parser.add_subparsers(title='action')

    # action: cut a raster into overlapping tiles
    tiles_parser = sub.add_parser('tiles', help='Convert a raster to ROWS x COLS tiles named <base>.<row>.<col>.png.')
    _add_raster_arguments(tiles_parser)
    tiles_parser.add_argument('rows', type=int, nargs='?', default=None, help='Number of tile rows; HEIGHT - 1 must be divisible by it. Default: 1')
    tiles_parser.add_argument('cols', type=int, nargs='?', default=None, help='Number of tile columns; WIDTH - 1 must be divisible by it. Default: 1')
    tiles_parser.add_argument('--output-directory', type=str, default='.', help='Directory to write the tiles to. Default: ./')
    tiles_parser.add_argument('--strict', action='store_true', default=False, help='Reject flat rasters instead of encoding them as 0.')
    tiles_parser.add_argument('--footprints', action='store_true', default=False, help='Also write <base>.geojson with the outline of every tile.')
    tiles_parser.set_defaults(func=_generate_tiles)

    # action: convert a raster to one image
    convert_parser = sub.add_parser('convert', help='Convert a raster to a single image.')
    _add_raster_arguments(convert_parser)
    convert_parser.add_argument('output', type=str, help='PNG file to write.')
    convert_parser.add_argument('--strict', action='store_true', default=False, help='Reject flat rasters instead of encoding them as 0.')
    convert_parser.set_defaults(func=_generate_image)

    # action: show the calibration of a converted image
    inspect_parser = sub.add_parser('inspect', help='Show the sCAL and pCAL records of a converted image.')
    inspect_parser.add_argument('image', type=str, help='PNG file to inspect.')
    inspect_parser.set_defaults(func=_inspect)

    return parser


def main(argv=None):
    parser = build_parser()
    ns = parser.parse_args(argv)
    set_verbose(ns.verbose)

    if 'func' not in ns:
        parser.print_usage()
        sys.exit(0)

    try:
        ns.func(ns)
    except ConversionError as e:
        logger.error('%s, exiting.', e)
        sys.exit(1)


if __name__ == '__main__':
    main()
