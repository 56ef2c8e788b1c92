import os.path
from pathlib import Path
from typing import NamedTuple, Sequence, Tuple

from .constants import CALIBRATION_DESCRIPTION, CALIBRATION_UNIT, ENCODED_MAX
from .errors import TileOpenError
from .footprints import tile_feature, write_footprints
from .geodetic import CellParser, GeoLocation, base_name, parse_cell
from .imagetools import PhysicalScale, PixelCalibration, SCAL_UNIT_METRE, SCAL_UNIT_RADIAN, encode_png, write_png
from .logger import logger
from .raster import Raster, load_raster, to_native, to_storage
from .rescale import ElevationRange, rescale, scan_range
from .tiling import TileGrid, TileView


class ConversionReport(NamedTuple):
    source: str
    location: GeoLocation
    elevation_range: ElevationRange
    grid: TileGrid
    outputs: Sequence[str]
    source_size: int
    output_size: int

    @property
    def compression(self) -> float:
        '''
        Size of all written images in percent of the source size.
        '''
        return self.output_size / self.source_size * 100.0


def elevation_calibration(elevation_range: ElevationRange) -> PixelCalibration:
    return PixelCalibration.linear(
        CALIBRATION_DESCRIPTION,
        CALIBRATION_UNIT,
        0,
        ENCODED_MAX,
        elevation_range.minimum,
        elevation_range.delta,
    )


def prepare_raster(
        source: str,
        width: int,
        height: int,
        strict: bool = False,
        parse: CellParser = parse_cell,
) -> Tuple[Raster, GeoLocation, ElevationRange]:
    '''
    Load a HGT file and encode it, ready to be cut into images.
    '''
    raster = load_raster(source, width, height)

    location = parse(source)
    logger.info('Bounds: %s', location.describe_bounds())

    to_native(raster)
    elevation_range = scan_range(raster)
    logger.info('Range: [%d, %d] meters', elevation_range.minimum, elevation_range.maximum)
    logger.info('Missing: %d pixels', elevation_range.invalid_count)

    if elevation_range.is_empty:
        logger.warning('Raster "%s" contains no valid samples.', source)
    elif elevation_range.is_flat:
        logger.warning('Raster "%s" is flat at %d meters, all valid samples encode to 0.', source, elevation_range.minimum)

    rescale(raster, elevation_range, strict=strict)
    to_storage(raster)

    return raster, location, elevation_range


def _emit_image(raster: Raster, view: TileView, path: str, scale: PhysicalScale, calibration: PixelCalibration) -> int:
    data = encode_png(view.select(raster.data), scale, calibration)
    write_png(path, data)

    logger.debug('Wrote tile %d/%d (%d x %d px, %d bytes) to "%s".', view.row_index, view.col_index, view.width, view.height, len(data), path)

    return len(data)


def _log_report(report: ConversionReport) -> ConversionReport:
    logger.info('Output: %d image(s), %d bytes', len(report.outputs), report.output_size)
    logger.info('Output: Compression: %.2f%% of original size', report.compression)
    return report


def generate_tiles(
        source: str,
        width: int,
        height: int,
        rows: int = 1,
        cols: int = 1,
        output_directory: str = '.',
        strict: bool = False,
        footprints: bool = False,
        parse: CellParser = parse_cell,
) -> ConversionReport:
    '''
    Convert a HGT file into rows x cols PNG tiles named
    ``<base>.<row offset>.<column offset>.png``. Neighbouring tiles share one
    row or column of samples. Each tile carries its pixel size in radians
    (sCAL) and the function decoding its values to meters (pCAL).

    Tiles written before a failure are left on disk.
    '''
    grid = TileGrid.from_dimensions(width, height, rows, cols)
    logger.info('Tiles: %d x %d of %d(w) x %d(h) pixels', grid.rows, grid.cols, grid.subwidth, grid.subheight)

    raster, location, elevation_range = prepare_raster(source, width, height, strict=strict, parse=parse)
    calibration = elevation_calibration(elevation_range)
    base = base_name(source)

    try:
        Path(output_directory).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TileOpenError(str(output_directory), e.strerror) from e

    outputs = []
    features = []
    output_size = 0
    for view in grid.tiles():
        file_name = view.file_name(base)
        path = os.path.join(output_directory, file_name)
        scale = PhysicalScale(SCAL_UNIT_RADIAN, *view.pixel_angles)

        output_size += _emit_image(raster, view, path, scale, calibration)
        outputs.append(path)
        if footprints:
            features.append(tile_feature(location, grid, view, file_name))

    if footprints:
        footprint_path = os.path.join(output_directory, F'{base}.geojson')
        write_footprints(footprint_path, features)
        logger.info('Wrote %d tile footprints to "%s".', len(features), footprint_path)

    return _log_report(ConversionReport(source, location, elevation_range, grid, outputs, raster.nbytes, output_size))


def generate_image(
        source: str,
        width: int,
        height: int,
        output: str,
        strict: bool = False,
        parse: CellParser = parse_cell,
) -> ConversionReport:
    '''
    Convert a HGT file into a single PNG at ``output``. Its sCAL record holds
    the raw (minimum, delta) pair in meters rather than a pixel size.
    '''
    grid = TileGrid.from_dimensions(width, height)

    raster, location, elevation_range = prepare_raster(source, width, height, strict=strict, parse=parse)
    calibration = elevation_calibration(elevation_range)
    scale = PhysicalScale(SCAL_UNIT_METRE, elevation_range.minimum, elevation_range.delta)

    view = next(grid.tiles())
    output_size = _emit_image(raster, view, output, scale, calibration)

    return _log_report(ConversionReport(source, location, elevation_range, grid, [output], raster.nbytes, output_size))
