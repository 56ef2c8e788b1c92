from typing import Sequence, Tuple

from geojson import Feature, FeatureCollection, Polygon, dump

from .errors import TileWriteError
from .geodetic import GeoLocation
from .tiling import TileGrid, TileView
from .utils import LinearInterpolator


def tile_bounds(location: GeoLocation, grid: TileGrid, view: TileView) -> Tuple[float, float, float, float]:
    '''
    Latitude and longitude of the top left and bottom right sample of a tile,
    as (lat0, lng0, lat1, lng1). Row 0 is the northern edge of the cell.
    '''
    row_to_lat = LinearInterpolator(0, grid.height - 1, location.north, location.south)
    col_to_lng = LinearInterpolator(0, grid.width - 1, location.west, location.east)

    return (
        row_to_lat(view.row_offset),
        col_to_lng(view.col_offset),
        row_to_lat(view.row_offset + view.height - 1),
        col_to_lng(view.col_offset + view.width - 1),
    )


def tile_feature(location: GeoLocation, grid: TileGrid, view: TileView, file_name: str) -> Feature:
    lat0, lng0, lat1, lng1 = tile_bounds(location, grid, view)

    return Feature(
        geometry=Polygon([[
            (lng0, lat0),
            (lng1, lat0),
            (lng1, lat1),
            (lng0, lat1),
            (lng0, lat0),
        ]]),
        properties=dict(
            file=file_name,
            cell=str(location),
            row_offset=view.row_offset,
            col_offset=view.col_offset,
        ),
    )


def write_footprints(path: str, features: Sequence[Feature]):
    try:
        with open(path, 'w') as f:
            dump(FeatureCollection(list(features)), f)
    except OSError as e:
        raise TileWriteError(F'Could not write footprints to "{path}" ({e.strerror})') from e
