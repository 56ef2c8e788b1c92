from __future__ import annotations
from dataclasses import dataclass
import os.path
import re
from typing import Callable

from .errors import InvalidCellNameError, InvalidHemisphereError

# e.g. N37W122.hgt or N37W122.SRTMGL1.hgt, any extension; the hemisphere letters are validated separately
_CELL_NAME = re.compile(r'^(?P<ns>.)(?P<lat>\d{2})(?P<ew>.)(?P<lng>\d{3})(?:\..*)?$')


def _format_lat(lat: int) -> str:
    return F'{abs(lat)}{"N" if lat >= 0 else "S"}'


def _format_lng(lng: int) -> str:
    return F'{abs(lng)}{"E" if lng >= 0 else "W"}'


@dataclass(frozen=True)
class GeoLocation:
    '''
    The 1 degree x 1 degree cell a HGT file covers. The file name encodes the
    south-west corner of the cell.
    '''
    hemisphere_ns: str
    latitude: int
    hemisphere_ew: str
    longitude: int

    @property
    def south(self) -> int:
        return self.latitude if self.hemisphere_ns == 'N' else -self.latitude

    @property
    def north(self) -> int:
        return self.south + 1

    @property
    def west(self) -> int:
        return self.longitude if self.hemisphere_ew == 'E' else -self.longitude

    @property
    def east(self) -> int:
        return self.west + 1

    def describe_bounds(self) -> str:
        return F'({_format_lat(self.south)}, {_format_lng(self.west)}) to ({_format_lat(self.north)}, {_format_lng(self.east)})'

    def __str__(self):
        return F'{self.hemisphere_ns}{self.latitude:02d}{self.hemisphere_ew}{self.longitude:03d}'


CellParser = Callable[[str], GeoLocation]


def _illegal_hemisphere(file_name: str) -> str:
    if file_name[:1] not in ('N', 'S'):
        return file_name[:1]
    if file_name[3:4] not in ('W', 'E'):
        return file_name[3:4]
    return ''


def parse_cell(name: str) -> GeoLocation:
    '''
    Extract the cell location from the final path component of a HGT file.
    '''
    file_name = os.path.basename(name)

    match = _CELL_NAME.match(file_name)
    if match is None:
        raise InvalidCellNameError(file_name, _illegal_hemisphere(file_name))

    ns, ew = match['ns'], match['ew']
    if ns not in ('N', 'S'):
        raise InvalidHemisphereError(ns, file_name)
    if ew not in ('W', 'E'):
        raise InvalidHemisphereError(ew, file_name)

    return GeoLocation(ns, int(match['lat']), ew, int(match['lng']))


def base_name(path: str) -> str:
    '''
    Final path component without its extension, used as prefix of the tile
    file names.
    '''
    root, _ext = os.path.splitext(os.path.basename(path))
    return root
