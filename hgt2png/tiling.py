from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Iterator, Tuple

import numpy as np

from .constants import PNG_EXTENSION
from .errors import InvalidDimensionsError, InvalidTileDivisionError


@dataclass(frozen=True)
class TileView:
    '''
    One tile of a raster, given as offsets into the full raster. Tiles of a
    grid overlap by one row or column of samples at every shared edge.
    '''
    row_index: int
    col_index: int
    row_offset: int
    col_offset: int
    height: int
    width: int

    def select(self, data: np.ndarray) -> np.ndarray:
        '''
        Zero-copy view of the tile within the full raster array.
        '''
        return data[self.row_offset:self.row_offset + self.height, self.col_offset:self.col_offset + self.width]

    @property
    def pixel_angles(self) -> Tuple[float, float]:
        '''
        Size of one pixel in radians, as (x, y). The tile dimension minus one
        samples span one degree.
        '''
        return math.radians(1.0 / (self.width - 1)), math.radians(1.0 / (self.height - 1))

    def file_name(self, base: str) -> str:
        return F'{base}.{self.row_offset}.{self.col_offset}{PNG_EXTENSION}'


@dataclass(frozen=True)
class TileGrid:
    width: int
    height: int
    rows: int
    cols: int
    subwidth: int
    subheight: int

    @classmethod
    def from_dimensions(cls, width: int, height: int, rows: int = 1, cols: int = 1) -> TileGrid:
        if width < 2 or height < 2:
            raise InvalidDimensionsError(width, height, 2)

        if cols < 1 or (cols > 1 and (width - 1) % cols):
            raise InvalidTileDivisionError('width', width, cols)
        if rows < 1 or (rows > 1 and (height - 1) % rows):
            raise InvalidTileDivisionError('height', height, rows)

        subwidth = width // cols + 1 if cols > 1 else width
        subheight = height // rows + 1 if rows > 1 else height

        return cls(width, height, rows, cols, subwidth, subheight)

    @property
    def count(self) -> int:
        return self.rows * self.cols

    def tiles(self) -> Iterator[TileView]:
        '''
        All tiles in row-major order.
        '''
        for row_index in range(self.rows):
            for col_index in range(self.cols):
                yield TileView(
                    row_index,
                    col_index,
                    row_index * (self.subheight - 1),
                    col_index * (self.subwidth - 1),
                    self.subheight,
                    self.subwidth,
                )
