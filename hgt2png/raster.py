from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import os

import numpy as np

from .constants import IN_DTYPE, NATIVE_DTYPE, OUT_DTYPE, SAMPLE_SIZE
from .errors import InvalidDimensionsError, OpenError, RasterStageError, ShortReadError, SizeMismatchError
from .logger import logger


class Stage(Enum):
    STORED = 'big-endian signed'
    NATIVE_SIGNED = 'native signed'
    NATIVE_RESCALED = 'native unsigned'
    STORED_FINAL = 'big-endian unsigned'


@dataclass
class Raster:
    '''
    A HGT raster held in one buffer for the whole conversion. ``data`` is a
    (height, width) array whose dtype follows ``stage``; every stage
    reinterprets the same memory.
    '''
    width: int
    height: int
    data: np.ndarray
    stage: Stage = Stage.STORED

    @classmethod
    def from_buffer(cls, buffer: bytearray, width: int, height: int) -> Raster:
        data = np.frombuffer(buffer, IN_DTYPE).reshape(height, width)
        return cls(width, height, data)

    @property
    def nbytes(self) -> int:
        return self.width * self.height * SAMPLE_SIZE

    def require(self, stage: Stage, operation: str):
        if self.stage is not stage:
            raise RasterStageError(operation, self.stage, stage)


def load_raster(path: str, width: int, height: int) -> Raster:
    '''
    Read a HGT file of ``width`` x ``height`` samples completely into memory.
    The file length is checked against the dimensions before anything is
    read.
    '''
    if width < 1 or height < 1:
        raise InvalidDimensionsError(width, height, 1)

    expected = width * height * SAMPLE_SIZE

    try:
        f = open(path, 'rb')
    except OSError as e:
        raise OpenError(str(path), e.strerror) from e

    with f:
        f.seek(0, os.SEEK_END)
        size = f.tell()
        f.seek(0, os.SEEK_SET)

        logger.info('File: "%s" (%d bytes)', path, size)
        logger.info('Size: %d(w) x %d(h) pixels (%d samples)', width, height, width * height)

        if size != expected:
            raise SizeMismatchError(size, expected)

        buffer = bytearray(expected)
        read = f.readinto(buffer)

    if read != expected:
        raise ShortReadError(read, expected)

    return Raster.from_buffer(buffer, width, height)


def swap_byte_order(array: np.ndarray) -> np.ndarray:
    '''
    Swap the two bytes of every sample in place. The returned view carries the
    opposite byte order, so element values are unchanged while the memory
    layout flips. Applying it twice restores the original bytes.
    '''
    array.byteswap(inplace=True)
    return array.view(array.dtype.newbyteorder())


def to_native(raster: Raster) -> Raster:
    '''
    Decode on read: bring the stored big-endian samples into host byte order.
    '''
    raster.require(Stage.STORED, 'Decoding to native byte order')

    if raster.data.dtype != NATIVE_DTYPE:
        raster.data = swap_byte_order(raster.data)

    raster.stage = Stage.NATIVE_SIGNED
    return raster


def to_storage(raster: Raster) -> Raster:
    '''
    Encode on write: put the rescaled samples back into big-endian order, the
    layout of PNG sample rows.
    '''
    raster.require(Stage.NATIVE_RESCALED, 'Encoding to storage byte order')

    if raster.data.dtype != OUT_DTYPE:
        raster.data = swap_byte_order(raster.data)

    raster.stage = Stage.STORED_FINAL
    return raster
