from __future__ import annotations
import io
import struct
from typing import Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from PIL import Image
from PIL.PngImagePlugin import putchunk

from .constants import OUT_DTYPE, OUT_IMAGE_MODE, OUT_RAW_MODE
from .errors import TileOpenError, TileWriteError, ShortWriteError
from .utils import LinearInterpolator

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

SCAL_UNIT_METRE = 1
SCAL_UNIT_RADIAN = 2
PCAL_LINEAR = 0


def _ascii_float(value: float) -> bytes:
    return ('%.12g' % value).encode('ascii')


class PhysicalScale(NamedTuple):
    '''
    'sCAL' chunk: the physical size of one pixel along x and y.
    '''
    unit: int
    x: float
    y: float

    def to_chunk(self) -> bytes:
        return bytes([self.unit]) + _ascii_float(self.x) + b'\0' + _ascii_float(self.y)

    @classmethod
    def from_chunk(cls, data: bytes) -> PhysicalScale:
        fields = data[1:].split(b'\0')
        if not data or len(fields) != 2:
            raise ValueError(F'Malformed sCAL chunk {data!r}')

        x, y = fields
        return cls(data[0], float(x), float(y))


class PixelCalibration(NamedTuple):
    '''
    'pCAL' chunk: a function mapping the stored sample values in [x0, x1] to
    physical values. The parameters are kept as the strings stored in the
    chunk.
    '''
    description: str
    x0: int
    x1: int
    equation: int
    unit: str
    parameters: Tuple[str, ...]

    @classmethod
    def linear(cls, description: str, unit: str, x0: int, x1: int, offset: float, span: float) -> PixelCalibration:
        return cls(description, x0, x1, PCAL_LINEAR, unit, ('%f' % offset, '%f' % span))

    def to_chunk(self) -> bytes:
        return b''.join([
            self.description.encode('latin-1'),
            b'\0',
            struct.pack('>iiBB', self.x0, self.x1, self.equation, len(self.parameters)),
            self.unit.encode('latin-1'),
            b'\0',
            b'\0'.join(p.encode('ascii') for p in self.parameters),
        ])

    @classmethod
    def from_chunk(cls, data: bytes) -> PixelCalibration:
        if data.count(b'\0') < 2 or len(data.split(b'\0', 1)[1]) < 11:
            raise ValueError(F'Malformed pCAL chunk {data!r}')

        description, rest = data.split(b'\0', 1)
        x0, x1, equation, count = struct.unpack('>iiBB', rest[:10])
        unit, params = rest[10:].split(b'\0', 1)
        parameters = tuple(p.decode('ascii') for p in params.split(b'\0'))
        if len(parameters) != count:
            raise ValueError(F'pCAL chunk announces {count} parameters, found {len(parameters)}')

        return cls(description.decode('latin-1'), x0, x1, equation, unit.decode('latin-1'), parameters)

    def decoder(self) -> LinearInterpolator:
        if self.equation != PCAL_LINEAR:
            raise ValueError(F'Only linear pixel calibrations can be decoded, got equation type {self.equation}')

        offset, span = map(float, self.parameters)
        return LinearInterpolator(self.x0, self.x1, offset, offset + span)


def iter_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    if not data.startswith(PNG_SIGNATURE):
        raise ValueError('Not a PNG stream')

    pos = len(PNG_SIGNATURE)
    while pos < len(data):
        if pos + 8 > len(data):
            raise ValueError(F'Truncated PNG stream, chunk header at byte {pos}')
        length, cid = struct.unpack('>I4s', data[pos:pos + 8])
        if pos + length + 12 > len(data):
            raise ValueError(F'Truncated PNG stream, {cid!r} chunk at byte {pos}')
        yield cid, data[pos + 8:pos + 8 + length]
        pos += length + 12  # length, type, data, CRC


def _insert_before_idat(data: bytes, chunks: Sequence[Tuple[bytes, bytes]]) -> bytes:
    # Pillow does not write sCAL and pCAL itself, so they are spliced in
    # after encoding. Both must precede the image data.
    out = io.BytesIO()
    out.write(PNG_SIGNATURE)

    pending = list(chunks)
    for cid, chunk_data in iter_chunks(data):
        if cid == b'IDAT' and pending:
            for extra_cid, extra_data in pending:
                putchunk(out, extra_cid, extra_data)
            pending = []
        putchunk(out, cid, chunk_data)

    return out.getvalue()


def encode_png(pixels: np.ndarray, scale: PhysicalScale, calibration: Optional[PixelCalibration] = None) -> bytes:
    '''
    Encode a 2D array of big-endian unsigned 16 bit samples as a grayscale PNG
    carrying the given scale and, optionally, pixel calibration.
    '''
    if pixels.ndim != 2 or pixels.dtype != OUT_DTYPE:
        raise ValueError(F'Expected a 2D array of {OUT_DTYPE}, got {pixels.ndim}D {pixels.dtype}')

    height, width = pixels.shape
    img = Image.frombytes(OUT_IMAGE_MODE, (width, height), pixels.tobytes(), 'raw', OUT_RAW_MODE)

    buffer = io.BytesIO()
    img.save(buffer, 'png')

    chunks = [(b'sCAL', scale.to_chunk())]
    if calibration is not None:
        chunks.insert(0, (b'pCAL', calibration.to_chunk()))

    return _insert_before_idat(buffer.getvalue(), chunks)


def write_png(path: str, data: bytes):
    try:
        f = open(path, 'wb')
    except OSError as e:
        raise TileOpenError(str(path), e.strerror) from e

    with f:
        try:
            written = f.write(data)
        except OSError as e:
            raise TileWriteError(F'Could not write "{path}" ({e.strerror})') from e

    if written != len(data):
        raise ShortWriteError(str(path), written, len(data))


def read_calibration(path: str) -> Tuple[Optional[PhysicalScale], Optional[PixelCalibration]]:
    '''
    Read back the sCAL and pCAL records of a PNG file. Either is None if the
    file has no such chunk.
    '''
    with open(path, 'rb') as f:
        data = f.read()

    scale = None
    calibration = None
    for cid, chunk_data in iter_chunks(data):
        if cid == b'sCAL':
            scale = PhysicalScale.from_chunk(chunk_data)
        elif cid == b'pCAL':
            calibration = PixelCalibration.from_chunk(chunk_data)
        elif cid == b'IEND':
            break

    return scale, calibration
