"""
Unit tests for the calibrated PNG writer
"""

import numpy as np
import pytest
from PIL import Image

from hgt2png.constants import OUT_DTYPE
from hgt2png.errors import ShortWriteError, TileOpenError, TileWriteError
from hgt2png.imagetools import (
    SCAL_UNIT_RADIAN,
    PhysicalScale,
    PixelCalibration,
    encode_png,
    iter_chunks,
    read_calibration,
    write_png,
)


@pytest.fixture
def pixels() -> np.ndarray:
    return np.array([[0, 1, 2], [256, 65534, 65535]], dtype=OUT_DTYPE)


@pytest.fixture
def calibration() -> PixelCalibration:
    return PixelCalibration.linear('SRTM-HGT', 'm', 0, 65534, -20, 240)


class TestChunks:
    """Test cases for the sCAL and pCAL records"""

    def test_scal_layout(self):
        chunk = PhysicalScale(SCAL_UNIT_RADIAN, 0.5, 0.25).to_chunk()

        assert chunk == b'\x020.5\x000.25'
        assert PhysicalScale.from_chunk(chunk) == (SCAL_UNIT_RADIAN, 0.5, 0.25)

    def test_pcal_layout(self, calibration):
        chunk = calibration.to_chunk()

        assert chunk == (
            b'SRTM-HGT\x00'
            b'\x00\x00\x00\x00' b'\x00\x00\xff\xfe' b'\x00' b'\x02'
            b'm\x00'
            b'-20.000000\x00240.000000'
        )
        assert PixelCalibration.from_chunk(chunk) == calibration

    def test_pcal_decoder(self, calibration):
        decode = calibration.decoder()

        assert decode(0) == pytest.approx(-20)
        assert decode(65534) == pytest.approx(220)
        assert decode(32767) == pytest.approx(100)


class TestEncodePng:
    """Test cases for encoding images"""

    def test_pixels_survive(self, tmp_path, pixels, calibration):
        path = tmp_path / 'out.png'
        write_png(str(path), encode_png(pixels, PhysicalScale(SCAL_UNIT_RADIAN, 1e-5, 2e-5), calibration))

        with Image.open(path) as img:
            assert img.size == (3, 2)
            assert img.format == 'PNG'
            values = np.asarray(img).astype(np.int64)

        np.testing.assert_array_equal(values, pixels.astype(np.int64))

    def test_sixteen_bit_grayscale_header(self, pixels):
        data = encode_png(pixels, PhysicalScale(SCAL_UNIT_RADIAN, 1, 1))

        cid, ihdr = next(iter_chunks(data))
        assert cid == b'IHDR'
        # width, height, bit depth, color type
        assert ihdr[:10] == b'\x00\x00\x00\x03\x00\x00\x00\x02\x10\x00'

    def test_calibration_precedes_image_data(self, pixels, calibration):
        data = encode_png(pixels, PhysicalScale(SCAL_UNIT_RADIAN, 1, 1), calibration)
        order = [cid for cid, _ in iter_chunks(data)]

        assert order[0] == b'IHDR'
        assert order[-1] == b'IEND'
        assert order.index(b'pCAL') < order.index(b'IDAT')
        assert order.index(b'sCAL') < order.index(b'IDAT')
        assert order.count(b'sCAL') == 1

    def test_read_calibration(self, tmp_path, pixels, calibration):
        path = tmp_path / 'out.png'
        scale = PhysicalScale(SCAL_UNIT_RADIAN, 9.69627362e-06, 9.69627362e-06)
        write_png(str(path), encode_png(pixels, scale, calibration))

        read_scale, read_calibration_ = read_calibration(str(path))

        assert read_scale.unit == SCAL_UNIT_RADIAN
        assert read_scale.x == pytest.approx(scale.x)
        assert read_calibration_ == calibration

    def test_without_calibration(self, tmp_path, pixels):
        path = tmp_path / 'out.png'
        write_png(str(path), encode_png(pixels, PhysicalScale(SCAL_UNIT_RADIAN, 1, 1)))

        assert read_calibration(str(path))[1] is None

    def test_tile_views_are_accepted(self):
        full = np.arange(25, dtype=OUT_DTYPE).reshape(5, 5)

        data = encode_png(full[2:5, 2:5], PhysicalScale(SCAL_UNIT_RADIAN, 1, 1))

        assert data.startswith(b'\x89PNG')

    def test_rejects_native_samples(self):
        with pytest.raises(ValueError):
            encode_png(np.zeros((2, 2), dtype=np.int16), PhysicalScale(SCAL_UNIT_RADIAN, 1, 1))


def test_write_png_to_missing_directory(tmp_path):
    with pytest.raises(TileOpenError):
        write_png(str(tmp_path / 'missing' / 'out.png'), b'data')


class _FailingFile:
    def __init__(self, written=None, error=None):
        self.written = written
        self.error = error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def write(self, data):
        if self.error is not None:
            raise self.error
        return self.written


def test_write_png_short_write(tmp_path, monkeypatch):
    monkeypatch.setattr('hgt2png.imagetools.open', lambda path, mode: _FailingFile(written=3), raising=False)

    with pytest.raises(ShortWriteError) as info:
        write_png(str(tmp_path / 'out.png'), b'0123456789')

    assert (info.value.actual, info.value.expected) == (3, 10)
    assert isinstance(info.value, TileWriteError)


def test_write_png_failed_write(tmp_path, monkeypatch):
    failing = _FailingFile(error=OSError(28, 'No space left on device'))
    monkeypatch.setattr('hgt2png.imagetools.open', lambda path, mode: failing, raising=False)

    with pytest.raises(TileWriteError) as info:
        write_png(str(tmp_path / 'out.png'), b'0123456789')

    assert 'No space left on device' in str(info.value)


@pytest.mark.parametrize('cut', [1, 5, 20])
def test_truncated_png(pixels, cut):
    data = encode_png(pixels, PhysicalScale(SCAL_UNIT_RADIAN, 1, 1))

    with pytest.raises(ValueError):
        list(iter_chunks(data[:-cut]))


@pytest.mark.parametrize('chunk', [b'', b'\x02', b'\x021.0'])
def test_malformed_scal(chunk):
    with pytest.raises(ValueError):
        PhysicalScale.from_chunk(chunk)


@pytest.mark.parametrize('chunk', [b'', b'SRTM-HGT\x00\x00\x00', b'SRTM-HGT\x00' + b'\x00' * 10])
def test_malformed_pcal(chunk):
    with pytest.raises(ValueError):
        PixelCalibration.from_chunk(chunk)
