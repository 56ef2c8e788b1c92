import numpy as np
import pytest

from hgt2png.constants import IN_DTYPE, IN_NAN


def write_hgt(path, samples) -> str:
    '''
    Store a 2D array of elevations the way .hgt files do: big-endian signed
    16 bit, row-major, no header.
    '''
    with open(path, 'wb') as f:
        f.write(np.asarray(samples).astype(IN_DTYPE).tobytes())
    return str(path)


@pytest.fixture
def elevations() -> np.ndarray:
    # 5 x 5 cell with a hole in the middle
    samples = np.arange(25, dtype=np.int16).reshape(5, 5) * 10 - 20
    samples[2, 2] = IN_NAN
    return samples


@pytest.fixture
def hgt_file(tmp_path, elevations) -> str:
    return write_hgt(tmp_path / 'N37W122.hgt', elevations)


@pytest.fixture
def make_hgt(tmp_path):
    def _make(samples, name: str = 'N37W122.hgt') -> str:
        return write_hgt(tmp_path / name, samples)
    return _make
