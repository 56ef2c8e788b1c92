from typing import NamedTuple

import numpy as np

from .constants import ENCODED_MAX, IN_NAN, OUT_NAN, RESCALED_DTYPE
from .errors import DegenerateRangeError
from .raster import Raster, Stage
from .utils import LinearInterpolator

# bounds that any real sample moves past; kept as-is when a raster has no valid sample
INITIAL_MINIMUM = 32768
INITIAL_MAXIMUM = -32768


class ElevationRange(NamedTuple):
    minimum: int
    maximum: int
    invalid_count: int

    @property
    def is_empty(self) -> bool:
        return self.maximum < self.minimum

    @property
    def delta(self) -> int:
        return 0 if self.is_empty else self.maximum - self.minimum

    @property
    def is_flat(self) -> bool:
        return not self.is_empty and self.delta == 0

    def decoder(self) -> LinearInterpolator:
        '''
        Map from encoded values back to meters.
        '''
        return LinearInterpolator(0, ENCODED_MAX, self.minimum, self.minimum + self.delta)


def scan_range(raster: Raster) -> ElevationRange:
    '''
    Find the lowest and highest elevation of a raster, ignoring "no value"
    samples, and count those.
    '''
    raster.require(Stage.NATIVE_SIGNED, 'Range scan')

    valid = raster.data != IN_NAN
    valid_count = int(np.count_nonzero(valid))
    invalid_count = raster.data.size - valid_count

    if valid_count == 0:
        return ElevationRange(INITIAL_MINIMUM, INITIAL_MAXIMUM, invalid_count)

    samples = raster.data[valid]
    return ElevationRange(int(samples.min()), int(samples.max()), invalid_count)


def rescale(raster: Raster, elevation_range: ElevationRange, strict: bool = False) -> Raster:
    '''
    Scale the raster in place such that the minimum height encodes to 0 and
    the maximum height encodes to 65534. "No value" samples become 0xFFFF.

    A flat raster has no spread to scale over: its valid samples all encode
    to 0, unless ``strict`` is set, in which case it is rejected.
    '''
    raster.require(Stage.NATIVE_SIGNED, 'Rescaling')

    if elevation_range.is_flat and strict:
        raise DegenerateRangeError(elevation_range.minimum, elevation_range.maximum)

    signed = raster.data
    valid = signed != IN_NAN

    if elevation_range.delta > 0:
        scaled = (signed.astype(np.float64) - elevation_range.minimum) * float(ENCODED_MAX) / elevation_range.delta
    else:
        scaled = np.zeros(signed.shape, np.float64)

    # same memory, reinterpreted as unsigned
    encoded = signed.view(RESCALED_DTYPE)
    encoded[...] = OUT_NAN
    encoded[valid] = scaled[valid].astype(RESCALED_DTYPE)

    raster.data = encoded
    raster.stage = Stage.NATIVE_RESCALED
    return raster
