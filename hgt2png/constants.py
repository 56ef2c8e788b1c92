import numpy as np

DIM = 3601  # arcsecond resolution per degree x degree cell
SAMPLE_SIZE = 2  # bytes per sample
IN_DTYPE = np.dtype('>i2')  # binary representation in .hgt files
NATIVE_DTYPE = np.dtype(np.int16)  # signed elevations in host byte order
RESCALED_DTYPE = np.dtype(np.uint16)  # encoded values in host byte order
OUT_DTYPE = np.dtype('>u2')  # byte order of PNG sample rows
IN_NAN = -32768  # "no value" marker in .hgt files
OUT_NAN = 0xFFFF  # "no value" marker in the encoded images
ENCODED_MAX = 65534  # encoded value of the highest elevation
OUT_IMAGE_MODE = 'I;16'  # PIL/Pillow image mode for 16 bit grayscale output
OUT_RAW_MODE = 'I;16B'  # PIL/Pillow raw mode of the big-endian sample rows
PNG_EXTENSION = '.png'
CALIBRATION_DESCRIPTION = 'SRTM-HGT'
CALIBRATION_UNIT = 'm'
