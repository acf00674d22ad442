"""Signal operations.

- FFT convolution, cross-correlation and deconvolution (real and complex)
- Direct-form reference convolution and cross-correlation
- Block convolution with overlap-add/overlap-save
- Interpolation, decimation and rational resampling
- Time-scale modification (phase vocoder, WSOLA)
"""

from .block import BlockConvolver, block_convolve
from .convolution import (
    ComplexConvolver,
    Convolver,
    convolve,
    convolve_samples,
    cross_correlate,
    deconvolve,
)
from .core import FilteringMethod, TsmAlgorithm
from .direct import convolve_direct, cross_correlate_direct
from .resampling import Resampler, decimate, interpolate, resample, resample_up_down
from .tsm import PhaseVocoder, TsmEngine, Wsola, create_engine, time_stretch

__all__ = [
    # Enumerations
    "FilteringMethod",
    "TsmAlgorithm",
    # Convolution
    "Convolver",
    "ComplexConvolver",
    "convolve",
    "convolve_samples",
    "cross_correlate",
    "deconvolve",
    "convolve_direct",
    "cross_correlate_direct",
    # Block convolution
    "BlockConvolver",
    "block_convolve",
    # Resampling
    "Resampler",
    "interpolate",
    "decimate",
    "resample",
    "resample_up_down",
    # Time-scale modification
    "TsmEngine",
    "PhaseVocoder",
    "Wsola",
    "create_engine",
    "time_stretch",
]
