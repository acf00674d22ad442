"""Signal-processing building blocks used by the operations.

- Window functions (Hann, Hamming, Blackman, rectangular)
- FIR low-pass design (window method) and the FirFilter applicator
- Input validation and numerical helpers
"""

from .fir import FirFilter, design_lowpass, lowpass_filter
from .utils import check_1d_array, check_positive_int, next_pow2, princarg
from .windows import blackman, get_window, hamming, hann, rectangular

__all__ = [
    # Utils
    "check_1d_array",
    "check_positive_int",
    "next_pow2",
    "princarg",
    # Windows
    "hann",
    "hamming",
    "blackman",
    "rectangular",
    "get_window",
    # FIR
    "FirFilter",
    "design_lowpass",
    "lowpass_filter",
]
