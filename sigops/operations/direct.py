"""Direct-form convolution and cross-correlation.

Textbook nested summation with no transform, O(N*M). These are correctness
oracles for the spectral routines and are not meant for long signals.
"""

import numpy as np

from ..dsp.utils import check_1d_array
from ..signals import DiscreteSignal


def convolve_direct(signal1: DiscreteSignal, signal2: DiscreteSignal) -> DiscreteSignal:
    """Direct convolution by formula in time domain.

    Computes y[n] = sum_k a[n-k] * b[k] over valid indices.

    Args:
        signal1: First operand.
        signal2: Second operand (kernel).

    Returns:
        Signal of length len(a) + len(b) - 1 at the rate of ``signal1``.

    Raises:
        ValueError: If either signal is empty.
    """
    a = check_1d_array(signal1.samples, allow_empty=False)
    b = check_1d_array(signal2.samples, allow_empty=False)
    length = len(a) + len(b) - 1

    conv = np.zeros(length, dtype=float)
    for n in range(length):
        acc = 0.0
        for k in range(len(b)):
            if 0 <= n - k < len(a):
                acc += a[n - k] * b[k]
        conv[n] = acc

    return DiscreteSignal(signal1.sampling_rate, conv)


def cross_correlate_direct(
    signal1: DiscreteSignal, signal2: DiscreteSignal
) -> DiscreteSignal:
    """Direct cross-correlation by formula in time domain.

    Same as :func:`convolve_direct` with ``signal2`` read backwards:
    y[n] = sum_k a[n-k] * b[M-1-k].
    """
    a = check_1d_array(signal1.samples, allow_empty=False)
    b = check_1d_array(signal2.samples, allow_empty=False)
    length = len(a) + len(b) - 1
    last = len(b) - 1

    corr = np.zeros(length, dtype=float)
    for n in range(length):
        acc = 0.0
        for k in range(len(b)):
            if 0 <= n - k < len(a):
                acc += a[n - k] * b[last - k]
        corr[n] = acc

    return DiscreteSignal(signal1.sampling_rate, corr)
