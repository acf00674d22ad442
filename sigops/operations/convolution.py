"""Fast convolution, cross-correlation and deconvolution via FFT.

Linear (non-circular) convolution through the spectral domain: both operands
are zero-padded to the next power of two >= len(a) + len(b) - 1, transformed,
multiplied pointwise and transformed back. Real signals take the same complex
path and keep only the real part of the result; the imaginary residue is pure
rounding noise.
"""

from typing import Optional, Tuple, Union

import numpy as np

from ..core.transform import SpectralTransform, resolve_transform
from ..diagnostics import is_debug_enabled
from ..dsp.utils import check_1d_array, next_pow2
from ..logging import get_logger
from ..signals import ComplexDiscreteSignal, DiscreteSignal

logger = get_logger(__name__)

TransformLike = Union[str, SpectralTransform, None]

# Divisor bins below this magnitude are reported in debug mode.
_ZERO_BIN_TOL = 1e-12


class Convolver:
    """Spectral convolution engine for real-valued signals.

    Args:
        transform: Spectral transform backend (instance or name); defaults
            to the process-wide default transform.
    """

    def __init__(self, transform: TransformLike = None) -> None:
        self.transform = resolve_transform(transform)

    def convolve_samples(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        """Convolve two sample arrays.

        Args:
            x: First operand (1D, nonempty).
            h: Second operand (1D, nonempty).

        Returns:
            Array of length len(x) + len(h) - 1 with y[n] = sum_k x[n-k] h[k].

        Raises:
            ValueError: If either operand is empty or not 1D.
        """
        x = check_1d_array(x, allow_empty=False)
        h = check_1d_array(h, allow_empty=False)

        length = len(x) + len(h) - 1
        n_fft = next_pow2(length)

        X = self.transform.forward(x, n=n_fft)
        H = self.transform.forward(h, n=n_fft)
        y = self.transform.inverse(X * H)[:length]

        if is_debug_enabled():
            logger.debug(
                "Real convolution (n_fft=%d): max imaginary residue %.3e",
                n_fft,
                float(np.max(np.abs(y.imag))),
            )
        return np.ascontiguousarray(y.real)

    def convolve(self, signal: DiscreteSignal, kernel: DiscreteSignal) -> DiscreteSignal:
        """Convolve a signal with a kernel.

        The result keeps the sampling rate of ``signal``.
        """
        samples = self.convolve_samples(signal.samples, kernel.samples)
        return DiscreteSignal(signal.sampling_rate, samples)

    def cross_correlate(
        self, signal1: DiscreteSignal, signal2: DiscreteSignal
    ) -> DiscreteSignal:
        """Cross-correlate two signals: convolution with reversed ``signal2``.

        Same length law as :meth:`convolve`.
        """
        samples = self.convolve_samples(signal1.samples, signal2.samples[::-1])
        return DiscreteSignal(signal1.sampling_rate, samples)


class ComplexConvolver:
    """Spectral convolution engine for complex-valued signals.

    Args:
        transform: Spectral transform backend (instance or name).
    """

    def __init__(self, transform: TransformLike = None) -> None:
        self.transform = resolve_transform(transform)

    @staticmethod
    def _check_nonempty(*signals: ComplexDiscreteSignal) -> None:
        for s in signals:
            if len(s) == 0:
                raise ValueError("Input must contain at least one sample")

    def _spectra(
        self, a: np.ndarray, b: np.ndarray, n_fft: int
    ) -> Tuple[np.ndarray, np.ndarray]:
        return self.transform.forward(a, n=n_fft), self.transform.forward(b, n=n_fft)

    def _convolve_complex(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        length = len(a) + len(b) - 1
        A, B = self._spectra(a, b, next_pow2(length))
        return self.transform.inverse(A * B)[:length]

    def convolve(
        self, signal: ComplexDiscreteSignal, kernel: ComplexDiscreteSignal
    ) -> ComplexDiscreteSignal:
        """Convolve two complex signals (length len(a) + len(b) - 1)."""
        self._check_nonempty(signal, kernel)
        y = self._convolve_complex(signal.to_complex(), kernel.to_complex())
        return ComplexDiscreteSignal.from_complex(signal.sampling_rate, y)

    def cross_correlate(
        self, signal1: ComplexDiscreteSignal, signal2: ComplexDiscreteSignal
    ) -> ComplexDiscreteSignal:
        """Cross-correlate: convolve ``signal1`` with the time-reversed
        conjugate of ``signal2``."""
        self._check_nonempty(signal1, signal2)
        kernel = np.conj(signal2.to_complex()[::-1])
        y = self._convolve_complex(signal1.to_complex(), kernel)
        return ComplexDiscreteSignal.from_complex(signal1.sampling_rate, y)

    def deconvolve(
        self, signal: ComplexDiscreteSignal, kernel: ComplexDiscreteSignal
    ) -> ComplexDiscreteSignal:
        """Deconvolve ``signal`` by ``kernel`` with pointwise spectral division.

        Inverse of :meth:`convolve`: for ``signal = convolve(x, kernel)`` the
        result approximates ``x`` and has length len(signal) - len(kernel) + 1.

        No regularization is applied. Where the kernel spectrum approaches
        zero the quotient blows up and the output is unreliable (possibly
        inf/nan); with debug mode on, such bins are reported as a warning.

        Raises:
            ValueError: If either signal is empty or the kernel is longer
                than the signal.
        """
        self._check_nonempty(signal, kernel)
        if len(kernel) > len(signal):
            raise ValueError(
                f"Kernel length ({len(kernel)}) must not exceed signal length "
                f"({len(signal)}) for deconvolution"
            )

        length = len(signal) - len(kernel) + 1
        n_fft = next_pow2(len(signal))
        A, B = self._spectra(signal.to_complex(), kernel.to_complex(), n_fft)

        if is_debug_enabled():
            n_small = int(np.count_nonzero(np.abs(B) < _ZERO_BIN_TOL))
            if n_small:
                logger.warning(
                    "Deconvolution divides by %d near-zero spectral bins out of %d",
                    n_small,
                    n_fft,
                )

        with np.errstate(divide="ignore", invalid="ignore"):
            Q = A / B
        y = self.transform.inverse(Q)[:length]
        return ComplexDiscreteSignal.from_complex(signal.sampling_rate, y)


AnySignal = Union[DiscreteSignal, ComplexDiscreteSignal]


def _is_complex_pair(a: AnySignal, b: AnySignal) -> bool:
    return isinstance(a, ComplexDiscreteSignal) or isinstance(b, ComplexDiscreteSignal)


def _promote(s: AnySignal) -> ComplexDiscreteSignal:
    if isinstance(s, ComplexDiscreteSignal):
        return s
    return ComplexDiscreteSignal.from_real(s)


def convolve(
    signal: AnySignal, kernel: AnySignal, transform: TransformLike = None
) -> AnySignal:
    """Fast convolution via FFT.

    Real operands give a :class:`DiscreteSignal`; if either operand is
    complex both are treated as complex and a
    :class:`ComplexDiscreteSignal` is returned.

    Example:
        >>> convolve(DiscreteSignal(1, [1, 2, 3]), DiscreteSignal(1, [1, 1])).samples
        array([1., 3., 5., 3.])
    """
    if _is_complex_pair(signal, kernel):
        return ComplexConvolver(transform).convolve(_promote(signal), _promote(kernel))
    return Convolver(transform).convolve(signal, kernel)


def cross_correlate(
    signal1: AnySignal, signal2: AnySignal, transform: TransformLike = None
) -> AnySignal:
    """Fast cross-correlation via FFT (real or complex, as :func:`convolve`)."""
    if _is_complex_pair(signal1, signal2):
        return ComplexConvolver(transform).cross_correlate(
            _promote(signal1), _promote(signal2)
        )
    return Convolver(transform).cross_correlate(signal1, signal2)


def deconvolve(
    signal: AnySignal, kernel: AnySignal, transform: TransformLike = None
) -> ComplexDiscreteSignal:
    """Deconvolution via FFT; always computed (and returned) as complex.

    Numerically unstable where the kernel spectrum nears zero, see
    :meth:`ComplexConvolver.deconvolve`.
    """
    return ComplexConvolver(transform).deconvolve(_promote(signal), _promote(kernel))


def convolve_samples(
    x: np.ndarray, h: np.ndarray, transform: Optional[SpectralTransform] = None
) -> np.ndarray:
    """Fast convolution of plain sample arrays (used by filter application)."""
    return Convolver(transform).convolve_samples(x, h)
