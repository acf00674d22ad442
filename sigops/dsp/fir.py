"""FIR low-pass design (window method) and FIR filter application.

The resampler needs an anti-aliasing stage: :class:`FirFilter` wraps a kernel
and applies it in direct form or through the block convolver.
:func:`design_lowpass` builds the default windowed-sinc kernel when the caller
does not supply a filter.
"""

from typing import Literal, Optional, Union

import numpy as np

from ..core.transform import SpectralTransform
from ..signals import DiscreteSignal
from .utils import check_1d_array, check_positive_int, next_pow2
from .windows import get_window

FilterMode = Literal["full", "same", "causal"]

# Kernels longer than this are applied with overlap-save under AUTO.
MIN_KERNEL_SIZE_FOR_FFT = 64


def design_lowpass(numtaps: int, cutoff: float, window: str = "blackman") -> np.ndarray:
    """Design a linear-phase low-pass FIR filter by the window method.

    Windows the ideal impulse response h[n] = 2 fc sinc(2 fc (n - center))
    and normalizes it to unity DC gain.

    Args:
        numtaps: Number of taps (odd lengths give an integer group delay).
        cutoff: Normalized cutoff in cycles per sample, 0 < cutoff < 0.5.
        window: Window name (default: "blackman").

    Returns:
        Filter coefficients of length ``numtaps``.

    Raises:
        ValueError: If ``numtaps`` is not positive or the cutoff is outside
            (0, 0.5).
    """
    numtaps = check_positive_int(numtaps, "numtaps")
    if not 0.0 < cutoff < 0.5:
        raise ValueError(f"Invalid normalized cutoff frequency: {cutoff}")

    n = np.arange(numtaps, dtype=float)
    center = (numtaps - 1) / 2.0
    h = 2.0 * cutoff * np.sinc(2.0 * cutoff * (n - center))
    h *= get_window(window, numtaps, periodic=False)

    dc_gain = np.sum(h)
    if abs(dc_gain) > 1e-10:
        h = h / dc_gain
    return h


class FirFilter:
    """Finite impulse response filter.

    Args:
        kernel: Filter coefficients (nonempty).
        transform: Spectral transform backend used by block methods.
    """

    def __init__(
        self,
        kernel,
        transform: Union[str, SpectralTransform, None] = None,
    ) -> None:
        self.kernel = check_1d_array(kernel, allow_empty=False)
        self.transform = transform

    def __len__(self) -> int:
        return len(self.kernel)

    @property
    def group_delay(self) -> int:
        """Delay in samples of a linear-phase kernel, (len - 1) // 2."""
        return (len(self.kernel) - 1) // 2

    def _resolve(self, method, n_samples: int):
        from ..operations.core import FilteringMethod

        if method == FilteringMethod.AUTO:
            if len(self.kernel) > MIN_KERNEL_SIZE_FOR_FFT:
                method = FilteringMethod.OVERLAP_SAVE
            else:
                method = FilteringMethod.DIRECT_FORM

        fft_size = next_pow2(4 * len(self.kernel))
        # Block convolution passes short signals through untouched; a filter
        # must always filter, so those go through direct form instead.
        if method != FilteringMethod.DIRECT_FORM and n_samples < fft_size:
            method = FilteringMethod.DIRECT_FORM
        return method, fft_size

    def apply(
        self,
        samples,
        method=None,
        mode: FilterMode = "causal",
    ) -> np.ndarray:
        """Filter a sample array.

        Args:
            samples: Input samples.
            method: :class:`~sigops.operations.core.FilteringMethod`
                (default: AUTO).
            mode: "full" (n + k - 1 samples), "causal" (first n samples) or
                "same" (n samples, shifted by the group delay so a
                linear-phase kernel introduces no delay).

        Returns:
            Filtered samples.

        Raises:
            ValueError: If the mode is unknown.
        """
        from ..operations.block import BlockConvolver
        from ..operations.core import FilteringMethod

        if mode not in ("full", "same", "causal"):
            raise ValueError(f"Unsupported mode: {mode}")

        x = check_1d_array(samples)
        if len(x) == 0:
            return x.copy()

        if method is None:
            method = FilteringMethod.AUTO
        method, fft_size = self._resolve(method, len(x))

        if method == FilteringMethod.DIRECT_FORM:
            full = np.convolve(x, self.kernel, mode="full")
        else:
            conv = BlockConvolver(self.kernel, fft_size, method, self.transform)
            full = np.concatenate([conv.process(x), conv.flush()])

        if mode == "full":
            return full
        start = self.group_delay if mode == "same" else 0
        return full[start : start + len(x)]

    def apply_to(
        self,
        signal: DiscreteSignal,
        method=None,
        mode: FilterMode = "causal",
    ) -> DiscreteSignal:
        """Filter a signal; see :meth:`apply`."""
        filtered = self.apply(signal.samples, method, mode)
        return DiscreteSignal(signal.sampling_rate, filtered)


def lowpass_filter(
    factor: int, numtaps: Optional[int] = None, min_order: int = 101, scale: int = 2
) -> FirFilter:
    """Default anti-aliasing filter for a resampling factor.

    Cutoff is ``0.5 / factor`` (the new Nyquist frequency). The tap count is
    ``min_order`` unless the factor is large, in which case it grows as
    ``scale * factor + 1``.

    Args:
        factor: Interpolation/decimation factor (> 1).
        numtaps: Explicit tap count (overrides the heuristic).
        min_order: Minimum number of taps.
        scale: Taps per unit of factor for large factors.
    """
    factor = check_positive_int(factor, "factor")
    if numtaps is None:
        numtaps = scale * factor + 1 if factor > min_order // 2 else min_order
    return FirFilter(design_lowpass(numtaps, 0.5 / factor))
