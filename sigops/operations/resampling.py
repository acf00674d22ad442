"""Sampling-rate conversion by integer and rational factors.

Interpolation inserts L - 1 zeros between samples and low-passes the result;
decimation low-passes before keeping every M-th sample. Rational resampling
combines both around a single shared low-pass stage with the tighter of the
two cutoffs, so the signal is attenuated only once.

Anti-aliasing filters are :class:`~sigops.dsp.fir.FirFilter` objects:
supplied by the caller or derived from the factor (Blackman windowed sinc,
cutoff at the new Nyquist frequency). They are applied with delay
compensation so output samples line up with input samples.

:meth:`Resampler.resample_up_down` is a fast, filter-free alternative that
linearly interpolates between neighbouring input samples. It aliases and
smooths; use it only when speed matters more than quality.
"""

import math
from typing import Optional

import numpy as np

from ..dsp.fir import FirFilter, lowpass_filter
from ..dsp.utils import check_positive_int
from ..logging import get_logger
from ..signals import DiscreteSignal
from .core import FilteringMethod

logger = get_logger(__name__)

MIN_RESAMPLING_FILTER_ORDER = 101

# Above this, on both sides of the ratio, the zero-stuffed signal and the
# filter get too long and resample() switches to linear interpolation.
MAX_FILTERED_RATIO_FACTOR = 20


def _output_rate(rate: int, up: int, down: int) -> int:
    new_rate = rate * up // down
    if new_rate <= 0:
        raise ValueError(
            f"Resampling {rate} Hz by {up}/{down} gives a non-positive sampling rate"
        )
    return new_rate


def _zero_stuff(samples: np.ndarray, factor: int) -> np.ndarray:
    """Insert factor - 1 zeros after each sample, scaling by factor."""
    stuffed = np.zeros(len(samples) * factor, dtype=float)
    stuffed[::factor] = factor * samples
    return stuffed


class Resampler:
    """Interpolation, decimation and rational resampling.

    Args:
        method: How anti-aliasing filters are applied (default: AUTO).
    """

    def __init__(self, method: FilteringMethod = FilteringMethod.AUTO) -> None:
        self.method = method

    def interpolate(
        self, signal: DiscreteSignal, factor: int, filter: Optional[FirFilter] = None
    ) -> DiscreteSignal:
        """Upsample by an integer factor.

        Args:
            signal: Input signal.
            factor: Interpolation factor L >= 1.
            filter: Anti-imaging low-pass (default: cutoff 0.5 / L).

        Returns:
            Signal of length ``len(signal) * L`` at ``rate * L``.

        Raises:
            ValueError: If the factor is not a positive integer.
        """
        factor = check_positive_int(factor, "Interpolation factor")
        if factor == 1:
            return signal.copy()

        lp = filter if filter is not None else lowpass_filter(
            factor, min_order=MIN_RESAMPLING_FILTER_ORDER
        )
        stuffed = _zero_stuff(signal.samples, factor)
        output = lp.apply(stuffed, self.method, mode="same")
        return DiscreteSignal(signal.sampling_rate * factor, output)

    def decimate(
        self, signal: DiscreteSignal, factor: int, filter: Optional[FirFilter] = None
    ) -> DiscreteSignal:
        """Downsample by an integer factor.

        Args:
            signal: Input signal.
            factor: Decimation factor M >= 1.
            filter: Anti-aliasing low-pass (default: cutoff 0.5 / M).

        Returns:
            Signal of length ``len(signal) // M`` at ``rate // M``.

        Raises:
            ValueError: If the factor is not a positive integer or exceeds
                the sampling rate.
        """
        factor = check_positive_int(factor, "Decimation factor")
        if factor == 1:
            return signal.copy()
        new_rate = _output_rate(signal.sampling_rate, 1, factor)

        lp = filter if filter is not None else lowpass_filter(
            factor, min_order=MIN_RESAMPLING_FILTER_ORDER
        )
        filtered = lp.apply(signal.samples, self.method, mode="same")
        output = filtered[::factor][: len(signal) // factor]
        return DiscreteSignal(new_rate, output)

    def resample(
        self,
        signal: DiscreteSignal,
        new_sampling_rate: int,
        filter: Optional[FirFilter] = None,
    ) -> DiscreteSignal:
        """Convert to a new sampling rate by the rational factor up/down.

        ``up/down`` is ``new_rate/old_rate`` in lowest terms. When both exceed
        20 the conversion falls back to :meth:`resample_up_down`.

        Args:
            signal: Input signal.
            new_sampling_rate: Target rate in Hz.
            filter: Shared low-pass (default: cutoff 0.5 / max(up, down)).

        Returns:
            Signal of length ``len(signal) * up // down`` at the new rate.

        Raises:
            ValueError: If the new rate is not a positive integer.
        """
        new_sampling_rate = check_positive_int(new_sampling_rate, "New sampling rate")
        rate = signal.sampling_rate
        if rate == new_sampling_rate:
            return signal.copy()

        g = math.gcd(rate, new_sampling_rate)
        up = new_sampling_rate // g
        down = rate // g

        if up > MAX_FILTERED_RATIO_FACTOR and down > MAX_FILTERED_RATIO_FACTOR:
            logger.debug(
                "Ratio %d/%d too large for filtered resampling, using linear "
                "interpolation",
                up,
                down,
            )
            return self.resample_up_down(signal, up, down)

        lp = filter if filter is not None else lowpass_filter(
            max(up, down), min_order=MIN_RESAMPLING_FILTER_ORDER, scale=8
        )
        stuffed = _zero_stuff(signal.samples, up)
        filtered = lp.apply(stuffed, self.method, mode="same")
        output = filtered[::down][: len(signal) * up // down]
        return DiscreteSignal(new_sampling_rate, output)

    def resample_up_down(self, signal: DiscreteSignal, up: int, down: int) -> DiscreteSignal:
        """Fast approximate resampling by linear interpolation.

        Output sample i is read at input position ``i * down / up`` by
        linear interpolation between the two neighbouring samples (the last
        sample is held past the end). No anti-aliasing filter is applied, so
        downsampling aliases.

        Args:
            signal: Input signal.
            up: Upsampling factor (> 0).
            down: Downsampling factor (> 0).

        Returns:
            Signal of length ``int(len(signal) * up / down)`` at
            ``rate * up // down``.

        Raises:
            ValueError: If ``up`` or ``down`` is not a positive integer.
        """
        up = check_positive_int(up, "up")
        down = check_positive_int(down, "down")
        new_rate = _output_rate(signal.sampling_rate, up, down)

        n = len(signal)
        n_out = n * up // down
        if n_out == 0:
            return DiscreteSignal(new_rate, np.zeros(0))

        positions = np.arange(n_out, dtype=float) * down / up
        output = np.interp(positions, np.arange(n, dtype=float), signal.samples)
        return DiscreteSignal(new_rate, output)


def interpolate(
    signal: DiscreteSignal, factor: int, filter: Optional[FirFilter] = None
) -> DiscreteSignal:
    """Interpolation followed by low-pass filtering."""
    return Resampler().interpolate(signal, factor, filter)


def decimate(
    signal: DiscreteSignal, factor: int, filter: Optional[FirFilter] = None
) -> DiscreteSignal:
    """Decimation preceded by low-pass filtering."""
    return Resampler().decimate(signal, factor, filter)


def resample(
    signal: DiscreteSignal, new_sampling_rate: int, filter: Optional[FirFilter] = None
) -> DiscreteSignal:
    """Rational resampling (interpolation and decimation, one shared filter)."""
    return Resampler().resample(signal, new_sampling_rate, filter)


def resample_up_down(signal: DiscreteSignal, up: int, down: int) -> DiscreteSignal:
    """Filter-free resampling by linear interpolation."""
    return Resampler().resample_up_down(signal, up, down)
