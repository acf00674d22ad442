"""Shared machinery of the time-scale modification engines.

Both engines read frames from an input stream at analysis positions and
overlap-add windowed frames into an output stream at synthesis positions.
:class:`StreamBuffer` keeps just the part of the input that future frames can
still read; :class:`OverlapAddBuffer` keeps the part of the output that
future frames can still touch, together with the accumulated window weights
used for normalization.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ...dsp.utils import check_1d_array, check_positive_int, check_stretch
from ...signals import DiscreteSignal

# Window-weight sums are floored at this fraction of a single window's peak
# weight so the faded edges of the stream are attenuated, never amplified.
WEIGHT_FLOOR = 0.1


class StreamBuffer:
    """Sliding view over an input stream addressed by absolute sample index.

    Holds samples ``[start, end)``. :meth:`discard` may move ``start`` past
    ``end``; samples arriving later below the new ``start`` are dropped.
    """

    def __init__(self) -> None:
        self._data = np.zeros(0, dtype=float)
        self.start = 0
        self.end = 0

    def extend(self, chunk: np.ndarray) -> None:
        new_end = self.end + len(chunk)
        if self.start > self.end:
            chunk = chunk[self.start - self.end :]
        self._data = np.concatenate([self._data, chunk])
        self.end = new_end

    def discard(self, position: int) -> None:
        """Forget every sample before ``position``."""
        if position <= self.start:
            return
        self._data = self._data[position - self.start :]
        self.start = position

    def read(self, begin: int, stop: int) -> np.ndarray:
        if begin < self.start or stop > self.end:
            raise IndexError(
                f"Samples [{begin}, {stop}) not buffered (have [{self.start}, {self.end}))"
            )
        return self._data[begin - self.start : stop - self.start]


class OverlapAddBuffer:
    """Output accumulator for windowed overlap-add with weight normalization.

    Args:
        weight_floor: Lower bound applied to the weight sum before division.
    """

    def __init__(self, weight_floor: float) -> None:
        self.weight_floor = weight_floor
        self.offset = 0
        self._data = np.zeros(0, dtype=float)
        self._weights = np.zeros(0, dtype=float)

    def add(self, position: int, frame: np.ndarray, weights: np.ndarray) -> None:
        begin = position - self.offset
        if begin < 0:
            raise IndexError(f"Position {position} already emitted (offset {self.offset})")
        stop = begin + len(frame)
        if stop > len(self._data):
            grow = stop - len(self._data)
            self._data = np.concatenate([self._data, np.zeros(grow)])
            self._weights = np.concatenate([self._weights, np.zeros(grow)])
        self._data[begin:stop] += frame
        self._weights[begin:stop] += weights

    def emit(self, position: int) -> np.ndarray:
        """Normalize and release every sample before ``position``."""
        n = min(max(position - self.offset, 0), len(self._data))
        out = self._data[:n] / np.maximum(self._weights[:n], self.weight_floor)
        self._data = self._data[n:]
        self._weights = self._weights[n:]
        self.offset += n
        return out

    def emit_all(self) -> np.ndarray:
        return self.emit(self.offset + len(self._data))


class TsmEngine(ABC):
    """Base class of the time-scale modification engines.

    Engines are stateful stream processors: feed consecutive chunks to
    :meth:`process`, then call :meth:`flush` once at the end of the stream.
    :meth:`apply_to` does this for a whole signal. A single owner must drive
    an instance in stream order.

    Args:
        stretch: Duration ratio output/input (> 0).
        window_size: Frame length in samples.
        hop_size: Analysis hop in samples. The synthesis hop is
            ``round(hop_size * stretch)``.

    Raises:
        ValueError: If the stretch is not positive and finite, if the window
            or hop is not a positive integer, or if the synthesis hop is zero
            or not shorter than the window (frames would not overlap).
    """

    def __init__(self, stretch: float, window_size: int, hop_size: int) -> None:
        self.stretch = check_stretch(stretch)
        self.window_size = check_positive_int(window_size, "window_size")
        self.hop_analysis = check_positive_int(hop_size, "hop_size")
        self.hop_synthesis = int(round(self.hop_analysis * self.stretch))

        if self.hop_synthesis < 1:
            raise ValueError(
                f"Synthesis hop rounds to zero (hop_size={hop_size}, stretch={stretch})"
            )
        if self.hop_synthesis >= self.window_size:
            raise ValueError(
                f"Synthesis hop ({self.hop_synthesis}) must be shorter than the window "
                f"({self.window_size}); reduce hop_size or increase window_size"
            )

    @abstractmethod
    def reset(self) -> None:
        """Return to the freshly-constructed state."""

    @abstractmethod
    def _feed(self, chunk: np.ndarray) -> np.ndarray:
        """Consume validated input and return finalized output."""

    @abstractmethod
    def flush(self) -> np.ndarray:
        """Process the end of the stream, return remaining output, reset."""

    def process(self, chunk) -> np.ndarray:
        """Feed the next input chunk.

        Returns:
            Output samples that no later frame can change (possibly empty).
        """
        return self._feed(check_1d_array(chunk))

    def apply_to(self, signal: DiscreteSignal) -> DiscreteSignal:
        """Time-stretch a whole signal.

        Returns:
            Signal of exactly ``round(len(signal) * stretch)`` samples at the
            same sampling rate.
        """
        self.reset()
        output = np.concatenate([self.process(signal.samples), self.flush()])
        target = int(round(len(signal) * self.stretch))
        if len(output) < target:
            output = np.concatenate([output, np.zeros(target - len(output))])
        return DiscreteSignal(signal.sampling_rate, output[:target])
