"""Phase vocoder time-scale modification.

Frames of ``window_size`` samples are read every ``hop_analysis`` samples,
windowed with a periodic Hann window and transformed. Each bin keeps its
magnitude while its phase is advanced by the bin's measured instantaneous
frequency times the synthesis hop, so sinusoids stay continuous across the
stretched frames. Frames are resynthesized, windowed again and overlap-added
every ``hop_synthesis`` samples, normalized by the summed squared window.

With phase locking, bins are grouped into regions around spectral peaks and
every bin of a region receives the phase increment of its peak, which keeps
the partials of one peak coherent (less "phasiness").
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from ...core.transform import SpectralTransform, resolve_transform
from ...dsp.utils import princarg
from ...dsp.windows import hann
from ...logging import get_logger
from .base import WEIGHT_FLOOR, OverlapAddBuffer, StreamBuffer, TsmEngine

logger = get_logger(__name__)


def _peak_owners(magnitude: np.ndarray) -> Optional[np.ndarray]:
    """Assign every bin to the spectral peak whose region contains it.

    A peak is a bin larger than its two neighbours on each side. Regions
    between consecutive peaks are split at the magnitude minimum.

    Returns:
        Array mapping bin index to peak bin index, or None without peaks.
    """
    n = len(magnitude)
    padded = np.pad(magnitude, 2, constant_values=-np.inf)
    center = padded[2:-2]
    is_peak = (
        (center > padded[0:-4])
        & (center > padded[1:-3])
        & (center >= padded[3:-1])
        & (center >= padded[4:])
    )
    peaks = np.flatnonzero(is_peak)
    if len(peaks) == 0:
        return None

    owners = np.empty(n, dtype=int)
    start = 0
    for p, q in zip(peaks[:-1], peaks[1:]):
        boundary = p + 1 + int(np.argmin(magnitude[p + 1 : q]))
        owners[start:boundary] = p
        start = boundary
    owners[start:] = peaks[-1]
    return owners


class PhaseVocoder(TsmEngine):
    """Streaming phase vocoder.

    Args:
        stretch: Duration ratio output/input (> 0).
        window_size: Frame (transform) length in samples.
        hop_size: Analysis hop in samples.
        phase_locking: Lock bin phases to their spectral peak.
        transform: Spectral transform backend (instance or name).

    Raises:
        ValueError: See :class:`~sigops.operations.tsm.base.TsmEngine`.
    """

    def __init__(
        self,
        stretch: float,
        window_size: int = 1024,
        hop_size: int = 256,
        phase_locking: bool = False,
        transform: Union[str, SpectralTransform, None] = None,
    ) -> None:
        super().__init__(stretch, window_size, hop_size)
        self.phase_locking = phase_locking
        self.transform = resolve_transform(transform)

        n = self.window_size
        self._window = hann(n, periodic=True)
        self._weights = self._window**2
        self._n_bins = n // 2 + 1
        omega = 2.0 * np.pi * np.arange(self._n_bins) / n
        self._expected_advance = omega * self.hop_analysis
        self._hop_ratio = self.hop_synthesis / self.hop_analysis

        logger.debug(
            "PhaseVocoder: stretch=%.4f window=%d hop_a=%d hop_s=%d locking=%s",
            self.stretch,
            n,
            self.hop_analysis,
            self.hop_synthesis,
            phase_locking,
        )
        self.reset()

    def reset(self) -> None:
        self._input = StreamBuffer()
        self._output = OverlapAddBuffer(WEIGHT_FLOOR)
        self._frame = 0
        self._prev_phase: Optional[np.ndarray] = None
        self._phase_acc: Optional[np.ndarray] = None

    def _analyze(self, frame: np.ndarray):
        spectrum = self.transform.forward(frame * self._window)[: self._n_bins]
        return np.abs(spectrum), np.angle(spectrum)

    def _synthesize(self, magnitude: np.ndarray, phase: np.ndarray) -> np.ndarray:
        n = self.window_size
        half = magnitude * np.exp(1j * phase)
        spectrum = np.zeros(n, dtype=complex)
        spectrum[: self._n_bins] = half
        spectrum[self._n_bins :] = np.conj(half[1 : n - n // 2][::-1])
        return self.transform.inverse(spectrum).real

    def _advance_phase(self, magnitude: np.ndarray, phase: np.ndarray) -> np.ndarray:
        if self._phase_acc is None:
            return phase.copy()

        deviation = princarg(phase - self._prev_phase - self._expected_advance)
        increment = (self._expected_advance + deviation) * self._hop_ratio
        if self.phase_locking:
            owners = _peak_owners(magnitude)
            if owners is not None:
                increment = increment[owners]
        return princarg(self._phase_acc + increment)

    def _step(self) -> None:
        start = self._frame * self.hop_analysis
        frame = self._input.read(start, start + self.window_size)
        magnitude, phase = self._analyze(frame)

        self._phase_acc = self._advance_phase(magnitude, phase)
        self._prev_phase = phase

        y = self._synthesize(magnitude, self._phase_acc) * self._window
        self._output.add(self._frame * self.hop_synthesis, y, self._weights)

        self._frame += 1
        self._input.discard(self._frame * self.hop_analysis)

    def _feed(self, chunk: np.ndarray) -> np.ndarray:
        self._input.extend(chunk)
        while self._frame * self.hop_analysis + self.window_size <= self._input.end:
            self._step()
        return self._output.emit(self._frame * self.hop_synthesis)

    def flush(self) -> np.ndarray:
        """Process the remaining frames (zero-padded) and reset.

        Frames are produced until one starts at or past the last input
        sample, so the whole input is covered.
        """
        received = self._input.end
        while self._frame * self.hop_analysis < received:
            need = self._frame * self.hop_analysis + self.window_size
            if need > self._input.end:
                self._input.extend(np.zeros(need - self._input.end))
            self._step()
        tail = self._output.emit_all()
        self.reset()
        return tail
