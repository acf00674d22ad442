"""Waveform-similarity overlap-add (WSOLA) time-scale modification.

Output frames are written every ``hop_synthesis`` samples. Frame k would
ideally be read from input position ``k * hop_synthesis / stretch``; WSOLA
instead reads it from the position within ``max_delta`` samples of the ideal
one whose waveform best continues the previous frame, measured by the
normalized cross-correlation with the natural continuation of that frame.
Working in the time domain keeps transients sharp; there is no spectral
analysis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ...dsp.utils import check_stretch
from ...dsp.windows import hann
from ...logging import get_logger
from .base import WEIGHT_FLOOR, OverlapAddBuffer, StreamBuffer, TsmEngine

logger = get_logger(__name__)

# Template or candidate energy below this counts as silence.
_SILENCE_ENERGY = 1e-12


@dataclass
class SynthesisCursor:
    """Output write position and the matching ideal input read position."""

    stretch: float
    hop: int
    frame: int = 0

    @property
    def write_position(self) -> int:
        return self.frame * self.hop

    @property
    def ideal_read_position(self) -> int:
        return int(round(self.write_position / self.stretch))

    def advance(self) -> None:
        self.frame += 1


def best_offset(region: np.ndarray, template: np.ndarray) -> Optional[int]:
    """Index in ``region`` where ``template`` matches best.

    Scores every placement ``region[i : i + len(template)]`` by normalized
    cross-correlation.

    Returns:
        Best index, or None if the template or every candidate is silent.
    """
    length = len(template)
    template_energy = float(np.dot(template, template))
    if template_energy < _SILENCE_ENERGY:
        return None

    corr = np.correlate(region, template, mode="valid")
    cumulative = np.concatenate([[0.0], np.cumsum(region**2)])
    energy = cumulative[length:] - cumulative[:-length]

    audible = energy > _SILENCE_ENERGY
    if not np.any(audible):
        return None
    score = np.full(len(corr), -np.inf)
    score[audible] = corr[audible] / np.sqrt(energy[audible] * template_energy)
    return int(np.argmax(score))


class Wsola(TsmEngine):
    """Streaming WSOLA.

    Args:
        stretch: Duration ratio output/input (> 0).
        window_size: Frame length in samples.
        hop_size: Analysis hop (default: ``round(window_size / 2 / stretch)``,
            i.e. a synthesis hop of half a window).
        max_delta: Search radius in samples around the ideal read position
            (default: ``max(1, hop_size // 2)``).

    Raises:
        ValueError: If ``max_delta`` is negative, or see
            :class:`~sigops.operations.tsm.base.TsmEngine`.
    """

    def __init__(
        self,
        stretch: float,
        window_size: int = 1024,
        hop_size: Optional[int] = None,
        max_delta: Optional[int] = None,
    ) -> None:
        if hop_size is None:
            hop_size = max(1, int(round(window_size / 2 / check_stretch(stretch))))
        super().__init__(stretch, window_size, hop_size)

        if max_delta is None:
            max_delta = max(1, self.hop_analysis // 2)
        if isinstance(max_delta, bool) or int(max_delta) != max_delta or max_delta < 0:
            raise ValueError(f"max_delta must be a non-negative integer, got {max_delta!r}")
        self.max_delta = int(max_delta)
        self._window = hann(self.window_size, periodic=True)

        logger.debug(
            "Wsola: stretch=%.4f window=%d hop_a=%d hop_s=%d max_delta=%d",
            self.stretch,
            self.window_size,
            self.hop_analysis,
            self.hop_synthesis,
            self.max_delta,
        )
        self.reset()

    def reset(self) -> None:
        self._input = StreamBuffer()
        self._output = OverlapAddBuffer(WEIGHT_FLOOR)
        self._cursor = SynthesisCursor(self.stretch, self.hop_synthesis)
        self._prev_start: Optional[int] = None

    def _required_end(self) -> int:
        """Input samples needed before the next frame can be placed."""
        if self._prev_start is None:
            return self.window_size
        return self._cursor.ideal_read_position + self.max_delta + self.window_size

    def _search(self, ideal: int) -> int:
        n = self.window_size
        template = self._input.read(
            self._prev_start + self.hop_synthesis, self._prev_start + n
        )
        lo = max(0, ideal - self.max_delta)
        hi = ideal + self.max_delta
        region = self._input.read(lo, hi + len(template))
        offset = best_offset(region, template)
        if offset is None:
            return ideal
        return lo + offset

    def _step(self) -> None:
        n = self.window_size
        if self._prev_start is None:
            start = 0
        else:
            start = self._search(self._cursor.ideal_read_position)

        segment = self._input.read(start, start + n) * self._window
        self._output.add(self._cursor.write_position, segment, self._window)

        self._prev_start = start
        self._cursor.advance()
        next_lo = max(0, self._cursor.ideal_read_position - self.max_delta)
        self._input.discard(min(start + self.hop_synthesis, next_lo))

    def _feed(self, chunk: np.ndarray) -> np.ndarray:
        self._input.extend(chunk)
        while self._required_end() <= self._input.end:
            self._step()
        return self._output.emit(self._cursor.write_position)

    def flush(self) -> np.ndarray:
        """Place the remaining frames (zero-padded input) and reset.

        Frames are placed until the ideal read position passes the last
        input sample.
        """
        received = self._input.end
        if received > 0:
            while self._prev_start is None or self._cursor.ideal_read_position < received:
                need = self._required_end()
                if need > self._input.end:
                    self._input.extend(np.zeros(need - self._input.end))
                self._step()
        tail = self._output.emit_all()
        self.reset()
        return tail
