"""Signal containers.

A signal is an ordered array of float64 samples tagged with an integer
sampling rate (Hz). Operations treat signals as immutable inputs and always
return new signals; containers copy their sample buffers on construction so
callers cannot alias them by accident.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np


def _check_rate(sampling_rate) -> int:
    if isinstance(sampling_rate, bool) or int(sampling_rate) != sampling_rate:
        raise ValueError(f"Sampling rate must be an integer, got {sampling_rate!r}")
    if sampling_rate <= 0:
        raise ValueError(f"Sampling rate must be positive, got {sampling_rate}")
    return int(sampling_rate)


def _as_samples(values, name: str) -> np.ndarray:
    arr = np.array(values, dtype=float, copy=True)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim > 1:
        raise ValueError(f"{name} must be 1D, got {arr.ndim}D array")
    return arr


@dataclass(eq=False)
class DiscreteSignal:
    """Real-valued discrete-time signal.

    Attributes:
        sampling_rate: Sampling rate in Hz (positive integer).
        samples: 1D float64 sample array (may be empty).
    """

    sampling_rate: int
    samples: np.ndarray

    def __post_init__(self) -> None:
        self.sampling_rate = _check_rate(self.sampling_rate)
        self.samples = _as_samples(self.samples, "samples")

    def __len__(self) -> int:
        return len(self.samples)

    def __getitem__(self, index: Union[int, slice]) -> Union[float, "DiscreteSignal"]:
        if isinstance(index, slice):
            return DiscreteSignal(self.sampling_rate, self.samples[index])
        return float(self.samples[index])

    @property
    def duration(self) -> float:
        """Signal duration in seconds."""
        return len(self.samples) / self.sampling_rate

    def copy(self) -> "DiscreteSignal":
        """Return an independent copy."""
        return DiscreteSignal(self.sampling_rate, self.samples)


@dataclass(eq=False)
class ComplexDiscreteSignal:
    """Complex-valued discrete-time signal stored as real and imaginary parts.

    Attributes:
        sampling_rate: Sampling rate in Hz (positive integer).
        real: Real parts, 1D float64.
        imag: Imaginary parts, same length as ``real``. Defaults to zeros.
    """

    sampling_rate: int
    real: np.ndarray
    imag: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        self.sampling_rate = _check_rate(self.sampling_rate)
        self.real = _as_samples(self.real, "real")
        if self.imag is None:
            self.imag = np.zeros_like(self.real)
        else:
            self.imag = _as_samples(self.imag, "imag")
        if len(self.real) != len(self.imag):
            raise ValueError(
                f"Real and imaginary parts must have equal length, "
                f"got {len(self.real)} and {len(self.imag)}"
            )

    @classmethod
    def from_complex(cls, sampling_rate: int, values) -> "ComplexDiscreteSignal":
        """Build a signal from a complex array."""
        z = np.asarray(values, dtype=complex)
        return cls(sampling_rate, z.real, z.imag)

    @classmethod
    def from_real(cls, signal: DiscreteSignal) -> "ComplexDiscreteSignal":
        """Promote a real signal (zero imaginary part)."""
        return cls(signal.sampling_rate, signal.samples)

    def __len__(self) -> int:
        return len(self.real)

    def __getitem__(self, index: Union[int, slice]) -> Union[complex, "ComplexDiscreteSignal"]:
        if isinstance(index, slice):
            return ComplexDiscreteSignal(
                self.sampling_rate, self.real[index], self.imag[index]
            )
        return complex(self.real[index], self.imag[index])

    @property
    def magnitude(self) -> np.ndarray:
        """Sample-wise magnitude."""
        return np.hypot(self.real, self.imag)

    def to_complex(self) -> np.ndarray:
        """Return samples as a complex128 array."""
        return self.real + 1j * self.imag

    def copy(self) -> "ComplexDiscreteSignal":
        """Return an independent copy."""
        return ComplexDiscreteSignal(self.sampling_rate, self.real, self.imag)
