"""Window functions for block and frame processing.

Hann, Hamming and Blackman are generalized cosine windows and share one
implementation. Periodic forms are meant for STFT frames (analysis and
synthesis of the time-scale engines); symmetric forms for FIR design.
"""

from typing import Callable, Dict, Sequence

import numpy as np


def _cosine_sum(M: int, coeffs: Sequence[float], periodic: bool) -> np.ndarray:
    """w[n] = sum_k (-1)^k a_k cos(2πkn/D), D = M (periodic) or M-1."""
    if M <= 0:
        raise ValueError(f"Window length M must be positive, got {M}")
    if M == 1:
        return np.array([1.0], dtype=float)

    denom = M if periodic else M - 1
    phase = 2.0 * np.pi * np.arange(M, dtype=float) / denom
    w = np.zeros(M, dtype=float)
    for k, a in enumerate(coeffs):
        w += (-1) ** k * a * np.cos(k * phase)
    return w


def hann(M: int, periodic: bool = True) -> np.ndarray:
    """Generate Hann window.

    w[n] = 0.5 - 0.5 cos(2πn/D). The periodic form sums to a constant under
    50% and 75% overlap, which the overlap-add engines rely on.

    Args:
        M: Window length (must be positive integer).
        periodic: If True, D = M (FFT frames); otherwise D = M - 1.

    Returns:
        Window array of length M, dtype float64.

    Raises:
        ValueError: If M <= 0.
    """
    return _cosine_sum(M, (0.5, 0.5), periodic)


def hamming(M: int, periodic: bool = True) -> np.ndarray:
    """Generate Hamming window, w[n] = 0.54 - 0.46 cos(2πn/D)."""
    return _cosine_sum(M, (0.54, 0.46), periodic)


def blackman(M: int, periodic: bool = True) -> np.ndarray:
    """Generate Blackman window.

    w[n] = 0.42 - 0.5 cos(2πn/D) + 0.08 cos(4πn/D). Default window of the
    resampling low-pass filters (about -74 dB sidelobes).
    """
    return _cosine_sum(M, (0.42, 0.5, 0.08), periodic)


def rectangular(M: int, periodic: bool = True) -> np.ndarray:
    """Generate rectangular (boxcar) window; ``periodic`` is ignored."""
    if M <= 0:
        raise ValueError(f"Window length M must be positive, got {M}")
    return np.ones(M, dtype=float)


_WINDOWS: Dict[str, Callable[..., np.ndarray]] = {
    "hann": hann,
    "hamming": hamming,
    "blackman": blackman,
    "rectangular": rectangular,
}


def get_window(name: str, M: int, periodic: bool = True) -> np.ndarray:
    """Look up a window by name.

    Args:
        name: "hann", "hamming", "blackman" or "rectangular".
        M: Window length.
        periodic: Periodic (frame) or symmetric (filter design) form.

    Returns:
        Window array of length M.

    Raises:
        ValueError: If the window name is unknown.
    """
    if name not in _WINDOWS:
        raise ValueError(f"Unknown window: {name!r}. Supported: {sorted(_WINDOWS)}")
    return _WINDOWS[name](M, periodic=periodic)
