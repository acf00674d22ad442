"""Utility functions for signal processing.

Input validation and small numerical helpers shared by the operations.
"""

import math

import numpy as np


def check_1d_array(x, allow_empty: bool = True) -> np.ndarray:
    """Validate and cast input to 1D float64 array.

    Args:
        x: Input array-like object.
        allow_empty: If False, a zero-length input is rejected.

    Returns:
        1D float64 numpy array.

    Raises:
        ValueError: If input is not 1D, is empty while ``allow_empty`` is
            False, contains NaN, or contains Inf.
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim > 1:
        raise ValueError(f"Expected 1D array, got {arr.ndim}D array")
    if not allow_empty and arr.size == 0:
        raise ValueError("Input must contain at least one sample")
    if np.any(np.isnan(arr)):
        raise ValueError("Input contains NaN values")
    if np.any(np.isinf(arr)):
        raise ValueError("Input contains Inf values")
    return arr


def check_positive_int(value, name: str) -> int:
    """Validate a strictly positive integer parameter.

    Args:
        value: Candidate value (integral floats such as ``4.0`` are accepted).
        name: Parameter name used in the error message.

    Returns:
        The value as ``int``.

    Raises:
        ValueError: If the value is not a positive integer.
    """
    if isinstance(value, bool) or not float(value).is_integer() or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def check_stretch(stretch: float) -> float:
    """Validate a time-stretch factor (finite and > 0)."""
    stretch = float(stretch)
    if not math.isfinite(stretch) or stretch <= 0:
        raise ValueError(f"Stretch factor must be positive and finite, got {stretch}")
    return stretch


def next_pow2(n: int) -> int:
    """Return the next power-of-two >= n.

    Args:
        n: Positive integer.

    Returns:
        Smallest power-of-two >= n. Returns 1 if n <= 0.
    """
    if n <= 0:
        return 1
    if n & (n - 1) == 0:
        return n
    return 1 << (n - 1).bit_length()


def princarg(phase: np.ndarray) -> np.ndarray:
    """Wrap phase values to the principal interval [-pi, pi)."""
    return np.mod(phase + np.pi, 2.0 * np.pi) - np.pi
