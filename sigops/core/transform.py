"""Spectral transform backends.

Every spectral operation in sigops goes through a :class:`SpectralTransform`:
a forward/inverse complex DFT of a requested length. The operations only rely
on linearity and ``inverse(forward(x)) == x``, so any correct FFT will do.

Two backends ship with the package:

- ``"numpy"``: ``numpy.fft`` (the default).
- ``"torch_cpu"`` / ``"torch_cuda"``: ``torch.fft`` on a :class:`Device`.

The process-wide default is read from the ``SIGOPS_FFT_BACKEND`` environment
variable on first use and can be changed with :func:`set_default_transform`.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Optional, Union

import numpy as np
import torch

from ..logging import get_logger
from .device import Device, default_device, device

logger = get_logger(__name__)

_BACKEND_ENV_VAR = "SIGOPS_FFT_BACKEND"

_default: Optional["SpectralTransform"] = None


class SpectralTransform(ABC):
    """Forward/inverse complex transform of a fixed length.

    ``n`` zero-pads (or truncates) the input to the transform size, the same
    convention as ``numpy.fft.fft``. Inputs and outputs are NumPy arrays
    whatever the backend computes on.
    """

    name: str = "abstract"

    @abstractmethod
    def forward(self, x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        """Forward DFT of ``x`` (complex128 result of length ``n``)."""

    @abstractmethod
    def inverse(self, X: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        """Inverse DFT of ``X`` including the 1/n scaling."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class NumpyTransform(SpectralTransform):
    """Transform backed by ``numpy.fft``."""

    name = "numpy"

    def forward(self, x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        return np.fft.fft(np.asarray(x, dtype=complex), n=n)

    def inverse(self, X: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        return np.fft.ifft(np.asarray(X, dtype=complex), n=n)


class TorchTransform(SpectralTransform):
    """Transform backed by ``torch.fft`` on a given device.

    Buffers are moved to the device for each call and the result is copied
    back, so the gain comes from large transforms on an accelerator.
    """

    def __init__(self, dev: Optional[Device] = None) -> None:
        """Initialize the transform.

        Args:
            dev: Device to compute on (default: CPU).
        """
        self.device = dev if dev is not None else default_device()
        self.name = f"torch_{self.device.as_torch_device().type}"

    def _to_tensor(self, x: np.ndarray) -> torch.Tensor:
        return torch.as_tensor(
            np.asarray(x, dtype=complex),
            dtype=self.device.complex_dtype,
            device=self.device.as_torch_device(),
        )

    def forward(self, x: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        out = torch.fft.fft(self._to_tensor(x), n=n)
        return out.cpu().numpy()

    def inverse(self, X: np.ndarray, n: Optional[int] = None) -> np.ndarray:
        out = torch.fft.ifft(self._to_tensor(X), n=n)
        return out.cpu().numpy()


def get_transform(name: str) -> SpectralTransform:
    """Create a transform backend by name.

    Args:
        name: One of ``"numpy"``, ``"torch_cpu"``, ``"torch_cuda"``.

    Returns:
        A new transform instance.

    Raises:
        ValueError: If the name is not supported.
        RuntimeError: If ``"torch_cuda"`` is requested without CUDA.
    """
    if name == "numpy":
        return NumpyTransform()
    elif name == "torch_cpu":
        return TorchTransform(device("fft_cpu"))
    elif name == "torch_cuda":
        return TorchTransform(device("fft_cuda"))
    else:
        supported = ["numpy", "torch_cpu", "torch_cuda"]
        raise ValueError(
            f"Unsupported transform backend: {name!r}. Supported backends: {supported}"
        )


def default_transform() -> SpectralTransform:
    """Return the process-wide default transform.

    The first call honours ``SIGOPS_FFT_BACKEND`` (default ``"numpy"``).
    """
    global _default
    if _default is None:
        name = os.getenv(_BACKEND_ENV_VAR, "numpy").strip().lower() or "numpy"
        _default = get_transform(name)
        logger.debug("Default spectral transform: %s", _default.name)
    return _default


def set_default_transform(transform: Union[str, SpectralTransform, None]) -> None:
    """Replace the process-wide default transform.

    Args:
        transform: Backend name, a transform instance, or None to re-read
            ``SIGOPS_FFT_BACKEND`` on next use.
    """
    global _default
    if isinstance(transform, str):
        transform = get_transform(transform)
    _default = transform


def resolve_transform(
    transform: Union[str, SpectralTransform, None]
) -> SpectralTransform:
    """Turn an optional backend argument into a transform instance."""
    if transform is None:
        return default_transform()
    if isinstance(transform, str):
        return get_transform(transform)
    return transform
