"""Device abstraction for torch-backed spectral transforms."""

from __future__ import annotations

import torch


class Device:
    """
    Represents a compute device for spectral transforms: an underlying PyTorch
    device plus the complex dtype used for transform buffers.

    Attributes should not be modified after construction.
    """

    def __init__(
        self,
        name: str,
        torch_device: torch.device,
        complex_dtype: torch.dtype = torch.complex128,
    ) -> None:
        """
        Initialize a Device.

        Args:
            name: Logical device name (e.g., "fft_cpu", "fft_cuda").
            torch_device: Underlying PyTorch device.
            complex_dtype: Complex dtype for spectra.
        """
        self.name = name
        self.torch_device = torch_device
        self.complex_dtype = complex_dtype

    def __repr__(self) -> str:
        """Return a string representation of the device."""
        return (
            f"Device(name={self.name!r}, torch_device={self.torch_device}, "
            f"complex_dtype={self.complex_dtype})"
        )

    def as_torch_device(self) -> torch.device:
        """
        Return the underlying PyTorch device.

        Returns:
            The PyTorch device object.
        """
        return self.torch_device


def device(name: str) -> Device:
    """
    Create a Device instance from a device name.

    Supported device names:
        - "fft_cpu": CPU transforms
        - "fft_cuda": CUDA transforms (only if CUDA is available)

    Both use double precision so torch results match the NumPy backend.

    Args:
        name: Device name string.

    Returns:
        A Device instance.

    Raises:
        RuntimeError: If "fft_cuda" is requested but CUDA is not available.
        ValueError: If the device name is not supported.
    """
    if name == "fft_cpu":
        return Device(name="fft_cpu", torch_device=torch.device("cpu"))
    elif name == "fft_cuda":
        if not torch.cuda.is_available():
            raise RuntimeError(
                "CUDA device requested but torch.cuda.is_available() is False"
            )
        return Device(name="fft_cuda", torch_device=torch.device("cuda"))
    else:
        supported = ["fft_cpu", "fft_cuda"]
        raise ValueError(
            f"Unsupported device name: {name!r}. Supported devices: {supported}"
        )


def default_device() -> Device:
    """
    Return the default device (CPU transforms).

    Returns:
        A Device instance for "fft_cpu".
    """
    return device("fft_cpu")
