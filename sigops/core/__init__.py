"""Core abstractions: compute devices and spectral transform backends."""

from .device import Device, default_device, device
from .transform import (
    NumpyTransform,
    SpectralTransform,
    TorchTransform,
    default_transform,
    get_transform,
    resolve_transform,
    set_default_transform,
)

__all__ = [
    "Device",
    "device",
    "default_device",
    "SpectralTransform",
    "NumpyTransform",
    "TorchTransform",
    "get_transform",
    "default_transform",
    "set_default_transform",
    "resolve_transform",
]
