"""Tests for spectral transform backends and devices."""

import numpy as np
import pytest
import torch

from sigops.core import (
    Device,
    NumpyTransform,
    TorchTransform,
    default_transform,
    device,
    get_transform,
    set_default_transform,
)
from sigops.core.transform import resolve_transform
from sigops.operations import convolve
from sigops.signals import DiscreteSignal


def test_device_cpu():
    dev = device("fft_cpu")
    assert isinstance(dev, Device)
    assert dev.as_torch_device() == torch.device("cpu")
    assert dev.complex_dtype == torch.complex128


def test_device_unknown_name():
    with pytest.raises(ValueError, match="Unsupported device name"):
        device("tpu")


@pytest.mark.skipif(torch.cuda.is_available(), reason="CUDA present")
def test_cuda_transform_requires_cuda():
    with pytest.raises(RuntimeError, match="CUDA"):
        get_transform("torch_cuda")


def test_get_transform_names():
    assert isinstance(get_transform("numpy"), NumpyTransform)
    torch_cpu = get_transform("torch_cpu")
    assert isinstance(torch_cpu, TorchTransform)
    assert torch_cpu.name == "torch_cpu"


def test_get_transform_unknown():
    with pytest.raises(ValueError, match="Unsupported transform backend"):
        get_transform("fftw")


@pytest.mark.parametrize("name", ["numpy", "torch_cpu"])
def test_forward_inverse_roundtrip(name, rng):
    transform = get_transform(name)
    x = rng.standard_normal(37)
    X = transform.forward(x, n=64)
    assert X.shape == (64,)
    np.testing.assert_allclose(X, np.fft.fft(x, n=64), atol=1e-10)
    np.testing.assert_allclose(transform.inverse(X)[:37].real, x, atol=1e-12)


def test_torch_and_numpy_convolution_agree(rng):
    a = DiscreteSignal(16000, rng.standard_normal(300))
    b = DiscreteSignal(16000, rng.standard_normal(45))
    y_np = convolve(a, b, transform="numpy")
    y_torch = convolve(a, b, transform=TorchTransform())
    np.testing.assert_allclose(y_torch.samples, y_np.samples, atol=1e-10)


def test_set_default_transform():
    set_default_transform("torch_cpu")
    assert default_transform().name == "torch_cpu"
    assert resolve_transform(None) is default_transform()

    set_default_transform(None)
    assert default_transform() is not None


def test_default_transform_from_environment(monkeypatch):
    monkeypatch.setenv("SIGOPS_FFT_BACKEND", "torch_cpu")
    set_default_transform(None)
    assert default_transform().name == "torch_cpu"

    monkeypatch.setenv("SIGOPS_FFT_BACKEND", "numpy")
    set_default_transform(None)
    assert default_transform().name == "numpy"


def test_resolve_transform_passes_instances_through():
    transform = NumpyTransform()
    assert resolve_transform(transform) is transform
    assert isinstance(resolve_transform("numpy"), NumpyTransform)
