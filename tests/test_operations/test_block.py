"""Tests for operations.block module."""

import numpy as np
import pytest

from sigops.core import NumpyTransform
from sigops.operations import (
    BlockConvolver,
    FilteringMethod,
    block_convolve,
    convolve,
)
from sigops.signals import DiscreteSignal


class CountingTransform(NumpyTransform):
    """NumPy transform that counts forward transforms."""

    def __init__(self):
        self.forward_calls = 0

    def forward(self, x, n=None):
        self.forward_calls += 1
        return super().forward(x, n)


@pytest.mark.parametrize(
    "method", [FilteringMethod.OVERLAP_ADD, FilteringMethod.OVERLAP_SAVE]
)
def test_block_convolve_matches_convolution(method, rng):
    signal = DiscreteSignal(16000, rng.standard_normal(5000))
    kernel = DiscreteSignal(16000, rng.standard_normal(101))

    y = block_convolve(signal, kernel, fft_size=512, method=method)
    expected = convolve(signal, kernel)
    assert len(y) == 5000 + 101 - 1
    np.testing.assert_allclose(y.samples, expected.samples, atol=1e-9)


def test_ola_and_ols_agree(rng):
    x = rng.standard_normal(2048)
    h = rng.standard_normal(64)
    signal = DiscreteSignal(8000, x)
    ola = block_convolve(signal, h, 256, FilteringMethod.OVERLAP_ADD)
    ols = block_convolve(signal, h, 256, FilteringMethod.OVERLAP_SAVE)
    np.testing.assert_allclose(ola.samples, ols.samples, atol=1e-10)


@pytest.mark.parametrize(
    "method", [FilteringMethod.OVERLAP_ADD, FilteringMethod.OVERLAP_SAVE]
)
def test_streaming_output_independent_of_chunking(method, rng):
    x = rng.standard_normal(3000)
    h = rng.standard_normal(50)

    conv = BlockConvolver(h, 256, method)
    hop_chunks = [conv.process(x[i : i + conv.hop_size]) for i in range(0, 3000, conv.hop_size)]
    by_hop = np.concatenate(hop_chunks + [conv.flush()])

    conv = BlockConvolver(h, 256, method)
    edges = [0, 1, 17, 500, 501, 1999, 3000]
    odd_chunks = [conv.process(x[a:b]) for a, b in zip(edges[:-1], edges[1:])]
    by_odd = np.concatenate(odd_chunks + [conv.flush()])

    np.testing.assert_allclose(by_hop, by_odd, atol=1e-12)
    np.testing.assert_allclose(by_hop, np.convolve(x, h), atol=1e-9)


def test_process_emits_whole_hops(rng):
    conv = BlockConvolver(rng.standard_normal(33), 128)
    assert conv.hop_size == 96
    assert len(conv.process(rng.standard_normal(95))) == 0
    assert len(conv.process(rng.standard_normal(1))) == 96
    assert len(conv.process(rng.standard_normal(200))) == 192


def test_flush_resets_state(rng):
    h = rng.standard_normal(10)
    x = rng.standard_normal(300)
    conv = BlockConvolver(h, 64)
    first = np.concatenate([conv.process(x), conv.flush()])
    second = np.concatenate([conv.process(x), conv.flush()])
    np.testing.assert_allclose(first, second)
    assert len(first) == 309


def test_kernel_spectrum_computed_once(rng):
    transform = CountingTransform()
    conv = BlockConvolver(rng.standard_normal(20), 64, transform=transform)
    assert transform.forward_calls == 1

    out = conv.process(rng.standard_normal(45 * 4))
    # One transform per block, none for the kernel.
    assert len(out) == 45 * 4
    assert transform.forward_calls == 1 + 4


def test_auto_resolves_to_overlap_save(rng):
    conv = BlockConvolver(rng.standard_normal(5), 16, FilteringMethod.AUTO)
    assert conv.method == FilteringMethod.OVERLAP_SAVE


def test_direct_form_rejected():
    with pytest.raises(ValueError, match="does not support"):
        BlockConvolver(np.ones(4), 16, FilteringMethod.DIRECT_FORM)


def test_kernel_longer_than_fft_size():
    signal = DiscreteSignal(8000, np.ones(1000))
    with pytest.raises(ValueError, match="must not exceed the FFT size"):
        block_convolve(signal, np.ones(300), fft_size=256)
    with pytest.raises(ValueError, match="must not exceed the FFT size"):
        BlockConvolver(np.ones(300), 256)


def test_short_signal_passthrough():
    signal = DiscreteSignal(8000, np.arange(100.0))
    y = block_convolve(signal, np.ones(8), fft_size=256)
    assert y is not signal
    np.testing.assert_array_equal(y.samples, signal.samples)


def test_kernel_as_long_as_block(rng):
    """A kernel of exactly fft_size samples gives a hop of one sample."""
    h = rng.standard_normal(16)
    x = rng.standard_normal(40)
    y = block_convolve(DiscreteSignal(8000, x), h, fft_size=16)
    np.testing.assert_allclose(y.samples, np.convolve(x, h), atol=1e-10)
