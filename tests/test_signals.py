"""Tests for signal containers."""

import numpy as np
import pytest

from sigops.signals import ComplexDiscreteSignal, DiscreteSignal


def test_discrete_signal_basics():
    s = DiscreteSignal(8000, [1, 2, 3, 4])
    assert len(s) == 4
    assert s.samples.dtype == np.float64
    assert s.duration == pytest.approx(4 / 8000)
    assert s[1] == 2.0


def test_discrete_signal_copies_input():
    samples = np.array([1.0, 2.0, 3.0])
    s = DiscreteSignal(8000, samples)
    samples[0] = 100.0
    assert s.samples[0] == 1.0

    c = s.copy()
    c.samples[1] = -1.0
    assert s.samples[1] == 2.0


def test_discrete_signal_slice():
    s = DiscreteSignal(100, np.arange(10.0))
    part = s[2:5]
    assert isinstance(part, DiscreteSignal)
    assert part.sampling_rate == 100
    np.testing.assert_array_equal(part.samples, [2.0, 3.0, 4.0])


def test_empty_signal_allowed():
    assert len(DiscreteSignal(8000, [])) == 0


@pytest.mark.parametrize("rate", [0, -8000, 44.1])
def test_invalid_sampling_rate(rate):
    with pytest.raises(ValueError, match="Sampling rate"):
        DiscreteSignal(rate, [1.0])


def test_discrete_signal_rejects_2d():
    with pytest.raises(ValueError, match="1D"):
        DiscreteSignal(8000, np.zeros((2, 2)))


def test_complex_signal_defaults_imag_to_zero():
    s = ComplexDiscreteSignal(8000, [1.0, 2.0])
    np.testing.assert_array_equal(s.imag, [0.0, 0.0])


def test_complex_signal_from_complex():
    z = np.array([1 + 2j, -3j, 4.0])
    s = ComplexDiscreteSignal.from_complex(8000, z)
    np.testing.assert_array_equal(s.real, [1.0, 0.0, 4.0])
    np.testing.assert_array_equal(s.imag, [2.0, -3.0, 0.0])
    np.testing.assert_array_equal(s.to_complex(), z)
    np.testing.assert_allclose(s.magnitude, np.abs(z))
    assert s[1] == -3j


def test_complex_signal_length_mismatch():
    with pytest.raises(ValueError, match="equal length"):
        ComplexDiscreteSignal(8000, [1.0, 2.0], [1.0])


def test_complex_signal_from_real():
    s = ComplexDiscreteSignal.from_real(DiscreteSignal(22050, [1.0, -1.0]))
    assert s.sampling_rate == 22050
    np.testing.assert_array_equal(s.to_complex(), [1.0, -1.0])
