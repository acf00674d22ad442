"""Tests for operations.tsm (time-scale modification)."""

import numpy as np
import pytest

from sigops.operations import PhaseVocoder, TsmAlgorithm, Wsola, time_stretch
from sigops.operations.tsm import create_engine
from sigops.operations.tsm.base import OverlapAddBuffer, StreamBuffer
from sigops.operations.tsm.phase_vocoder import _peak_owners
from sigops.operations.tsm.wsola import SynthesisCursor, best_offset
from sigops.signals import DiscreteSignal

RATE = 16000
ALGORITHMS = [
    TsmAlgorithm.WSOLA,
    TsmAlgorithm.PHASE_VOCODER,
    TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING,
]


def _sine(freq: float = 440.0, n: int = RATE) -> DiscreteSignal:
    return DiscreteSignal(RATE, 0.5 * np.sin(2 * np.pi * freq * np.arange(n) / RATE))


def _dominant_frequency(samples: np.ndarray) -> float:
    n_fft = 1 << 17
    spectrum = np.abs(np.fft.rfft(samples * np.hanning(len(samples)), n=n_fft))
    return float(np.argmax(spectrum)) * RATE / n_fft


def _rms(samples: np.ndarray) -> float:
    return float(np.sqrt(np.mean(samples**2)))


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_identity_stretch_returns_copy(algorithm):
    x = _sine(n=1000)
    y = time_stretch(x, 1.0, algorithm)
    assert y is not x
    np.testing.assert_array_equal(y.samples, x.samples)

    y = time_stretch(x, 1.0 + 1e-12, algorithm)
    np.testing.assert_array_equal(y.samples, x.samples)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("stretch", [0.5, 0.75, 1.3, 2.0])
def test_output_length(algorithm, stretch):
    x = _sine(n=10007)
    y = time_stretch(x, stretch, algorithm)
    assert len(y) == int(round(10007 * stretch))
    assert y.sampling_rate == RATE
    assert np.all(np.isfinite(y.samples))


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("stretch", [0.75, 1.5])
def test_pitch_preserved(algorithm, stretch):
    """A stretched 440 Hz tone is still a 440 Hz tone of the same level."""
    x = _sine(440.0)
    y = time_stretch(x, stretch, algorithm)

    middle = y.samples[2048:-2048]
    assert abs(_dominant_frequency(middle) - 440.0) < 5.0
    assert _rms(middle) == pytest.approx(_rms(x.samples), rel=0.2)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_short_and_empty_signals(algorithm):
    y = time_stretch(_sine(n=100), 2.0, algorithm)
    assert len(y) == 200

    y = time_stretch(DiscreteSignal(RATE, []), 2.0, algorithm)
    assert len(y) == 0


@pytest.mark.parametrize("stretch", [0.0, -1.0, np.inf, np.nan])
def test_invalid_stretch(stretch):
    with pytest.raises(ValueError, match="Stretch factor"):
        time_stretch(_sine(n=100), stretch)


def test_synthesis_hop_must_be_shorter_than_window():
    with pytest.raises(ValueError, match="must be shorter than the window"):
        PhaseVocoder(2.0, window_size=512, hop_size=300)
    with pytest.raises(ValueError, match="must be shorter than the window"):
        time_stretch(_sine(n=5000), 1.5, TsmAlgorithm.WSOLA, window_size=256, hop_size=200)


def test_synthesis_hop_rounding_to_zero():
    with pytest.raises(ValueError, match="rounds to zero"):
        Wsola(0.4, window_size=64, hop_size=1)


def test_invalid_max_delta():
    with pytest.raises(ValueError, match="max_delta"):
        Wsola(1.5, max_delta=-1)


def test_default_parameters():
    pv = create_engine(2.0, TsmAlgorithm.PHASE_VOCODER)
    assert (pv.window_size, pv.hop_analysis, pv.hop_synthesis) == (1024, 100, 200)
    assert not pv.phase_locking

    locked = create_engine(0.5, TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING)
    assert (locked.hop_analysis, locked.hop_synthesis) == (256, 128)
    assert locked.phase_locking

    # Large stretch: the default hop shrinks to keep half-window synthesis hops.
    locked = create_engine(4.0, TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING)
    assert locked.hop_analysis == 128
    assert locked.hop_synthesis == 512

    wsola = create_engine(2.0)
    assert isinstance(wsola, Wsola)
    assert (wsola.hop_analysis, wsola.hop_synthesis, wsola.max_delta) == (256, 512, 128)


def test_explicit_parameters_used_as_given():
    engine = create_engine(1.5, TsmAlgorithm.PHASE_VOCODER, window_size=2048, hop_size=400)
    assert (engine.window_size, engine.hop_analysis, engine.hop_synthesis) == (2048, 400, 600)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_streaming_matches_whole_signal(algorithm, rng):
    x = DiscreteSignal(RATE, rng.standard_normal(6000))
    whole = time_stretch(x, 1.25, algorithm)

    engine = create_engine(1.25, algorithm)
    edges = [0, 100, 101, 2500, 4999, 6000]
    pieces = [engine.process(x.samples[a:b]) for a, b in zip(edges[:-1], edges[1:])]
    pieces.append(engine.flush())
    streamed = np.concatenate(pieces)[: len(whole)]

    np.testing.assert_allclose(streamed, whole.samples, atol=1e-12)


def test_process_only_emits_finalized_output(rng):
    engine = PhaseVocoder(2.0, window_size=256, hop_size=64)
    out = engine.process(rng.standard_normal(256 + 3 * 64))
    # Four frames placed; output before the fifth frame's position is final.
    assert len(out) == 4 * 128


def test_flush_resets_engine(rng):
    x = rng.standard_normal(3000)
    engine = Wsola(1.5, window_size=512)
    first = np.concatenate([engine.process(x), engine.flush()])
    second = np.concatenate([engine.process(x), engine.flush()])
    np.testing.assert_array_equal(first, second)


def test_phase_vocoder_accepts_torch_transform():
    x = _sine(n=4000)
    y_np = time_stretch(x, 1.5, TsmAlgorithm.PHASE_VOCODER, transform="numpy")
    y_torch = time_stretch(x, 1.5, TsmAlgorithm.PHASE_VOCODER, transform="torch_cpu")
    np.testing.assert_allclose(y_torch.samples, y_np.samples, atol=1e-8)


def test_peak_owners():
    magnitude = np.array([0.0, 1.0, 5.0, 1.0, 0.0, 0.0, 2.0, 8.0, 2.0, 0.0])
    owners = _peak_owners(magnitude)
    np.testing.assert_array_equal(owners, [2, 2, 2, 2, 7, 7, 7, 7, 7, 7])

    assert _peak_owners(np.zeros(8)) is None


def test_best_offset():
    t = np.arange(400)
    region = np.sin(2 * np.pi * t / 50)
    template = region[37:137]
    assert best_offset(region[:250], template) % 50 == 37

    assert best_offset(np.zeros(200), template) is None
    assert best_offset(region, np.zeros(20)) is None


def test_synthesis_cursor():
    cursor = SynthesisCursor(stretch=2.0, hop=512)
    assert cursor.write_position == 0
    cursor.advance()
    cursor.advance()
    assert cursor.write_position == 1024
    assert cursor.ideal_read_position == 512


def test_stream_buffer_skips_discarded_samples():
    buf = StreamBuffer()
    buf.extend(np.arange(5.0))
    buf.discard(8)
    buf.extend(np.arange(5.0, 12.0))
    assert (buf.start, buf.end) == (8, 12)
    np.testing.assert_array_equal(buf.read(8, 12), [8.0, 9.0, 10.0, 11.0])
    with pytest.raises(IndexError):
        buf.read(4, 10)


def test_overlap_add_buffer_normalizes():
    ola = OverlapAddBuffer(weight_floor=0.1)
    ola.add(0, np.full(4, 2.0), np.full(4, 2.0))
    ola.add(2, np.full(4, 3.0), np.full(4, 3.0))
    np.testing.assert_allclose(ola.emit(2), [1.0, 1.0])
    np.testing.assert_allclose(ola.emit_all(), [1.0, 1.0, 1.0, 1.0])
    assert ola.offset == 6
