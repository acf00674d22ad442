"""Time-scale modification: change duration without changing pitch."""

from typing import Optional, Union

from ...core.transform import SpectralTransform
from ...dsp.utils import check_stretch
from ...logging import get_logger
from ...signals import DiscreteSignal
from ..core import TsmAlgorithm
from .base import TsmEngine
from .phase_vocoder import PhaseVocoder
from .wsola import SynthesisCursor, Wsola

logger = get_logger(__name__)

DEFAULT_WINDOW_SIZE = 1024

# Stretch factors this close to 1 leave the signal untouched.
_IDENTITY_TOLERANCE = 1e-10

_DEFAULT_HOPS = {
    TsmAlgorithm.PHASE_VOCODER: 100,
    TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING: 256,
}


def create_engine(
    stretch: float,
    algorithm: TsmAlgorithm = TsmAlgorithm.WSOLA,
    window_size: Optional[int] = None,
    hop_size: Optional[int] = None,
    transform: Union[str, SpectralTransform, None] = None,
) -> TsmEngine:
    """Build a TSM engine with the default parameters of ``algorithm``.

    Omitted parameters take these defaults (window 1024 throughout):

    - ``PHASE_VOCODER``: analysis hop 100.
    - ``PHASE_VOCODER_PHASE_LOCKING``: analysis hop 256.
    - ``WSOLA``: analysis hop ``round(window / 2 / stretch)``.

    A default phase-vocoder hop is reduced so the synthesis hop does not
    exceed half a window.

    Raises:
        ValueError: If the algorithm is unknown or the parameters are invalid.
    """
    stretch = check_stretch(stretch)
    if window_size is None:
        window_size = DEFAULT_WINDOW_SIZE

    if algorithm == TsmAlgorithm.WSOLA:
        return Wsola(stretch, window_size, hop_size)

    if algorithm not in _DEFAULT_HOPS:
        raise ValueError(f"Unsupported TSM algorithm: {algorithm}")
    if hop_size is None:
        max_hop = max(1, int(window_size / 2 / stretch))
        hop_size = min(_DEFAULT_HOPS[algorithm], max_hop)
    return PhaseVocoder(
        stretch,
        window_size,
        hop_size,
        phase_locking=algorithm == TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING,
        transform=transform,
    )


def time_stretch(
    signal: DiscreteSignal,
    stretch: float,
    algorithm: TsmAlgorithm = TsmAlgorithm.WSOLA,
    window_size: Optional[int] = None,
    hop_size: Optional[int] = None,
    transform: Union[str, SpectralTransform, None] = None,
) -> DiscreteSignal:
    """Change the duration of a signal by ``stretch`` keeping its pitch.

    Args:
        signal: Input signal.
        stretch: Duration ratio output/input (> 0); 2.0 doubles the length.
        algorithm: TSM algorithm (default: WSOLA).
        window_size: Frame length (default 1024).
        hop_size: Analysis hop (default depends on the algorithm, see
            :func:`create_engine`).
        transform: Spectral transform backend for the phase vocoder.

    Returns:
        Signal of exactly ``round(len(signal) * stretch)`` samples at the
        same sampling rate. A stretch within 1e-10 of 1 returns a copy.

    Raises:
        ValueError: If the stretch is not positive and finite, or the
            window/hop combination is invalid.

    Example:
        >>> slow = time_stretch(speech, 1.5, TsmAlgorithm.PHASE_VOCODER_PHASE_LOCKING)
    """
    stretch = check_stretch(stretch)
    if abs(stretch - 1.0) < _IDENTITY_TOLERANCE:
        logger.debug("Stretch %.12f is identity: returning a copy", stretch)
        return signal.copy()

    engine = create_engine(stretch, algorithm, window_size, hop_size, transform)
    return engine.apply_to(signal)


__all__ = [
    "TsmEngine",
    "PhaseVocoder",
    "Wsola",
    "SynthesisCursor",
    "create_engine",
    "time_stretch",
]
