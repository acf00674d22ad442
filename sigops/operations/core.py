"""Closed enumerations selecting algorithm variants."""

from enum import Enum


class FilteringMethod(Enum):
    """How a kernel is applied to a signal.

    ``AUTO`` lets the engine decide: block convolution resolves it to
    overlap-save, :class:`~sigops.dsp.fir.FirFilter` to direct form for short
    kernels and overlap-save for long ones.
    """

    DIRECT_FORM = "direct_form"
    OVERLAP_ADD = "overlap_add"
    OVERLAP_SAVE = "overlap_save"
    AUTO = "auto"


class TsmAlgorithm(Enum):
    """Time-scale modification algorithm."""

    WSOLA = "wsola"
    PHASE_VOCODER = "phase_vocoder"
    PHASE_VOCODER_PHASE_LOCKING = "phase_vocoder_phase_locking"


__all__ = ["FilteringMethod", "TsmAlgorithm"]
