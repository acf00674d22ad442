"""sigops - spectral signal operations on NumPy with optional torch.fft acceleration."""

__version__ = "0.1.0"

# Core abstractions
from .core import (
    Device,
    NumpyTransform,
    SpectralTransform,
    TorchTransform,
    default_device,
    default_transform,
    device,
    get_transform,
    set_default_transform,
)

# Diagnostics
from .diagnostics import debug_context, is_debug_enabled, set_debug_enabled

# Building blocks
from .dsp import FirFilter, blackman, design_lowpass, hamming, hann, lowpass_filter

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Operations
from .operations import (
    BlockConvolver,
    ComplexConvolver,
    Convolver,
    FilteringMethod,
    PhaseVocoder,
    Resampler,
    TsmAlgorithm,
    Wsola,
    block_convolve,
    convolve,
    convolve_direct,
    cross_correlate,
    cross_correlate_direct,
    decimate,
    deconvolve,
    interpolate,
    resample,
    resample_up_down,
    time_stretch,
)

# Signals
from .signals import ComplexDiscreteSignal, DiscreteSignal

__all__ = [
    "__version__",
    # Core
    "Device",
    "device",
    "default_device",
    "SpectralTransform",
    "NumpyTransform",
    "TorchTransform",
    "get_transform",
    "default_transform",
    "set_default_transform",
    # Diagnostics
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
    # Signals
    "DiscreteSignal",
    "ComplexDiscreteSignal",
    # DSP
    "hann",
    "hamming",
    "blackman",
    "FirFilter",
    "design_lowpass",
    "lowpass_filter",
    # Operations
    "FilteringMethod",
    "TsmAlgorithm",
    "Convolver",
    "ComplexConvolver",
    "convolve",
    "cross_correlate",
    "deconvolve",
    "convolve_direct",
    "cross_correlate_direct",
    "BlockConvolver",
    "block_convolve",
    "Resampler",
    "interpolate",
    "decimate",
    "resample",
    "resample_up_down",
    "PhaseVocoder",
    "Wsola",
    "time_stretch",
]
