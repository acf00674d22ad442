"""Block convolution: streaming FIR filtering with overlap-add / overlap-save.

A :class:`BlockConvolver` filters an arbitrarily long (or unbounded) signal
with a fixed kernel using fixed-size transforms of ``fft_size`` samples. Each
hop of ``hop_size = fft_size - len(kernel) + 1`` input samples yields exactly
``hop_size`` output samples, so memory stays bounded by the block size no
matter how long the stream runs.

Overlap-add (OLA) keeps the pending output tail of the previous block;
overlap-save (OLS) keeps the trailing input history. Both hold
``len(kernel) - 1`` samples of state and produce identical output.

Example:
    >>> conv = BlockConvolver(kernel, fft_size=1024)
    >>> out = [conv.process(chunk) for chunk in chunks]  # chunks of conv.hop_size
    >>> out.append(conv.flush())
"""

from typing import Union

import numpy as np

from ..core.transform import SpectralTransform, resolve_transform
from ..dsp.utils import check_1d_array, check_positive_int
from ..logging import get_logger
from ..signals import DiscreteSignal
from .core import FilteringMethod

logger = get_logger(__name__)

KernelLike = Union[DiscreteSignal, np.ndarray]


def _kernel_samples(kernel: KernelLike) -> np.ndarray:
    if isinstance(kernel, DiscreteSignal):
        kernel = kernel.samples
    return check_1d_array(kernel, allow_empty=False)


def _check_kernel_fits(kernel: np.ndarray, fft_size: int) -> None:
    if len(kernel) > fft_size:
        raise ValueError(
            f"Kernel length ({len(kernel)}) must not exceed the FFT size ({fft_size})"
        )


class BlockConvolver:
    """Stateful OLA/OLS block convolver.

    The kernel spectrum is computed once here and reused for every block.
    Calls to :meth:`process` must come from a single owner in stream order.

    Args:
        kernel: Filter kernel (array or signal), ``len(kernel) <= fft_size``.
        fft_size: Transform (block) size.
        method: ``OVERLAP_ADD``, ``OVERLAP_SAVE`` or ``AUTO`` (overlap-save).
            Fixed for the lifetime of the instance since the two algorithms
            keep different state.
        transform: Spectral transform backend (instance or name).

    Raises:
        ValueError: If the kernel is empty or longer than ``fft_size``, if
            ``fft_size`` is not a positive integer, or if ``method`` is
            ``DIRECT_FORM``.
    """

    def __init__(
        self,
        kernel: KernelLike,
        fft_size: int,
        method: FilteringMethod = FilteringMethod.OVERLAP_ADD,
        transform: Union[str, SpectralTransform, None] = None,
    ) -> None:
        kernel = _kernel_samples(kernel)
        fft_size = check_positive_int(fft_size, "fft_size")
        _check_kernel_fits(kernel, fft_size)

        if method == FilteringMethod.AUTO:
            method = FilteringMethod.OVERLAP_SAVE
        if method not in (FilteringMethod.OVERLAP_ADD, FilteringMethod.OVERLAP_SAVE):
            raise ValueError(f"Block convolution does not support method {method}")

        self.kernel = kernel
        self.fft_size = fft_size
        self.method = method
        self.transform = resolve_transform(transform)
        self._overlap = len(kernel) - 1
        self._kernel_spectrum = self.transform.forward(kernel, n=fft_size)

        logger.debug(
            "BlockConvolver: kernel=%d fft_size=%d hop=%d method=%s",
            len(kernel),
            fft_size,
            self.hop_size,
            method.value,
        )
        self.reset()

    @property
    def hop_size(self) -> int:
        """Input samples consumed (and output samples produced) per block."""
        return self.fft_size - len(self.kernel) + 1

    def reset(self) -> None:
        """Drop overlap state and pending input."""
        # OLA: output tail of the previous block; OLS: input history.
        self._state = np.zeros(self._overlap, dtype=float)
        self._pending = np.zeros(0, dtype=float)

    def _filter_block(self, block: np.ndarray) -> np.ndarray:
        spectrum = self.transform.forward(block, n=self.fft_size)
        return self.transform.inverse(spectrum * self._kernel_spectrum).real

    def _overlap_add(self, segment: np.ndarray) -> np.ndarray:
        y = self._filter_block(segment)
        if self._overlap:
            y[: self._overlap] += self._state
            self._state = y[self.hop_size :].copy()
        return y[: self.hop_size]

    def _overlap_save(self, segment: np.ndarray) -> np.ndarray:
        block = np.concatenate([self._state, segment])
        y = self._filter_block(block)
        self._state = block[self.hop_size :].copy()
        # The first len(kernel) - 1 samples are wrapped around (circular part).
        return y[self._overlap :]

    def process(self, chunk) -> np.ndarray:
        """Filter the next chunk of the stream.

        Every complete hop of buffered input produces ``hop_size`` output
        samples. Chunks that are multiples of :attr:`hop_size` are the
        intended usage; a trailing partial hop is kept pending until more
        input (or :meth:`flush`) arrives.

        Args:
            chunk: Next input samples.

        Returns:
            Output samples for all completed hops (possibly empty).
        """
        chunk = check_1d_array(chunk)
        buf = np.concatenate([self._pending, chunk])
        hop = self.hop_size
        n_hops = len(buf) // hop

        if self.method == FilteringMethod.OVERLAP_ADD:
            step = self._overlap_add
        else:
            step = self._overlap_save

        output = np.empty(n_hops * hop, dtype=float)
        for i in range(n_hops):
            output[i * hop : (i + 1) * hop] = step(buf[i * hop : (i + 1) * hop])

        self._pending = buf[n_hops * hop :].copy()
        return output

    def flush(self) -> np.ndarray:
        """Emit the remaining output and reset.

        Drains pending input and the ``len(kernel) - 1`` sample convolution
        tail by feeding zeros, so the concatenation of all outputs has length
        ``n + len(kernel) - 1``.
        """
        remaining = len(self._pending) + self._overlap
        hop = self.hop_size
        padded_len = -(-remaining // hop) * hop
        zeros = np.zeros(padded_len - len(self._pending), dtype=float)
        tail = self.process(zeros)[:remaining]
        self.reset()
        return tail


def block_convolve(
    signal: DiscreteSignal,
    kernel: KernelLike,
    fft_size: int,
    method: FilteringMethod = FilteringMethod.OVERLAP_ADD,
    transform: Union[str, SpectralTransform, None] = None,
) -> DiscreteSignal:
    """Block convolution of a whole signal (OLA or OLS).

    Args:
        signal: Input signal.
        kernel: Filter kernel, no longer than ``fft_size``.
        fft_size: Block/transform size.
        method: Block algorithm (default: overlap-add).
        transform: Spectral transform backend.

    Returns:
        Filtered signal of length ``len(signal) + len(kernel) - 1``. A signal
        shorter than ``fft_size`` is returned as an unmodified copy.

    Raises:
        ValueError: If the kernel is longer than ``fft_size``.
    """
    kernel = _kernel_samples(kernel)
    fft_size = check_positive_int(fft_size, "fft_size")
    _check_kernel_fits(kernel, fft_size)

    if len(signal) < fft_size:
        logger.debug(
            "Signal shorter than FFT size (%d < %d): returning a copy",
            len(signal),
            fft_size,
        )
        return signal.copy()

    conv = BlockConvolver(kernel, fft_size, method=method, transform=transform)
    hop = conv.hop_size
    pieces = [
        conv.process(signal.samples[i : i + hop]) for i in range(0, len(signal), hop)
    ]
    pieces.append(conv.flush())
    return DiscreteSignal(signal.sampling_rate, np.concatenate(pieces))
