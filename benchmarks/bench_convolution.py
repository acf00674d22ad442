"""Benchmark direct, spectral and block convolution."""

import time
from typing import Dict

import numpy as np

import sigops as so
from sigops import DiscreteSignal, FilteringMethod


def _time(fn, repeats: int) -> float:
    fn()  # warmup
    start = time.perf_counter()
    for _ in range(repeats):
        fn()
    return (time.perf_counter() - start) / repeats


def benchmark_convolution(
    n_samples: int,
    kernel_size: int,
    fft_size: int = 2048,
    transform: str = "numpy",
    repeats: int = 10,
) -> Dict[str, float]:
    """Benchmark convolution routes on random data.

    Args:
        n_samples: Signal length.
        kernel_size: Kernel length.
        fft_size: Block size of the block convolver.
        transform: Spectral backend name.
        repeats: Timed repetitions per route.

    Returns:
        Dictionary with seconds per call for each route.
    """
    rng = np.random.default_rng(0)
    signal = DiscreteSignal(16000, rng.standard_normal(n_samples))
    kernel = DiscreteSignal(16000, rng.standard_normal(kernel_size))

    results = {
        "n_samples": n_samples,
        "kernel_size": kernel_size,
        "fft_sec": _time(lambda: so.convolve(signal, kernel, transform=transform), repeats),
        "ola_sec": _time(
            lambda: so.block_convolve(
                signal, kernel, fft_size, FilteringMethod.OVERLAP_ADD, transform
            ),
            repeats,
        ),
        "ols_sec": _time(
            lambda: so.block_convolve(
                signal, kernel, fft_size, FilteringMethod.OVERLAP_SAVE, transform
            ),
            repeats,
        ),
    }
    # The nested-loop reference is only timed on short inputs.
    if n_samples * kernel_size <= 2_000_000:
        results["direct_sec"] = _time(lambda: so.convolve_direct(signal, kernel), 1)
    return results


if __name__ == "__main__":
    print("Benchmarking convolution...")

    for n, k in [(4000, 64), (160000, 255), (1600000, 1025)]:
        results = benchmark_convolution(n_samples=n, kernel_size=k)
        print(f"Signal {n}, kernel {k}:")
        for route in ("direct", "fft", "ola", "ols"):
            key = f"{route}_sec"
            if key in results:
                print(f"  {route:<6}: {results[key]*1e3:.2f} ms")
