"""Pytest configuration and shared fixtures for sigops tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Isolation of process-wide settings (default transform, debug mode)
"""

import os

import numpy as np
import pytest
import torch

from sigops.core.transform import set_default_transform
from sigops.diagnostics import is_debug_enabled, set_debug_enabled


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic torch RNG (CPU) for tests."""
    generator = torch.Generator(device="cpu")
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Set global numpy and torch seeds for every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function", autouse=True)
def restore_global_settings():
    """Restore the default transform and debug flag after each test."""
    debug = is_debug_enabled()
    yield
    set_debug_enabled(debug)
    set_default_transform(None)
