"""Tests for logging utilities."""

import logging
from io import StringIO

import numpy as np

from sigops.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)
from sigops.operations import block_convolve
from sigops.signals import DiscreteSignal


def test_get_logger_returns_logger():
    """Test that get_logger returns a logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "sigops.test_module"


def test_get_logger_keeps_package_names():
    """Module names already inside the package are not prefixed twice."""
    logger = get_logger("sigops.operations.block")
    assert logger.name == "sigops.operations.block"
    assert get_logger().name == "sigops"


def test_get_logger_caching():
    """Test that get_logger caches loggers."""
    logger1 = get_logger("test_module")
    logger2 = get_logger("test_module")
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_get_logger_different_modules():
    """Test that different modules get different loggers."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level_string():
    """Test that set_log_level accepts string levels."""
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG

        set_log_level("ERROR")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging():
    """Test configure_logging function."""
    stream = StringIO()
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_module")
        logger.debug("Debug message")

        output = stream.getvalue()
        assert "[DEBUG] sigops.test_module: Debug message" in output
    finally:
        configure_logging(level=logging.WARNING)


def test_passthrough_is_logged():
    """Block convolution of a short signal reports the passthrough."""
    stream = StringIO()
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        block_convolve(DiscreteSignal(8000, np.ones(10)), np.ones(3), fft_size=64)
        assert "shorter than FFT size" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_logger_does_not_propagate():
    """Test that loggers don't propagate to root logger."""
    logger = get_logger("test_module")
    assert logger.propagate is False
