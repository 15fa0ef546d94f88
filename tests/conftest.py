"""Test configuration and fixtures."""

import pytest

from noisychannels.utils.logging import configure_logger

from tests.fixtures.synthetic_data import (
    create_sinusoid_recording,
    create_synthetic_raw,
    create_synthetic_recording,
)


@pytest.fixture(autouse=True, scope="session")
def quiet_logger():
    """Only show warnings and above while testing."""
    configure_logger(verbose="WARNING")


@pytest.fixture
def synthetic_recording():
    """32 channel, 256 Hz, 30 s recording with 10-20 positions."""
    return create_synthetic_recording()


@pytest.fixture
def sinusoid_recording():
    """10 channel, 1000 Hz, 10 s recording where channel 5 is loud white noise."""
    return create_sinusoid_recording()


@pytest.fixture
def synthetic_raw():
    """MNE Raw version of the synthetic recording."""
    return create_synthetic_raw(n_channels=16, duration=20)
