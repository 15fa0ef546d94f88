"""Noisy channel detection for continuous EEG.

This package flags bad channels before referencing using four criteria:
robust amplitude deviation, high-frequency noise, inter-channel correlation
and RANSAC spatial predictability.
"""

from .exceptions import (
    InvalidChannelLocationError,
    InvalidInputError,
    InvalidParameterError,
    NoisyChannelsError,
)
from .functions import find_noisy_channels
from .parameters import get_default_parameters, resolve_parameters
from .types import NoisyChannelsReport, Recording

__version__ = "0.1.0"

__all__ = [
    "find_noisy_channels",
    "get_default_parameters",
    "resolve_parameters",
    "Recording",
    "NoisyChannelsReport",
    "NoisyChannelsError",
    "InvalidInputError",
    "InvalidParameterError",
    "InvalidChannelLocationError",
]
