"""Standalone noisy channel detection functions.

All functions accept plain numpy arrays or MNE data objects and explicit
parameters, so each criterion can be used on its own:

- preprocessing: channel selection, window grids, low-pass separation
- artifacts: the four bad channel criteria and their combination

Examples
--------
>>> from noisychannels.functions import find_noisy_channels
>>> report = find_noisy_channels(raw)
>>> report.noisy_channels
"""

from .artifacts import (
    find_bad_by_correlation,
    find_bad_by_deviation,
    find_bad_by_hf_noise,
    find_bad_by_ransac,
    find_noisy_channels,
)
from .preprocessing import compute_window_grid, lowpass_separation, select_channels

__all__ = [
    "find_noisy_channels",
    "find_bad_by_deviation",
    "find_bad_by_hf_noise",
    "find_bad_by_correlation",
    "find_bad_by_ransac",
    "compute_window_grid",
    "lowpass_separation",
    "select_channels",
]
