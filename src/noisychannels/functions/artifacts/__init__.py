"""Bad channel detection functions.

Functions
---------
find_noisy_channels : Run all criteria and assemble the report
find_bad_by_deviation : Robust amplitude deviation criterion
find_bad_by_hf_noise : High-frequency noise criterion
find_bad_by_correlation : Windowed maximum correlation criterion
find_bad_by_ransac : RANSAC spatial predictability criterion
"""

from .correlation import find_bad_by_correlation, find_bad_by_hf_noise
from .deviation import find_bad_by_deviation
from .noisy import find_noisy_channels
from .ransac import find_bad_by_ransac

__all__ = [
    "find_noisy_channels",
    "find_bad_by_deviation",
    "find_bad_by_hf_noise",
    "find_bad_by_correlation",
    "find_bad_by_ransac",
]
