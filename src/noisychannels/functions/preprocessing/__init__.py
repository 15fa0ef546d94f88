"""Preprocessing functions used before bad channel scoring.

Functions
---------
select_channels : Subset and transpose a channels x samples array
compute_window_grid : Non-overlapping window offsets for a window length
window_view : Split a signal into windows
lowpass_separation : Zero-phase FIR low-pass below 50 Hz
"""

from .filtering import design_lowpass, lowpass_separation
from .windowing import (
    WindowGrid,
    compute_window_grid,
    round_half_away,
    select_channels,
    window_view,
)

__all__ = [
    "WindowGrid",
    "compute_window_grid",
    "design_lowpass",
    "lowpass_separation",
    "round_half_away",
    "select_channels",
    "window_view",
]
