"""Channel selection and window grids.

The detector works on dense samples x channels arrays of the selected
channels and on non-overlapping windows of them. Window offsets are 1-based
sample numbers, matching how channel numbers are reported.
"""

from typing import NamedTuple, Sequence

import numpy as np


class WindowGrid(NamedTuple):
    """Non-overlapping windows of ``window_samples`` samples each."""

    window_samples: int
    offsets: np.ndarray

    @property
    def n_windows(self) -> int:
        return len(self.offsets)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(np.sign(value) * np.floor(np.abs(value) + 0.5))


def select_channels(data: np.ndarray, channels: Sequence[int]) -> np.ndarray:
    """Return the 1-based ``channels`` of channels x samples ``data`` as samples x channels float64."""
    index = np.asarray(channels, dtype=int) - 1
    return np.asarray(data)[index, :].astype(np.float64).T


def compute_window_grid(window_seconds: float, srate: float, n_samples: int) -> WindowGrid:
    """Lay non-overlapping windows over ``n_samples`` samples.

    The window length is ``round(window_seconds * srate)`` samples. Windows
    start at sample 1 and every ``window_samples`` after; a trailing partial
    window is dropped, so there are ``n_samples // window_samples`` windows.
    """
    window_samples = round_half_away(window_seconds * srate)
    if window_samples < 1:
        raise ValueError(
            f"Window of {window_seconds} s at {srate} Hz is shorter than one sample"
        )
    n_windows = n_samples // window_samples
    offsets = 1 + window_samples * np.arange(n_windows, dtype=int)
    return WindowGrid(window_samples, offsets)


def window_view(x: np.ndarray, grid: WindowGrid) -> np.ndarray:
    """Split samples x channels ``x`` into a windows x window_samples x channels array."""
    n = grid.window_samples
    used = n * grid.n_windows
    return x[:used].reshape(grid.n_windows, n, x.shape[1])
