"""Tests for channel selection, window grids and low-pass separation."""

import numpy as np
import pytest

from noisychannels.functions.preprocessing import (
    compute_window_grid,
    design_lowpass,
    lowpass_separation,
    round_half_away,
    select_channels,
    window_view,
)


class TestWindowGrid:
    """Test window grid computation."""

    @pytest.mark.parametrize(
        "n_samples, window_samples",
        [(1000, 100), (999, 100), (1099, 100), (100, 100), (99, 100), (1, 1), (12345, 256)],
    )
    def test_window_count(self, n_samples, window_samples):
        """Window count is floor((N - w) / w) + 1 when N >= w, else 0."""
        grid = compute_window_grid(window_samples / 100.0, 100.0, n_samples)

        expected = (n_samples - window_samples) // window_samples + 1 if n_samples >= window_samples else 0
        assert grid.window_samples == window_samples
        assert grid.n_windows == expected

    def test_offsets_are_one_based_and_in_range(self):
        """Offsets start at 1, step by the window and never pass N - w + 1."""
        grid = compute_window_grid(1.0, 256, 256 * 10 + 100)

        assert grid.offsets[0] == 1
        assert np.all(np.diff(grid.offsets) == 256)
        assert grid.offsets[-1] <= 256 * 10 + 100 - 256 + 1
        assert grid.n_windows == 10

    def test_window_length_is_rounded(self):
        """Window length rounds half away from zero."""
        assert compute_window_grid(0.0125, 100, 1000).window_samples == 1
        assert compute_window_grid(1.5, 1, 1000).window_samples == 2
        assert compute_window_grid(2.5, 1, 1000).window_samples == 3

    def test_window_shorter_than_a_sample_raises(self):
        """A window under half a sample cannot be laid out."""
        with pytest.raises(ValueError):
            compute_window_grid(0.001, 100, 1000)

    def test_round_half_away(self):
        """Halves round away from zero, unlike Python's round."""
        assert round_half_away(0.5) == 1
        assert round_half_away(2.5) == 3
        assert round_half_away(-2.5) == -3
        assert round_half_away(2.4) == 2


class TestChannelSelection:
    """Test channel subsetting."""

    def test_select_channels_transposes_and_subsets(self):
        """Selected 1-based channels become float64 columns."""
        data = np.arange(12, dtype=np.int32).reshape(4, 3)

        x = select_channels(data, [2, 4])

        assert x.dtype == np.float64
        assert x.shape == (3, 2)
        assert np.array_equal(x[:, 0], data[1])
        assert np.array_equal(x[:, 1], data[3])

    def test_window_view_drops_partial_window(self):
        """Trailing samples beyond the last full window are discarded."""
        x = np.arange(25, dtype=float).reshape(25, 1)
        grid = compute_window_grid(1.0, 10, 25)

        windows = window_view(x, grid)

        assert windows.shape == (2, 10, 1)
        assert windows[1, 0, 0] == 10
        assert windows[-1, -1, 0] == 19


class TestLowpassSeparation:
    """Test the zero-phase FIR low-pass."""

    def test_design_is_symmetric(self):
        """A linear-phase FIR has symmetric coefficients."""
        b = design_lowpass(500)

        assert len(b) == 101
        assert np.allclose(b, b[::-1])

    def test_low_sample_rate_returns_copy(self):
        """At or below 100 Hz the signal is returned unchanged."""
        x = np.random.default_rng(0).normal(size=(500, 3))

        filtered = lowpass_separation(x, 100)

        assert filtered is not x
        assert np.array_equal(filtered, x)

    def test_keeps_low_and_removes_high_frequencies(self):
        """10 Hz passes with no phase shift; 200 Hz is removed."""
        srate = 1000
        times = np.arange(5 * srate) / srate
        low = np.sin(2 * np.pi * 10 * times)
        high = np.sin(2 * np.pi * 200 * times)
        x = np.column_stack([low, high, low + high])

        filtered = lowpass_separation(x, srate)
        middle = slice(srate, 4 * srate)

        assert np.allclose(filtered[middle, 0], low[middle], atol=0.02)
        assert np.max(np.abs(filtered[middle, 1])) < 0.01
        assert np.allclose(filtered[middle, 2], low[middle], atol=0.03)

    def test_short_signal_is_filtered(self):
        """Signals shorter than the default edge padding still filter."""
        x = np.random.default_rng(1).normal(size=(120, 2))

        filtered = lowpass_separation(x, 500)

        assert filtered.shape == x.shape
        assert np.all(np.isfinite(filtered))
