"""Bad channels by high-frequency noise and by low correlation.

Both criteria compare the raw signal with its low-pass separated version
(see :func:`noisychannels.functions.preprocessing.lowpass_separation`).
The correlation criterion also reports per-window noise levels and
amplitudes, z-scored with the whole-recording statistics so that values
are comparable across windows.
"""

from typing import NamedTuple

import numpy as np
from joblib import Parallel, delayed

from ...utils.logging import message
from ..preprocessing.filtering import MIN_SRATE_FOR_FILTER
from ..preprocessing.windowing import WindowGrid, window_view
from .robust import nanquantile, noise_ratio, robust_std, robust_zscore

#: Percentile of a channel's correlations taken as its maximum correlation.
MAX_CORRELATION_QUANTILE = 0.98


class HFNoiseResult(NamedTuple):
    noisiness: np.ndarray
    zscores: np.ndarray
    median: float
    sd: float
    bad_mask: np.ndarray


class CorrelationResult(NamedTuple):
    maximum_correlations: np.ndarray  # windows x channels
    noise_levels: np.ndarray  # windows x channels
    channel_deviations: np.ndarray  # windows x channels
    fraction_bad_windows: np.ndarray
    median_max_correlation: np.ndarray
    bad_mask: np.ndarray


def find_bad_by_hf_noise(
    x: np.ndarray, filtered: np.ndarray, srate: float, threshold: float
) -> HFNoiseResult:
    """Flag channels with unusually much signal above 50 Hz.

    A channel's noisiness is ``noise_ratio(x, filtered)`` over the whole
    recording. Noisiness is robust z-scored across channels and a channel is
    bad when ``z > threshold``. At or below 100 Hz there is nothing above
    50 Hz to measure: z-scores are zero, the normalization is (0, 1) and no
    channel is flagged.
    """
    n_channels = x.shape[1]
    if srate <= MIN_SRATE_FOR_FILTER:
        message("info", f"Sample rate {srate} Hz too low for high-frequency noise criterion")
        return HFNoiseResult(
            np.zeros(n_channels), np.zeros(n_channels), 0.0, 1.0, np.zeros(n_channels, dtype=bool)
        )

    noisiness = noise_ratio(x, filtered, axis=0)
    zscores, median, sd = robust_zscore(noisiness)
    with np.errstate(invalid="ignore"):
        bad_mask = zscores > threshold

    message("values", f"Noisiness median {median:.4g}, robust sd {sd:.4g}")
    return HFNoiseResult(noisiness, zscores, median, sd, bad_mask)


def _window_statistics(raw_window, filtered_window, noise_median, noise_sd,
                       deviation_median, deviation_sd):
    """Max correlation, noise level and amplitude of every channel in one window."""
    with np.errstate(divide="ignore", invalid="ignore"):
        correlations = np.atleast_2d(np.corrcoef(filtered_window, rowvar=False))
        abs_corr = np.abs(correlations - np.diag(np.diag(correlations)))
        # Flat channels have undefined correlations; leave them out of the others' percentiles
        max_correlations = nanquantile(abs_corr, MAX_CORRELATION_QUANTILE, axis=0)

        noise_levels = (noise_ratio(raw_window, filtered_window) - noise_median) / noise_sd
        deviations = (robust_std(raw_window) - deviation_median) / deviation_sd

    return max_correlations, noise_levels, deviations


def find_bad_by_correlation(
    x: np.ndarray,
    filtered: np.ndarray,
    grid: WindowGrid,
    correlation_threshold: float,
    bad_time_threshold: float,
    noise_median: float,
    noise_sd: float,
    deviation_median: float,
    deviation_sd: float,
    n_jobs: int = 1,
) -> CorrelationResult:
    """Flag channels that too often fail to correlate with any other channel.

    For each window of ``grid``, a channel's maximum correlation is the 98th
    percentile of its absolute correlations with the other channels of the
    low-passed signal. The window is bad for the channel when this is below
    ``correlation_threshold``, and the channel is bad when the fraction of bad
    windows exceeds ``bad_time_threshold``.

    Parameters
    ----------
    x, filtered : ndarray, shape (n_samples, n_channels)
        Raw and low-passed signal of the selected channels.
    grid : WindowGrid
        Correlation windows.
    correlation_threshold, bad_time_threshold : float
        Window and channel cutoffs.
    noise_median, noise_sd : float
        Whole-recording normalization of the noisiness, applied to each
        window's noise levels.
    deviation_median, deviation_sd : float
        Whole-recording normalization of channel amplitudes, applied to each
        window's amplitudes.
    n_jobs : int
        Number of joblib workers for the window loop.
    """
    n_channels = x.shape[1]
    n_windows = grid.n_windows

    maximum_correlations = np.ones((n_windows, n_channels))
    noise_levels = np.zeros((n_windows, n_channels))
    channel_deviations = np.zeros((n_windows, n_channels))

    if n_windows > 0:
        raw_windows = window_view(x, grid)
        filtered_windows = window_view(filtered, grid)
        results = Parallel(n_jobs=n_jobs)(
            delayed(_window_statistics)(
                raw_windows[k], filtered_windows[k],
                noise_median, noise_sd, deviation_median, deviation_sd,
            )
            for k in range(n_windows)
        )
        for k, (max_corr, noise, deviation) in enumerate(results):
            maximum_correlations[k] = max_corr
            noise_levels[k] = noise
            channel_deviations[k] = deviation

        with np.errstate(invalid="ignore"):
            bad_windows = maximum_correlations < correlation_threshold
        fraction_bad_windows = bad_windows.mean(axis=0)
        median_max_correlation = np.median(maximum_correlations, axis=0)
    else:
        message("warning", f"Recording is shorter than one correlation window ({grid.window_samples} samples)")
        fraction_bad_windows = np.zeros(n_channels)
        median_max_correlation = np.full(n_channels, np.nan)

    bad_mask = fraction_bad_windows > bad_time_threshold
    return CorrelationResult(
        maximum_correlations,
        noise_levels,
        channel_deviations,
        fraction_bad_windows,
        median_max_correlation,
        bad_mask,
    )
