"""Bad channels by amplitude deviation."""

from typing import NamedTuple

import numpy as np

from ...utils.logging import message
from .robust import robust_std, robust_zscore


class DeviationResult(NamedTuple):
    channel_deviation: np.ndarray
    zscores: np.ndarray
    median: float
    sd: float
    bad_mask: np.ndarray


def find_bad_by_deviation(x: np.ndarray, threshold: float) -> DeviationResult:
    """Flag channels whose overall amplitude is unusually high or low.

    Each channel's amplitude is its robust (IQR-based) standard deviation over
    the whole recording. Amplitudes are robust z-scored across channels and a
    channel is bad when ``abs(z) > threshold``. Channels with a non-finite
    z-score are never flagged.

    Parameters
    ----------
    x : ndarray, shape (n_samples, n_channels)
        Signal of the selected channels.
    threshold : float
        Z-score cutoff (``robust_deviation_threshold``).

    Returns
    -------
    DeviationResult
        Amplitudes, z-scores, the median and sd used for z-scoring, and the
        boolean bad mask over the columns of ``x``.
    """
    channel_deviation = robust_std(x, axis=0)
    zscores, median, sd = robust_zscore(channel_deviation)

    with np.errstate(invalid="ignore"):
        bad_mask = np.abs(zscores) > threshold

    message("values", f"Channel deviation median {median:.4g}, robust sd {sd:.4g}")
    return DeviationResult(channel_deviation, zscores, median, sd, bad_mask)
