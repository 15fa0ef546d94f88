"""Robust statistics shared by the bad channel criteria.

Quantiles follow the MATLAB convention (``np.percentile`` method ``hazen``)
so that robust standard deviations match the PREP pipeline's values.
"""

import warnings
from typing import Tuple

import numpy as np
from scipy.stats import median_abs_deviation

#: Scales an interquartile range to a standard deviation for Gaussian data.
IQR_TO_SD = 0.7413


def quantile(x: np.ndarray, q, axis: int = 0) -> np.ndarray:
    """Quantile ``q`` (0-1) of ``x`` along ``axis``, MATLAB interpolation."""
    return np.percentile(x, np.asarray(q) * 100.0, axis=axis, method="hazen")


def nanquantile(x: np.ndarray, q, axis: int = 0) -> np.ndarray:
    """Like :func:`quantile` but ignoring NaN; all-NaN slices give NaN."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        return np.nanpercentile(x, np.asarray(q) * 100.0, axis=axis, method="hazen")


def iqr(x: np.ndarray, axis: int = 0) -> np.ndarray:
    """Interquartile range of ``x`` along ``axis``."""
    q25, q75 = quantile(x, [0.25, 0.75], axis=axis)
    return q75 - q25


def robust_std(x: np.ndarray, axis: int = 0) -> np.ndarray:
    """IQR-based estimate of the standard deviation of ``x`` along ``axis``."""
    return IQR_TO_SD * iqr(x, axis=axis)


def robust_zscore(values: np.ndarray) -> Tuple[np.ndarray, float, float]:
    """Robust z-scores of a vector of per-channel statistics.

    Returns
    -------
    zscores : ndarray
        ``(values - median) / sd``. Non-finite where ``sd`` is zero.
    median : float
        Median of ``values``.
    sd : float
        ``IQR_TO_SD * iqr(values)``.
    """
    values = np.asarray(values, dtype=float)
    median = float(np.median(values))
    sd = float(robust_std(values))
    with np.errstate(divide="ignore", invalid="ignore"):
        zscores = (values - median) / sd
    return zscores, median, sd


def noise_ratio(raw: np.ndarray, filtered: np.ndarray, axis: int = 0) -> np.ndarray:
    """Ratio of high-frequency to low-frequency amplitude per channel.

    Both amplitudes are median absolute deviations (unscaled); the high
    frequency part is ``raw - filtered``.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return median_abs_deviation(raw - filtered, axis=axis) / median_abs_deviation(
            filtered, axis=axis
        )
