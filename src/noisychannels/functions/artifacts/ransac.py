"""Bad channels by RANSAC spatial predictability.

Each channel is predicted from random subsets of the other channels with
spherical spline interpolation. The median of the predictions over all
subsets is the consensus prediction; a channel whose signal correlates
poorly with its consensus prediction for too long is bad.
"""

from typing import NamedTuple, Optional

import numpy as np
from joblib import Parallel, delayed
from mne.utils import check_random_state

from ...exceptions import InvalidChannelLocationError
from ...utils.logging import message
from ..preprocessing.windowing import WindowGrid, round_half_away, window_view
from .interpolation import spherical_spline_matrix

#: Channels reconstructed together when scoring a window; bounds memory use.
CHANNEL_CHUNK_SIZE = 32


class ReconstructionProjector(NamedTuple):
    """Bag of reconstruction matrices built from random channel subsets.

    ``subsets[i]`` are the candidate positions used by sample ``i`` and
    ``matrices[i]`` maps their signals to all candidates.
    """

    subsets: np.ndarray  # samples x subset_size
    matrices: np.ndarray  # samples x candidates x subset_size

    @property
    def n_samples(self) -> int:
        return self.subsets.shape[0]


class RansacResult(NamedTuple):
    performed: bool
    message: Optional[str]
    correlations: np.ndarray  # channels x windows
    bad_window_fraction: np.ndarray
    bad_mask: np.ndarray


def ransac_subset_size(channel_fraction: float, n_channels: int) -> int:
    """Number of channels in each random subset."""
    return round_half_away(channel_fraction * n_channels)


def check_ransac_eligibility(n_candidates: int, subset_size: int) -> Optional[str]:
    """Return why RANSAC cannot run with these counts, or None if it can."""
    if n_candidates < 3 or n_candidates < subset_size + 1 or subset_size < 2:
        return (
            "Too many channels have failed quality tests to perform ransac "
            f"({n_candidates} channels left, subsets of {subset_size})"
        )
    return None


def draw_random_subsets(n_candidates: int, subset_size: int, n_samples: int,
                        random_state=None) -> np.ndarray:
    """Draw ``n_samples`` subsets of ``subset_size`` distinct candidate positions.

    All draws come from one generator, consumed in order, so the same seed
    always gives the same subsets.
    """
    rng = check_random_state(random_state)
    subsets = np.zeros((n_samples, subset_size), dtype=int)
    for k in range(n_samples):
        subsets[k] = rng.choice(n_candidates, subset_size, replace=False)
    return subsets


def validate_locations(locations, rows: np.ndarray) -> np.ndarray:
    """Return the ``rows`` of ``locations`` as a finite len(rows) x 3 array, or raise.

    Parameters
    ----------
    locations : array-like, shape (n_channels, 3)
        Positions of every channel of the recording.
    rows : ndarray of int
        0-based channel indices whose positions are needed.
    """
    if locations is None:
        raise InvalidChannelLocationError("Must provide valid channel locations")
    try:
        locations = np.asarray(locations, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidChannelLocationError(f"Must provide valid channel locations: {e}") from e
    if locations.ndim != 2 or locations.shape[1] != 3 or locations.shape[0] <= np.max(rows):
        raise InvalidChannelLocationError(
            f"Channel locations must be a channels x 3 array, got shape {locations.shape}"
        )
    locations = locations[rows]
    missing = ~np.isfinite(locations).all(axis=1)
    if missing.any():
        raise InvalidChannelLocationError(
            "The channel locations must have valid X, Y, and Z components "
            f"(missing for channels {(rows[missing] + 1).tolist()})"
        )
    return locations


def build_projector(locations: np.ndarray, subsets: np.ndarray, n_jobs: int = 1) -> ReconstructionProjector:
    """Compute one interpolation matrix per subset."""
    matrices = Parallel(n_jobs=n_jobs)(
        delayed(spherical_spline_matrix)(locations[subset], locations) for subset in subsets
    )
    if not matrices:
        matrices = np.zeros((0, locations.shape[0], subsets.shape[1]))
    return ReconstructionProjector(subsets, np.asarray(matrices))


def ransac_window_correlations(window: np.ndarray, projector: ReconstructionProjector,
                               chunk_size: int = CHANNEL_CHUNK_SIZE) -> np.ndarray:
    """Correlation of each channel with its consensus prediction in one window.

    Parameters
    ----------
    window : ndarray, shape (n_samples, n_candidates)
        Low-passed signal of the candidate channels.
    projector : ReconstructionProjector
        Reconstruction bag built for the same candidates.

    Returns
    -------
    correlations : ndarray, shape (n_candidates,)
        Uncentered correlation between each channel and the median of its
        predictions across the bag.
    """
    n_times, n_channels = window.shape
    p = projector.n_samples
    middle = (p + 1) // 2 - 1
    consensus = np.empty_like(window)

    for start in range(0, n_channels, chunk_size):
        stop = min(start + chunk_size, n_channels)
        predictions = np.empty((p, n_times, stop - start))
        for i in range(p):
            source = window[:, projector.subsets[i]]
            predictions[i] = source @ projector.matrices[i, start:stop].T
        predictions.sort(axis=0)
        consensus[:, start:stop] = predictions[middle]

    with np.errstate(divide="ignore", invalid="ignore"):
        return np.sum(window * consensus, axis=0) / (
            np.sqrt(np.sum(window ** 2, axis=0)) * np.sqrt(np.sum(consensus ** 2, axis=0))
        )


def unbroken_time_samples(unbroken_time: float, n_samples: int, srate: float) -> float:
    """Bad-time allowance in samples.

    Values below 1 are a fraction of the recording; values of 1 or more are
    seconds.
    """
    if unbroken_time < 1:
        return n_samples * unbroken_time
    return srate * unbroken_time


def find_bad_by_ransac(
    filtered: np.ndarray,
    locations,
    channel_index: np.ndarray,
    candidate_mask: np.ndarray,
    srate: float,
    grid: WindowGrid,
    n_reference: int,
    sample_size: int,
    channel_fraction: float,
    correlation_threshold: float,
    unbroken_time: float,
    random_state=None,
    n_jobs: int = 1,
) -> RansacResult:
    """Flag channels that their neighbors cannot predict.

    Parameters
    ----------
    filtered : ndarray, shape (n_samples, n_channels)
        Low-passed signal of the reference channels.
    locations : ndarray, shape (n_recording_channels, 3) or None
        Positions of every channel of the recording.
    channel_index : ndarray of int, shape (n_channels,)
        0-based recording channel of each column of ``filtered``.
    candidate_mask : ndarray of bool, shape (n_channels,)
        Channels still considered; the others were flagged by earlier criteria.
    srate : float
        Sample rate in Hz.
    grid : WindowGrid
        RANSAC windows.
    n_reference : int
        Number of reference channels, which sets the subset size.
    sample_size, channel_fraction, correlation_threshold, unbroken_time
        The ``ransac_*`` parameters.
    random_state : int, RandomState, Generator or None
        Seed or generator for the subset draws.
    n_jobs : int
        Number of joblib workers for projector construction and scoring.

    Returns
    -------
    RansacResult
        ``performed`` is False when there are no locations or too few
        candidates; arrays then keep their fill values.

    Raises
    ------
    InvalidChannelLocationError
        If RANSAC can run but candidate positions are missing or non-finite.
    """
    n_channels = filtered.shape[1]
    correlations = np.ones((n_channels, grid.n_windows))
    not_performed = RansacResult(
        False, None, correlations, np.zeros(n_channels), np.zeros(n_channels, dtype=bool)
    )

    if locations is None:
        reason = "ransac could not be computed because there were no channel locations"
        message("warning", reason)
        return not_performed._replace(message=reason)

    candidates = np.flatnonzero(candidate_mask)
    subset_size = ransac_subset_size(channel_fraction, n_reference)
    reason = check_ransac_eligibility(len(candidates), subset_size)
    if reason is not None:
        message("warning", reason)
        return not_performed._replace(message=reason)

    candidate_locations = validate_locations(locations, np.asarray(channel_index)[candidates])

    subsets = draw_random_subsets(len(candidates), subset_size, sample_size, random_state)
    message("debug", f"Building {sample_size} reconstructions from {subset_size} of {len(candidates)} channels")
    projector = build_projector(candidate_locations, subsets, n_jobs=n_jobs)

    candidate_correlations = np.ones((len(candidates), grid.n_windows))
    if grid.n_windows > 0:
        windows = window_view(filtered[:, candidates], grid)
        results = Parallel(n_jobs=n_jobs)(
            delayed(ransac_window_correlations)(windows[k], projector)
            for k in range(grid.n_windows)
        )
        for k, window_correlations in enumerate(results):
            candidate_correlations[:, k] = window_correlations
    else:
        message("warning", f"Recording is shorter than one ransac window ({grid.window_samples} samples)")
    correlations[candidates] = candidate_correlations

    with np.errstate(invalid="ignore"):
        flagged = correlations < correlation_threshold
    n_bad_windows = flagged.sum(axis=1)
    allowance = unbroken_time_samples(unbroken_time, filtered.shape[0], srate)
    bad_mask = n_bad_windows * grid.window_samples > allowance
    if grid.n_windows > 0:
        bad_window_fraction = n_bad_windows / grid.n_windows
    else:
        bad_window_fraction = np.zeros(n_channels)

    return RansacResult(True, None, correlations, bad_window_fraction, bad_mask)
