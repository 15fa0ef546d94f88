"""Noisy channel detection.

Combines four criteria in two stages. Amplitude deviation, high-frequency
noise and low correlation are computed on all reference channels; channels
flagged by deviation or correlation are then removed and RANSAC spatial
predictability is computed on the rest. The union of all four sets is the
final list of noisy channels.

The recording is assumed to be high-passed (and preferably free of line
noise) and continuous, i.e. without removed segments.
"""

from typing import Any, Mapping, Optional, Union

import mne
import numpy as np

from ...exceptions import InvalidChannelLocationError, InvalidInputError, InvalidParameterError
from ...parameters import RANSAC_SEED, resolve_parameters
from ...types.recording import Recording
from ...types.report import NoisyChannelsReport
from ...utils.logging import message
from ..preprocessing.filtering import lowpass_separation
from ..preprocessing.windowing import compute_window_grid, select_channels
from .correlation import find_bad_by_correlation, find_bad_by_hf_noise
from .deviation import find_bad_by_deviation
from .ransac import find_bad_by_ransac


def _as_recording(data: Union[mne.io.BaseRaw, Recording]) -> Recording:
    """Validate the input and return it as a :class:`Recording`."""
    if isinstance(data, mne.io.BaseRaw):
        try:
            data = Recording.from_raw(data)
        except ValueError as e:
            raise InvalidInputError(f"Could not read EEG channels from Raw: {e}") from e
    elif not isinstance(data, Recording):
        raise InvalidInputError(
            f"Data must be an MNE Raw object or a Recording, got {type(data).__name__}"
        )

    if data.data is None:
        raise InvalidInputError("Recording has no data")
    array = np.asarray(data.data)
    if array.ndim != 2:
        raise InvalidInputError(
            f"Data must be a 2D channels x samples array (continuous), got {array.ndim} dimensions"
        )
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise InvalidInputError(f"Data is empty (shape {array.shape})")
    if not np.issubdtype(array.dtype, np.number):
        raise InvalidInputError(f"Data must be numeric, got {array.dtype}")
    if data.srate is None or not np.isfinite(data.srate) or data.srate <= 0:
        raise InvalidInputError(f"Recording needs a positive sample rate, got {data.srate}")
    return data


def _grid(parameters: dict, name: str, srate: float, n_samples: int):
    try:
        return compute_window_grid(parameters[name], srate, n_samples)
    except ValueError as e:
        raise InvalidParameterError(name, str(e)) from e


def _expand(values: np.ndarray, channels: np.ndarray, n_channels: int, fill: float = 0.0) -> np.ndarray:
    """Place per-reference-channel rows at their original channel rows."""
    values = np.asarray(values)
    expanded = np.full((n_channels,) + values.shape[1:], fill, dtype=float)
    expanded[channels - 1] = values
    return expanded


def _channel_list(mask: np.ndarray, channels: np.ndarray) -> list:
    return [int(ch) for ch in channels[np.asarray(mask, dtype=bool)]]


def find_noisy_channels(
    data: Union[mne.io.BaseRaw, Recording],
    parameters: Optional[Mapping[str, Any]] = None,
    *,
    random_state=RANSAC_SEED,
    n_jobs: int = 1,
) -> NoisyChannelsReport:
    """Identify noisy channels in continuous EEG.

    Four criteria are used:

    1. Deviation: a channel's robust amplitude z-score exceeds
       ``robust_deviation_threshold`` in absolute value.
    2. High-frequency noise: the z-score of a channel's ratio of content
       above 50 Hz to content below exceeds ``high_frequency_noise_threshold``.
       Only computed when the sample rate is above 100 Hz.
    3. Correlation: in more than ``bad_time_threshold`` of the
       ``correlation_window_seconds`` windows, the channel's maximum
       correlation with any other channel is below ``correlation_threshold``.
    4. RANSAC: after removing channels bad by 1 or 3, each remaining channel
       is predicted from random subsets of the others. The channel is bad
       when its correlation with the prediction is below
       ``ransac_correlation_threshold`` for longer than ``ransac_unbroken_time``.

    Parameters
    ----------
    data : mne.io.BaseRaw or Recording
        High-passed continuous recording. Raw objects are converted with
        :meth:`Recording.from_raw` (EEG channels only).
    parameters : mapping or None
        Overrides of the defaults in :func:`noisychannels.parameters.get_default_parameters`.
        snake_case names and the PREP camelCase names are both accepted.
    random_state : int, RandomState, Generator or None, default 435656
        Seed for the RANSAC subset draws. A fixed seed makes runs reproducible.
    n_jobs : int, default 1
        joblib workers for the correlation windows, the RANSAC projector and
        the RANSAC windows.

    Returns
    -------
    report : NoisyChannelsReport
        Bad channel lists (1-based original channel numbers) and all
        per-channel and per-window statistics.

    Raises
    ------
    InvalidInputError
        If ``data`` is not a continuous 2D recording with a sample rate.
    InvalidParameterError
        If a parameter fails its type or constraint check.

    Notes
    -----
    Invalid channel locations do not raise: RANSAC is then reported with
    ``ransac_performed=False``, ``ransac_failed=True`` and the reason in
    ``ransac_message``.

    Examples
    --------
    >>> from noisychannels import find_noisy_channels
    >>> report = find_noisy_channels(raw, {"ransac_off": True})
    >>> report.noisy_channels
    [5, 17]
    """
    recording = _as_recording(data)
    parameters = resolve_parameters(parameters, recording)

    srate = float(recording.srate)
    n_original = recording.n_channels
    channels = parameters["reference_channels"]
    x = select_channels(recording.data, channels)
    n_samples, n_channels = x.shape

    correlation_grid = _grid(parameters, "correlation_window_seconds", srate, n_samples)
    ransac_grid = _grid(parameters, "ransac_window_seconds", srate, n_samples)

    message("header", f"Detecting noisy channels in {n_channels} of {n_original} channels...")

    # Method 1: unusually high or low amplitude
    deviation = find_bad_by_deviation(x, parameters["robust_deviation_threshold"])
    message("info", f"Bad by deviation: {_channel_list(deviation.bad_mask, channels)}")

    # Method 2: high-frequency noise; X is reused by methods 3 and 4
    filtered = lowpass_separation(x, srate)
    hf_noise = find_bad_by_hf_noise(
        x, filtered, srate, parameters["high_frequency_noise_threshold"]
    )
    message("info", f"Bad by high-frequency noise: {_channel_list(hf_noise.bad_mask, channels)}")

    # Method 3: low correlation with every other channel
    correlation = find_bad_by_correlation(
        x,
        filtered,
        correlation_grid,
        parameters["correlation_threshold"],
        parameters["bad_time_threshold"],
        hf_noise.median,
        hf_noise.sd,
        deviation.median,
        deviation.sd,
        n_jobs=n_jobs,
    )
    message("info", f"Bad by correlation: {_channel_list(correlation.bad_mask, channels)}")

    # Method 4: ransac on the channels that survived 1 and 3
    early_bad = deviation.bad_mask | correlation.bad_mask
    ransac_failed = False
    if parameters["ransac_off"]:
        ransac_message = "ransac was turned off"
        message("info", ransac_message)
        ransac = None
    else:
        try:
            ransac = find_bad_by_ransac(
                filtered,
                parameters["channel_locations"],
                channels - 1,
                ~early_bad,
                srate,
                ransac_grid,
                n_channels,
                parameters["ransac_sample_size"],
                parameters["ransac_channel_fraction"],
                parameters["ransac_correlation_threshold"],
                parameters["ransac_unbroken_time"],
                random_state=random_state,
                n_jobs=n_jobs,
            )
            ransac_message = ransac.message
        except InvalidChannelLocationError as e:
            message("error", f"ransac failed: {e.message}")
            ransac = None
            ransac_failed = True
            ransac_message = e.message

    if ransac is not None and ransac.performed:
        ransac_correlations = _expand(ransac.correlations, channels, n_original, fill=1.0)
        ransac_bad_window_fraction = _expand(ransac.bad_window_fraction, channels, n_original)
        bad_from_ransac = _channel_list(ransac.bad_mask, channels)
        message("info", f"Bad by ransac: {bad_from_ransac}")
    else:
        ransac_correlations = np.ones((n_original, ransac_grid.n_windows))
        ransac_bad_window_fraction = np.zeros(n_original)
        bad_from_ransac = []

    bad_from_deviation = _channel_list(deviation.bad_mask, channels)
    bad_from_hf_noise = _channel_list(hf_noise.bad_mask, channels)
    bad_from_correlation = _channel_list(correlation.bad_mask, channels)
    noisy = sorted(
        set(bad_from_deviation) | set(bad_from_correlation) | set(bad_from_ransac) | set(bad_from_hf_noise)
    )

    if noisy:
        message("success", f"Detected {len(noisy)} noisy channels: {noisy}")
    else:
        message("success", "No noisy channels detected")

    reported_parameters = {
        key: value
        for key, value in parameters.items()
        if key not in ("reference_channels", "channel_locations", "channel_information")
    }
    # The report freezes its arrays; keep the caller's positions writable
    locations = parameters["channel_locations"]
    if locations is not None:
        locations = np.array(locations, dtype=float)

    return NoisyChannelsReport(
        srate=srate,
        samples=n_samples,
        reference_channels=[int(ch) for ch in channels],
        channel_names=recording.channel_names,
        channel_locations=locations,
        channel_information=parameters["channel_information"],
        parameters=reported_parameters,
        noisy_channels=noisy,
        bad_channels_from_deviation=bad_from_deviation,
        bad_channels_from_hf_noise=bad_from_hf_noise,
        bad_channels_from_correlation=bad_from_correlation,
        bad_channels_from_ransac=bad_from_ransac,
        robust_channel_deviation=_expand(deviation.zscores, channels, n_original),
        channel_deviations=_expand(correlation.channel_deviations.T, channels, n_original),
        zscore_hf_noise=_expand(hf_noise.zscores, channels, n_original),
        noise_levels=_expand(correlation.noise_levels.T, channels, n_original),
        maximum_correlations=_expand(correlation.maximum_correlations.T, channels, n_original, fill=1.0),
        median_max_correlation=_expand(correlation.median_max_correlation, channels, n_original, fill=1.0),
        fraction_bad_correlation_windows=_expand(correlation.fraction_bad_windows, channels, n_original),
        correlation_offsets=correlation_grid.offsets,
        ransac_performed=bool(ransac is not None and ransac.performed),
        ransac_failed=ransac_failed,
        ransac_message=ransac_message,
        ransac_correlations=ransac_correlations,
        ransac_offsets=ransac_grid.offsets,
        ransac_bad_window_fraction=ransac_bad_window_fraction,
    )
