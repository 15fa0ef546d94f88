# report.py
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict

BAD_CHANNEL_KINDS = ("deviation", "hf_noise", "correlation", "ransac")


class NoisyChannelsReport(BaseModel):
    """Diagnostics of one noisy channel detection run.

    Channel lists hold 1-based channel numbers in the original recording.
    Per-channel arrays have one row per original channel (row ``k - 1`` is
    channel ``k``); channels left out of ``reference_channels`` keep the
    fill value (0, or 1 for correlations).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    # Inputs
    srate: float
    samples: int
    reference_channels: List[int]
    channel_names: Optional[List[str]] = None
    channel_locations: Optional[Any] = None
    channel_information: Optional[Dict[str, Any]] = None
    parameters: Dict[str, Any]

    # Bad channel sets
    noisy_channels: List[int]
    bad_channels_from_deviation: List[int]
    bad_channels_from_hf_noise: List[int]
    bad_channels_from_correlation: List[int]
    bad_channels_from_ransac: List[int]

    # Method 1
    robust_channel_deviation: Any
    channel_deviations: Any

    # Method 2
    zscore_hf_noise: Any
    noise_levels: Any

    # Method 3
    maximum_correlations: Any
    median_max_correlation: Any
    fraction_bad_correlation_windows: Any
    correlation_offsets: Any

    # Method 4
    ransac_performed: bool
    ransac_failed: bool = False
    ransac_message: Optional[str] = None
    ransac_correlations: Any
    ransac_offsets: Any
    ransac_bad_window_fraction: Any

    def model_post_init(self, __context: Any) -> None:
        for value in self.__dict__.values():
            if isinstance(value, np.ndarray):
                value.setflags(write=False)

    def bad_channels(self, kind: str) -> List[int]:
        """Return the channels flagged by one method (see ``BAD_CHANNEL_KINDS``)."""
        if kind not in BAD_CHANNEL_KINDS:
            raise ValueError(f"kind must be one of {BAD_CHANNEL_KINDS}, got {kind!r}")
        return list(getattr(self, f"bad_channels_from_{kind}"))

    def bad_channel_names(self, kind: Optional[str] = None) -> List[str]:
        """Names of the noisy channels, or of one method's channels if ``kind`` is given."""
        if self.channel_names is None:
            raise ValueError("Report has no channel names")
        channels = self.noisy_channels if kind is None else self.bad_channels(kind)
        return [self.channel_names[ch - 1] for ch in channels]

    def as_dict(self) -> Dict[str, Any]:
        """Return the report with numpy arrays converted to nested lists."""
        result = {}
        for key, value in self.__dict__.items():
            if isinstance(value, np.ndarray):
                value = value.tolist()
            result[key] = value
        return result
