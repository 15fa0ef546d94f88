# recording.py
from typing import Any, Dict, List, Optional

import mne
import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..utils.montage import get_channel_locations


class Recording(BaseModel):
    """Continuous multi-channel recording handed to the detector.

    ``data`` is channels x samples. ``channel_locations`` is channels x 3 with
    NaN rows for channels without a known position.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any
    srate: Optional[float] = None
    channel_locations: Optional[Any] = None
    channel_information: Optional[Dict[str, Any]] = None
    channel_names: Optional[List[str]] = Field(default=None)

    @property
    def n_channels(self) -> int:
        return int(np.shape(self.data)[0])

    @property
    def n_samples(self) -> int:
        return int(np.shape(self.data)[1])

    @classmethod
    def from_raw(cls, raw: mne.io.BaseRaw, picks: Optional[Any] = "eeg") -> "Recording":
        """Build a recording from an MNE Raw object.

        Parameters
        ----------
        raw : mne.io.BaseRaw
            Continuous data; loaded into memory by ``get_data``.
        picks : str, list or None, default 'eeg'
            Channels to keep, as understood by ``mne.pick_info``. ``None``
            keeps every channel.
        """
        if picks is not None:
            raw = raw.copy().pick(picks)

        locations = get_channel_locations(raw)
        # MNE head coordinates put the nasion on +Y
        information = {"nosedir": "+Y"} if locations is not None else None

        return cls(
            data=raw.get_data(),
            srate=float(raw.info["sfreq"]),
            channel_locations=locations,
            channel_information=information,
            channel_names=list(raw.ch_names),
        )
