"""Utility functions for reading channel positions from MNE objects."""

from typing import Optional

import mne
import numpy as np

from .logging import message

VALID_MONTAGES = {
    "standard_1005": "10-05 system",
    "standard_1020": "10-20 system",
    "standard_alphabetic": "Letter-number combos",
    "standard_postfixed": "10-20 with postfixes",
    "standard_prefixed": "10-20 with prefixes",
    "standard_primed": "10-20 with primes",
    "biosemi16": "BioSemi 16",
    "biosemi32": "BioSemi 32",
    "biosemi64": "BioSemi 64",
    "biosemi128": "BioSemi 128",
    "biosemi160": "BioSemi 160",
    "biosemi256": "BioSemi 256",
    "easycap-M1": "EasyCap M1 (10-05)",
    "easycap-M10": "EasyCap M10",
    "EGI_256": "EGI 256",
    "GSN-HydroCel-32": "HydroCel GSN 32",
    "GSN-HydroCel-64_1.0": "HydroCel GSN 64",
    "GSN-HydroCel-65_1.0": "HydroCel GSN 65",
    "GSN-HydroCel-128": "HydroCel GSN 128",
    "GSN-HydroCel-129": "HydroCel GSN 129",
    "GSN-HydroCel-256": "HydroCel GSN 256",
    "GSN-HydroCel-257": "HydroCel GSN 257",
    "mgh60": "MGH 60-channel",
    "mgh70": "MGH 70-channel",
}


def get_channel_locations(raw: mne.io.BaseRaw) -> Optional[np.ndarray]:
    """Return the channels x 3 sensor positions of ``raw``.

    Channels without a position get a NaN row. ``None`` is returned when no
    channel has a position, which is what MNE reports for data without a
    montage.
    """
    locations = np.array([ch["loc"][:3] for ch in raw.info["chs"]], dtype=float)
    if locations.size == 0:
        return None

    missing = ~np.isfinite(locations).all(axis=1) | np.all(locations == 0, axis=1)
    if missing.all():
        message("debug", "No channel positions found in recording")
        return None

    if missing.any():
        message(
            "warning",
            f"{int(missing.sum())} channels have no position: "
            f"{[raw.ch_names[i] for i in np.flatnonzero(missing)]}",
        )
    locations[missing] = np.nan
    return locations


def set_standard_montage(raw: mne.io.BaseRaw, montage: str) -> mne.io.BaseRaw:
    """Return a copy of ``raw`` with one of the built-in MNE montages applied."""
    if montage not in VALID_MONTAGES:
        error_msg = (
            f"Invalid montage: {montage}. Supported: {', '.join(VALID_MONTAGES.keys())}"
        )
        message("error", error_msg)
        raise ValueError(error_msg)

    result = raw.copy()
    result.set_montage(mne.channels.make_standard_montage(montage), on_missing="warn")
    message("success", f"✓ Montage applied: {montage}")
    return result
