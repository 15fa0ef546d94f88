"""Unit tests for channel position helpers."""

import mne
import numpy as np
import pytest

from noisychannels.utils.montage import VALID_MONTAGES, get_channel_locations, set_standard_montage
from tests.fixtures.synthetic_data import create_synthetic_raw


class TestGetChannelLocations:
    """Test reading positions from Raw objects."""

    def test_positions_from_montage(self):
        raw = create_synthetic_raw(n_channels=8, duration=2)

        locations = get_channel_locations(raw)

        assert locations.shape == (8, 3)
        assert np.all(np.isfinite(locations))

    def test_no_montage_gives_none(self):
        raw = create_synthetic_raw(n_channels=8, duration=2, montage=None)

        assert get_channel_locations(raw) is None

    def test_partial_positions_become_nan_rows(self):
        raw = create_synthetic_raw(n_channels=8, duration=2)
        raw.info["chs"][3]["loc"][:3] = 0.0

        locations = get_channel_locations(raw)

        assert np.all(np.isnan(locations[3]))
        assert np.isfinite(np.delete(locations, 3, axis=0)).all()


class TestSetStandardMontage:
    """Test applying built-in montages."""

    def test_applies_montage_to_copy(self):
        raw = create_synthetic_raw(n_channels=8, duration=2, montage=None)
        raw.rename_channels(dict(zip(raw.ch_names, mne.channels.make_standard_montage("standard_1020").ch_names[:8])))

        result = set_standard_montage(raw, "standard_1020")

        assert result is not raw
        assert get_channel_locations(result) is not None
        assert get_channel_locations(raw) is None

    def test_rejects_unknown_montage(self):
        raw = create_synthetic_raw(n_channels=4, duration=1)

        with pytest.raises(ValueError, match="Invalid montage"):
            set_standard_montage(raw, "not-a-montage")

    def test_known_montages_exist_in_mne(self):
        builtin = set(mne.channels.get_builtin_montages())

        assert set(VALID_MONTAGES) <= builtin
