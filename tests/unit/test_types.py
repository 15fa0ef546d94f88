"""Unit tests for the Recording and NoisyChannelsReport models."""

import numpy as np
import pytest
from pydantic import ValidationError

from noisychannels import find_noisy_channels
from noisychannels.types import BAD_CHANNEL_KINDS, NoisyChannelsReport, Recording
from tests.fixtures.synthetic_data import create_sinusoid_recording, create_synthetic_raw


@pytest.fixture(scope="module")
def report():
    recording = create_sinusoid_recording()
    names = [f"E{i}" for i in range(1, 11)]
    return find_noisy_channels(recording.model_copy(update={"channel_names": names}))


class TestRecording:
    """Test the input container."""

    def test_dimensions(self):
        recording = Recording(data=np.zeros((4, 250)), srate=250)

        assert recording.n_channels == 4
        assert recording.n_samples == 250
        assert recording.channel_locations is None

    def test_from_raw(self):
        raw = create_synthetic_raw(n_channels=8, sfreq=200, duration=2)

        recording = Recording.from_raw(raw)

        assert recording.srate == 200
        assert recording.data.shape == (8, 400)
        assert recording.channel_names == raw.ch_names
        assert recording.channel_locations.shape == (8, 3)
        assert recording.channel_information == {"nosedir": "+Y"}

    def test_from_raw_keeps_only_eeg(self):
        raw = create_synthetic_raw(n_channels=8, sfreq=200, duration=2)
        raw.set_channel_types({raw.ch_names[0]: "eog"})

        recording = Recording.from_raw(raw)

        assert recording.n_channels == 7
        assert raw.ch_names[0] not in recording.channel_names

    def test_from_raw_without_montage(self):
        raw = create_synthetic_raw(n_channels=4, duration=1, montage=None)

        recording = Recording.from_raw(raw)

        assert recording.channel_locations is None
        assert recording.channel_information is None


class TestReport:
    """Test the detection report."""

    def test_is_frozen(self, report):
        with pytest.raises(ValidationError):
            report.noisy_channels = []

    def test_arrays_are_read_only(self, report):
        with pytest.raises(ValueError):
            report.robust_channel_deviation[0] = 1.0

    def test_bad_channels_by_kind(self, report):
        for kind in BAD_CHANNEL_KINDS:
            assert report.bad_channels(kind) == getattr(report, f"bad_channels_from_{kind}")

        with pytest.raises(ValueError, match="kind must be one of"):
            report.bad_channels("line_noise")

    def test_bad_channel_names(self, report):
        assert report.bad_channel_names() == ["E5"]
        assert report.bad_channel_names("ransac") == []

    def test_bad_channel_names_need_names(self, sinusoid_recording):
        unnamed = find_noisy_channels(sinusoid_recording, {"ransac_off": True})

        with pytest.raises(ValueError, match="no channel names"):
            unnamed.bad_channel_names()

    def test_as_dict(self, report):
        result = report.as_dict()

        assert set(result) == set(NoisyChannelsReport.model_fields)
        assert isinstance(result["robust_channel_deviation"], list)
        assert isinstance(result["maximum_correlations"][0], list)
        assert result["noisy_channels"] == [5]
        assert result["parameters"]["correlation_threshold"] == 0.4
