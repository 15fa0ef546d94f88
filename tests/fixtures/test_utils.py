"""Shared helpers for the test suite."""

import shutil
import tempfile
from pathlib import Path

import numpy as np


class BaseTestCase:
    """Base class giving each test a fresh temporary directory."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp(prefix="noisychannels_test_"))

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)


class ReportAssertions:
    """Assertions about the structure of a NoisyChannelsReport."""

    @staticmethod
    def assert_report_shapes(report, n_channels, n_correlation_windows=None, n_ransac_windows=None):
        assert report.robust_channel_deviation.shape == (n_channels,)
        assert report.zscore_hf_noise.shape == (n_channels,)
        assert report.median_max_correlation.shape == (n_channels,)
        assert report.fraction_bad_correlation_windows.shape == (n_channels,)
        assert report.ransac_bad_window_fraction.shape == (n_channels,)
        if n_correlation_windows is not None:
            assert report.maximum_correlations.shape == (n_channels, n_correlation_windows)
            assert report.noise_levels.shape == (n_channels, n_correlation_windows)
            assert report.channel_deviations.shape == (n_channels, n_correlation_windows)
            assert len(report.correlation_offsets) == n_correlation_windows
        if n_ransac_windows is not None:
            assert report.ransac_correlations.shape == (n_channels, n_ransac_windows)
            assert len(report.ransac_offsets) == n_ransac_windows

    @staticmethod
    def assert_union_property(report):
        union = (
            set(report.bad_channels_from_deviation)
            | set(report.bad_channels_from_hf_noise)
            | set(report.bad_channels_from_correlation)
            | set(report.bad_channels_from_ransac)
        )
        assert set(report.noisy_channels) == union
        assert report.noisy_channels == sorted(report.noisy_channels)

    @staticmethod
    def assert_arrays_equal(first, second):
        assert np.array_equal(np.asarray(first), np.asarray(second), equal_nan=True)
