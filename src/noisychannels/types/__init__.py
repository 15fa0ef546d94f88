"""Input and output models for noisy channel detection."""

from .recording import Recording
from .report import BAD_CHANNEL_KINDS, NoisyChannelsReport

__all__ = ["Recording", "NoisyChannelsReport", "BAD_CHANNEL_KINDS"]
