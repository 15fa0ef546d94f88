"""Exceptions raised by the noisy channel detector."""


class NoisyChannelsError(Exception):
    """Base exception for noisy channel detection."""

    def __init__(self, error_message: str):
        self.message = error_message
        super().__init__(self.message)


class InvalidInputError(NoisyChannelsError):
    """The recording is not continuous 2D data or is missing required fields."""


class InvalidParameterError(NoisyChannelsError):
    """A supplied parameter violates its declared type or constraint."""

    def __init__(self, name: str, error_message: str):
        self.name = name
        super().__init__(f"Invalid value for '{name}': {error_message}")


class InvalidChannelLocationError(NoisyChannelsError):
    """Channel coordinates are absent or non-finite when RANSAC needs them."""
