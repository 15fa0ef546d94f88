"""Utility functions and helpers.

Import specific modules directly:

    from noisychannels.utils.config import load_parameters
    from noisychannels.utils.logging import message
    from noisychannels.utils.montage import get_channel_locations
"""

__all__ = []
