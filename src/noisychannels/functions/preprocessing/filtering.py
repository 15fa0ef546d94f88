"""Low-pass separation of EEG into low- and high-frequency parts.

The high-frequency noise and correlation criteria compare each channel with
its content below 50 Hz. The low-pass is a 100th order FIR (45 Hz pass edge,
50 Hz stop edge) applied forward and backward so the result has no phase
shift relative to the raw signal.
"""

import numpy as np
from scipy import signal

#: Filtering needs content above 50 Hz, i.e. a sample rate above 100 Hz.
MIN_SRATE_FOR_FILTER = 100.0

FIR_ORDER = 100
PASS_EDGE_HZ = 45.0
STOP_EDGE_HZ = 50.0


def design_lowpass(srate: float, order: int = FIR_ORDER) -> np.ndarray:
    """Design the separation low-pass for sample rate ``srate``.

    Frequency-sampling design (``scipy.signal.firwin2``, Hamming window) with
    unit gain up to ``PASS_EDGE_HZ`` and zero gain from ``STOP_EDGE_HZ`` to
    Nyquist.
    """
    nyquist = srate / 2.0
    return signal.firwin2(
        order + 1,
        [0.0, PASS_EDGE_HZ, STOP_EDGE_HZ, nyquist],
        [1.0, 1.0, 0.0, 0.0],
        fs=srate,
        window="hamming",
    )


def lowpass_separation(x: np.ndarray, srate: float) -> np.ndarray:
    """Return the low-frequency part of samples x channels ``x``.

    At or below ``MIN_SRATE_FOR_FILTER`` Hz there is no band to separate and
    a copy of ``x`` is returned.
    """
    if srate <= MIN_SRATE_FOR_FILTER:
        return x.copy()

    b = design_lowpass(srate)
    # filtfilt needs more samples than its edge padding
    padlen = min(3 * len(b), x.shape[0] - 1)
    filtered = np.zeros_like(x)
    for k in range(x.shape[1]):
        filtered[:, k] = signal.filtfilt(b, 1.0, x[:, k], padlen=padlen)
    return filtered
