"""Spherical spline interpolation between sensor positions.

Implements the spherical splines of Perrin et al. (1989): sensor positions
are projected onto the unit sphere and each target sensor is predicted as a
weighted sum of the source sensors, the weights coming from a Legendre
series of the cosine of the angle between sensors.

The kernel and matrix are ported from MNE's private helpers in
``mne/channels/interpolation.py``.
"""

import numpy as np
from numpy.polynomial.legendre import legval
from scipy import linalg

N_LEGENDRE_TERMS = 7
STIFFNESS = 4
REGULARIZATION = 1e-5


def _normalize(positions: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(positions, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return positions / norms


def _calc_g(cosang: np.ndarray, stiffness: int = STIFFNESS,
            n_legendre_terms: int = N_LEGENDRE_TERMS) -> np.ndarray:
    """Spline kernel ``g(cos(angle))`` truncated after ``n_legendre_terms`` terms."""
    factors = [
        (2 * n + 1) / (n ** stiffness * (n + 1) ** stiffness * 4 * np.pi)
        for n in range(1, n_legendre_terms + 1)
    ]
    return legval(cosang, [0] + factors)


def spherical_spline_matrix(pos_from: np.ndarray, pos_to: np.ndarray,
                            alpha: float = REGULARIZATION) -> np.ndarray:
    """Matrix mapping signals at ``pos_from`` to signals at ``pos_to``.

    Parameters
    ----------
    pos_from : ndarray, shape (n_from, 3)
        Positions of the sensors with known signal.
    pos_to : ndarray, shape (n_to, 3)
        Positions to interpolate to.
    alpha : float
        Ridge added to the diagonal of the source kernel.

    Returns
    -------
    interpolation : ndarray, shape (n_to, n_from)
        ``signal_to = interpolation @ signal_from``.
    """
    pos_from = _normalize(np.asarray(pos_from, dtype=float))
    pos_to = _normalize(np.asarray(pos_to, dtype=float))
    n_from = pos_from.shape[0]
    n_to = pos_to.shape[0]

    cosang_from = np.clip(pos_from @ pos_from.T, -1.0, 1.0)
    cosang_to_from = np.clip(pos_to @ pos_from.T, -1.0, 1.0)
    g_from = _calc_g(cosang_from)
    g_to_from = _calc_g(cosang_to_from)
    g_from.flat[:: n_from + 1] += alpha

    # Bordered system enforcing a constant term
    c = np.vstack([
        np.hstack([g_from, np.ones((n_from, 1))]),
        np.hstack([np.ones((1, n_from)), [[0.0]]]),
    ])
    c_inv = linalg.pinv(c)
    return np.hstack([g_to_from, np.ones((n_to, 1))]) @ c_inv[:, :-1]
