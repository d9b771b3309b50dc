"""Synthetic log-price paths — random walk with a slowly alternating drift.

Each step adds ``trend + u1 + u2 - u3 - u4`` (four fresh uniforms, drawn in
that order) to the previous log-price.  The drift flips sign at every multiple
of ``TREND_FLIP_PERIOD`` and stays flipped, so the path trends for 50 bars,
then reverts for 50 bars, and so on.
"""

import numba as nb
import numpy as np

from trnbias.rng import MWC256

TREND_FLIP_PERIOD = 50
DRAWS_PER_STEP = 4


@nb.njit(cache=True, error_model="numpy")
def _random_walk(draws, trend, out):
    """Accumulate the path in place from a pre-drawn block of uniforms."""
    out[0] = 0.0
    k = 0
    for i in range(1, len(out)):
        if i % TREND_FLIP_PERIOD == 0:
            trend = -trend
        out[i] = out[i - 1] + trend + draws[k] + draws[k + 1] - draws[k + 2] - draws[k + 3]
        k += DRAWS_PER_STEP


def synthesize_path(ncases: int, trend: float, rng: MWC256) -> np.ndarray:
    """Generate ``ncases`` log-prices starting at 0.0.

    Consumes exactly ``4 * (ncases - 1)`` uniforms from ``rng``; two calls on
    the same generator therefore yield disjoint realizations of the process.
    """
    if ncases < 2:
        raise ValueError(f"ncases must be >= 2, got {ncases}")
    draws = rng.uniform(DRAWS_PER_STEP * (ncases - 1))
    x = np.empty(ncases, dtype=np.float64)
    _random_walk(draws, float(trend), x)
    return x


# Warmup: trigger Numba compilation at import time
_random_walk(np.zeros(4, dtype=np.float64), 0.0, np.empty(2, dtype=np.float64))
