"""Crossover engine — Numba JIT grid search and fixed-parameter replay.

Rule: at bar i compare the mean of the last ``short`` log-prices with the
mean of the last ``long`` log-prices (both windows end at i, inclusive).
  short mean > long mean  →  long,  earn x[i+1] - x[i]
  short mean < long mean  →  short, earn x[i] - x[i+1]
  equal                   →  flat,  earn 0
Evaluable bars run from ``long - 1`` through ``n - 2``, so every pair is scored
over ``n - long`` bars.

Search:
- long lookback ascending over [2, min(max_lookback, n)), short ascending over
  [1, long); a pair replaces the incumbent only on a strictly greater score,
  so the first pair found wins ties.
- window sums are seeded once per pair, then slid incrementally (O(1) per bar).
- kernels are sequential; the winner depends on enumeration order.
"""

import math
import operator
from enum import IntEnum
from typing import NamedTuple

import numba as nb
import numpy as np

MAX_LOOKBACK = 200

# Seeds for the profit-factor win/loss sums and the Sharpe sum of squares.
# Exact values matter for tie-breaking when returns are all zero.
PF_EPSILON = 1e-60
SHARPE_EPSILON = 1e-8

_WORST_SCORE = -1.0e60


class Criterion(IntEnum):
    MEAN_RETURN = 0
    PROFIT_FACTOR = 1
    SHARPE_RATIO = 2


class Fit(NamedTuple):
    """Best lookback pair from a grid search.

    ``(0, 0)`` means no candidate pair could be scored; ``score`` is NaN then.
    """

    short: int
    long: int
    score: float

    @property
    def found(self) -> bool:
        return self.long > 0


# ---------------------------------------------------------------------------
# Kernels
# ---------------------------------------------------------------------------


@nb.njit(cache=True, error_model="numpy")
def _window_sums(x, i, short, long):
    """Sums of the ``short`` and ``long`` windows ending at bar i.

    The long sum continues from the short sum, walking backwards from x[i].
    """
    short_sum = 0.0
    j = i
    while j > i - short:
        short_sum += x[j]
        j -= 1
    long_sum = short_sum
    while j > i - long:
        long_sum += x[j]
        j -= 1
    return short_sum, long_sum


@nb.njit(cache=True, error_model="numpy")
def _bar_return(x, i, short_mean, long_mean):
    if short_mean > long_mean:
        return x[i + 1] - x[i]
    elif short_mean < long_mean:
        return x[i] - x[i + 1]
    return 0.0


@nb.njit(cache=True, error_model="numpy")
def _score_pair(x, short, long, criterion):
    """Simulate one (short, long) pair and score it under ``criterion``."""
    n = len(x)
    total_return = 0.0
    win_sum = PF_EPSILON
    lose_sum = PF_EPSILON
    sum_squares = PF_EPSILON
    short_sum = 0.0
    long_sum = 0.0

    for i in range(long - 1, n - 1):
        if i == long - 1:
            short_sum, long_sum = _window_sums(x, i, short, long)
        else:
            short_sum += x[i] - x[i - short]
            long_sum += x[i] - x[i - long]

        ret = _bar_return(x, i, short_sum / short, long_sum / long)

        total_return += ret
        sum_squares += ret * ret
        if ret > 0.0:
            win_sum += ret
        else:
            lose_sum -= ret

    n_bars = n - long
    if criterion == 0:
        return total_return / n_bars
    if criterion == 1:
        return win_sum / lose_sum

    mean_ret = total_return / n_bars
    variance = sum_squares / n_bars - mean_ret * mean_ret
    # Cancellation can leave a tiny negative variance
    if variance < 0.0:
        variance = 0.0
    return mean_ret / (math.sqrt(variance) + SHARPE_EPSILON)


@nb.njit(cache=True, error_model="numpy")
def _optimize(x, criterion, max_lookback):
    """Exhaustive scan; returns (best_short, best_long, best_score)."""
    n = len(x)
    long_stop = min(max_lookback, n)
    best_score = _WORST_SCORE
    best_short = 0
    best_long = 0

    for long in range(2, long_stop):
        for short in range(1, long):
            score = _score_pair(x, short, long, criterion)
            if score > best_score:
                best_score = score
                best_short = short
                best_long = long

    return best_short, best_long, best_score


@nb.njit(cache=True, error_model="numpy")
def _score_grid(x, criterion, max_lookback):
    """Score matrix indexed [long, short]; NaN where the pair is not a candidate."""
    n = len(x)
    out = np.full((max_lookback, max_lookback), np.nan)
    for long in range(2, min(max_lookback, n)):
        for short in range(1, long):
            out[long, short] = _score_pair(x, short, long, criterion)
    return out


@nb.njit(cache=True, error_model="numpy")
def _replay(x, short, long):
    """Mean per-bar return of a fixed pair, recomputing both windows every bar."""
    n = len(x)
    total = 0.0
    for i in range(long - 1, n - 1):
        short_sum, long_sum = _window_sums(x, i, short, long)
        total += _bar_return(x, i, short_sum / short, long_sum / long)
    return total / (n - long)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _as_series(series) -> np.ndarray:
    x = np.ascontiguousarray(series, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"price series must be 1-D, got shape {x.shape}")
    if len(x) < 2:
        raise ValueError(f"price series needs at least 2 bars, got {len(x)}")
    return x


def _check_lookback_limit(max_lookback: int) -> int:
    if max_lookback < 2:
        raise ValueError(f"max_lookback must be >= 2, got {max_lookback}")
    return int(max_lookback)


def optimize(criterion, series, max_lookback: int = MAX_LOOKBACK) -> Fit:
    """Find the (short, long) pair that maximizes ``criterion`` on ``series``.

    Returns ``Fit(0, 0, nan)`` when the series is too short for any pair
    with ``long < len(series)``.
    """
    criterion = Criterion(criterion)
    x = _as_series(series)
    limit = _check_lookback_limit(max_lookback)
    short, long, score = _optimize(x, int(criterion), limit)
    if long == 0:
        return Fit(0, 0, math.nan)
    return Fit(int(short), int(long), float(score))


def score_grid(criterion, series, max_lookback: int = MAX_LOOKBACK) -> np.ndarray:
    """Score every candidate pair; ``grid[long, short]`` (NaN outside the search space)."""
    criterion = Criterion(criterion)
    x = _as_series(series)
    return _score_grid(x, int(criterion), _check_lookback_limit(max_lookback))


def evaluate(series, short: int, long: int) -> float:
    """Mean per-bar return of the crossover rule with fixed lookbacks."""
    x = _as_series(series)
    short = operator.index(short)
    long = operator.index(long)
    if not 1 <= short < long < len(x):
        raise ValueError(
            f"need 1 <= short < long < {len(x)}, got short={short}, long={long}"
        )
    return float(_replay(x, short, long))


# ---------------------------------------------------------------------------
# Warmup: trigger Numba compilation at import time
# ---------------------------------------------------------------------------

_dummy_x = np.array([0.0, 0.5, 0.25, 0.75], dtype=np.float64)
_optimize(_dummy_x, 0, 4)
_score_grid(_dummy_x, 0, 4)
_replay(_dummy_x, 1, 2)
del _dummy_x
