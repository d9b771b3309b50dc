"""Deterministic uniform generator — Marsaglia's 256-lag multiply-with-carry.

The stream must match other MWC256 implementations bit-for-bit for a given
seed and call count, since every synthetic path (and therefore every IS/OOS
figure) is derived from it.

State layout (owned by an ``MWC256`` instance, never module-global):
  - ``_q``     : 256-word lag table, int64 holding unsigned 32-bit values
  - ``_state`` : int64 vector [carry, index, initialized, seed]

The table is populated lazily on the first draw after a reset, from a
69069/12345 LCG run over the stored seed.  Each draw advances the rotating
index (mod 256) and computes ``t = 809430660 * q[index] + carry`` in 64 bits;
the high word becomes the new carry, the low word replaces ``q[index]`` and is
returned.  The product never exceeds 2**63, so signed int64 is exact.
"""

import numba as nb
import numpy as np

DEFAULT_SEED = 123456789

_TABLE_SIZE = 256
_INITIAL_CARRY = 362436
_INITIAL_INDEX = 255
_MULTIPLIER = 809430660
_LCG_A = 69069
_LCG_C = 12345
_MASK32 = 0xFFFFFFFF
_UNIT = 1.0 / 0xFFFFFFFF

# Indices into the state vector
_CARRY = 0
_INDEX = 1
_INITIALIZED = 2
_SEED = 3


@nb.njit(cache=True)
def _mwc_next(q, state):
    """Advance the generator one step and return the new 32-bit word."""
    if state[_INITIALIZED] == 0:
        j = state[_SEED]
        for k in range(_TABLE_SIZE):
            j = (_LCG_A * j + _LCG_C) & _MASK32
            q[k] = j
        state[_INITIALIZED] = 1

    idx = (state[_INDEX] + 1) & 0xFF
    t = _MULTIPLIER * q[idx] + state[_CARRY]
    state[_CARRY] = t >> 32
    q[idx] = t & _MASK32
    state[_INDEX] = idx
    return q[idx]


@nb.njit(cache=True)
def _fill_uint32(q, state, out):
    for k in range(len(out)):
        out[k] = _mwc_next(q, state)


@nb.njit(cache=True)
def _fill_uniform(q, state, out):
    for k in range(len(out)):
        out[k] = _UNIT * _mwc_next(q, state)


class MWC256:
    """Seeded 32-bit multiply-with-carry stream plus a derived [0, 1) sampler.

    Not thread-safe: every draw mutates the table, carry and index.  Give each
    replication run (or test) its own instance.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self._q = np.zeros(_TABLE_SIZE, dtype=np.int64)
        self._state = np.zeros(4, dtype=np.int64)
        self.reset(seed)

    def __repr__(self):
        return f"MWC256(seed={self.seed}, index={int(self._state[_INDEX])})"

    @property
    def seed(self) -> int:
        return int(self._state[_SEED])

    def reset(self, seed: int) -> None:
        """Discard all stream state; the table is rebuilt on the next draw."""
        self._q[:] = 0
        self._state[_CARRY] = _INITIAL_CARRY
        self._state[_INDEX] = _INITIAL_INDEX
        self._state[_INITIALIZED] = 0
        self._state[_SEED] = int(seed) & _MASK32

    def next_uint32(self) -> int:
        return int(_mwc_next(self._q, self._state))

    def next_uniform(self) -> float:
        """Next value of ``next_uint32() / (2**32 - 1)``."""
        return _UNIT * _mwc_next(self._q, self._state)

    def uint32(self, size: int) -> np.ndarray:
        """Draw ``size`` successive raw words."""
        out = np.empty(size, dtype=np.int64)
        _fill_uint32(self._q, self._state, out)
        return out

    def uniform(self, size: int) -> np.ndarray:
        """Draw ``size`` successive uniforms; same values as repeated next_uniform()."""
        out = np.empty(size, dtype=np.float64)
        _fill_uniform(self._q, self._state, out)
        return out


def reset_generator(rng: MWC256, seed: int = DEFAULT_SEED) -> None:
    """Reset a caller-owned generator to a fresh stream for ``seed``."""
    rng.reset(seed)


def next_uniform(rng: MWC256) -> float:
    return rng.next_uniform()


# ---------------------------------------------------------------------------
# Warmup: trigger Numba compilation at import time
# ---------------------------------------------------------------------------

_warm = MWC256()
_warm.uniform(2)
_warm.uint32(2)
del _warm
