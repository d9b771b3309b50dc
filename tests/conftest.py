import numpy as np
import pytest

from trnbias.data import synthesize_path
from trnbias.rng import DEFAULT_SEED, MWC256


@pytest.fixture
def rng() -> MWC256:
    return MWC256(DEFAULT_SEED)


@pytest.fixture
def short_path() -> np.ndarray:
    """60 bars, mild drift, seed 7 — small enough for the grid to be bounded by N."""
    return synthesize_path(60, 0.05, MWC256(7))


@pytest.fixture
def tiny_path() -> np.ndarray:
    """3 bars: (1, 2) is the only candidate pair."""
    return synthesize_path(3, 0.0, MWC256(7))
