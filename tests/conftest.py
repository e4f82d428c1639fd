"""
Pytest configuration and shared fixtures for Spillway tests.

Provides reusable fixtures for:
- Random number generators
- Sample spend series
- Spend DataFrames and transform configs
- Transform parameters
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from datetime import date, timedelta
from hypothesis import settings, Verbosity

from spillway.data.schemas import (
    CarryoverParams,
    ChannelTransform,
    HillParams,
    TransformConfig,
)


# =============================================================================
# BASIC FIXTURES
# =============================================================================


@pytest.fixture
def random_seed() -> int:
    """Consistent random seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(random_seed: int) -> np.random.Generator:
    """NumPy random generator."""
    return np.random.default_rng(random_seed)


@pytest.fixture
def channels() -> list[str]:
    """Channels used in the DataFrame fixtures."""
    return ["tv_spend", "search_spend", "social_spend"]


# =============================================================================
# SPEND DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_spend_series(rng: np.random.Generator) -> np.ndarray:
    """Sample weekly spend data (52 weeks)."""
    base = rng.lognormal(mean=10, sigma=0.5, size=52)
    # Dark weeks
    base[10:12] = 0
    base[30:32] = 0
    return base


@pytest.fixture
def sample_spend_series_short() -> np.ndarray:
    """Short spend series for edge case testing."""
    return np.array([100.0, 50.0, 0.0, 75.0, 25.0])


@pytest.fixture
def sample_spend_series_sparse() -> np.ndarray:
    """Very sparse spend: a single five-week flight."""
    x = np.zeros(26)
    x[10:15] = [50000, 60000, 40000, 30000, 20000]
    return x


@pytest.fixture
def normalized_spend_series(sample_spend_series: np.ndarray) -> np.ndarray:
    """Spend series scaled to [0, 1]."""
    return sample_spend_series / sample_spend_series.max()


@pytest.fixture
def spend_df(channels: list[str], rng: np.random.Generator) -> pd.DataFrame:
    """20 weeks of spend with a date column, one column per channel."""
    start = date(2024, 1, 1)
    records = []
    for week in range(20):
        row = {"date": start + timedelta(weeks=week)}
        for channel in channels:
            row[channel] = float(rng.lognormal(8, 0.5))
        records.append(row)

    df = pd.DataFrame(records)
    df["date"] = pd.to_datetime(df["date"])
    return df


# =============================================================================
# TRANSFORM PARAMETER FIXTURES
# =============================================================================


@pytest.fixture
def carryover_params() -> CarryoverParams:
    """Standard peaked adstock parameters."""
    return CarryoverParams(length=8, peak=1, decay=0.7)


@pytest.fixture
def hill_params() -> HillParams:
    """Standard Hill parameters on normalized spend."""
    return HillParams(half_saturation=0.5, slope=2.0)


@pytest.fixture
def transform_config(channels: list[str]) -> TransformConfig:
    """Transform config covering every fixture channel."""
    params = {
        "tv_spend": ((13, 2.0, 0.8), (0.6, 1.5), 2.0),
        "search_spend": ((4, 0.0, 0.3), (0.35, 2.5), 1.0),
        "social_spend": ((6, 0.0, 0.5), (0.45, 2.0), 0.5),
    }
    transforms = []
    for channel in channels:
        (length, peak, decay), (K, S), coef = params[channel]
        transforms.append(
            ChannelTransform(
                channel=channel,
                carryover=CarryoverParams(length=length, peak=peak, decay=decay),
                hill=HillParams(half_saturation=K, slope=S),
                coefficient=coef,
            )
        )
    return TransformConfig(channels=transforms)


# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

settings.register_profile("ci", max_examples=50, deadline=None)
settings.register_profile("dev", max_examples=10, deadline=None)
settings.register_profile(
    "debug", max_examples=5, verbosity=Verbosity.verbose, deadline=None
)
