"""
Synthetic weekly media spend for demos and tests.

Spend follows flighting patterns seen in real media plans: a base weekly
level per channel, seasonal bursts, random launch spikes, multiplicative
noise and dark periods where a channel is switched off.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class SyntheticSpendConfig:
    """
    Configuration for synthetic spend generation.

    Attributes
    ----------
    channels : list[str]
        Spend column names.
    n_weeks : int
        Number of weekly rows.
    start_date : date
        First week (a Monday by default).
    mean_weekly_spend : dict[str, float]
        Base weekly spend per channel; unknown channels use 10,000.
    spend_volatility : float
        Sigma of the lognormal week-to-week noise.
    dark_periods : dict[str, list[tuple[int, int]]]
        ``(start_week, n_weeks)`` ranges with zero spend, per channel.
    random_seed : int
    """

    channels: list[str] = field(
        default_factory=lambda: [
            "tv_spend",
            "radio_spend",
            "print_spend",
            "search_spend",
            "social_spend",
            "display_spend",
        ]
    )

    n_weeks: int = 104

    start_date: date = field(default_factory=lambda: date(2023, 1, 2))  # Monday

    mean_weekly_spend: dict[str, float] = field(
        default_factory=lambda: {
            "tv_spend": 80000,
            "radio_spend": 20000,
            "print_spend": 8000,
            "search_spend": 30000,
            "social_spend": 25000,
            "display_spend": 15000,
        }
    )

    spend_volatility: float = 0.35

    dark_periods: dict[str, list[tuple[int, int]]] = field(
        default_factory=lambda: {
            # TV runs in flights: dark over summer
            "tv_spend": [(26, 8), (78, 8)],
            "print_spend": [(0, 6)],
        }
    )

    random_seed: int = 42


def generate_spend_data(
    config: Optional[SyntheticSpendConfig] = None,
    random_seed: Optional[int] = None,
) -> pd.DataFrame:
    """
    Generate weekly spend per channel.

    Parameters
    ----------
    config : SyntheticSpendConfig, optional
        Generation settings; defaults to ``SyntheticSpendConfig()``.
    random_seed : int, optional
        Overrides ``config.random_seed``.

    Returns
    -------
    pd.DataFrame
        ``date`` column plus one non-negative column per channel.
    """
    if config is None:
        config = SyntheticSpendConfig()
    if config.n_weeks < 1:
        raise ValueError(f"n_weeks must be >= 1, got {config.n_weeks}")

    seed = config.random_seed if random_seed is None else random_seed
    rng = np.random.default_rng(seed)

    records = []
    for week in range(config.n_weeks):
        current_date = config.start_date + timedelta(weeks=week)

        # Q4 push, January dip
        q4_boost = 1.3 if current_date.month in [11, 12] else 1.0
        jan_dip = 0.8 if current_date.month == 1 else 1.0
        seasonality = q4_boost * jan_dip

        row: dict = {"date": current_date}
        for channel in config.channels:
            base_spend = config.mean_weekly_spend.get(channel, 10000.0)

            launch_spike = 1.0
            if rng.random() < 0.05:
                launch_spike = rng.uniform(1.5, 2.5)

            noise = rng.lognormal(0, config.spend_volatility)
            spend = base_spend * seasonality * launch_spike * noise

            for gap_start, gap_duration in config.dark_periods.get(channel, []):
                if gap_start <= week < gap_start + gap_duration:
                    spend = 0.0
                    break

            row[channel] = max(0.0, round(spend, 2))

        records.append(row)

    df = pd.DataFrame(records)
    df["date"] = pd.to_datetime(df["date"])
    logger.debug(
        "generated %d weeks of spend for %d channels (seed=%s)",
        config.n_weeks,
        len(config.channels),
        seed,
    )
    return df


def save_spend_data(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    output_path = Path(path)
    output_path.parent.mkdir(exist_ok=True, parents=True)
    df.to_csv(output_path, index=False)
    return output_path


def load_spend_data(path: Union[str, Path], date_col: Optional[str] = "date") -> pd.DataFrame:
    parse_dates = [date_col] if date_col else False
    return pd.read_csv(path, parse_dates=parse_dates)
