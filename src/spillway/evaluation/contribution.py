import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from spillway.data.schemas import ChannelTransform, TransformConfig, validate_spend_frame
from spillway.transforms.adstock import apply_adstock
from spillway.transforms.saturation import apply_saturation

logger = logging.getLogger(__name__)


@dataclass
class ContributionResult:
    contributions: pd.DataFrame
    adstocked: pd.DataFrame
    spend_scale: pd.Series


def _transform_channel(
    x: ArrayLike,
    transform: ChannelTransform,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    adstocked = apply_adstock(x, transform.carryover)
    saturated = np.asarray(apply_saturation(adstocked, transform.hill), dtype=np.float64)
    return adstocked, transform.coefficient * saturated


def channel_contribution(
    x: ArrayLike,
    transform: ChannelTransform,
) -> NDArray[np.float64]:
    """Contribution series ``coefficient * hill(adstock(x))`` for one channel."""
    return _transform_channel(x, transform)[1]


def compute_contributions(
    df: pd.DataFrame,
    config: TransformConfig,
    normalize: bool = True,
) -> ContributionResult:
    """
    Run every configured channel through adstock and saturation.

    Parameters
    ----------
    df : pd.DataFrame
        Weekly spend table, one column per configured channel.
    config : TransformConfig
        Per-channel transform parameters.
    normalize : bool
        Divide each channel by its maximum spend first, so half-saturation
        points are on a 0-1 scale. All-zero channels are left as zeros.

    Returns
    -------
    ContributionResult
        Contribution and adstocked series (indexed by the date column when
        present, otherwise like ``df``) and the per-channel spend scale.
        A configured ``date_col`` missing from ``df`` is ignored and the
        frame keeps its own index.

    Raises
    ------
    pandera.errors.SchemaError
        If a channel column is missing, null or negative.
    TransformError
        If a transform rejects its input.
    """
    date_col = config.date_col if config.date_col in df.columns else None
    if config.date_col is not None and date_col is None:
        logger.debug("date column %r not in frame, keeping its index", config.date_col)
    validated = validate_spend_frame(df, config.channel_names, date_col=date_col)

    if date_col is not None:
        index = pd.DatetimeIndex(validated[date_col], name=date_col)
    else:
        index = validated.index

    contributions: dict[str, NDArray[np.float64]] = {}
    adstocked: dict[str, NDArray[np.float64]] = {}
    scales: dict[str, float] = {}

    for transform in config.channels:
        x = validated[transform.channel].to_numpy(dtype=np.float64)

        scale = float(x.max()) if (normalize and x.size and x.max() > 0) else 1.0
        x = x / scale

        carried, contribution = _transform_channel(x, transform)

        adstocked[transform.channel] = carried
        contributions[transform.channel] = contribution
        scales[transform.channel] = scale
        logger.debug(
            "%s: scale=%.2f mean contribution=%.4f",
            transform.channel,
            scale,
            float(contribution.mean()) if contribution.size else 0.0,
        )

    return ContributionResult(
        contributions=pd.DataFrame(contributions, index=index),
        adstocked=pd.DataFrame(adstocked, index=index),
        spend_scale=pd.Series(scales, name="spend_scale"),
    )


def summarize_contributions(
    contributions: Union[ContributionResult, pd.DataFrame],
) -> pd.DataFrame:
    if isinstance(contributions, ContributionResult):
        contributions = contributions.contributions

    totals = contributions.sum()
    grand_total = float(totals.sum())
    shares = totals / grand_total if grand_total > 0 else totals * 0.0

    summary = pd.DataFrame(
        {
            "total": totals,
            "mean": contributions.mean(),
            "peak": contributions.max(),
            "share": shares,
        }
    )
    summary.index.name = "channel"
    return summary


def format_contribution_report(
    summary: pd.DataFrame,
    decimals: int = 3,
    title: Optional[str] = None,
) -> str:
    lines = [
        "=" * 70,
        title or "MEDIA CONTRIBUTION REPORT",
        "=" * 70,
        "",
        "CONTRIBUTION BY CHANNEL",
        "(Saturated adstock, scaled by channel coefficient)",
        "-" * 50,
        summary.round(decimals).to_string(),
        "",
    ]

    if len(summary) and float(summary["total"].sum()) > 0:
        top = summary["share"].idxmax()
        bottom = summary["share"].idxmin()
        lines.extend(
            [
                "-" * 50,
                f"Largest share: {str(top).replace('_spend', '')} ({summary.loc[top, 'share']:.1%})",
                f"Smallest share: {str(bottom).replace('_spend', '')} ({summary.loc[bottom, 'share']:.1%})",
                "",
            ]
        )

    lines.append("=" * 70)
    return "\n".join(lines)
