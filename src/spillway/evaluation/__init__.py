"""
Contribution reporting for transformed media channels.

This module provides tools for:
- Per-channel contribution series (adstock → saturation → coefficient)
- Contribution totals and shares
- Plain-text contribution reports
"""

from spillway.evaluation.contribution import (
    ContributionResult,
    channel_contribution,
    compute_contributions,
    summarize_contributions,
    format_contribution_report,
)

__all__ = [
    "ContributionResult",
    "channel_contribution",
    "compute_contributions",
    "summarize_contributions",
    "format_contribution_report",
]
