"""
Media transformation functions for marketing mix models.

Spend does not turn into response directly. Two effects are modeled:

1. **Adstock (Carryover)**: exposure this week keeps working in the weeks
   after it. The peaked carryover kernel weights lag ``l`` by
   ``decay ** ((l - peak) ** 2)``, so the effect can build up to a delayed
   peak before it fades.

   - Search: immediate, fast decay (peak 0, decay ≈ 0.3)
   - TV: delayed peak, long tail (peak 2, decay ≈ 0.8)

2. **Saturation (Diminishing Returns)**: the Hill curve
   ``1 / (1 + (x / K) ** -S)`` maps adstocked spend to a bounded effect
   that reaches half its maximum at ``K``.

These transforms are applied in order:

    raw_spend → adstock → saturation → contribution

All functions are pure (no side effects) and work on NumPy arrays.
"""

from spillway.transforms.adstock import (
    carryover_weights,
    carryover_adstock,
    geometric_adstock,
    weibull_adstock,
    apply_adstock,
    peak_lag,
    half_life_to_alpha,
    alpha_to_half_life,
    get_effective_spend_period,
    plot_carryover_weights,
    CHANNEL_CARRYOVER_DEFAULTS,
)
from spillway.transforms.saturation import (
    hill_saturation,
    apply_saturation,
    hill_marginal_response,
    find_saturation_threshold,
    plot_saturation_curve,
    CHANNEL_SATURATION_DEFAULTS,
)

__all__ = [
    # Adstock
    "carryover_weights",
    "carryover_adstock",
    "geometric_adstock",
    "weibull_adstock",
    "apply_adstock",
    "peak_lag",
    "half_life_to_alpha",
    "alpha_to_half_life",
    "get_effective_spend_period",
    "plot_carryover_weights",
    "CHANNEL_CARRYOVER_DEFAULTS",
    # Saturation
    "hill_saturation",
    "apply_saturation",
    "hill_marginal_response",
    "find_saturation_threshold",
    "plot_saturation_curve",
    "CHANNEL_SATURATION_DEFAULTS",
]
