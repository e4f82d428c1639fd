import logging
import math
from numbers import Real
from typing import TYPE_CHECKING, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from spillway.errors import DomainError, InvalidParameterError

if TYPE_CHECKING:
    import matplotlib.figure

    from spillway.data.schemas import HillParams

logger = logging.getLogger(__name__)


# Half-saturation points are on max-normalized spend.
CHANNEL_SATURATION_DEFAULTS: dict[str, dict] = {
    "tv_spend": {"K": 0.60, "S": 1.5, "description": "Broad reach, slow saturation."},
    "radio_spend": {"K": 0.55, "S": 1.8, "description": "Moderate-slow saturation."},
    "print_spend": {"K": 0.50, "S": 1.5, "description": "Moderate saturation."},
    "search_spend": {"K": 0.35, "S": 2.5, "description": "Demand-capped, quick saturation."},
    "social_spend": {"K": 0.45, "S": 2.0, "description": "Moderate saturation."},
    "display_spend": {"K": 0.40, "S": 2.2, "description": "Frequency-capped saturation."},
}


def _check_positive(value: float, name: str) -> float:
    if not isinstance(value, Real) or not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(name, value, "must be finite and > 0")
    return float(value)


def hill_saturation(
    x: ArrayLike,
    half_saturation: float,
    slope: float,
) -> Union[float, NDArray[np.float64]]:
    """
    Hill diminishing-returns curve ``1 / (1 + (x / K) ** -S)``.

    Output rises monotonically from 0 towards 1 and equals exactly 0.5 at
    ``x == half_saturation``. ``x == 0`` maps to 0, the limit of the curve,
    instead of evaluating ``0 ** -S``.

    Parameters
    ----------
    x : float or array-like
        Non-negative (usually adstocked) exposure or spend.
    half_saturation : float
        K > 0, the input giving half of the maximum effect.
    slope : float
        S > 0, steepness of the curve around K.

    Returns
    -------
    float or NDArray[np.float64]
        A float for scalar input, otherwise an array shaped like ``x``.

    Raises
    ------
    InvalidParameterError
        If K or S is not a finite positive number.
    DomainError
        If ``x`` holds negative or NaN values.

    Examples
    --------
    >>> hill_saturation(200.0, half_saturation=100.0, slope=2.0)
    0.8
    """
    K = _check_positive(half_saturation, "half_saturation")
    S = _check_positive(slope, "slope")

    x_arr = np.asarray(x, dtype=np.float64)
    if np.isnan(x_arr).any():
        raise DomainError("Hill saturation input contains NaN values")
    if (x_arr < 0).any():
        raise DomainError(
            f"Hill saturation is undefined for negative input, got min {x_arr.min()}"
        )

    flat = np.atleast_1d(x_arr)
    result = np.zeros(flat.shape, dtype=np.float64)
    positive = flat > 0
    # Tiny x overflows (x / K) ** -S to inf, which correctly yields 0.
    with np.errstate(over="ignore"):
        result[positive] = 1.0 / (1.0 + (flat[positive] / K) ** (-S))

    if x_arr.ndim == 0:
        return float(result[0])
    return result.reshape(x_arr.shape)


def apply_saturation(
    x: ArrayLike, params: "HillParams"
) -> Union[float, NDArray[np.float64]]:
    return hill_saturation(
        x, half_saturation=params.half_saturation, slope=params.slope
    )


def hill_marginal_response(
    x: ArrayLike,
    half_saturation: float,
    slope: float,
) -> Union[float, NDArray[np.float64]]:
    """
    Derivative of :func:`hill_saturation` with respect to ``x``.

    Uses ``d/dx hill(x) = S / x * hill(x) * (1 - hill(x))`` for ``x > 0``.
    At ``x == 0`` the derivative is 1/K when S == 1, 0 when S > 1 and
    unbounded (returned as ``inf``) when S < 1.
    """
    K = _check_positive(half_saturation, "half_saturation")
    S = _check_positive(slope, "slope")

    h = np.atleast_1d(np.asarray(hill_saturation(x, K, S), dtype=np.float64))
    flat = np.atleast_1d(np.asarray(x, dtype=np.float64))

    if S == 1:
        at_zero = 1.0 / K
    elif S > 1:
        at_zero = 0.0
    else:
        at_zero = np.inf

    result = np.full(flat.shape, at_zero, dtype=np.float64)
    positive = flat > 0
    result[positive] = S / flat[positive] * h[positive] * (1.0 - h[positive])

    if np.ndim(x) == 0:
        return float(result[0])
    return result.reshape(np.shape(x))


def find_saturation_threshold(
    half_saturation: float,
    slope: float,
    threshold: float = 0.9,
) -> float:
    """Input level at which the Hill curve reaches ``threshold``."""
    K = _check_positive(half_saturation, "half_saturation")
    S = _check_positive(slope, "slope")
    if not 0 < threshold < 1:
        raise InvalidParameterError("threshold", threshold, "must be in (0, 1)")

    return float(K * (threshold / (1 - threshold)) ** (1 / S))


def plot_saturation_curve(
    saturation_params: dict[str, dict],
    x_max: float = 1.0,
    n_points: int = 100,
    figsize: tuple[int, int] = (10, 6),
    title: str = "Saturation Curves by Channel",
) -> "matplotlib.figure.Figure":
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=figsize)
    x = np.linspace(0, x_max, n_points)

    for name, params in saturation_params.items():
        K = float(params["K"])
        y = hill_saturation(x, half_saturation=K, slope=float(params["S"]))
        ax.plot(x, y, label=name, linewidth=2)

        if 0 <= K <= x_max:
            ax.scatter([K], [0.5], marker="o", s=50, zorder=5)

    ax.set_xlabel("Adstocked Spend (normalized)")
    ax.set_ylabel("Effect (fraction of maximum)")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    ax.set_xlim(0, x_max)
    ax.set_ylim(0, 1.05)

    plt.tight_layout()
    logger.debug("plotted %d saturation curves", len(saturation_params))
    return fig
