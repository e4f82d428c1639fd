import logging
import math
from numbers import Integral, Real
from typing import TYPE_CHECKING, Literal, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from spillway.errors import DomainError, InvalidParameterError

if TYPE_CHECKING:
    import matplotlib.figure

    from spillway.data.schemas import CarryoverParams

logger = logging.getLogger(__name__)


CHANNEL_CARRYOVER_DEFAULTS: dict[str, dict] = {
    "tv_spend": {
        "length": 13,
        "peak": 2.0,
        "decay": 0.80,
        "description": "Builds over two weeks, long tail.",
    },
    "radio_spend": {
        "length": 8,
        "peak": 1.0,
        "decay": 0.70,
        "description": "Short delay, moderate tail.",
    },
    "print_spend": {
        "length": 6,
        "peak": 1.0,
        "decay": 0.60,
        "description": "Weekly titles, one week delay.",
    },
    "search_spend": {
        "length": 4,
        "peak": 0.0,
        "decay": 0.30,
        "description": "Immediate, fast decay.",
    },
    "social_spend": {
        "length": 6,
        "peak": 0.0,
        "decay": 0.50,
        "description": "Immediate, moderate decay.",
    },
    "display_spend": {
        "length": 6,
        "peak": 0.0,
        "decay": 0.45,
        "description": "Immediate, moderate-fast decay.",
    },
}


def _check_length(length: int, name: str = "length") -> int:
    if isinstance(length, bool) or not isinstance(length, Integral):
        raise InvalidParameterError(name, length, "must be an integer")
    if length < 1:
        raise InvalidParameterError(name, length, "must be >= 1")
    return int(length)


def _check_unit_interval(value: float, name: str) -> float:
    if not isinstance(value, Real) or not math.isfinite(value):
        raise InvalidParameterError(name, value, "must be a finite number")
    if not 0 <= value <= 1:
        raise InvalidParameterError(name, value, "must be in [0, 1]")
    return float(value)


def _check_positive(value: float, name: str) -> float:
    if not isinstance(value, Real) or not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(name, value, "must be finite and > 0")
    return float(value)


def _as_series(x: ArrayLike) -> NDArray[np.float64]:
    arr = np.asarray(x, dtype=np.float64)
    if arr.ndim != 1:
        raise DomainError(f"input series must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise DomainError("input series contains NaN or infinite values")
    return arr


def _convolve(x: NDArray[np.float64], weights: NDArray[np.float64]) -> NDArray[np.float64]:
    # Lag l multiplies x[t - l]; positions before the start count as zero spend.
    if x.size == 0:
        return x.copy()
    return np.convolve(x, weights, mode="full")[: x.size]


def carryover_weights(
    length: int,
    peak: float,
    decay: float,
    normalize: bool = True,
) -> NDArray[np.float64]:
    """
    Peaked carryover weights ``decay ** ((lag - peak) ** 2)`` for lags ``0..length-1``.

    Parameters
    ----------
    length : int
        Number of lags in the window (L >= 1).
    peak : float
        Lag at which the weight is largest (P >= 0).
    decay : float
        Retention rate in [0, 1]. Close to 1 gives flat weights, close to 0
        a sharp spike at ``peak``.
    normalize : bool
        Divide by the weight sum so the weights add up to 1.

    Returns
    -------
    NDArray[np.float64]
        Weights indexed by lag.

    Raises
    ------
    InvalidParameterError
        If a parameter is out of range or every weight is zero (for example
        ``decay=0`` with a non-integer ``peak``).

    Examples
    --------
    >>> carryover_weights(4, peak=1, decay=0.8, normalize=False)
    array([0.8   , 1.    , 0.8   , 0.4096])
    """
    length = _check_length(length)
    if not isinstance(peak, Real) or not math.isfinite(peak) or peak < 0:
        raise InvalidParameterError("peak", peak, "must be finite and >= 0")
    decay = _check_unit_interval(decay, "decay")

    lags = np.arange(length, dtype=np.float64)
    weights = np.power(decay, (lags - float(peak)) ** 2)

    total = float(weights.sum())
    if total <= 0:
        raise InvalidParameterError(
            "decay",
            decay,
            f"all carryover weights vanish for length={length}, peak={peak}",
        )
    if normalize:
        weights = weights / total
    return weights


def carryover_adstock(
    x: ArrayLike,
    length: int,
    peak: float,
    decay: float,
) -> NDArray[np.float64]:
    """
    Apply peaked (delayed) adstock to a spend or exposure series.

    Each output value is the weighted mean of the current value and the
    ``length - 1`` values before it, using :func:`carryover_weights`. The
    series is padded with ``length - 1`` zeros on the left, so the output has
    the same length as the input and every value lies between the min and
    max of its window.

    Parameters
    ----------
    x : array-like
        One-dimensional series indexed by time step.
    length, peak, decay
        See :func:`carryover_weights`.

    Returns
    -------
    NDArray[np.float64]
        Adstocked series, same length as ``x``.

    Raises
    ------
    InvalidParameterError
        On invalid ``length``, ``peak`` or ``decay``.
    DomainError
        If ``x`` is not one-dimensional or holds NaN/inf.

    Examples
    --------
    >>> carryover_adstock([0.0, 0.0, 0.0, 100.0], length=1, peak=0, decay=0.5)
    array([  0.,   0.,   0., 100.])
    """
    weights = carryover_weights(length, peak, decay, normalize=True)
    series = _as_series(x)
    logger.debug(
        "carryover adstock n=%d length=%d peak=%s decay=%s",
        series.size,
        weights.size,
        peak,
        decay,
    )
    return _convolve(series, weights)


def geometric_adstock(
    x: ArrayLike,
    alpha: float,
    l_max: int = 8,
    normalize: bool = True,
) -> NDArray[np.float64]:
    alpha = _check_unit_interval(alpha, "alpha")
    l_max = _check_length(l_max, "l_max")
    series = _as_series(x)

    weights = np.power(alpha, np.arange(l_max, dtype=np.float64))
    if normalize:
        weights = weights / weights.sum()

    return _convolve(series, weights)


def weibull_adstock(
    x: ArrayLike,
    shape: float,
    scale: float,
    l_max: int = 8,
    adstock_type: Literal["cdf", "pdf"] = "cdf",
    normalize: bool = True,
) -> NDArray[np.float64]:
    from scipy.stats import weibull_min

    shape = _check_positive(shape, "shape")
    scale = _check_positive(scale, "scale")
    l_max = _check_length(l_max, "l_max")
    if adstock_type not in ("cdf", "pdf"):
        raise InvalidParameterError("adstock_type", adstock_type, "must be 'cdf' or 'pdf'")
    series = _as_series(x)

    t = np.arange(l_max) + 1

    if adstock_type == "cdf":
        weights = weibull_min.sf(t, c=shape, scale=scale)
    else:
        weights = weibull_min.pdf(t, c=shape, scale=scale)

    weights = np.maximum(np.asarray(weights, dtype=np.float64), 0.0)

    if normalize:
        total = float(weights.sum())
        if total <= 0:
            raise InvalidParameterError(
                "scale", scale, f"Weibull weights vanish over {l_max} lags"
            )
        weights = weights / total

    return _convolve(series, weights)


def apply_adstock(x: ArrayLike, params: "CarryoverParams") -> NDArray[np.float64]:
    return carryover_adstock(
        x, length=params.length, peak=params.peak, decay=params.decay
    )


def peak_lag(length: int, peak: float, decay: float) -> int:
    """Lag with the largest carryover weight."""
    return int(np.argmax(carryover_weights(length, peak, decay, normalize=False)))


def half_life_to_alpha(half_life: float) -> float:
    if half_life <= 0:
        raise InvalidParameterError("half_life", half_life, "must be > 0")
    return 0.5 ** (1 / half_life)


def alpha_to_half_life(alpha: float) -> float:
    if not 0 < alpha < 1:
        raise InvalidParameterError("alpha", alpha, "must be in (0, 1)")
    return float(np.log(0.5) / np.log(alpha))


def get_effective_spend_period(
    alpha: float,
    threshold: float = 0.95,
) -> int:
    """Number of lags needed to capture ``threshold`` of geometric carryover."""
    if not 0 < alpha < 1:
        raise InvalidParameterError("alpha", alpha, "must be in (0, 1)")
    if not 0 < threshold < 1:
        raise InvalidParameterError("threshold", threshold, "must be in (0, 1)")

    n = np.ceil(np.log(1 - threshold) / np.log(alpha))
    return int(max(1, n))


def plot_carryover_weights(
    carryover_params: dict[str, dict],
    l_max: Optional[int] = None,
    figsize: tuple[int, int] = (10, 6),
    title: str = "Carryover Weights by Channel",
) -> "matplotlib.figure.Figure":
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=figsize)
    widest = l_max or max(int(p["length"]) for p in carryover_params.values())

    for name, params in carryover_params.items():
        length = int(params["length"])
        weights = carryover_weights(
            length, float(params["peak"]), float(params["decay"]), normalize=True
        )
        ax.plot(
            np.arange(length), weights, marker="o", label=name, linewidth=2, markersize=6
        )

    ax.set_xlabel("Weeks After Spend")
    ax.set_ylabel("Carryover Weight (normalized)")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    ax.set_xticks(np.arange(widest))

    plt.tight_layout()
    return fig
