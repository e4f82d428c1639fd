"""Pydantic parameter models and Pandera spend schemas."""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import pandera.pandas as pa
from pydantic import BaseModel, ConfigDict, Field, model_validator

from spillway.transforms.adstock import CHANNEL_CARRYOVER_DEFAULTS, carryover_weights
from spillway.transforms.saturation import CHANNEL_SATURATION_DEFAULTS

logger = logging.getLogger(__name__)

FALLBACK_CARRYOVER = {"length": 8, "peak": 0.0, "decay": 0.5}
FALLBACK_SATURATION = {"K": 0.5, "S": 2.0}


class CarryoverParams(BaseModel):
    """
    Peaked adstock parameters (L, P, D).

    Example
    -------
    >>> CarryoverParams(length=4, peak=1, decay=0.8)
    CarryoverParams(length=4, peak=1.0, decay=0.8)
    """

    model_config = ConfigDict(frozen=True)

    length: int = Field(ge=1, description="Number of lags in the carryover window")
    peak: float = Field(
        ge=0, allow_inf_nan=False, description="Lag with the strongest effect"
    )
    decay: float = Field(
        ge=0, le=1, allow_inf_nan=False, description="Retention rate around the peak"
    )

    @model_validator(mode="after")
    def check_weights_do_not_vanish(self) -> "CarryoverParams":
        """Reject combinations whose weights all underflow to zero."""
        carryover_weights(self.length, self.peak, self.decay)
        return self


class HillParams(BaseModel):
    """Hill saturation parameters (K, S)."""

    model_config = ConfigDict(frozen=True)

    half_saturation: float = Field(
        gt=0, allow_inf_nan=False, description="Input at which the effect is 0.5"
    )
    slope: float = Field(
        gt=0, allow_inf_nan=False, description="Steepness around the half-saturation point"
    )


class ChannelTransform(BaseModel):
    """Transform chain for one media channel: adstock, then Hill, then scale."""

    model_config = ConfigDict(frozen=True)

    channel: str = Field(min_length=1, description="Spend column name")
    carryover: CarryoverParams
    hill: HillParams
    coefficient: float = Field(
        default=1.0,
        ge=0,
        allow_inf_nan=False,
        description="Maximum contribution reached at full saturation",
    )


class TransformConfig(BaseModel):
    """
    Transform configuration for a spend table.

    Example
    -------
    >>> config = load_transform_config("transforms.json")
    >>> config.channel_names
    ['tv_spend', 'search_spend']
    """

    channels: list[ChannelTransform] = Field(min_length=1)
    date_col: Optional[str] = "date"

    @model_validator(mode="after")
    def check_unique_channels(self) -> "TransformConfig":
        names = [c.channel for c in self.channels]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate channel entries: {duplicates}")
        return self

    @property
    def channel_names(self) -> list[str]:
        return [c.channel for c in self.channels]

    def get(self, channel: str) -> ChannelTransform:
        for transform in self.channels:
            if transform.channel == channel:
                return transform
        raise KeyError(f"'{channel}' is not configured")


def build_spend_schema(
    channels: list[str],
    date_col: Optional[str] = "date",
) -> pa.DataFrameSchema:
    """
    Build a Pandera schema for a weekly spend table.

    Every channel column must be a non-null, non-negative float. Columns not
    listed are allowed and left untouched.

    Parameters
    ----------
    channels : list[str]
        Spend column names.
    date_col : str, optional
        Date column to coerce to datetime, or None when the table has none.

    Returns
    -------
    pa.DataFrameSchema
    """
    columns = {
        channel: pa.Column(
            float,
            checks=pa.Check.ge(0),
            nullable=False,
            coerce=True,
            description=f"{channel} weekly spend",
        )
        for channel in channels
    }
    if date_col is not None:
        columns[date_col] = pa.Column(
            "datetime64[ns]", nullable=False, coerce=True, description="Week start date"
        )

    return pa.DataFrameSchema(columns, name="SpendFrame", strict=False)


def validate_spend_frame(
    df: pd.DataFrame,
    channels: list[str],
    date_col: Optional[str] = "date",
) -> pd.DataFrame:
    """
    Validate (and coerce) a spend DataFrame.

    Raises
    ------
    pandera.errors.SchemaError
        If a column is missing, null or negative.
    """
    return build_spend_schema(channels, date_col=date_col).validate(df)


def default_transform_config(
    channels: Optional[list[str]] = None,
    date_col: Optional[str] = "date",
) -> TransformConfig:
    """Config from the per-channel defaults, with fallbacks for unknown channels."""
    if channels is None:
        channels = list(CHANNEL_CARRYOVER_DEFAULTS.keys())

    transforms = []
    for channel in channels:
        carry = CHANNEL_CARRYOVER_DEFAULTS.get(channel, FALLBACK_CARRYOVER)
        sat = CHANNEL_SATURATION_DEFAULTS.get(channel, FALLBACK_SATURATION)
        if channel not in CHANNEL_CARRYOVER_DEFAULTS:
            logger.debug("no defaults for %s, using fallback parameters", channel)
        transforms.append(
            ChannelTransform(
                channel=channel,
                carryover=CarryoverParams(
                    length=int(carry["length"]),
                    peak=float(carry["peak"]),
                    decay=float(carry["decay"]),
                ),
                hill=HillParams(half_saturation=float(sat["K"]), slope=float(sat["S"])),
            )
        )

    return TransformConfig(channels=transforms, date_col=date_col)


def load_transform_config(path: Union[str, Path]) -> TransformConfig:
    """
    Load a transform config from JSON.

    Raises
    ------
    pydantic.ValidationError
        If the file does not describe a valid config.
    """
    text = Path(path).read_text(encoding="utf-8")
    return TransformConfig.model_validate_json(text)


def save_transform_config(config: TransformConfig, path: Union[str, Path]) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(exist_ok=True, parents=True)
    output_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
