"""Parameter schemas, spend validation and synthetic spend generation."""

from spillway.data.schemas import (
    CarryoverParams,
    HillParams,
    ChannelTransform,
    TransformConfig,
    build_spend_schema,
    validate_spend_frame,
    default_transform_config,
    load_transform_config,
    save_transform_config,
)
from spillway.data.synthetic import (
    SyntheticSpendConfig,
    generate_spend_data,
    save_spend_data,
    load_spend_data,
)

__all__ = [
    "CarryoverParams",
    "HillParams",
    "ChannelTransform",
    "TransformConfig",
    "build_spend_schema",
    "validate_spend_frame",
    "default_transform_config",
    "load_transform_config",
    "save_transform_config",
    "SyntheticSpendConfig",
    "generate_spend_data",
    "save_spend_data",
    "load_spend_data",
]
