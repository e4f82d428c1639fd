"""Media carryover and diminishing-return transforms for marketing mix models."""

from spillway.errors import DomainError, InvalidParameterError, TransformError
from spillway.transforms import carryover_adstock, hill_saturation

__version__ = "0.1.0"

__all__ = [
    "carryover_adstock",
    "hill_saturation",
    "TransformError",
    "InvalidParameterError",
    "DomainError",
]
