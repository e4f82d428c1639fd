"""Error types raised by the media transforms."""

from __future__ import annotations

from typing import Any


class TransformError(ValueError):
    """Base class for transform failures."""


class InvalidParameterError(TransformError):
    """Raised when a transform parameter is out of its valid range."""

    def __init__(self, parameter: str, value: Any, detail: str = "") -> None:
        self.parameter = parameter
        self.value = value
        self.detail = detail
        message = f"invalid {parameter}={value!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DomainError(TransformError):
    """Raised when input values fall outside a transform's domain."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
