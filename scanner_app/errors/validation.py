"""Request validation errors for calculator inputs."""

from typing import Any, Optional

from .data_quality import DataQualityError


class InvalidInputError(DataQualityError, ValueError):
    """A required field is missing or invalid for the requested calculation."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
