"""Flux error classes."""
from typing import Any, Optional


class FluxError(Exception):

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

"""Raised when a configuration value (environment or argument) is not accepted."""
class FluxConfigError(FluxError, ValueError):
    def __init__(self, key: str, value: Any, message: Optional[str] = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid value for {key}: {value!r}")
