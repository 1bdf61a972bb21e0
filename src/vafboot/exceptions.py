"""
Custom exceptions for the vafboot resampling pipeline.

Every failure aborts the whole run; there is no partial result.
"""


class VafBootError(Exception):
    """Base exception for vafboot errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(VafBootError):
    """Raised when run configuration is invalid."""
    pass


class UnknownModelError(ConfigurationError):
    """Raised when an unsupported bootstrap model reaches the engine."""
    pass


class InputSchemaError(VafBootError):
    """Raised when referenced columns are absent from the input table."""
    pass


class RangeError(VafBootError):
    """Raised when VAF or depth values fall outside their valid range."""
    pass


class DegenerateClusterError(VafBootError):
    """Raised when a cluster's statistics cannot parameterize the model."""
    pass
