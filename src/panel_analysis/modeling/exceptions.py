class InvalidModelSpec(ValueError):
    """Raised when a model specification cannot be fitted to the data."""


class ModelFitError(Exception):
    """Raised when the underlying optimizer fails numerically."""
