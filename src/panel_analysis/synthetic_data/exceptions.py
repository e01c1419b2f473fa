class InvalidParameter(ValueError):
    """Raised when generation parameters are out of range."""
