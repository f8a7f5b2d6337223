"""Exceptions raised while building gate graphs."""


class InvalidGateError(ValueError):
    """Raised when a gate would be constructed or assigned in a malformed state."""
