"""
errors.py
Excepciones para parámetros de scrypt fuera de rango.
"""


class InvalidParameter(ValueError):
    """A scrypt parameter was rejected before any work was done."""

    def __init__(self, parameter: str, message: str):
        super().__init__(message)
        self.parameter = parameter


class InvalidCostParameter(InvalidParameter):
    """N is zero or not a power of two, or r/p is below 1."""


class ParameterTooLarge(InvalidParameter):
    """The buffer size computation would overflow the operand limit."""
