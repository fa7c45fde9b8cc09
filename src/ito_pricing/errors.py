"""
Exceptions raised by the pricing engines.

Both are raised synchronously at construction time, never mid-computation.
They subclass ValueError so callers that already guard with ValueError
keep working.
"""


class InvalidParameterError(ValueError):
    """A market or simulation parameter violates its precondition."""


class DegenerateSampleError(InvalidParameterError):
    """Sample too small for a Bessel-corrected variance (N < 2)."""
