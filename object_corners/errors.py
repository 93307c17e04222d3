"""
Exceptions raised by the contour algorithms.
"""


class ContourPreconditionError(ValueError):
    """The caller passed input that breaks the contract of the operation."""


class ContourInvariantError(RuntimeError):
    """An internal invariant failed; this is a defect, not bad input."""
