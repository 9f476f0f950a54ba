"""
Error types raised by simple_nn.

Every failure is local and recoverable: construction and ``dot`` validate
their inputs up front and raise one of these instead of indexing into a
malformed matrix.
"""


class TensorError(Exception):
    """Base class for all simple_nn errors."""


class ShapeMismatch(TensorError, ValueError):
    """Two dimensions that must agree do not."""

    def __init__(self, expected, actual, op="dot"):
        self.expected = expected
        self.actual = actual
        self.op = op
        super().__init__(f"{op}: shape mismatch, {actual} != {expected}")


class EmptyInput(TensorError, ValueError):
    """A tensor was requested with zero rows or zero columns."""


class IrregularRows(TensorError, ValueError):
    """Construction input whose rows are not all the same length."""

    def __init__(self, row, expected, actual):
        self.row = row
        self.expected = expected
        self.actual = actual
        super().__init__(f"row {row} has length {actual}, expected {expected}")


class GraphError(TensorError, RuntimeError):
    """A graph handle is unknown or no longer valid."""


class GraphMismatch(GraphError):
    """Operands were recorded in two different graphs."""


class GradientError(TensorError, RuntimeError):
    """A gradient operation was applied to a tensor without a gradient buffer."""


__all__ = [
    "TensorError",
    "ShapeMismatch",
    "EmptyInput",
    "IrregularRows",
    "GraphError",
    "GraphMismatch",
    "GradientError",
]
