"""
simple_nn - a minimal 2-D tensor with reverse-mode differentiation.

This package provides a dense float64 Tensor, matrix multiplication that
records itself in a computation graph, and backward propagation of
gradients through that graph.
"""

import sys

# --- Check Dependencies ---
try:
    import numpy
except ImportError as e:
    print("Error: NumPy is required for simple_nn but could not be imported.", file=sys.stderr)
    print("Please install NumPy: pip install numpy", file=sys.stderr)
    raise e from None


# --- Re-export Core Components ---

from .tensor import Tensor, tensor, zeros, ones
from .graph import Graph, OpCode, default_graph, use_graph
from .errors import (
    TensorError,
    ShapeMismatch,
    EmptyInput,
    IrregularRows,
    GraphError,
    GraphMismatch,
    GradientError,
)

# --- Version Information ---
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("simple_nn")
except PackageNotFoundError:
    # Not installed; keep in sync with setup.py
    __version__ = "0.1.0"

# --- Clean up namespace ---
del sys
del numpy
del PackageNotFoundError, version

__all__ = [
    # Core
    "Tensor",
    "__version__",
    # Creation Ops
    "tensor",
    "zeros",
    "ones",
    # Graph
    "Graph",
    "OpCode",
    "default_graph",
    "use_graph",
    # Errors
    "TensorError",
    "ShapeMismatch",
    "EmptyInput",
    "IrregularRows",
    "GraphError",
    "GraphMismatch",
    "GradientError",
]
