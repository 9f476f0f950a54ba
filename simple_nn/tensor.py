"""
Defines the Tensor object for simple_nn.

A Tensor is a dense 2-D matrix of float64 values. Tensors built from
values, and every result of ``dot``, are differentiable: they own a
same-shaped gradient buffer, kept in the graph record their ``node``
handle points at. Tensors from ``ones``/``zeros`` are constants with no
gradient.
"""

from __future__ import annotations

import numbers
import operator
import weakref
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import EmptyInput, GradientError, GraphMismatch, IrregularRows, ShapeMismatch
from .graph import Graph, default_graph, matmul
from .log import get_logger

logger = get_logger("simple_nn.tensor")

ArrayLike = Union[Sequence[Sequence[float]], np.ndarray, "Tensor"]


def _to_matrix(data) -> np.ndarray:
    """Validate ``data`` as a non-empty rectangular matrix and copy it to float64."""
    if isinstance(data, Tensor):
        return data.numpy()
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise ValueError(f"expected a 2-D array, got {data.ndim} dimensions")
        if data.dtype.kind not in "biuf":
            raise ValueError(f"tensor entries must be real numbers, got dtype {data.dtype}")
        if 0 in data.shape:
            raise EmptyInput(f"cannot build a tensor of shape {data.shape}")
        return np.array(data, dtype=np.float64)

    rows = list(data)
    if not rows:
        raise EmptyInput("cannot build a tensor from an empty sequence")
    for i, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not hasattr(row, "__len__"):
            raise ValueError(f"row {i} is not a sequence: {row!r}")
    cols = len(rows[0])
    if cols == 0:
        raise EmptyInput("cannot build a tensor with zero columns")
    for i, row in enumerate(rows):
        if len(row) != cols:
            raise IrregularRows(i, cols, len(row))
    for i, row in enumerate(rows):
        for x in row:
            if not isinstance(x, numbers.Real):
                raise ValueError(f"row {i}: tensor entries must be real numbers, got {x!r}")
    return np.array([[float(x) for x in row] for row in rows], dtype=np.float64)


def _normalize_shape(*shape) -> Tuple[int, int]:
    if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
        shape = tuple(shape[0])
    if len(shape) != 2:
        raise ValueError(f"expected (rows, cols), got {shape!r}")
    for s in shape:
        if isinstance(s, bool):
            raise TypeError(f"dimensions must be integers, got {s!r}")
    try:
        rows, cols = (operator.index(s) for s in shape)
    except TypeError:
        raise TypeError(f"dimensions must be integers, got {shape!r}") from None
    if rows < 0 or cols < 0:
        raise ValueError(f"negative dimension in shape {(rows, cols)}")
    if rows == 0 or cols == 0:
        raise EmptyInput(f"cannot build a tensor of shape {(rows, cols)}")
    return rows, cols


class Tensor:
    """
    Dense 2-D float64 matrix with an optional gradient buffer.

    Args:
        data (array_like): rows of numbers (nested sequences or a 2-D NumPy array).
        requires_grad (bool, optional): record the tensor as a leaf of the default
            graph with a zero gradient buffer. Defaults to True.
    """

    __slots__ = ("_values", "_graph", "_node", "__weakref__")

    def __init__(self, data: ArrayLike, requires_grad: bool = True):
        self._values = _to_matrix(data)
        self._values.flags.writeable = False
        self._graph: Optional[Graph] = None
        self._node: Optional[int] = None
        if requires_grad:
            self._graph = default_graph()
            self._node = self._graph.add_leaf(self.shape)
            weakref.finalize(self, self._graph.release, self._node)

    @classmethod
    def _from_values(cls, values: np.ndarray, graph: Optional[Graph] = None, node: Optional[int] = None) -> Tensor:
        out = cls.__new__(cls)
        out._values = values
        out._values.flags.writeable = False
        out._graph, out._node = graph, node
        if node is not None:
            # the record is released once the tensor is collected
            weakref.finalize(out, graph.release, node)
        return out

    # --- creation ---
    @staticmethod
    def zeros(*shape) -> Tensor:
        return Tensor._from_values(np.zeros(_normalize_shape(*shape), dtype=np.float64))

    @staticmethod
    def ones(*shape) -> Tensor:
        return Tensor._from_values(np.ones(_normalize_shape(*shape), dtype=np.float64))

    # --- data ---
    @property
    def data(self) -> List[List[float]]:
        return self._values.tolist()

    @property
    def shape(self) -> Tuple[int, int]:
        return self._values.shape

    @property
    def node(self) -> Optional[int]:
        return self._node

    @property
    def graph(self) -> Optional[Graph]:
        return self._graph

    @property
    def requires_grad(self) -> bool:
        return self._node is not None

    @property
    def grad(self) -> Optional[Tensor]:
        """Snapshot of the gradient buffer as a grad-less Tensor, or None for constants."""
        if self._node is None:
            return None
        return Tensor._from_values(self._graph.grad(self._node))

    def numpy(self) -> np.ndarray:
        return self._values.copy()

    def __repr__(self) -> str:
        grad = ", requires_grad=True" if self.requires_grad else ""
        return f"Tensor({self._values.tolist()}{grad})"

    # --- ops ---
    def dot(self, other: Tensor) -> Tensor:
        """Matrix product ``self . other``; ``(m, k) . (k, n) -> (m, n)``."""
        if not isinstance(other, Tensor):
            raise TypeError(f"dot expects a Tensor, got {type(other).__name__}")
        if other.shape[0] != self.shape[1]:
            raise ShapeMismatch(self.shape[1], other.shape[0])

        graphs = {t._graph for t in (self, other) if t._graph is not None}
        if len(graphs) > 1:
            raise GraphMismatch("dot operands were recorded in different graphs")
        graph = graphs.pop() if graphs else default_graph()

        values = matmul(self._values, other._values)
        node = graph.add_dot((self._node, self._values), (other._node, other._values))
        return Tensor._from_values(values, graph, node)

    def matmul(self, other: Tensor) -> Tensor:
        return self.dot(other)

    def __matmul__(self, other: Tensor) -> Tensor:
        return self.dot(other)

    # --- autograd ---
    def backward(self, grad: Optional[ArrayLike] = None) -> Tensor:
        """
        Backpropagate from this tensor through the graph that produced it.

        ``grad`` is the upstream gradient to seed with; it defaults to all ones
        of ``self.shape``. Gradients accumulate into every differentiable tensor
        reachable from this one, including this tensor itself.
        """
        if self._node is None:
            raise GradientError("backward called on a tensor without a gradient buffer")
        if grad is None:
            seed = np.ones(self.shape, dtype=np.float64)
        else:
            seed = _to_matrix(grad)
            if seed.shape != self.shape:
                raise ShapeMismatch(self.shape, seed.shape, op="backward")
        logger.debug("backward from node %d with seed shape %s", self._node, seed.shape)
        self._graph.backward(self._node, seed)
        return self

    def zero_grad(self) -> None:
        if self._node is None:
            raise GradientError("zero_grad called on a tensor without a gradient buffer")
        self._graph.zero_grad(self._node)


def tensor(data: ArrayLike, requires_grad: bool = True) -> Tensor:
    return Tensor(data, requires_grad=requires_grad)


def zeros(*shape) -> Tensor:
    return Tensor.zeros(*shape)


def ones(*shape) -> Tensor:
    return Tensor.ones(*shape)


__all__ = [
    "Tensor",
    "tensor",
    "zeros",
    "ones",
]
