"""
Computation graph for simple_nn.

The graph is an arena: operation records addressed by integer handles. A
differentiable Tensor holds the handle of the record that produced it, and
a record holds the handles of its operands (``None`` for constant
operands) plus the operand values the chain rule needs. Records never
point at tensors, so nothing here forms a reference cycle.

Handles are assigned in creation order and never reused, and an operation
can only consume tensors that already exist, so every operand handle is
smaller than the handle of the record using it. Visiting handles in
descending order is therefore a reverse topological order.

A record is reference counted: one reference for its owner (the Tensor, or
the caller of ``add_leaf``/``add_dot``) and one for each live record using
it as an operand. When the count drops to zero the record is freed and its
operands are released in turn, so intermediates stay alive exactly as long
as something downstream can still backpropagate through them.
"""

from __future__ import annotations

import contextlib
import enum
import heapq
import operator
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from . import config
from .errors import GraphError, ShapeMismatch
from .log import get_logger

logger = get_logger("simple_nn.graph")

Shape = Tuple[int, int]
Operand = Tuple[Optional[int], np.ndarray]


class OpCode(enum.Enum):
    LEAF = "leaf"
    DOT = "dot"


@dataclass
class OpRecord:
    """One node of the graph: the op that produced it and its gradient buffer."""

    op: OpCode
    shape: Shape
    grad: np.ndarray
    operands: Tuple[Optional[int], ...] = ()
    saved: Tuple[np.ndarray, ...] = ()
    refs: int = 1


def matmul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Matrix product accumulated in increasing inner index order.

    Entry (i, j) is built as ``0.0 + a[i,0]*b[0,j] + a[i,1]*b[1,j] + ...``
    with one rounding per multiply and per add, so results are reproducible
    bit for bit and match a plain triple loop.
    """
    out = np.zeros((a.shape[0], b.shape[1]), dtype=np.float64)
    for t in range(a.shape[1]):
        out += np.multiply.outer(a[:, t], b[t, :])
    return out


class Graph:
    """Arena of operation records addressed by integer handles."""

    def __init__(self):
        self._records: Dict[int, OpRecord] = {}
        self._next = 0

    def __len__(self) -> int:
        """Number of live records."""
        return len(self._records)

    def __repr__(self) -> str:
        return f"Graph(records={len(self._records)})"

    def _add(self, record: OpRecord) -> int:
        handle = self._next
        self._next += 1
        self._records[handle] = record
        if config.debug_level() >= 1:
            logger.debug("record %d: %s %s operands=%s", handle, record.op.value, record.shape, record.operands)
        return handle

    def add_leaf(self, shape: Shape) -> int:
        return self._add(OpRecord(OpCode.LEAF, tuple(shape), np.zeros(shape, dtype=np.float64)))

    def add_dot(self, a: Operand, b: Operand) -> int:
        """Record ``C = A . B``; ``a`` and ``b`` are ``(handle or None, values)`` pairs."""
        (ha, va), (hb, vb) = a, b
        ha = None if ha is None else self._check(ha)
        hb = None if hb is None else self._check(hb)
        for h in (ha, hb):
            if h is not None:
                self._records[h].refs += 1
        shape = (va.shape[0], vb.shape[1])
        va, vb = va.view(), vb.view()
        va.flags.writeable = False
        vb.flags.writeable = False
        return self._add(OpRecord(OpCode.DOT, shape, np.zeros(shape, dtype=np.float64), (ha, hb), (va, vb)))

    def _check(self, handle) -> int:
        if isinstance(handle, bool):
            raise GraphError(f"unknown graph handle {handle!r}")
        try:
            handle = operator.index(handle)
        except TypeError:
            raise GraphError(f"unknown graph handle {handle!r}") from None
        if handle not in self._records:
            raise GraphError(f"unknown graph handle {handle!r} ({len(self._records)} live records)")
        return handle

    def record(self, handle: int) -> OpRecord:
        return self._records[self._check(handle)]

    def release(self, handle: int) -> None:
        """Drop the owner's reference to ``handle``; freed records release their operands."""
        pending = [self._check(handle)]
        while pending:
            h = pending.pop()
            record = self._records[h]
            record.refs -= 1
            if record.refs > 0:
                continue
            del self._records[h]
            if config.debug_level() >= 1:
                logger.debug("freed record %d", h)
            pending.extend(op for op in record.operands if op is not None)

    def grad(self, handle: int) -> np.ndarray:
        return self.record(handle).grad.copy()

    def zero_grad(self, handle: Optional[int] = None) -> None:
        records = list(self._records.values()) if handle is None else [self.record(handle)]
        for record in records:
            record.grad.fill(0.0)

    def backward(self, root: int, seed: np.ndarray) -> None:
        """
        Propagate ``seed`` from ``root`` to every node reachable from it.

        Nodes are visited largest handle first from a heap of the handles
        that have received a gradient, so the cost follows the reachable
        subgraph rather than the whole arena. Upstream gradients for this
        pass are collected in a local table first and only then added into
        the nodes' buffers, so gradients already held by intermediate nodes
        from earlier passes are not propagated again.
        """
        root = self._check(root)
        root_record = self._records[root]
        seed = np.array(seed, dtype=np.float64)
        if seed.shape != root_record.shape:
            raise ShapeMismatch(root_record.shape, seed.shape, op="backward")

        upstream: Dict[int, np.ndarray] = {root: seed}
        heap = [-root]
        while heap:
            handle = -heapq.heappop(heap)
            record = self._records[handle]
            if record.op is OpCode.DOT:
                for h in self._backward_dot(handle, record, upstream):
                    heapq.heappush(heap, -h)

        for handle, g in upstream.items():
            self._records[handle].grad += g

    def _backward_dot(self, handle: int, record: OpRecord, upstream: Dict[int, np.ndarray]) -> List[int]:
        # C = A . B  =>  dA = dC . B^T,  dB = A^T . dC
        grad_out = upstream[handle]
        (ha, hb), (a, b) = record.operands, record.saved
        new = []
        if ha is not None and _accumulate(upstream, ha, matmul(grad_out, b.T)):
            new.append(ha)
        if hb is not None and _accumulate(upstream, hb, matmul(a.T, grad_out)):
            new.append(hb)
        if config.debug_level() >= 2:
            logger.debug("backward %d: dot -> %s", handle, [h for h in (ha, hb) if h is not None])
        return new


def _accumulate(table: Dict[int, np.ndarray], handle: int, g: np.ndarray) -> bool:
    """Add ``g`` into ``table``; True when ``handle`` was not there yet."""
    if handle in table:
        table[handle] = table[handle] + g
        return False
    table[handle] = g
    return True


# The default graph stack; the bottom entry lives for the whole process.
_graph_stack: List[Graph] = [Graph()]


def default_graph() -> Graph:
    return _graph_stack[-1]


@contextlib.contextmanager
def use_graph(graph: Graph) -> Iterator[Graph]:
    """Make ``graph`` the default graph inside a ``with`` block."""
    _graph_stack.append(graph)
    try:
        yield graph
    finally:
        _graph_stack.pop()


__all__ = ["OpCode", "OpRecord", "Graph", "matmul", "default_graph", "use_graph"]
