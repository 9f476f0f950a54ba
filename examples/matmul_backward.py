#!/usr/bin/env python
"""
Matrix multiplication and backpropagation with simple_nn.
This example chains two products and prints the gradients of every input.
"""

import numpy as np
import simple_nn as nn

def main():
    """Build y = (x . w1) . w2, backpropagate, and check against the chain rule"""
    print("simple_nn example - two chained matrix products")

    with nn.use_graph(nn.Graph()) as graph:
        x = nn.tensor([
            [1.0, 2.0, 3.0],
            [3.0, 2.0, 3.0]
        ])
        w1 = nn.tensor([
            [0.5, -1.0],
            [1.5, 0.0],
            [-0.5, 2.0]
        ])
        w2 = nn.ones(2, 1)  # constant, no gradient

        h = x.dot(w1)
        y = h.dot(w2)
        print(f"\nGraph has {len(graph)} records")
        print(f"y = {y.data}")

        y.backward()

    print("\nGradients:")
    print(f"dy/dx  = {x.grad.data}")
    print(f"dy/dw1 = {w1.grad.data}")
    print(f"dy/dw2 = {w2.grad}  (constant)")

    # dh = dy . w2^T, dx = dh . w1^T, dw1 = x^T . dh
    dh = np.ones(y.shape) @ w2.numpy().T
    assert np.array_equal(x.grad.numpy(), dh @ w1.numpy().T)
    assert np.array_equal(w1.grad.numpy(), x.numpy().T @ dh)
    print("\nGradients match the chain rule.")

    return 0

if __name__ == "__main__":
    main()
