"""Iterative solution of a linear system ``A x = b`` in the style of Seidel's method.

Each sweep computes every new component from the previous approximation.
Iteration stops once the residual of the new approximation falls below
``epsilon``, or after ``max_iterations`` sweeps.
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence

from parlab.task import Task, TaskData

Matrix = list[list[float]]


def generate_random_matrix(
    size: int, rng: random.Random | None = None
) -> tuple[Matrix, list[float]]:
    """Return a random strictly diagonally dominant ``size`` x ``size`` system.

    Off-diagonal elements are integers from 1 to 10. Each diagonal element is
    the sum of its row's off-diagonal elements plus an integer from 1 to 5.
    The right-hand side holds integers from 1 to 20.
    """
    if size < 0:
        raise ValueError(f"size must not be negative, got {size}")
    rng = rng if rng is not None else random.Random()
    matrix: Matrix = []
    vector: list[float] = []
    for i in range(size):
        row = [0.0 if i == j else float(rng.randint(1, 10)) for j in range(size)]
        row[i] = sum(abs(value) for value in row) + float(rng.randint(1, 5))
        matrix.append(row)
        vector.append(float(rng.randint(1, 20)))
    return matrix, vector


def _resized(values: list[float], n: int) -> list[float]:
    """Truncate or pad with zeros to length ``n``, keeping existing values."""
    return values[:n] + [0.0] * (n - len(values))


class SeidelIterateMethods(Task):
    """Solve ``A x = b`` for a system whose size is ``inputs_count[0]``.

    Validation fills the system with the built-in test system of that size:
    2 on the diagonal, 1 elsewhere and ``n + 1`` on the right-hand side, or,
    when ``inputs_count[1]`` is 0, a system with a zero diagonal, which
    pre-processing then rejects. A different system can be supplied with
    :meth:`set_matrix` after validation.
    """

    default_epsilon = 1e-6
    default_max_iterations = 1000

    def __init__(self, task_data: TaskData) -> None:
        self._a: Matrix = []
        self._b: list[float] = []
        self._x: list[float] = []
        self._n = 0
        self.epsilon = self.default_epsilon
        self.max_iterations = self.default_max_iterations
        super().__init__(task_data)

    @property
    def solution(self) -> list[float]:
        """The current approximation of ``x``."""
        return list(self._x)

    def _zero_diagonal_test(self) -> bool:
        counts = self.task_data.inputs_count
        return len(counts) > 1 and counts[1] == 0

    def validation(self) -> bool:
        counts = self.task_data.inputs_count
        if not counts:
            return False
        n = int(counts[0])
        if n <= 0:
            return False
        self._n = n

        zero_diagonal = self._zero_diagonal_test()
        if zero_diagonal:
            self._a = [[0.0 if i == j else 1.0 for j in range(n)] for i in range(n)]
            self._b = [1.0] * n
        else:
            self._a = [[2.0 if i == j else 1.0 for j in range(n)] for i in range(n)]
            self._b = [float(n + 1)] * n

        return zero_diagonal or all(self._a[i][i] != 0.0 for i in range(n))

    def pre_processing(self) -> bool:
        if not self.validation():
            return False
        self.epsilon = self.default_epsilon
        self.max_iterations = self.default_max_iterations
        self._x = _resized(self._x, self._n)
        return not self._zero_diagonal_test()

    def run(self) -> bool:
        a, b, n = self._a, self._b, self._n
        self._x = _resized(self._x, n)
        for _ in range(self.max_iterations):
            x = self._x
            x_new = [
                (b[i] - sum(a[i][j] * x[j] for j in range(n) if j != i)) / a[i][i]
                for i in range(n)
            ]
            if self._residual(x_new) < self.epsilon:
                break
            self._x = x_new
        return True

    def post_processing(self) -> bool:
        return True

    def set_matrix(self, matrix: Sequence[Sequence[float]], vector: Sequence[float]) -> None:
        """Use the system ``matrix x = vector`` from now on."""
        n = len(matrix)
        if len(vector) != n:
            raise ValueError(f"vector has {len(vector)} elements, matrix has {n} rows")
        if any(len(row) != n for row in matrix):
            raise ValueError("matrix must be square")
        self._a = [[float(value) for value in row] for row in matrix]
        self._b = [float(value) for value in vector]
        self._n = n
        self._x = _resized(self._x, n)

    def _residual(self, x: Sequence[float]) -> float:
        total = 0.0
        for row, rhs in zip(self._a, self._b):
            difference = sum(coef * value for coef, value in zip(row, x)) - rhs
            total += difference * difference
        return math.sqrt(total)

    def residual_norm(self) -> float:
        """Euclidean norm of ``A x - b`` for the current approximation."""
        return self._residual(_resized(self._x, self._n))