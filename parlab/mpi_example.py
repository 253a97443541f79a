"""Sum, negated sum and maximum of a vector, sequentially and across ranks."""

from __future__ import annotations

import operator
import random
from collections.abc import Callable
from typing import Any

from parlab.comm import Communicator
from parlab.task import Task, TaskData

_OPERATIONS = ("+", "-", "max")


def get_random_vector(size: int) -> list[int]:
    """Return ``size`` random integers from 0 to 99."""
    return [random.randrange(100) for _ in range(size)]


def _check_ops(ops: str) -> str:
    if ops not in _OPERATIONS:
        raise ValueError(f"unknown operation {ops!r}; expected one of {_OPERATIONS}")
    return ops


def _apply(ops: str, values: list[int]) -> int:
    if ops == "+":
        return sum(values)
    if ops == "-":
        return -sum(values)
    if not values:
        raise ValueError("cannot take the maximum of an empty vector")
    return max(values)


def _combiner(ops: str) -> Callable[[Any, Any], Any]:
    return max if ops == "max" else operator.add


class ReductionSequential(Task):
    """Apply ``+``, ``-`` (negated sum) or ``max`` to ``inputs[0]``.

    The result is written to ``outputs[0][0]``.
    """

    def __init__(self, task_data: TaskData, ops: str) -> None:
        self.ops = _check_ops(ops)
        super().__init__(task_data)

    def validation(self) -> bool:
        self._order_test("validation")
        return self.task_data.outputs_count[0] == 1

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        data = self.task_data
        self._input = list(data.inputs[0][: data.inputs_count[0]])
        self._result = 0
        return True

    def run(self) -> bool:
        self._order_test("run")
        self._result = _apply(self.ops, self._input)
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        self.task_data.outputs[0][0] = self._result
        return True


class ReductionParallel(Task):
    """The same reduction spread over the ranks of a communicator.

    Only rank 0 needs data. It splits the input into ``len // size`` elements
    per rank (elements past ``size * (len // size)`` are not used), each rank
    reduces its share, and the results are combined on rank 0, which writes
    the answer to ``outputs[0][0]``.
    """

    def __init__(self, task_data: TaskData, ops: str, comm: Communicator | None = None) -> None:
        self.ops = _check_ops(ops)
        self.comm = comm if comm is not None else Communicator()
        super().__init__(task_data)

    def validation(self) -> bool:
        self._order_test("validation")
        if self.comm.rank == 0:
            return self.task_data.outputs_count[0] == 1
        return True

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        comm = self.comm
        delta = 0
        if comm.rank == 0:
            delta = self.task_data.inputs_count[0] // comm.size
        delta = comm.broadcast(delta, 0)

        if comm.rank == 0:
            data = self.task_data
            values = list(data.inputs[0][: data.inputs_count[0]])
            for proc in range(1, comm.size):
                comm.send(proc, 0, values[proc * delta : (proc + 1) * delta])
            self._local_input = values[:delta]
        else:
            self._local_input = comm.recv(0, 0)
        self._result: Any = 0
        return True

    def run(self) -> bool:
        self._order_test("run")
        local = _apply(self.ops, self._local_input)
        self._result = self.comm.reduce(local, _combiner(self.ops), 0)
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        if self.comm.rank == 0:
            self.task_data.outputs[0][0] = self._result
        return True