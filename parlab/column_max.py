"""Largest value of every column of a matrix, sequentially and across ranks.

The matrix is stored column by column: ``inputs[0]`` holds ``cols * rows``
elements, the first ``rows`` of them being column 0. ``inputs_count`` is
``[len(inputs[0]), cols, rows]`` and the column maxima go to ``outputs[0]``.
"""

from __future__ import annotations

import random
from itertools import chain

from parlab.comm import Communicator
from parlab.task import Task, TaskData


def generate_random_vector(size: int) -> list[int]:
    """Return ``size`` random integers from 0 to 99, zero about half the time.

    Each element is drawn from -100 to 99 and negative draws are kept as 0.
    """
    return [max(0, random.randrange(200) - 100) for _ in range(size)]


def _valid_shape(data: TaskData) -> bool:
    counts = data.inputs_count
    if counts[1] == 0 or counts[2] == 0:
        return False
    if not data.inputs or counts[0] <= 0:
        return False
    return counts[1] == data.outputs_count[0]


def _read_matrix(data: TaskData) -> list[int]:
    return list(data.inputs[0][: data.inputs_count[0]])


def _column_maxima(values: list[int], rows: int, start: int, stop: int) -> list[int]:
    if len(values) < stop * rows:
        raise ValueError(
            f"matrix holds {len(values)} elements, columns up to {stop} "
            f"of {rows} rows need {stop * rows}"
        )
    return [max(values[col * rows : (col + 1) * rows]) for col in range(start, stop)]


class ColumnMaxSequential(Task):
    """Column maxima computed in a single process."""

    def validation(self) -> bool:
        self._order_test("validation")
        return _valid_shape(self.task_data)

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        data = self.task_data
        self._cols = int(data.inputs_count[1])
        self._rows = int(data.inputs_count[2])
        self._matrix = _read_matrix(data)
        self._result = [0] * self._cols
        return True

    def run(self) -> bool:
        self._order_test("run")
        self._result = _column_maxima(self._matrix, self._rows, 0, self._cols)
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        output = self.task_data.outputs[0]
        for col, value in enumerate(self._result):
            output[col] = value
        return True


class ColumnMaxParallel(Task):
    """Column maxima with the columns shared out between the ranks.

    Only rank 0 needs data. Every rank gets ``cols // size`` columns and the
    last rank also takes the ``cols % size`` columns left over; rank 0 gathers
    the maxima and writes them to ``outputs[0]``.
    """

    def __init__(self, task_data: TaskData, comm: Communicator | None = None) -> None:
        self.comm = comm if comm is not None else Communicator()
        self._cols = 0
        self._rows = 0
        self._delta = 0
        self._extra = 0
        self._matrix: list[int] = []
        self._result: list[int] = []
        super().__init__(task_data)

    def validation(self) -> bool:
        self._order_test("validation")
        if self.comm.rank == 0:
            return _valid_shape(self.task_data)
        return True

    def _read_shape(self) -> None:
        data = self.task_data
        size = self.comm.size
        self._cols = int(data.inputs_count[1])
        self._rows = int(data.inputs_count[2])
        self._delta, self._extra = divmod(self._cols, size)

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        if self.comm.rank == 0:
            self._read_shape()
            self._matrix = _read_matrix(self.task_data)
        self._result = [0] * self._cols
        return True

    def run(self) -> bool:
        self._order_test("run")
        comm = self.comm
        if comm.rank == 0:
            self._read_shape()
            self._matrix = _read_matrix(self.task_data)
        shape = (self._cols, self._rows, self._delta, self._extra)
        self._cols, self._rows, self._delta, self._extra = comm.broadcast(shape, 0)

        matrix = self._matrix[: self._cols * self._rows] if comm.rank == 0 else None
        self._matrix = comm.broadcast(matrix, 0)

        start = self._delta * comm.rank
        stop = start + self._delta
        if comm.rank == comm.size - 1:
            stop += self._extra
        local = _column_maxima(self._matrix, self._rows, start, stop)

        gathered = comm.gather(local, 0)
        if gathered is not None:
            self._result = list(chain.from_iterable(gathered))
        else:
            self._result = [0] * self._cols
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        if self.comm.rank == 0:
            output = self.task_data.outputs[0]
            for col, value in enumerate(self._result):
                output[col] = value
        return True