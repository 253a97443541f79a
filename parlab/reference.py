"""Reference sequential tasks over vectors and row-major matrices."""

from __future__ import annotations

from typing import Any

from parlab.task import Task


def _read_input(task: Task, slot: int = 0) -> list[Any]:
    data = task.task_data
    return list(data.inputs[slot][: data.inputs_count[slot]])


class MinOfVectorElements(Task):
    """Smallest element of a vector and the index of its first occurrence.

    Writes the value to ``outputs[0][0]`` and the index to ``outputs[1][0]``.
    """

    def validation(self) -> bool:
        self._order_test("validation")
        counts = self.task_data.outputs_count
        return counts[0] == 1 and counts[1] == 1

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        self._input = _read_input(self)
        self._min: Any = 0
        self._min_index = 0
        return True

    def run(self) -> bool:
        self._order_test("run")
        if not self._input:
            raise ValueError("cannot take the minimum of an empty vector")
        self._min_index = min(range(len(self._input)), key=self._input.__getitem__)
        self._min = self._input[self._min_index]
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        outputs = self.task_data.outputs
        outputs[0][0] = self._min
        outputs[1][0] = self._min_index
        return True


class NearestNeighborElements(Task):
    """First pair of adjacent elements whose absolute difference is smallest.

    Writes the two values to ``outputs[0][0:2]`` and their indices to
    ``outputs[1][0:2]``.
    """

    def validation(self) -> bool:
        self._order_test("validation")
        counts = self.task_data.outputs_count
        return counts[0] == 2 and counts[1] == 2

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        self._input = _read_input(self)
        self._left: Any = 0
        self._right: Any = 0
        self._left_index = 0
        self._right_index = 0
        return True

    def run(self) -> bool:
        self._order_test("run")
        values = self._input
        if len(values) < 2:
            raise ValueError("need at least two elements to find neighbours")
        differences = [abs(a - b) for a, b in zip(values, values[1:])]
        self._left_index = min(range(len(differences)), key=differences.__getitem__)
        self._right_index = self._left_index + 1
        self._left = values[self._left_index]
        self._right = values[self._right_index]
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        values, indices = self.task_data.outputs[0], self.task_data.outputs[1]
        values[0], values[1] = self._left, self._right
        indices[0], indices[1] = self._left_index, self._right_index
        return True


class NumOfOrderlyViolations(Task):
    """Number of adjacent pairs where an element is greater than the next one.

    Writes the count to ``outputs[0][0]``.
    """

    def validation(self) -> bool:
        self._order_test("validation")
        return self.task_data.outputs_count[0] == 1

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        self._input = _read_input(self)
        self._count = 0
        return True

    def run(self) -> bool:
        self._order_test("run")
        values = self._input
        self._count = sum(1 for a, b in zip(values, values[1:]) if a > b)
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        self.task_data.outputs[0][0] = self._count
        return True


class SumValuesByRowsMatrix(Task):
    """Sum of each row of a row-major matrix.

    ``inputs[0]`` holds the elements and ``inputs[1]`` holds ``(rows, cols)``;
    the row sums are written to ``outputs[0]``.
    """

    def validation(self) -> bool:
        self._order_test("validation")
        data = self.task_data
        return data.inputs_count[1] == 2 and data.outputs_count[0] == data.inputs[1][0]

    def pre_processing(self) -> bool:
        self._order_test("pre_processing")
        self._input = _read_input(self)
        self._rows = int(self.task_data.inputs[1][0])
        self._cols = int(self.task_data.inputs[1][1])
        self._sums: list[Any] = [0] * self._rows
        return True

    def run(self) -> bool:
        self._order_test("run")
        cols = self._cols
        self._sums = [
            sum(self._input[cols * row : cols * (row + 1)]) for row in range(self._rows)
        ]
        return True

    def post_processing(self) -> bool:
        self._order_test("post_processing")
        output = self.task_data.outputs[0]
        for row, total in enumerate(self._sums):
            output[row] = total
        return True