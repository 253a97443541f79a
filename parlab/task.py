"""Staged computational tasks and the data bundle they read from and write to."""

from __future__ import annotations

import time
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from itertools import cycle
from typing import Any

_STEP_ORDER = ("validation", "pre_processing", "run", "post_processing")


class StateOfTesting(Enum):
    """Whether a task is being checked for correctness or timed."""

    FUNC = "func"
    PERF = "perf"


@dataclass
class TaskData:
    """Input and output buffers of a task, with the element count of each."""

    inputs: list[Any] = field(default_factory=list)
    inputs_count: list[int] = field(default_factory=list)
    outputs: list[Any] = field(default_factory=list)
    outputs_count: list[int] = field(default_factory=list)
    state_of_testing: StateOfTesting = StateOfTesting.FUNC


class FunctionOrderError(ValueError):
    """Raised when a task's stages are called out of order."""

    def __init__(self, position: int, actual: str, expected: str) -> None:
        super().__init__(
            "order of functions is not right:\n"
            f"serial number: {position}\n"
            f"your function: {actual}\n"
            f"expected function: {expected}"
        )
        self.position = position
        self.actual = actual
        self.expected = expected


class Task(ABC):
    """A computation split into validation, pre-processing, run and post-processing.

    Subclasses call ``self._order_test(<stage name>)`` at the start of each stage;
    the stages must then come in the order validation, pre_processing, run
    (possibly repeated), post_processing, and may start over after that.
    """

    max_test_time = 1.0

    def __init__(self, task_data: TaskData) -> None:
        self._functions_order: list[str] = []
        self._started: float | None = None
        self.set_data(task_data)

    def set_data(self, task_data: TaskData) -> None:
        """Attach new data, putting the task back into functional testing."""
        task_data.state_of_testing = StateOfTesting.FUNC
        self._functions_order.clear()
        self._started = None
        self.task_data = task_data

    @abstractmethod
    def validation(self) -> bool:
        """Check the data and the task's attributes before running."""

    @abstractmethod
    def pre_processing(self) -> bool:
        """Prepare the input data."""

    @abstractmethod
    def run(self) -> bool:
        """Do the computation."""

    @abstractmethod
    def post_processing(self) -> bool:
        """Write the results to the outputs."""

    def _order_test(self, name: str) -> None:
        order = self._functions_order
        if order and name == "run" and order[-1] == "run":
            return
        order.append(name)

        for position, (actual, expected) in enumerate(zip(order, cycle(_STEP_ORDER)), start=1):
            if actual != expected:
                raise FunctionOrderError(position, actual, expected)

        if self.task_data.state_of_testing is not StateOfTesting.FUNC:
            return
        if name == "pre_processing":
            self._started = time.perf_counter()
        elif name == "post_processing" and self._started is not None:
            elapsed = time.perf_counter() - self._started
            if elapsed > self.max_test_time:
                warnings.warn(
                    f"current test took more than {self.max_test_time} secs: {elapsed}",
                    RuntimeWarning,
                    stacklevel=3,
                )