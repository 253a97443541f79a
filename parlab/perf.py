"""Timing of tasks, either whole pipelines or the run stage alone."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from parlab.task import StateOfTesting, Task

_COURSE_MARKER = "parallel_programming_course"
_PERF_MARKER = "perf_tests"


class TypeOfRunning(Enum):
    """What a measurement covered."""

    PIPELINE = "pipeline"
    TASK_RUN = "task_run"
    NONE = "none"


def _zero_timer() -> float:
    return 0.0


@dataclass
class PerfAttr:
    """How many times to run, and the clock to read, in seconds."""

    num_running: int
    current_timer: Callable[[], float] = field(default=_zero_timer)


@dataclass
class PerfResults:
    """Measured time in seconds and what was measured."""

    time_sec: float = 0.0
    type_of_running: TypeOfRunning = TypeOfRunning.NONE
    MAX_TIME: ClassVar[float] = 10.0


class Perf:
    """Performance analysis of a task with its data already attached."""

    def __init__(self, task: Task) -> None:
        self.set_task(task)

    def set_task(self, task: Task) -> None:
        """Switch the task to performance testing and analyse it from now on."""
        task.task_data.state_of_testing = StateOfTesting.PERF
        self.task = task

    def pipeline_run(self, attr: PerfAttr) -> PerfResults:
        """Time the full pipeline, repeated ``attr.num_running`` times."""
        task = self.task

        def pipeline() -> None:
            task.validation()
            task.pre_processing()
            task.run()
            task.post_processing()

        return PerfResults(self._measure(attr, pipeline), TypeOfRunning.PIPELINE)

    def task_run(self, attr: PerfAttr) -> PerfResults:
        """Time the run stage alone, then run the whole pipeline once more."""
        task = self.task
        task.validation()
        task.pre_processing()
        elapsed = self._measure(attr, task.run)
        task.post_processing()

        task.validation()
        task.pre_processing()
        task.run()
        task.post_processing()
        return PerfResults(elapsed, TypeOfRunning.TASK_RUN)

    @staticmethod
    def _measure(attr: PerfAttr, pipeline: Callable[[], object]) -> float:
        begin = attr.current_timer()
        for _ in range(attr.num_running):
            pipeline()
        return attr.current_timer() - begin


def _task_path(test_path: str) -> str:
    path = test_path
    start = path.find(_COURSE_MARKER)
    if start != -1:
        path = path[start + len(_COURSE_MARKER) + 1 :]
    end = path.find(_PERF_MARKER)
    if end != -1:
        path = path[: max(end - 1, 0)]
    return path


def _exceeds_limit(results: PerfResults) -> bool:
    return not results.time_sec < PerfResults.MAX_TIME


def format_perf_statistic(results: PerfResults, test_path: str) -> str:
    """Return the ``<task path>:<kind>:<seconds>`` line for automated checkers.

    A time at or over the limit is reported as -1.
    """
    seconds = -1.0 if _exceeds_limit(results) else results.time_sec
    return f"{_task_path(test_path)}:{results.type_of_running.value}:{seconds:.10f}"


def print_perf_statistic(results: PerfResults, test_path: str) -> str:
    """Print the statistic line and return it.

    Raises RuntimeError, after printing, when the time is over the limit.
    """
    line = format_perf_statistic(results, test_path)
    over = _exceeds_limit(results)
    if over:
        print(
            f"Task execution time must be < {PerfResults.MAX_TIME} secs.\n"
            f"Original time in secs: {results.time_sec}",
            file=sys.stderr,
        )
    print(line)
    if over:
        raise RuntimeError(
            f"task took {results.time_sec} secs, limit is {PerfResults.MAX_TIME} secs"
        )
    return line