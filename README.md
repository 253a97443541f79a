# parlab

parlab is a small framework for parallel programming exercises. Every
exercise is a task. A task runs in four stages, in this order:
`validation`, `pre_processing`, `run` and `post_processing`. The `run`
stage may be repeated, and the sequence may start over once it is
complete. If a task built on the framework's order check calls its stages
in any other order, it raises `FunctionOrderError`, which is a
`ValueError`.

## Contents

- `parlab.task`
  - `TaskData` holds the lists `inputs`, `inputs_count`, `outputs` and
    `outputs_count`, and a `state_of_testing` value.
  - `StateOfTesting` has the values `FUNC` and `PERF`.
  - `Task` is the abstract base class. Subclasses call
    `self._order_test("<stage>")` at the start of each stage. In `FUNC`
    state, if the time from `pre_processing` to `post_processing` is more
    than `Task.max_test_time` (1 second), the task issues a
    `RuntimeWarning`.
- `parlab.perf`
  - `Perf(task)` switches the task to `PERF` state.
  - `Perf.pipeline_run(attr)` times the full sequence of stages.
  - `Perf.task_run(attr)` times only `run`, then runs the whole sequence
    once more.
  - Both methods repeat the timed work `attr.num_running` times and return
    a `PerfResults` holding `time_sec` and `type_of_running`.
  - `PerfAttr.current_timer` is the clock the methods read. By default it
    always returns 0.0, so pass a real clock such as `time.perf_counter`.
  - `format_perf_statistic(results, test_path)` returns a line of the form
    `<path>:<kind>:<seconds>`. A time of `PerfResults.MAX_TIME` (10 s) or
    more is reported as -1.
  - `print_perf_statistic(results, test_path)` prints that line. If the
    time is over the limit, it then raises `RuntimeError`.
- `parlab.reference` provides these reference tasks:
  - `MinOfVectorElements`: the minimum of a vector and its index.
  - `NearestNeighborElements`: the adjacent pair with the smallest
    absolute difference.
  - `NumOfOrderlyViolations`: the number of adjacent pairs in which the
    first element is greater than the second.
  - `SumValuesByRowsMatrix`: the sum of each row of a row-major matrix.
- `parlab.comm`
  - `Communicator` is one rank of an in-process world, and each rank runs
    as a thread. It offers `barrier`, `broadcast`, `send`/`recv`,
    `gather`, `reduce` and `has_pending`, and the properties `rank` and
    `size`.
  - `run_parallel(size, target, *args)` calls `target(comm, *args)` on
    every rank and returns the results in rank order.
- `parlab.mpi_example`
  - `ReductionSequential` and `ReductionParallel` compute `"+"`, `"-"`
    (the negated sum) or `"max"` of a vector.
  - `get_random_vector` makes test input.
- `parlab.column_max`
  - `ColumnMaxSequential` and `ColumnMaxParallel` compute the maximum of
    each column of a matrix stored column by column.
  - `generate_random_vector` makes test input.
- `parlab.seidel`
  - `SeidelIterateMethods` solves `A x = b` by iteration.
  - `generate_random_matrix(size, rng)` builds a random system that is
    diagonally dominant.
- `parlab.samples`
  - `fib` computes Fibonacci numbers with threads.
  - `thread_report` and `world_report` are small census programs.
  - `main` is the `parlab-samples` command.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## The `parlab-samples` command

```
parlab-samples world --size 4   # each rank prints its processor name, rank and world size
parlab-samples threads --count 4   # starts the threads and prints each thread's number
parlab-samples fib 10           # prints 55
```

The command needs one of these subcommands:

- `world`: `--size` defaults to the processor count.
- `threads`: `--count` defaults to the processor count.
- `fib`: the number defaults to 10.

## Example

```python
import time

from parlab.task import TaskData
from parlab.reference import MinOfVectorElements
from parlab.perf import Perf, PerfAttr, format_perf_statistic

data = TaskData(
    inputs=[[3, 1, 2]], inputs_count=[3],
    outputs=[[0], [0]], outputs_count=[1, 1],
)
task = MinOfVectorElements(data)
assert task.validation()
task.pre_processing()
task.run()
task.post_processing()
print(data.outputs)  # [[1], [1]]

results = Perf(task).pipeline_run(PerfAttr(num_running=10, current_timer=time.perf_counter))
print(format_perf_statistic(results, "tasks/min/perf_tests/main.py"))
```

## Limits

The parallel tasks run their ranks as threads of one Python process
through `parlab.comm`. They do not start separate processes and do not
communicate across machines. `SeidelIterateMethods` does not use a
communicator; it always works in a single process.