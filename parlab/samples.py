"""Small first programs: a thread census, a process world census and a parallel Fibonacci."""

from __future__ import annotations

import argparse
import os
import platform
import threading
from collections.abc import Sequence

from parlab.comm import Communicator, run_parallel

_PARALLEL_DEPTH = 4


def _fib(n: int, depth: int) -> int:
    if n < 2:
        return n
    if depth <= 0:
        return _fib(n - 1, 0) + _fib(n - 2, 0)

    results = [0, 0]

    def compute(slot: int, k: int) -> None:
        results[slot] = _fib(k, depth - 1)

    workers = [
        threading.Thread(target=compute, args=(0, n - 1)),
        threading.Thread(target=compute, args=(1, n - 2)),
    ]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    return results[0] + results[1]


def fib(n: int) -> int:
    """Return the ``n``-th Fibonacci number, computing the two halves concurrently.

    Values of ``n`` below 2 are returned unchanged.
    """
    return _fib(n, _PARALLEL_DEPTH)


def thread_report(count: int | None = None) -> list[str]:
    """Start ``count`` threads, one per processor by default, each reporting its number.

    Returns the header line followed by each thread's line in thread order.
    """
    if count is None:
        count = os.cpu_count() or 1
    if count < 0:
        raise ValueError(f"thread count must not be negative, got {count}")
    lines = [""] * count

    def task(number: int) -> None:
        lines[number] = f"thread number: {number}"

    threads = [threading.Thread(target=task, args=(number,)) for number in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return [f"Number of threads = {count}", *lines]


def _rank_report(comm: Communicator) -> list[str]:
    comm.barrier()
    return [
        f"Processor = {platform.node()}",
        f"Rank = {comm.rank}",
        f"Number of processors = {comm.size}",
    ]


def world_report(size: int) -> list[str]:
    """Run a world of ``size`` processes; each reports its processor, rank and world size.

    Returns the lines of all ranks, in rank order.
    """
    reports = run_parallel(size, _rank_report)
    return [line for report in reports for line in report]


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(prog="parlab-samples", description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    world = commands.add_parser("world", help="report every process of a world")
    world.add_argument("--size", type=int, default=os.cpu_count() or 1)

    threads = commands.add_parser("threads", help="report every started thread")
    threads.add_argument("--count", type=int, default=None)

    fibonacci = commands.add_parser("fib", help="compute a Fibonacci number")
    fibonacci.add_argument("n", type=int, nargs="?", default=10)

    args = parser.parse_args(argv)
    try:
        if args.command == "world":
            lines = world_report(args.size)
        elif args.command == "threads":
            lines = thread_report(args.count)
        else:
            lines = [str(fib(args.n))]
    except ValueError as error:
        parser.error(str(error))
    for line in lines:
        print(line)
    return 0