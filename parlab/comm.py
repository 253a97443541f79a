"""An in-process message-passing world whose ranks run as threads."""

from __future__ import annotations

import copy
import functools
import threading
from collections import defaultdict, deque
from collections.abc import Callable
from typing import Any


class CommunicatorAborted(RuntimeError):
    """Raised in a rank that waits on a world in which another rank failed."""


class _World:
    """State shared by all ranks of one communicator."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"a world needs at least one process, got {size}")
        self.size = size
        self.barrier = threading.Barrier(size)
        self.condition = threading.Condition()
        self.mailboxes: defaultdict[tuple[int, int, int], deque[Any]] = defaultdict(deque)
        self.aborted = False
        self.shared: Any = None
        self.slots: list[Any] = [None] * size

    def abort(self) -> None:
        with self.condition:
            self.aborted = True
            self.condition.notify_all()
        self.barrier.abort()


class Communicator:
    """One rank's view of a group of processes that exchange messages.

    Created without arguments it is a world of a single process, rank 0.
    """

    def __init__(self, rank: int = 0, world: _World | None = None) -> None:
        if world is None:
            world = _World(1)
        if not 0 <= rank < world.size:
            raise ValueError(f"rank {rank} is outside a world of size {world.size}")
        self._rank = rank
        self._world = world

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._world.size

    def _check_rank(self, rank: int, role: str) -> None:
        if not 0 <= rank < self.size:
            raise ValueError(f"{role} {rank} is outside a world of size {self.size}")

    def barrier(self) -> None:
        """Wait until every rank has reached this point."""
        try:
            self._world.barrier.wait()
        except threading.BrokenBarrierError:
            raise CommunicatorAborted("another process of the world failed") from None

    def broadcast(self, value: Any, root: int) -> Any:
        """Return the root's value on every rank; other ranks' values are ignored."""
        self._check_rank(root, "root")
        world = self._world
        if self._rank == root:
            world.shared = value
        self.barrier()
        result = value if self._rank == root else copy.deepcopy(world.shared)
        self.barrier()
        return result

    def send(self, dest: int, tag: int, value: Any) -> None:
        """Post a copy of ``value`` to rank ``dest`` under ``tag``."""
        self._check_rank(dest, "destination")
        world = self._world
        with world.condition:
            world.mailboxes[(self._rank, dest, tag)].append(copy.deepcopy(value))
            world.condition.notify_all()

    def recv(self, source: int, tag: int) -> Any:
        """Wait for and return the next message from ``source`` under ``tag``."""
        self._check_rank(source, "source")
        world = self._world
        key = (source, self._rank, tag)
        with world.condition:
            while True:
                if world.aborted:
                    raise CommunicatorAborted("another process of the world failed")
                box = world.mailboxes.get(key)
                if box:
                    value = box.popleft()
                    if not box:
                        del world.mailboxes[key]
                    return value
                world.condition.wait()

    def gather(self, value: Any, root: int) -> list[Any] | None:
        """Collect every rank's value, in rank order, on the root; others get None."""
        self._check_rank(root, "root")
        world = self._world
        world.slots[self._rank] = value
        self.barrier()
        result = list(world.slots) if self._rank == root else None
        self.barrier()
        return result

    def reduce(self, value: Any, op: Callable[[Any, Any], Any], root: int) -> Any:
        """Combine every rank's value with ``op`` in rank order on the root.

        Ranks other than the root get None.
        """
        gathered = self.gather(value, root)
        if gathered is None:
            return None
        return functools.reduce(op, gathered)

    def has_pending(self) -> bool:
        """Whether a message addressed to this rank is waiting to be received."""
        world = self._world
        with world.condition:
            return any(key[1] == self._rank and box for key, box in world.mailboxes.items())


def run_parallel(size: int, target: Callable[..., Any], *args: Any) -> list[Any]:
    """Run ``target(comm, *args)`` on ``size`` ranks at once, one thread each.

    Returns the results in rank order. If any rank raises, the world is
    aborted and the first failure (other than the resulting aborts) is raised.
    """
    world = _World(size)
    results: list[Any] = [None] * size
    errors: list[BaseException | None] = [None] * size

    def worker(rank: int) -> None:
        try:
            results[rank] = target(Communicator(rank, world), *args)
        except BaseException as error:  # noqa: BLE001 - re-raised in the caller
            errors[rank] = error
            world.abort()

    threads = [
        threading.Thread(target=worker, args=(rank,), name=f"rank-{rank}", daemon=True)
        for rank in range(size)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    failures = [error for error in errors if error is not None]
    if failures:
        primary = [error for error in failures if not isinstance(error, CommunicatorAborted)]
        raise (primary or failures)[0]
    return results