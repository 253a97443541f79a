import operator

import pytest

from parlab.comm import CommunicatorAborted, Communicator, run_parallel


def test_single_process_communicator():
    comm = Communicator()
    assert (comm.rank, comm.size) == (0, 1)
    assert comm.broadcast("x", 0) == "x"
    assert comm.reduce(5, operator.add, 0) == 5
    assert comm.gather(7, 0) == [7]


def test_run_parallel_returns_results_in_rank_order():
    results = run_parallel(4, lambda comm: (comm.rank, comm.size))
    assert results == [(rank, 4) for rank in range(4)]


@pytest.mark.parametrize("size", [0, -1])
def test_run_parallel_rejects_empty_world(size):
    with pytest.raises(ValueError):
        run_parallel(size, lambda comm: None)


@pytest.mark.parametrize("size", [1, 2, 5])
def test_broadcast_delivers_root_value(size):
    def target(comm):
        return comm.broadcast([1, 2, 3] if comm.rank == 0 else None, 0)

    assert run_parallel(size, target) == [[1, 2, 3]] * size


def test_broadcast_from_other_root():
    def target(comm):
        return comm.broadcast(comm.rank * 10, 2)

    assert run_parallel(3, target) == [20, 20, 20]


def test_gather_on_root_only():
    results = run_parallel(4, lambda comm: comm.gather(comm.rank, 0))
    assert results[0] == list(range(4))
    assert results[1:] == [None, None, None]


@pytest.mark.parametrize("size", [1, 3, 4])
def test_reduce_sum_and_max(size):
    def target(comm):
        total = comm.reduce(comm.rank + 1, operator.add, 0)
        largest = comm.reduce(comm.rank, max, 0)
        return total, largest

    results = run_parallel(size, target)
    assert results[0] == (sum(range(1, size + 1)), size - 1)
    assert all(result == (None, None) for result in results[1:])


def test_send_recv_preserves_order_and_copies():
    def target(comm):
        if comm.rank == 0:
            payload = [1, 2]
            comm.send(1, 0, payload)
            payload.append(3)
            comm.send(1, 0, payload)
            return None
        return [comm.recv(0, 0), comm.recv(0, 0)]

    results = run_parallel(2, target)
    assert results[1] == [[1, 2], [1, 2, 3]]


def test_recv_matches_tag():
    def target(comm):
        if comm.rank == 0:
            comm.send(1, 5, "five")
            comm.send(1, 7, "seven")
            return None
        return comm.recv(0, 7), comm.recv(0, 5)

    assert run_parallel(2, target)[1] == ("seven", "five")


def test_has_pending_reflects_mailbox():
    def target(comm):
        if comm.rank == 0:
            comm.send(1, 0, "hello")
        comm.barrier()
        before = comm.has_pending()
        if comm.rank == 1:
            comm.recv(0, 0)
        comm.barrier()
        return before, comm.has_pending()

    results = run_parallel(2, target)
    assert results[0] == (False, False)
    assert results[1] == (True, False)


def test_failure_in_one_rank_is_raised():
    def target(comm):
        if comm.rank == 1:
            raise KeyError("boom")
        comm.barrier()
        return comm.rank

    with pytest.raises(KeyError):
        run_parallel(3, target)


def test_failure_unblocks_waiting_recv():
    def target(comm):
        if comm.rank == 0:
            return comm.recv(1, 0)
        raise ZeroDivisionError

    with pytest.raises(ZeroDivisionError):
        run_parallel(2, target)


def test_send_to_missing_rank_rejected():
    with pytest.raises(ValueError):
        Communicator().send(3, 0, "x")


def test_broadcast_bad_root_rejected():
    with pytest.raises(ValueError):
        Communicator().broadcast(1, 1)


def test_communicator_aborted_is_runtime_error():
    def target(comm):
        comm.barrier()

    world_error = None
    try:
        run_parallel(1, lambda comm: (_ for _ in ()).throw(CommunicatorAborted("x")))
    except CommunicatorAborted as error:
        world_error = error
    assert isinstance(world_error, RuntimeError)
    assert run_parallel(2, target) == [None, None]