import random

import pytest

from parlab.seidel import SeidelIterateMethods, generate_random_matrix
from parlab.task import TaskData


def _task(*counts):
    return SeidelIterateMethods(TaskData(inputs_count=list(counts)))


def test_matrix_with_zero_diagonal():
    task = _task(3, 0)
    assert task.validation() is True
    assert task.pre_processing() is False


def test_validation_rejects_missing_size():
    assert _task().validation() is False


def test_validation_rejects_zero_size():
    assert _task(0).validation() is False


@pytest.mark.parametrize("size", [2, 3, 5, 10])
def test_random_matrix_pipeline(size):
    task = _task(size)
    matrix, vector = generate_random_matrix(size, random.Random(size))
    task.set_matrix(matrix, vector)
    assert task.validation() is True
    assert task.pre_processing() is True
    assert task.run() is True
    assert task.post_processing() is True


@pytest.mark.parametrize("size", [2, 5, 10])
def test_random_system_set_after_validation_is_solved(size):
    task = _task(size)
    assert task.validation() is True
    assert task.pre_processing() is True
    matrix, vector = generate_random_matrix(size, random.Random(100 + size))
    task.set_matrix(matrix, vector)
    task.run()
    task.post_processing()
    assert task.residual_norm() < 1e-4
    assert len(task.solution) == size


def test_default_two_by_two_system_converges_to_ones():
    task = _task(2)
    assert task.validation()
    assert task.pre_processing()
    task.run()
    assert task.solution == pytest.approx([1.0, 1.0], abs=1e-5)


def test_default_three_by_three_system_does_not_converge():
    task = _task(3)
    task.validation()
    task.pre_processing()
    assert task.run() is True
    assert task.residual_norm() > task.epsilon


def test_generated_matrix_is_strictly_diagonally_dominant():
    matrix, vector = generate_random_matrix(6, random.Random(7))
    assert len(matrix) == 6 and len(vector) == 6
    for i, row in enumerate(matrix):
        off = [value for j, value in enumerate(row) if j != i]
        assert all(1.0 <= value <= 10.0 for value in off)
        assert sum(off) + 1.0 <= row[i] <= sum(off) + 5.0
    assert all(1.0 <= value <= 20.0 for value in vector)


def test_generated_matrix_is_reproducible_with_seed():
    first_matrix, first_vector = generate_random_matrix(4, random.Random(3))
    second_matrix, second_vector = generate_random_matrix(4, random.Random(3))
    assert len(first_matrix) == 4
    assert all(len(row) == 4 for row in first_matrix)
    assert len(first_vector) == 4
    assert first_matrix == second_matrix
    assert first_vector == second_vector
    other_matrix, other_vector = generate_random_matrix(4, random.Random(4))
    assert (other_matrix, other_vector) != (first_matrix, first_vector)


def test_set_matrix_rejects_mismatched_vector():
    task = _task(2)
    with pytest.raises(ValueError):
        task.set_matrix([[1.0, 0.0], [0.0, 1.0]], [1.0])


def test_set_matrix_rejects_non_square_matrix():
    task = _task(2)
    with pytest.raises(ValueError):
        task.set_matrix([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]], [1.0, 1.0])


def test_generate_rejects_negative_size():
    with pytest.raises(ValueError):
        generate_random_matrix(-1)