import numpy as np
import pytest

from game.board import Board, MatchKeys
from solver.feedback_matrix import FeedbackMatrix


@pytest.mark.parametrize("colors,holes", [(3, 2), (4, 3), (5, 2), (2, 5)])
def test_dense_matrix_matches_compute_match(colors, holes):
    board = Board(colors, holes)
    matrix = FeedbackMatrix(board)
    assert matrix.is_dense
    n = board.total_pattern_count()
    for p in range(n):
        for g in range(n):
            assert matrix[p, g] == board.compute_match(p, g)


def test_lazy_matrix_matches_dense():
    board = Board(4, 3)
    dense = FeedbackMatrix(board)
    lazy = FeedbackMatrix(board, dense_limit=10, row_cache_size=4)
    assert not lazy.is_dense
    for g in range(board.total_pattern_count()):
        np.testing.assert_array_equal(lazy.row(g), dense.row(g))
    guesses = [5, 0, 63, 17]
    np.testing.assert_array_equal(lazy.rows(guesses), dense.rows(guesses))


def test_matrix_is_symmetric():
    matrix = FeedbackMatrix(Board(6, 4))
    table = matrix.rows(np.arange(len(matrix)))
    np.testing.assert_array_equal(table, table.T)


def test_matrix_diagonal_is_solved():
    board = Board(5, 3)
    matrix = FeedbackMatrix(board)
    solved = board.key_index(board.solved_keys())
    for p in range(len(matrix)):
        assert matrix.row(p)[p] == solved


def test_lookup_example():
    matrix = FeedbackMatrix(Board(3, 2))
    assert matrix.lookup(0, 1) == MatchKeys(1, 0)
    assert matrix.lookup(1, 3) == MatchKeys(0, 2)


def test_rows_are_read_only():
    matrix = FeedbackMatrix(Board(3, 2))
    with pytest.raises(ValueError):
        matrix.row(0)[0] = 1
    lazy = FeedbackMatrix(Board(3, 2), dense_limit=1)
    with pytest.raises(ValueError):
        lazy.row(0)[0] = 1


def test_progress_callback_reports_rows():
    lines = []
    FeedbackMatrix(Board(3, 2), progress=lines.append)
    assert lines
    assert lines[-1] == "Feedback matrix: 9/9 rows"
