import matplotlib
import pytest

from game.board import Board
from game.ruleset import make_rules

# no display in test runs
matplotlib.use("Agg")


@pytest.fixture
def small_board():
    return Board(3, 2)


@pytest.fixture
def abc_rules():
    return make_rules(2, ["A", "B", "C"], name="abc")
