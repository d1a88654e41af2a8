import random

import pytest

from game.board import Board, MatchKeys
from game.errors import DecodeError, InconsistentFeedbackError
from game.game import Game
from game.guess import Guess
from game.ruleset import make_rules
from game.secret_code import Code
from solver.solver_manager import MinimaxConfig, MinimaxSolver
from state.persistence import load_state, save_state

SERIAL = MinimaxConfig(max_workers=1)


def test_code_encodes_and_scores(abc_rules):
    code = Code("CB", rules=abc_rules)
    assert code.is_valid
    assert code.pattern == 7
    assert code.compare_with(7) == MatchKeys(2, 0)
    assert code.compare_with(Guess(5, "BC", 9)) == MatchKeys(0, 2)
    assert code == "CB"
    assert str(code) == "CB"


def test_code_validation(abc_rules):
    with pytest.raises(DecodeError):
        Code("CD", rules=abc_rules)
    with pytest.raises(DecodeError):
        Code("ABC", rules=abc_rules)
    code = Code(rules=abc_rules)
    code.sequence = ["Z", "A"]
    assert code.validate(strict=False) is False


def test_random_code_is_seeded(abc_rules):
    a = Code(rules=abc_rules).generate_random(random.Random(3))
    b = Code(rules=abc_rules).generate_random(random.Random(3))
    assert a == b
    assert a.is_valid


def test_guess_record():
    guess = Guess(7, "CB", 3)
    assert guess.get_feedback() is None
    assert not guess.is_answer
    guess.apply_feedback(MatchKeys(1, 0))
    assert guess.get_feedback() == (1, 0)
    assert guess.as_string() == "CB"
    assert Guess(7, "CB", 1).is_answer


@pytest.mark.parametrize("secret", ["AA", "AB", "CB", "CC", "BA"])
def test_play_against_code(abc_rules, secret):
    code = Code(secret, rules=abc_rules)
    game = Game(abc_rules, config=SERIAL)
    game.secret_code = code
    state = game.play(code.compare_with)
    assert state.is_over and state.is_won
    last = game.guesses[-1]
    assert last.as_string() == secret
    assert state.current_attempts == len(game.guesses)
    assert state.secret_code == secret
    # possibles never grow from turn to turn
    counts = [g.possibles for g in game.guesses]
    assert counts == sorted(counts, reverse=True)


def test_lucky_guess_ends_game_with_candidates_left(abc_rules):
    solver = MinimaxSolver(Board.from_rules(abc_rules), config=SERIAL)
    first, _ = solver.get_guess()
    secret = solver.board.pattern_to_string(first, abc_rules["colors"])

    game = Game(abc_rules, solver=solver)
    seen = []
    state = game.play(Code(secret, rules=abc_rules).compare_with, on_guess=seen.append)
    assert game.lucky
    assert state.is_won
    assert state.current_attempts == 1
    assert seen[0].possibles == 9
    # the solver itself was never told the game ended
    assert solver.candidate_count == 9


def test_inconsistent_feedback_raises(abc_rules):
    game = Game(abc_rules, config=SERIAL)
    guess = game.next_guess()
    game.record_feedback(guess, MatchKeys(1, 0))
    with pytest.raises(InconsistentFeedbackError):
        game.record_feedback(guess, MatchKeys(0, 0))
    assert game.is_over and not game.is_won


def test_game_reuses_and_resets_solver(abc_rules):
    solver = MinimaxSolver(Board.from_rules(abc_rules), config=SERIAL)
    solver.apply_match(0, MatchKeys(0, 0))
    game = Game(abc_rules, solver=solver)
    assert game.solver is solver
    assert solver.candidate_count == 9


def test_render_uses_glyphs():
    rules = make_rules(4, "PRGYB")
    code = Code("PRGY", rules=rules)
    game = Game(rules, config=SERIAL)
    game.play(code.compare_with)
    board_text = game.render()
    assert "🟣" in board_text
    assert board_text.count("\n") == 2 * len(game.guesses)


def test_render_falls_back_to_symbols(abc_rules):
    game = Game(abc_rules, config=SERIAL)
    guess = game.next_guess()
    game.record_feedback(guess, MatchKeys(0, 1))
    assert guess.as_string()[0] in game.render()
    assert "⚪" in game.render()


def test_transcript_round_trip(tmp_path, abc_rules):
    code = Code("BC", rules=abc_rules)
    game = Game(abc_rules, config=SERIAL)
    game.secret_code = code
    state = game.play(code.compare_with)

    path = save_state(state, tmp_path / "game.json")
    loaded = load_state(path)
    assert loaded.to_dict() == state.to_dict()
    assert loaded.secret_code == "BC"
    assert loaded.guesses[-1]["guess"] == "BC"
