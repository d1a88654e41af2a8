import json

import pytest

from game.board import Board, MatchKeys
from game.game import Game
from game.ruleset import make_rules
from solver.solver_manager import MinimaxConfig
from ui.cli import gameloop, main, parse_match_keys, read_match_keys


def test_parse_match_keys():
    board = Board(6, 4)
    assert parse_match_keys("1,2", board) == MatchKeys(1, 2)
    assert parse_match_keys(" 0 , 3 ", board) == MatchKeys(0, 3)
    assert parse_match_keys("4 0", board) == MatchKeys(4, 0)
    for bad in ["", "1", "1,2,3", "a,b", "3,2", "3,1", "-1,0"]:
        with pytest.raises(ValueError):
            parse_match_keys(bad, board)


def test_read_match_keys_reprompts(capsys):
    answers = iter(["nonsense", "5,0", "2,1"])
    keys = read_match_keys(Board(6, 4), lambda prompt: next(answers))
    assert keys == MatchKeys(2, 1)
    assert capsys.readouterr().out.count("Invalid input") == 2


def test_read_match_keys_exit():
    assert read_match_keys(Board(6, 4), lambda prompt: "exit") is None


def test_automated_mode(capsys):
    assert main(["2", "ABC", "--code", "CB", "--quiet"]) == 0
    out = capsys.readouterr().out
    assert "Secret code: CB" in out
    assert "Answer: CB" in out or "Lucky guess!" in out
    assert "(9 possibles)" in out


def test_automated_mode_saves_transcript(tmp_path):
    path = tmp_path / "game.json"
    assert main(["4", "PRGYB", "--code", "YYBP", "--quiet", "--save", str(path)]) == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["is_won"]
    assert data["secret_code"] == "YYBP"
    assert data["guesses"][-1]["guess"] == "YYBP"


def test_random_mode(capsys):
    assert main(["2", "ABC", "--random", "--seed", "4", "--quiet"]) == 0
    assert "Solved in" in capsys.readouterr().out


def test_benchmark_mode(tmp_path, capsys):
    results = tmp_path / "bench.json"
    image = tmp_path / "bench.png"
    code = main(["2", "ABC", "--benchmark", "--quiet", "--workers", "1",
                 "--save", str(results), "--plot", str(image)])
    assert code == 0
    out = capsys.readouterr().out
    assert "Codes played: 9" in out
    assert "max: " in out and "mean: " in out
    assert json.loads(results.read_text(encoding="utf-8"))["games"] == 9
    assert image.exists()


def test_interactive_mode(monkeypatch, capsys):
    rules = make_rules(2, "ABC")
    board = Board.from_rules(rules)
    secret = board.string_to_pattern("CA", rules["colors"])
    game = Game(rules, config=MinimaxConfig(max_workers=1))

    def fake_input(prompt):
        guess = game.guesses[-1]
        return str(board.compute_match(secret, guess.pattern))

    state = gameloop(game, input_fn=fake_input)
    assert state.is_won
    assert game.guesses[-1].as_string() == "CA"


def test_interactive_main_lucky(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt: "2,0")
    assert main(["2", "ABC", "--quiet"]) == 0
    out = capsys.readouterr().out
    assert "Lucky guess!" in out


def test_interactive_inconsistent_feedback_exits_1(monkeypatch, capsys):
    # AB scores 0,1 against BC and CA only; AA then scores neither as 0,1
    answers = iter(["0,1", "0,1"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    assert main(["2", "ABC", "--quiet"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_interactive_exit(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt: "quit")
    assert main(["2", "ABC", "--quiet"]) == 0
    assert "Exiting game." in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["x", "ABC"],
        ["0", "ABC"],
        ["2", "ABA"],
        ["32", "01"],
        ["2", "ABC", "--code", "AD", "--quiet"],
        ["2", "ABC", "--code", "ABC", "--quiet"],
        ["2", "ABC", "--plot", "out.png", "--quiet"],
    ],
)
def test_configuration_errors_exit_1(argv, capsys):
    assert main(argv) == 1
    assert "Error:" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["4"],
        ["2", "ABC", "--benchmark", "--code", "AB"],
        ["2", "ABC", "--random", "--benchmark"],
        ["2", "ABC", "--workers", "many"],
    ],
)
def test_argument_errors_exit_1(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 1
