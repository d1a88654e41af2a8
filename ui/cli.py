# Command-line interface: interactive, automated and benchmark play
from __future__ import annotations

import argparse
import random
import sys

from game.board import Board, MatchKeys
from game.errors import MastermindError
from game.game import Game
from game.ruleset import make_rules
from game.secret_code import Code
from solver.benchmark import run_benchmark
from solver.solver_manager import MinimaxConfig
from state.persistence import save_results, save_state

EXIT_WORDS = {"EXIT", "QUIT", "Q"}


class _ArgumentParser(argparse.ArgumentParser):
    # configuration errors exit with status 1, not argparse's 2
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="mastermind-solver",
        description="Minimax Mastermind codebreaker.",
    )
    ap.add_argument("hole_count", help="Number of holes in the code (e.g. 4)")
    ap.add_argument("colors", help="Ordered color alphabet, one symbol per character (e.g. PRGYB)")

    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--code", help="Play automatically against this secret code")
    mode.add_argument("--random", action="store_true", help="Play automatically against a random code")
    mode.add_argument("--benchmark", action="store_true", help="Play against every possible code")

    ap.add_argument("--seed", type=int, default=None, help="Seed for --random")
    ap.add_argument("--workers", type=int, default=None, help="Worker threads for the guess search")
    ap.add_argument("--dense-limit", type=int, default=None,
                    help="Largest pattern count with a precomputed feedback matrix")
    ap.add_argument("--quiet", action="store_true", help="No progress output")
    ap.add_argument("--save", default=None, help="Write the game transcript or benchmark results (JSON)")
    ap.add_argument("--plot", default=None, help="Benchmark only: write a guess-count histogram image")
    return ap


def parse_match_keys(text: str, board: Board) -> MatchKeys:
    """
    Parse 'exact,color' feedback typed by the user.

    Raises:
        ValueError: On malformed or impossible feedback.
    """
    parts = [p.strip() for p in text.replace(" ", ",").split(",") if p.strip()]
    if len(parts) != 2:
        raise ValueError("expected two numbers separated by a comma, e.g. 1,2")
    try:
        keys = MatchKeys(int(parts[0]), int(parts[1]))
    except ValueError:
        raise ValueError("feedback must be two non-negative integers") from None
    if not board.is_valid_keys(keys):
        raise ValueError(f"{keys} is not possible with {board.hole_count} holes")
    return keys


def read_match_keys(board: Board, input_fn=None) -> MatchKeys | None:
    """Prompt until valid feedback is entered. Returns None on exit."""
    input_fn = input_fn or input
    while True:
        user_input = input_fn("Enter exact count and color count separated by comma: ").strip()
        if user_input.upper() in EXIT_WORDS:
            return None
        try:
            return parse_match_keys(user_input, board)
        except ValueError as e:
            print(f"Invalid input: {e}")


class _Aborted(Exception):
    pass


class _UsageError(Exception):
    pass


def _report_guess(guess):
    if guess.is_answer:
        print(f"Answer: {guess}")
    else:
        print(f"Guess: {guess} ({guess.possibles} possibles)")


def gameloop(game: Game, input_fn=None):
    """Interactive play: the user scores each guess against their code."""
    print("=== Mastermind Solver ===")
    print(f"Colors: {', '.join(game.rules['colors'])}, holes: {game.rules['code_length']}")
    print("Think of a code and score each guess. Type 'exit' to quit.\n")

    def feedback(guess):
        keys = read_match_keys(game.board, input_fn)
        if keys is None:
            raise _Aborted()
        return keys

    try:
        state = game.play(feedback, on_guess=_report_guess)
    except _Aborted:
        print("Exiting game.")
        return game.get_current_state()

    if game.lucky:
        print("Lucky guess!")
    print(game.render())
    return state


def autoplay(game: Game, code: Code):
    """Automated play against a known code."""
    game.secret_code = code
    print(f"Secret code: {code}")
    state = game.play(code.compare_with, on_guess=_report_guess)
    if game.lucky:
        print("Lucky guess!")
    print(game.render())
    print(f"Solved in {game.current_attempt} guesses.")
    return state


def benchmark(rules, config: MinimaxConfig, save=None, plot=None):
    """Play against every code and print the guess statistics."""
    result = run_benchmark(rules, config=config)
    print(f"Codes played: {result.games}")
    print(f"max: {result.max_guesses}")
    print(f"mean: {result.mean_guesses:.4f}")
    for guesses, count in result.histogram.items():
        print(f"  {guesses} guesses: {count}")
    if save:
        save_results(result, save)
        print(f"Results written to {save}")
    if plot:
        # matplotlib is only needed for this option
        from plot.plot import plot_guess_distribution

        plot_guess_distribution([result.to_dict()], plot)
        print(f"Plot written to {plot}")
    return result


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        rules = make_rules(args.hole_count, list(args.colors))
        cfg_kwargs = {"progress": not args.quiet}
        if args.workers is not None:
            cfg_kwargs["max_workers"] = max(1, args.workers)
        if args.dense_limit is not None:
            cfg_kwargs["dense_limit"] = args.dense_limit
        config = MinimaxConfig(**cfg_kwargs)

        if args.plot and not args.benchmark:
            raise _UsageError("--plot requires --benchmark")

        if args.benchmark:
            benchmark(rules, config, save=args.save, plot=args.plot)
            return 0

        code = None
        if args.code is not None:
            code = Code(args.code, rules=rules)
            code.validate()
        elif args.random:
            code = Code(rules=rules).generate_random(random.Random(args.seed))

        game = Game(rules, config=config)
        if code is not None:
            state = autoplay(game, code)
        else:
            state = gameloop(game)
        if args.save:
            save_state(state, args.save)
            print(f"Transcript written to {args.save}")
        return 0
    except (MastermindError, _UsageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
