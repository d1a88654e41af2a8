from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field, replace

from game.board import Board
from game.ruleset import DEFAULT_RULES
from solver.solver_manager import MinimaxConfig, MinimaxSolver, log_print, progress_print


@dataclass
class BenchmarkResult:
    """Guess counts of the solver against every code of a board."""

    rules: dict
    guess_counts: list[int] = field(default_factory=list)
    total_time_s: float = 0.0

    @property
    def games(self) -> int:
        return len(self.guess_counts)

    @property
    def max_guesses(self) -> int:
        return max(self.guess_counts, default=0)

    @property
    def mean_guesses(self) -> float:
        if not self.guess_counts:
            return 0.0
        return sum(self.guess_counts) / len(self.guess_counts)

    @property
    def histogram(self) -> dict[int, int]:
        return dict(sorted(Counter(self.guess_counts).items()))

    def to_dict(self) -> dict:
        return {
            "rules": self.rules,
            "games": self.games,
            "guess_counts": list(self.guess_counts),
            "max_guesses": self.max_guesses,
            "mean_guesses": self.mean_guesses,
            # json object keys must be strings
            "histogram": {str(k): v for k, v in self.histogram.items()},
            "total_time_s": self.total_time_s,
        }

    @classmethod
    def from_dict(cls, data: dict) -> BenchmarkResult:
        return cls(
            rules=data["rules"],
            guess_counts=list(data["guess_counts"]),
            total_time_s=data.get("total_time_s", 0.0),
        )


def play_against(solver: MinimaxSolver, secret: int, guess_cache: dict | None = None) -> int:
    """
    Play one automated game against `secret` and return the number of
    guesses, counting the final one.

    Args:
        solver: MinimaxSolver, reset before use.
        secret: Encoded secret pattern.
        guess_cache: Optional dict from candidate set to chosen guess,
            shared between games on the same board.
    """
    board = solver.board
    solved = board.solved_keys()
    solver.reset()
    turns = 0
    while True:
        key = solver.candidates.tobytes()
        if guess_cache is not None and key in guess_cache:
            guess, possibles = guess_cache[key]
        else:
            guess, possibles = solver.get_guess()
            if guess_cache is not None:
                guess_cache[key] = (guess, possibles)
        turns += 1
        if possibles == 1:
            return turns
        keys = board.compute_match(secret, guess)
        if keys == solved:
            return turns
        solver.apply_match(guess, keys)


def run_benchmark(rules=None, config: MinimaxConfig | None = None, solver: MinimaxSolver | None = None) -> BenchmarkResult:
    """
    Play against every code of the board and collect guess counts.

    Args:
        rules (dict): Ruleset; DEFAULT_RULES when omitted.
        config (MinimaxConfig): Solver settings.
        solver (MinimaxSolver): Reuse an existing solver for these rules.
    Returns:
        BenchmarkResult
    """
    rules = rules or DEFAULT_RULES
    config = config or MinimaxConfig()
    board = Board.from_rules(rules)
    if solver is None:
        # per-guess progress lines would drown the benchmark's own
        solver = MinimaxSolver(board, config=replace(config, progress=False))

    result = BenchmarkResult(rules=rules)
    guess_cache = {}
    pattern_count = board.total_pattern_count()
    start = time.perf_counter()
    last_report = start

    for secret in range(pattern_count):
        result.guess_counts.append(play_against(solver, secret, guess_cache))

        now = time.perf_counter()
        if config.progress and now - last_report >= config.report_interval:
            progress_print(
                f"Benchmark: {secret + 1}/{pattern_count} codes, "
                f"mean {result.mean_guesses:.3f} guesses"
            )
            last_report = now

    result.total_time_s = time.perf_counter() - start
    if config.progress:
        log_print(
            f"Benchmark done: {result.games} codes in {result.total_time_s:.2f}s"
        )
    solver.reset()
    return result
