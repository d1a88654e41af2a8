from __future__ import annotations

import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np

from game.board import Board, MatchKeys
from game.errors import InconsistentFeedbackError
from solver.feedback_matrix import FeedbackMatrix


# drop-in helper for progress and log line
def progress_print(msg: str) -> None:
    # overwrite same line, no newline
    print(f"\r\033[K{msg}", end="", flush=True)


def log_print(msg: str) -> None:
    # first terminate the progress line, then print normally
    print("\r\033[K", end="", flush=True)
    print(msg, flush=True)


@dataclass(frozen=True)
class MinimaxConfig:
    max_workers: int = max(1, (os.cpu_count() or 2) - 1)
    # guesses scored per work unit
    chunk_size: int = 256
    # largest pattern count with a fully materialised feedback matrix
    dense_limit: int = 4096
    # memoised rows when the matrix is computed lazily
    row_cache_size: int = 64
    progress: bool = False
    report_interval: float = 2.0


class MinimaxSolver:
    """
    Minimax guess selection:
    - every pattern of the universe is a candidate guess
    - per guess, partition the live candidates by feedback
    - best guess = smallest largest group, then smallest sum of squared
      group sizes, then lowest pattern value

    Attributes:
        board: Board
        cfg: MinimaxConfig
        matrix: FeedbackMatrix
        pattern_count: int

    Methods:
        get_guess(): Select the next guess.
        apply_match(guess, keys): Keep candidates consistent with feedback.
    """

    def __init__(
        self,
        board: Board,
        config: MinimaxConfig | None = None,
        matrix: FeedbackMatrix | None = None,
    ):
        self.board = board
        self.cfg = config or MinimaxConfig()
        self.pattern_count = board.total_pattern_count()

        if matrix is None:
            matrix = FeedbackMatrix(
                board,
                dense_limit=self.cfg.dense_limit,
                row_cache_size=self.cfg.row_cache_size,
                progress=progress_print if self.cfg.progress else None,
            )
            if self.cfg.progress:
                log_print(f"Feedback matrix ready ({self.pattern_count} patterns)")
        elif matrix.board != board:
            raise ValueError(f"Matrix was built for {matrix.board}, not {board}.")
        self.matrix = matrix
        self._key_space = board.key_space()

        self._candidates = np.arange(self.pattern_count, dtype=np.int64)

    def reset(self) -> None:
        """Restore the full candidate set, keeping the matrix."""
        self._candidates = np.arange(self.pattern_count, dtype=np.int64)

    @property
    def pattern_list(self) -> list[int]:
        """Candidates still consistent with all feedback, ascending."""
        return self._candidates.tolist()

    @property
    def candidates(self) -> np.ndarray:
        return self._candidates

    @property
    def candidate_count(self) -> int:
        return int(self._candidates.size)

    @property
    def is_solved(self) -> bool:
        return self._candidates.size == 1

    def _score_rows(self, rows: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Group sizes per row of projected feedback.

        Args:
            rows: (n_guesses, n_candidates) key indices.
        Returns:
            (row_max, total_length) arrays, one entry per guess.
        """
        n = rows.shape[0]
        offsets = (np.arange(n, dtype=np.int64) * self._key_space)[:, None]
        counts = np.bincount(
            (rows + offsets).ravel(), minlength=n * self._key_space
        ).reshape(n, self._key_space)
        return counts.max(axis=1), (counts * counts).sum(axis=1)

    def score_guess(self, guess: int) -> tuple[int, int]:
        """
        Score one guess against the current candidates.

        Returns:
            (row_max, total_length): size of the largest feedback group and
            the sum of squared group sizes.
        """
        projected = self.matrix.row(guess)[self._candidates]
        row_max, total = self._score_rows(projected[None, :].astype(np.int64))
        return int(row_max[0]), int(total[0])

    def _best_in_range(self, start: int, stop: int) -> tuple[int, int, int]:
        """Worker: best (row_max, total_length, guess) among guesses [start, stop)."""
        guesses = np.arange(start, stop, dtype=np.int64)
        projected = self.matrix.rows(guesses)[:, self._candidates].astype(np.int64)
        row_max, total = self._score_rows(projected)
        # lexsort keys are read last-to-first
        best = np.lexsort((guesses, total, row_max))[0]
        return int(row_max[best]), int(total[best]), int(guesses[best])

    def get_guess(self) -> tuple[int, int]:
        """
        Choose the next guess using the minimax strategy.

        Returns:
            (guess, candidate_count): the chosen pattern and the number of
            candidates before it is played. A count of 1 means the guess is
            the answer.
        Raises:
            InconsistentFeedbackError: If no candidate is left.
        """
        if self._candidates.size == 0:
            raise InconsistentFeedbackError(
                "No pattern is consistent with the feedback given so far."
            )
        if self._candidates.size == 1:
            return int(self._candidates[0]), 1

        step = max(1, self.cfg.chunk_size)
        ranges = [
            (start, min(start + step, self.pattern_count))
            for start in range(0, self.pattern_count, step)
        ]

        start_time = time.perf_counter()
        last_report = start_time
        done = 0
        best = None

        if self.cfg.max_workers <= 1 or len(ranges) == 1:
            results = (self._best_in_range(a, b) for a, b in ranges)
            for result in results:
                best = result if best is None else min(best, result)
            done = self.pattern_count
        else:
            # use ThreadPoolExecutor for parallel evaluation
            with ThreadPoolExecutor(max_workers=self.cfg.max_workers) as pool:
                futures = {
                    pool.submit(self._best_in_range, a, b): b - a for a, b in ranges
                }
                # collect results as they complete
                for fut in as_completed(futures):
                    result = fut.result()
                    done += futures[fut]
                    # ties fall to the lowest guess, whatever the completion order
                    best = result if best is None else min(best, result)

                    now = time.perf_counter()
                    # periodic progress report
                    if self.cfg.progress and now - last_report >= self.cfg.report_interval:
                        rate = done / max(1e-9, now - start_time)
                        progress_print(
                            f"Progress: {done}/{self.pattern_count} guesses "
                            f"({rate:.1f} guesses/sec)"
                        )
                        last_report = now

        row_max, total_length, guess = best
        if self.cfg.progress:
            log_print(
                f"Best guess : {guess}\n"
                f"worst case : {row_max}\n"
                f"sum sq     : {total_length}\n"
                f"scored     : {done} guesses in "
                f"{time.perf_counter() - start_time:.2f}s"
            )
        return guess, self.candidate_count

    def apply_match(self, guess: int, match_keys: MatchKeys) -> int:
        """
        Keep only candidates whose feedback against `guess` equals
        `match_keys`. Returns the new candidate count, which is 0 when the
        feedback contradicts everything seen so far.
        """
        if not self.board.is_valid_keys(match_keys):
            self._candidates = self._candidates[:0]
            return 0
        row = self.matrix.row(guess)
        self._candidates = self._candidates[
            row[self._candidates] == self.board.key_index(match_keys)
        ]
        return self.candidate_count
