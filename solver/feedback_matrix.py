from __future__ import annotations

from functools import lru_cache

import numpy as np

from game.board import Board, MatchKeys


# Cap on the pattern x guess x hole cells compared in one vectorised batch
_BATCH_CELLS = 1 << 22


class FeedbackMatrix:
    """
    Pattern x guess table of feedback, stored as dense key indices
    (see Board.key_index).

    Small boards are materialised in full at construction. Boards with
    more than `dense_limit` patterns compute rows on demand and keep the
    most recent `row_cache_size` of them. Lookups behave the same in
    both modes.

    Attributes:
        board: Board
        pattern_count: int
        is_dense: bool
    """

    def __init__(
        self,
        board: Board,
        *,
        dense_limit: int = 4096,
        row_cache_size: int = 64,
        progress=None,
    ):
        self.board = board
        self.pattern_count = board.total_pattern_count()
        self.dtype = np.uint8 if board.key_space() <= 256 else np.uint16
        self.is_dense = self.pattern_count <= dense_limit

        patterns = np.arange(self.pattern_count, dtype=np.int64)
        weights = board.color_count ** np.arange(
            board.hole_count - 1, -1, -1, dtype=np.int64
        )
        # digits[p, i]: color in hole i of pattern p, most significant first
        self._digits = (patterns[:, None] // weights[None, :]) % board.color_count
        # color_totals[p, c]: how often color c occurs in pattern p
        self._color_totals = np.zeros(
            (self.pattern_count, board.color_count), dtype=np.int16
        )
        for hole in range(board.hole_count):
            np.add.at(
                self._color_totals, (patterns, self._digits[:, hole]), 1
            )

        self._table = None
        if self.is_dense:
            self._table = self._build_table(progress)
        else:
            self._cached_row = lru_cache(maxsize=row_cache_size)(self._compute_row)

    def _batch_size(self) -> int:
        cells = self.pattern_count * max(self.board.hole_count, self.board.color_count)
        return max(1, _BATCH_CELLS // max(1, cells))

    def _compute_rows(self, guesses: np.ndarray) -> np.ndarray:
        """
        Key indices of every pattern against each guess in `guesses`.

        exact = positions with equal digits; color = sum over colors of
        the smaller total count, minus exact.
        """
        guess_digits = self._digits[guesses]
        exact = (guess_digits[:, None, :] == self._digits[None, :, :]).sum(
            axis=2, dtype=np.int64
        )
        overlap = np.minimum(
            self._color_totals[guesses][:, None, :], self._color_totals[None, :, :]
        ).sum(axis=2, dtype=np.int64)
        color = overlap - exact
        return (exact * (self.board.hole_count + 1) + color).astype(self.dtype)

    def _compute_row(self, guess: int) -> np.ndarray:
        row = self._compute_rows(np.array([guess], dtype=np.int64))[0]
        row.setflags(write=False)
        return row

    def _build_table(self, progress=None) -> np.ndarray:
        table = np.empty((self.pattern_count, self.pattern_count), dtype=self.dtype)
        step = self._batch_size()
        for start in range(0, self.pattern_count, step):
            stop = min(start + step, self.pattern_count)
            table[start:stop] = self._compute_rows(
                np.arange(start, stop, dtype=np.int64)
            )
            if progress is not None:
                progress(f"Feedback matrix: {stop}/{self.pattern_count} rows")
        table.setflags(write=False)
        return table

    def row(self, guess: int) -> np.ndarray:
        """Key indices of every pattern against `guess` (read-only)."""
        if self._table is not None:
            return self._table[guess]
        return self._cached_row(int(guess))

    def rows(self, guesses) -> np.ndarray:
        """Stacked rows for a batch of guesses, shape (len(guesses), P)."""
        guesses = np.asarray(guesses, dtype=np.int64)
        if self._table is not None:
            return self._table[guesses]
        out = np.empty((len(guesses), self.pattern_count), dtype=self.dtype)
        step = self._batch_size()
        for start in range(0, len(guesses), step):
            out[start:start + step] = self._compute_rows(guesses[start:start + step])
        return out

    def lookup(self, pattern: int, guess: int) -> MatchKeys:
        return self.board.keys_from_index(self.row(guess)[pattern])

    def __getitem__(self, index) -> MatchKeys:
        pattern, guess = index
        return self.lookup(pattern, guess)

    def __len__(self):
        return self.pattern_count
