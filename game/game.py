from __future__ import annotations

from .board import Board, MatchKeys
from .errors import InconsistentFeedbackError
from .guess import Guess
from .ruleset import DEFAULT_RULES
from solver.solver_manager import MinimaxConfig, MinimaxSolver
from state.game_state import GameState


class Game:
    """Runs the solver against a feedback source and keeps the turn history."""

    def __init__(self, rules=None, solver: MinimaxSolver | None = None, config: MinimaxConfig | None = None):
        """Initialize a game for a ruleset, optionally reusing a solver."""
        self.rules = rules or DEFAULT_RULES
        self.board = Board.from_rules(self.rules)
        self.solver = solver or MinimaxSolver(self.board, config=config)
        self.solver.reset()
        self.secret_code = None
        self.guesses = []
        self.current_attempt = 0
        self.is_over = False
        self.is_won = False
        self.lucky = False

    def next_guess(self) -> Guess:
        """Ask the solver for the next guess and record it."""
        pattern, possibles = self.solver.get_guess()
        guess = Guess(
            pattern,
            self.board.pattern_to_string(pattern, self.rules["colors"]),
            possibles,
        )
        self.guesses.append(guess)
        self.current_attempt += 1

        if guess.is_answer:
            self.is_over = True
            self.is_won = True
        return guess

    def record_feedback(self, guess: Guess, keys: MatchKeys):
        """
        Apply feedback for `guess`.

        The solved feedback ends the game even if several candidates are
        left. Otherwise the candidate set is narrowed.

        Raises:
            InconsistentFeedbackError: If no candidate survives.
        """
        guess.apply_feedback(keys)

        if keys == self.board.solved_keys():
            self.is_over = True
            self.is_won = True
            self.lucky = not guess.is_answer
            return

        if self.solver.apply_match(guess.pattern, keys) == 0:
            self.is_over = True
            raise InconsistentFeedbackError(
                f"Feedback {keys} for {guess} contradicts every remaining pattern."
            )

    def play(self, feedback_source, on_guess=None) -> GameState:
        """
        Play until the code is found.

        Args:
            feedback_source: Callable taking a Guess and returning MatchKeys.
            on_guess: Optional callable invoked with each Guess before
                feedback is requested.
        Returns:
            GameState: Snapshot of the finished game.
        """
        while not self.is_over:
            guess = self.next_guess()
            if on_guess is not None:
                on_guess(guess)
            if self.is_over:
                break
            self.record_feedback(guess, feedback_source(guess))
        return self.get_current_state()

    def get_current_state(self) -> GameState:
        """Return a GameState snapshot for saving or analysis."""
        return GameState(
            rules=self.rules,
            guesses=list(self.guesses),
            current_attempts=self.current_attempt,
            is_over=self.is_over,
            is_won=self.is_won,
            lucky=self.lucky,
            code=self.secret_code.as_string() if self.secret_code else None,
        )

    def render(self) -> str:
        """Text board of every guess with its feedback pegs."""

        glyphs = self.rules.get("display", {}).get("emoji_map", {})
        holes = self.rules["code_length"]
        exact_peg = glyphs.get("BK", "X")
        color_peg = glyphs.get("W", "o")

        lines = []
        line = "+----" * (2 * holes) + "+"
        lines.append(line)
        for guess in self.guesses:
            attempt_line = ""
            for c in guess.get_guess():
                attempt_line += "| " + glyphs.get(c, c.ljust(2)) + " "
            exact, color = guess.get_feedback() or (0, 0)
            attempt_line += ("| " + exact_peg + " ") * exact
            attempt_line += ("| " + color_peg + " ") * color
            attempt_line += "|    " * max(0, holes - exact - color)
            lines.append(attempt_line + "|")
            lines.append(line)
        return "\n".join(lines)
