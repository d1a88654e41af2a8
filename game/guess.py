from .board import MatchKeys


class Guess:
    """
        One turn played by the solver.
    Attributes:
        pattern (int): The encoded guess.
        sequence (list[str]): The guess as color symbols.
        possibles (int): Candidates left before this guess was played.
        feedback (MatchKeys | None): Feedback received, if any."""

    def __init__(self, pattern: int, sequence, possibles: int):
        """
        Initialize a Guess instance.
        Args:
            pattern (int): The encoded guess.
            sequence (str | list[str]): The decoded symbols.
            possibles (int): Candidate count before the guess.
        """
        self.pattern = pattern
        self.sequence = list(sequence)
        self.possibles = possibles
        self.feedback = None

    @property
    def is_answer(self) -> bool:
        """True when the solver had already narrowed the code down to this guess."""
        return self.possibles == 1

    def apply_feedback(self, feedback: MatchKeys):
        """
        Store feedback for this guess.
        Args:
            feedback (MatchKeys): (exact_count, color_count)
        """
        self.feedback = feedback

    def get_feedback(self):
        """
        Return the stored feedback as a tuple (exact_count, color_count),
        or None if the guess was never scored.
        """
        if self.feedback is None:
            return None
        return (self.feedback.exact_count, self.feedback.color_count)

    def get_guess(self):
        return self.sequence

    def as_string(self):
        """
        Return a string representation of the guess (e.g. 'PRGY').
        Returns:
            str: The guess as a string."""
        return "".join(self.sequence)

    def __str__(self):
        return self.as_string()
