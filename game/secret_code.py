import random

from .board import Board, MatchKeys
from .errors import DecodeError
from .ruleset import DEFAULT_RULES


class Code:
    """
        Represents the secret code for automated play.
    Attributes:
        sequence (list[str]): The sequence of colors representing the code.
        rules (dict): The ruleset for validation.
        board (Board): Board used to encode and score the code.
        is_valid (bool): Whether the code is valid according to the rules."""

    def __init__(self, sequence=None, rules=None):
        """
        Initialize a Code instance.

        Args:
            sequence (str | list[str] | None): The color symbols of the code.
            rules (dict or None): Ruleset defining length and colors.
        """

        self.rules = rules or DEFAULT_RULES
        self.board = Board.from_rules(self.rules)
        if isinstance(sequence, str):
            self.sequence = list(sequence.replace(" ", ""))
        elif sequence is None:
            self.sequence = []
        else:
            self.sequence = list(sequence)

        self.is_valid = False
        if self.sequence:
            self.is_valid = self.validate()

    def generate_random(self, rng=None):
        """
        Draw a random code from the rules' alphabet.

        Args:
            rng (random.Random | None): Source of randomness, for seeding.
        """

        rng = rng or random
        self.sequence = rng.choices(self.rules["colors"], k=self.rules["code_length"])
        self.is_valid = self.validate()
        return self

    def validate(self, strict: bool = True) -> bool:
        """
        Validate the current code (length, colors).

        Args:
            strict (bool): If True, raise DecodeError with an explanatory
            message when validation fails. If False, return False on failure.

        Returns:
            bool: True if the code sequence is valid.
        """

        try:
            self.board.string_to_pattern(self.sequence, self.rules["colors"])
        except DecodeError:
            if strict:
                raise
            return False
        return True

    @property
    def pattern(self) -> int:
        """The code encoded as a pattern integer."""
        return self.board.string_to_pattern(self.sequence, self.rules["colors"])

    def compare_with(self, guess) -> MatchKeys:
        """
        Score a guess against this code.

        Args:
            guess (Guess | int): A played Guess or an encoded pattern.

        Returns:
            MatchKeys: exact and color matches of the guess.
        """

        guess_pattern = guess if isinstance(guess, int) else guess.pattern
        return self.board.compute_match(self.pattern, guess_pattern)

    def as_string(self):
        return "".join(self.sequence) if self.sequence else "EMPTY"

    def __eq__(self, other):
        if isinstance(other, Code):
            return self.sequence == other.sequence
        if isinstance(other, (list, str)):
            return self.sequence == list(other)
        return False

    def __str__(self):
        return self.as_string()
