from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import ConfigurationError, DecodeError
from .ruleset import DEFAULT_RULES, MAX_PATTERN_COUNT


@dataclass(frozen=True, order=True)
class MatchKeys:
    """
    Feedback for one (pattern, guess) pair.

    Attributes:
        exact_count (int): Holes with the same color in the same position.
        color_count (int): Additional color matches among the other holes.
    """

    exact_count: int
    color_count: int

    def __str__(self):
        return f"{self.exact_count},{self.color_count}"


class Board:
    """
    Fixed board geometry: encodes patterns as base-`color_count` integers
    of `hole_count` digits and computes feedback between two patterns.

    Attributes:
        color_count (int): Size of the color alphabet.
        hole_count (int): Number of holes in a code.
    """

    def __init__(self, color_count: int, hole_count: int):
        if color_count <= 0 or hole_count <= 0:
            raise ConfigurationError(
                f"Board needs at least one color and one hole, got "
                f"{color_count} colors and {hole_count} holes."
            )
        self.color_count = color_count
        self.hole_count = hole_count

    @classmethod
    def from_rules(cls, rules=None) -> Board:
        """Create a board from a ruleset dict (see game.ruleset)."""
        rules = rules or DEFAULT_RULES
        return cls(len(rules["colors"]), rules["code_length"])

    def __repr__(self):
        return f"Board(color_count={self.color_count}, hole_count={self.hole_count})"

    def __eq__(self, other):
        if isinstance(other, Board):
            return (self.color_count, self.hole_count) == (
                other.color_count,
                other.hole_count,
            )
        return NotImplemented

    def __hash__(self):
        return hash((self.color_count, self.hole_count))

    def total_pattern_count(self) -> int:
        """
        Return color_count ** hole_count.

        Raises:
            ConfigurationError: If the universe exceeds MAX_PATTERN_COUNT.
        """
        count = self.color_count**self.hole_count
        if count > MAX_PATTERN_COUNT:
            raise ConfigurationError(
                f"{count} patterns exceed the supported {MAX_PATTERN_COUNT}."
            )
        return count

    def _check_pattern(self, pattern: int) -> None:
        if not 0 <= pattern < self.color_count**self.hole_count:
            raise DecodeError(
                f"Pattern {pattern} is outside the board's range "
                f"[0, {self.color_count ** self.hole_count})."
            )

    def pattern_digits(self, pattern: int) -> list[int]:
        """Return the digits of `pattern`, most significant first."""
        self._check_pattern(pattern)
        digits = []
        for _ in range(self.hole_count):
            digits.append(pattern % self.color_count)
            pattern //= self.color_count
        digits.reverse()
        return digits

    def pattern_to_string(self, pattern: int, color_symbols: Sequence[str]) -> str:
        """
        Decode `pattern` into its color symbols.

        Args:
            pattern (int): Encoded pattern.
            color_symbols (Sequence[str]): One symbol per color.
        Returns:
            str: The symbols, one per hole, most significant first.
        """
        if len(color_symbols) != self.color_count:
            raise ConfigurationError(
                f"Alphabet has {len(color_symbols)} symbols, board has "
                f"{self.color_count} colors."
            )
        return "".join(color_symbols[d] for d in self.pattern_digits(pattern))

    def string_to_pattern(self, symbols: Sequence[str], color_symbols: Sequence[str]) -> int:
        """
        Encode a sequence of color symbols (e.g. 'PRGY') into a pattern.

        Raises:
            DecodeError: On a wrong length or a symbol outside the alphabet.
        """
        if len(color_symbols) != self.color_count:
            raise ConfigurationError(
                f"Alphabet has {len(color_symbols)} symbols, board has "
                f"{self.color_count} colors."
            )
        if len(symbols) != self.hole_count:
            raise DecodeError(
                f"Code length must be {self.hole_count}, but got {len(symbols)}."
            )

        pattern = 0
        for symbol in symbols:
            try:
                digit = list(color_symbols).index(symbol)
            except ValueError:
                allowed = ", ".join(color_symbols)
                raise DecodeError(
                    f"Invalid color '{symbol}'. Allowed: {allowed}."
                ) from None
            pattern = pattern * self.color_count + digit
        return pattern

    def compute_match(self, pattern: int, guess: int) -> MatchKeys:
        """
        Compute the feedback of `guess` against `pattern`.

        Digits are compared position by position; holes that do not match
        exactly are tallied per color on both sides, and the color count is
        the sum of the per-color minimums. The result is symmetric in its
        arguments.
        """
        exact_count = 0
        pattern_colors = [0] * self.color_count
        guess_colors = [0] * self.color_count

        for _ in range(self.hole_count):
            pattern_digit = pattern % self.color_count
            guess_digit = guess % self.color_count
            pattern //= self.color_count
            guess //= self.color_count
            if pattern_digit == guess_digit:
                exact_count += 1
            else:
                pattern_colors[pattern_digit] += 1
                guess_colors[guess_digit] += 1

        color_count = sum(min(p, g) for p, g in zip(pattern_colors, guess_colors))
        return MatchKeys(exact_count, color_count)

    def solved_keys(self) -> MatchKeys:
        """Feedback meaning the guess is fully correct."""
        return MatchKeys(self.hole_count, 0)

    def is_valid_keys(self, keys: MatchKeys) -> bool:
        """Check whether `keys` can be produced on this board at all."""
        exact, color = keys.exact_count, keys.color_count
        if exact < 0 or color < 0 or exact + color > self.hole_count:
            return False
        # a single non-exact hole can never score a color match
        return not (exact == self.hole_count - 1 and color == 1)

    def possible_keys(self) -> list[MatchKeys]:
        """All feedback values this board can produce, ascending."""
        keys = [
            MatchKeys(e, c)
            for e in range(self.hole_count + 1)
            for c in range(self.hole_count + 1 - e)
        ]
        return [k for k in keys if self.is_valid_keys(k)]

    # Dense integer codes, used by the feedback matrix

    def key_space(self) -> int:
        return (self.hole_count + 1) ** 2

    def key_index(self, keys: MatchKeys) -> int:
        return keys.exact_count * (self.hole_count + 1) + keys.color_count

    def keys_from_index(self, index: int) -> MatchKeys:
        exact, color = divmod(int(index), self.hole_count + 1)
        return MatchKeys(exact, color)
