# state/game_state.py


class GameState:
    """Container for a finished (or running) game transcript"""

    def __init__(
        self, rules, guesses, current_attempts, is_over, is_won, lucky=False, code=None
    ):
        self.rules = rules
        self.guesses = guesses
        self.current_attempts = current_attempts
        self.is_over = is_over
        self.is_won = is_won
        self.lucky = lucky
        self.secret_code = code

    def to_dict(self):
        # Guesses may be Guess objects or dicts already loaded from json
        guesses = []
        for g in self.guesses:
            if isinstance(g, dict):
                guesses.append(dict(g))
                continue
            feedback = g.get_feedback()
            guesses.append(
                {
                    "guess": g.as_string(),
                    "pattern": g.pattern,
                    "possibles": g.possibles,
                    "feedback": list(feedback) if feedback is not None else None,
                }
            )
        return {
            "rules": self.rules,
            "guesses": guesses,
            "current_attempts": self.current_attempts,
            "is_over": self.is_over,
            "is_won": self.is_won,
            "lucky": self.lucky,
            "secret_code": self.secret_code,
        }

    @classmethod
    def from_dict(cls, data):
        # Load the transcript from a dictionary
        return cls(
            rules=data["rules"],
            guesses=data["guesses"],
            current_attempts=data["current_attempts"],
            is_over=data["is_over"],
            is_won=data["is_won"],
            lucky=data.get("lucky", False),
            code=data.get("secret_code"),
        )
