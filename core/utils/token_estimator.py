"""
Token Estimator

Character-based token approximation (~4 characters per token).
Deterministic on purpose: chunk budgets only need to be consistent,
not tokenizer-exact.
"""

from typing import Optional

CHARACTERS_PER_TOKEN = 4


class TokenEstimator:

    def __init__(self, characters_per_token: int = CHARACTERS_PER_TOKEN):
        self.characters_per_token = characters_per_token

    def estimate(self, text: Optional[str]) -> int:
        """
        Estimate tokens for text.

        Returns 0 for None/empty input and at least 1 otherwise.
        """
        if not text:
            return 0
        return max(1, len(text) // self.characters_per_token)


_default_estimator = TokenEstimator()


def estimate_tokens(text: Optional[str]) -> int:
    return _default_estimator.estimate(text)
