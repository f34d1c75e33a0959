# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-13
# Description: ChangeDetector
# -----------------------------------------------------------------------------
import logging

from rapidfuzz.distance import Levenshtein

from errors.VectorizationErrors import ConfigError
from utility.logging_utils import get_class_logger


def levenshtein(a: str, b: str) -> int:
    """Character-level edit distance (insert / delete / substitute, all cost 1)."""
    return Levenshtein.distance(a, b)


class ChangeDetector:
    """
    Decides whether edited text differs enough from what was last embedded.

    The ratio is `levenshtein(old, new) / max(len(old), len(new))` over raw
    characters. No case or whitespace normalisation is applied; the default
    threshold of 0.2 was tuned against exactly this behaviour.
    """

    def __init__(self, *, threshold: float = 0.2, logger: logging.Logger | None = None):
        if not 0.0 < threshold < 1.0:
            raise ConfigError(f"threshold must be in (0, 1), got {threshold}")
        self.threshold = threshold
        self.logger = logger or get_class_logger(self.__class__)

    def change_ratio(self, old_text: str, new_text: str) -> float:
        max_len = max(len(old_text), len(new_text))
        if max_len == 0:
            return 0.0
        return levenshtein(old_text, new_text) / max_len

    def should_reembed(self, old_text: str, new_text: str) -> bool:
        if not old_text:
            return bool(new_text)

        # change to empty is still a change; the caller decides what to store
        if not new_text:
            return True

        if old_text == new_text:
            return False

        ratio = self.change_ratio(old_text, new_text)
        decision = ratio > self.threshold
        self.logger.debug(
            "Change ratio %.3f (threshold %.3f) -> reembed=%s",
            ratio,
            self.threshold,
            decision,
        )
        return decision
