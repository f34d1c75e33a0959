# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-12
# Description: NoteSegmenter
# -----------------------------------------------------------------------------
import logging
from typing import List

from errors.VectorizationErrors import ConfigError
from utility.logging_utils import get_class_logger


class NoteSegmenter:
    """
    Splits transcript text into overlapping word windows for chunk-level embedding.

    Words are whitespace-delimited. Text that already fits in one window is
    returned untouched; longer text is re-joined with single spaces, and the
    last `overlap_words` words of each segment are exactly the first
    `overlap_words` words of the next one.
    """

    def __init__(
        self,
        *,
        max_words: int = 300,
        overlap_words: int = 50,
        logger: logging.Logger | None = None,
    ):
        self.max_words = max_words
        self.overlap_words = overlap_words
        self.logger = logger or get_class_logger(self.__class__)

        if self.max_words <= 0 or self.overlap_words <= 0:
            raise ConfigError(
                f"max_words ({self.max_words}) and overlap_words ({self.overlap_words}) must be positive"
            )
        # guard against bad config that can cause infinite loops
        if self.overlap_words >= self.max_words:
            raise ConfigError(
                f"overlap_words ({self.overlap_words}) must be < max_words ({self.max_words})"
            )

    def segment(self, text: str) -> List[str]:
        words = text.split()
        num_words = len(words)

        if num_words == 0:
            return []

        if num_words <= self.max_words:
            return [text]

        segments: List[str] = []
        start_idx = 0
        while start_idx < num_words:
            end_idx = min(start_idx + self.max_words, num_words)
            segments.append(" ".join(words[start_idx:end_idx]))

            if end_idx == num_words:
                break

            start_idx = end_idx - self.overlap_words

        self.logger.debug(
            "Segmented %d words into %d segments (max_words=%d overlap=%d)",
            num_words,
            len(segments),
            self.max_words,
            self.overlap_words,
        )
        return segments
