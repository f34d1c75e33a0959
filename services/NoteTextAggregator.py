# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-19
# Description: NoteTextAggregator.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Tuple

ActiveVersion = Literal["dictation", "ai", "edited"]


@dataclass(frozen=True)
class ChunkText:
    """The text versions of one transcript chunk, as held by the notes subsystem."""
    chunk_id: str
    chunk_order: int
    active_version: ActiveVersion = "dictation"
    dictation_text: Optional[str] = None
    ai_text: Optional[str] = None
    edited_text: Optional[str] = None

    def active_text(self) -> str:
        if self.active_version == "edited":
            return self.edited_text or ""
        if self.active_version == "ai":
            return self.ai_text or ""
        return self.dictation_text or ""


class NoteTextAggregator:
    """
    Builds the note-level aggregate text that NoteEmbeddingIndex.index_note_text expects.

    Chunks are taken in ascending chunk_order; each contributes its active
    version, trimmed; blank chunks are skipped. Texts are joined with `separator`.
    """

    def __init__(self, separator: str = " ") -> None:
        self.separator = separator

    def aggregate(self, chunks: Iterable[ChunkText]) -> Tuple[str, List[str]]:
        parts: List[str] = []
        chunk_ids: List[str] = []

        for chunk in sorted(chunks, key=lambda c: c.chunk_order):
            text = chunk.active_text().strip()
            if not text:
                continue
            parts.append(text)
            chunk_ids.append(chunk.chunk_id)

        return self.separator.join(parts), chunk_ids
