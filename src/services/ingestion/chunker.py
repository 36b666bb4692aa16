"""Text chunking with overlapping sentence windows.

Splits extracted article text into chunk strings sized for the embedding
model (1000 characters by default, with up to 200 characters of overlap).

Extracted text arrives as one line (blocks joined by single spaces), so
boundaries are found at the sentence level:

1. **Sentence packing** -- sentences are accumulated greedily until the
   next one would push the chunk past ``chunk_size``.
2. **Overlapping windows** -- the next chunk starts with the trailing
   sentences of the previous one, as long as they fit in ``overlap``
   characters, so a fact spanning a boundary is whole in at least one
   chunk.
3. **Oversized sentences** -- a sentence longer than ``chunk_size`` is
   split on word boundaries; a single word longer than ``chunk_size`` is
   cut.

Chunk count and content depend only on the input text and the two size
parameters.  That matters because chunk position feeds the point id.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

# Common abbreviations that should NOT trigger a sentence split.
_ABBREVIATIONS = frozenset(
    {
        "Dr",
        "Mr",
        "Mrs",
        "Ms",
        "Prof",
        "Jr",
        "Sr",
        "St",
        "Gen",
        "Gov",
        "Sen",
        "Rep",
        "No",
        "vs",
        "etc",
        "approx",
        "est",
        "Inc",
        "Ltd",
        "Co",
        "Corp",
        "U.S",
        "U.K",
        "Jan",
        "Feb",
        "Aug",
        "Sept",
        "Oct",
        "Nov",
        "Dec",
    }
)


class TextChunker:
    """Splits text into overlapping, size-bounded chunks.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1000).
    overlap:
        Maximum characters carried over from the previous chunk
        (default 200).  ``0`` disables overlap.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if overlap < 0 or overlap >= chunk_size:
            raise ValueError(f"overlap must be in [0, chunk_size), got {overlap}")
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, text: str) -> list[str]:
        """Split *text* into ordered chunk strings.

        Returns
        -------
        list[str]
            Every chunk is at most ``chunk_size`` characters.  Every word
            of *text* appears in at least one chunk, in order.  Empty or
            whitespace-only input returns ``[]``.
        """
        if not text or not text.strip():
            return []

        pieces: list[str] = []
        for sentence in self._split_sentences(text.strip()):
            if len(sentence) > self._chunk_size:
                pieces.extend(self._split_long_sentence(sentence))
            else:
                pieces.append(sentence)

        chunks = self._accumulate(pieces)
        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            text_length=len(text),
            chunk_size=self._chunk_size,
        )
        return chunks

    # ------------------------------------------------------------------
    # Sentence splitting
    # ------------------------------------------------------------------

    def _split_sentences(self, text: str) -> list[str]:
        """Split *text* at sentence boundaries while respecting abbreviations.

        Handles ``.``, ``!``, ``?`` followed by whitespace or end-of-string.
        Periods after known abbreviations are masked (same length, so
        indices stay aligned) before matching.
        """
        masked = text
        for abbr in _ABBREVIATIONS:
            masked = re.sub(rf"\b{re.escape(abbr)}\.", f"{abbr}\x00", masked)

        sentences: list[str] = []
        last = 0
        for match in re.finditer(r"[.!?](?:\s|$)", masked):
            end = match.end()
            sentence = text[last:end].strip()
            if sentence:
                sentences.append(sentence)
            last = end

        remainder = text[last:].strip()
        if remainder:
            sentences.append(remainder)

        return sentences if sentences else [text]

    def _split_long_sentence(self, sentence: str) -> list[str]:
        """Split an oversized sentence on word boundaries."""
        parts: list[str] = []
        current = ""
        for word in sentence.split():
            while len(word) > self._chunk_size:
                if current:
                    parts.append(current)
                    current = ""
                parts.append(word[: self._chunk_size])
                word = word[self._chunk_size :]
            if not word:
                continue
            candidate = f"{current} {word}" if current else word
            if len(candidate) > self._chunk_size:
                parts.append(current)
                current = word
            else:
                current = candidate
        if current:
            parts.append(current)
        return parts

    # ------------------------------------------------------------------
    # Chunk accumulation
    # ------------------------------------------------------------------

    def _accumulate(self, pieces: list[str]) -> list[str]:
        """Greedily pack *pieces* into chunks with sentence-level overlap."""
        chunks: list[str] = []
        current: list[str] = []
        # Number of leading entries in ``current`` that were carried over.
        carried = 0

        for piece in pieces:
            if current and self._joined_length(current + [piece]) > self._chunk_size:
                chunks.append(" ".join(current))
                current = self._build_overlap(current)
                carried = len(current)
                # Drop carried context if the new piece would not fit beside it.
                while current and self._joined_length(current + [piece]) > self._chunk_size:
                    current.pop(0)
                    carried -= 1
            current.append(piece)

        # A trailing chunk made only of carried-over sentences adds nothing.
        if current and len(current) > carried:
            chunks.append(" ".join(current))

        return chunks

    def _build_overlap(self, parts: list[str]) -> list[str]:
        """Return tail entries of *parts* whose joined length <= ``overlap``."""
        overlap_parts: list[str] = []
        for part in reversed(parts):
            if self._joined_length([part] + overlap_parts) > self._overlap:
                break
            overlap_parts.insert(0, part)
        # Never carry the whole previous chunk forward.
        if len(overlap_parts) == len(parts):
            overlap_parts = overlap_parts[1:]
        return overlap_parts

    @staticmethod
    def _joined_length(parts: list[str]) -> int:
        return sum(len(p) for p in parts) + max(0, len(parts) - 1)
