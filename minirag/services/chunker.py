"""Fixed-width sliding-window text chunking with character offsets.

Splits a document into :class:`~minirag.models.rag.Chunk` objects of
``chunk_size`` characters, each starting ``chunk_size - overlap``
characters after the previous one, so consecutive chunks share exactly
``overlap`` characters.  Every chunk records its ``[start, end)`` offsets
in the source text, which is what lets an answer's citations be traced
back to a position in the uploaded document.

Chunking is purely positional: no tokenizer, no paragraph detection.  The
same text and parameters always produce the same offsets.

Worked example, ``"ABCDEFGHIJ"`` with size 4 and overlap 2::

    [0,4) ABCD   [2,6) CDEF   [4,8) EFGH   [6,10) GHIJ   [8,10) IJ

The window keeps sliding until one comes back shorter than ``chunk_size``
(it was cut by the end of the text); that short window is the last one.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from minirag.models.rag import DEFAULT_SOURCE_FILENAME, Chunk
from minirag.utils.errors import InputError

logger = structlog.get_logger(logger_name=__name__)


class TextChunker:
    """Splits text into overlapping fixed-size character windows.

    Parameters
    ----------
    chunk_size:
        Characters per chunk (default 1000).
    overlap:
        Characters shared by consecutive chunks (default 150).  Must be
        positive and smaller than *chunk_size*.
    max_chunks:
        Hard cap on chunks per document (default 90).  Keeps one document
        inside a single 96-text embedding request.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 150, max_chunks: int = 90) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 < overlap < chunk_size:
            raise ValueError(
                f"overlap must satisfy 0 < overlap < chunk_size, got overlap={overlap}, "
                f"chunk_size={chunk_size}"
            )
        if max_chunks < 1:
            raise ValueError(f"max_chunks must be >= 1, got {max_chunks}")
        self._chunk_size = chunk_size
        self._overlap = overlap
        self._max_chunks = max_chunks

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    @property
    def max_chunks(self) -> int:
        return self._max_chunks

    def chunk(self, text: str, source_filename: str = DEFAULT_SOURCE_FILENAME) -> list[Chunk]:
        """Split *text* into overlapping :class:`Chunk` objects.

        Parameters
        ----------
        text:
            The document text.  Must be non-empty.
        source_filename:
            Copied onto every chunk for citation display.

        Returns
        -------
        list[Chunk]
            Chunks in document order; ``chunk_index`` equals list position.

        Raises
        ------
        InputError
            If *text* is empty.
        """
        if not text:
            raise InputError("Cannot chunk empty text")

        created_at = datetime.now(timezone.utc)
        chunks: list[Chunk] = []
        for start, end in self.spans(len(text)):
            chunks.append(
                Chunk(
                    id=str(uuid.uuid4()),
                    text=text[start:end],
                    start=start,
                    end=end,
                    chunk_index=len(chunks),
                    source_filename=source_filename,
                    created_at=created_at,
                )
            )

        if len(chunks) == self._max_chunks and chunks[-1].end < len(text):
            logger.warning(
                "chunk_limit_reached",
                max_chunks=self._max_chunks,
                covered_chars=chunks[-1].end,
                text_length=len(text),
                source=source_filename,
            )

        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            text_length=len(text),
            chunk_size=self._chunk_size,
            overlap=self._overlap,
            source=source_filename,
        )
        return chunks

    def spans(self, length: int) -> list[tuple[int, int]]:
        """Return the ``(start, end)`` offsets :meth:`chunk` would use for *length* chars."""
        spans: list[tuple[int, int]] = []
        start = 0
        while start < length and len(spans) < self._max_chunks:
            end = min(start + self._chunk_size, length)
            spans.append((start, end))

            # A window cut short by the end of the text is the final one.
            if end - start < self._chunk_size:
                break

            next_start = end - self._overlap
            if next_start <= start:
                break
            start = next_start

        return spans
