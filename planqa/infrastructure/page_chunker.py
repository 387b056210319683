# planqa/infrastructure/page_chunker.py

from typing import List

from planqa.domain.models import PageSegment


# ~4 characters per token
CHARS_PER_TOKEN = 4
DEFAULT_TARGET_LENGTH = 1000 * CHARS_PER_TOKEN
DEFAULT_OVERLAP = 175 * CHARS_PER_TOKEN

# A sentence break is only used if it falls within this many characters of
# the naive cut, so snapping never produces a stub segment.
DEFAULT_BOUNDARY_WINDOW = 200

SENTENCE_BREAKS = (".", "\n")


class PageChunker:
    """
    Splits the text of one page into overlapping segments of roughly
    target_length characters.

    Segment ends are snapped back to the last period or newline near the
    naive cut so sentences are not split in half. Consecutive segments share
    about `overlap` characters of context.
    """

    def __init__(
        self,
        target_length: int = DEFAULT_TARGET_LENGTH,
        overlap: int = DEFAULT_OVERLAP,
        boundary_window: int = DEFAULT_BOUNDARY_WINDOW,
    ):
        self._target_length = target_length
        self._overlap = overlap
        self._boundary_window = boundary_window

    def chunk(self, text: str, page_number: int) -> List[PageSegment]:
        segments: List[PageSegment] = []
        text_length = len(text)
        start = 0

        while start < text_length:
            end = min(start + self._target_length, text_length)

            chunk_end = end
            if end < text_length:
                chunk_end = self._snap_to_boundary(text, start, end)

            piece = text[start:chunk_end].strip()
            if piece:
                segments.append(PageSegment(
                    text=piece,
                    page_number=page_number,
                    sequence_id=f"{page_number}-{len(segments)}",
                ))

            if chunk_end >= text_length:
                break

            start = max(start + 1, chunk_end - self._overlap)
            if start >= end:
                start = end

        return segments

    def _snap_to_boundary(self, text: str, start: int, end: int) -> int:
        """Return the position just after the last sentence break, or `end`."""
        search_floor = max(start, end - self._boundary_window)
        break_point = max(text.rfind(mark, start, end) for mark in SENTENCE_BREAKS)
        if break_point > search_floor:
            return break_point + 1
        return end
