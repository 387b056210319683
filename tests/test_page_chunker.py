# tests/test_page_chunker.py

from planqa.infrastructure.page_chunker import (
    PageChunker,
    DEFAULT_TARGET_LENGTH,
    DEFAULT_OVERLAP,
)


def _sentences(count: int) -> str:
    return " ".join(f"Sentence number {i} explains one plan benefit." for i in range(count))


def test_empty_text_yields_no_chunks():
    assert PageChunker().chunk("", 1) == []


def test_whitespace_only_text_yields_no_chunks():
    assert PageChunker().chunk("   \n\t  ", 3) == []


def test_short_text_yields_single_trimmed_chunk():
    segments = PageChunker().chunk("  Short text about copays.  ", 1)

    assert len(segments) == 1
    assert segments[0].text == "Short text about copays."
    assert segments[0].sequence_id == "1-0"


def test_page_number_is_preserved():
    segments = PageChunker().chunk("Sample text content", 5)

    assert segments[0].page_number == 5
    assert segments[0].sequence_id.startswith("5-")


def test_long_text_is_split_into_multiple_chunks():
    segments = PageChunker().chunk("A" * 5000, 1)

    assert len(segments) == 2
    assert segments[0].text == "A" * DEFAULT_TARGET_LENGTH
    # Second chunk starts `overlap` characters before the first one ended
    assert len(segments[1].text) == 5000 - (DEFAULT_TARGET_LENGTH - DEFAULT_OVERLAP)


def test_sequence_ids_are_sequential_and_unique():
    segments = PageChunker().chunk(_sentences(400), 2)

    ids = [s.sequence_id for s in segments]
    assert ids == [f"2-{i}" for i in range(len(segments))]
    assert len(set(ids)) == len(ids)


def test_chunks_end_on_sentence_boundary():
    text = _sentences(400)
    segments = PageChunker().chunk(text, 1)

    assert len(segments) > 1
    for segment in segments[:-1]:
        assert segment.text.endswith(".")


def test_chunks_never_exceed_target_length():
    segments = PageChunker(target_length=100, overlap=20).chunk(_sentences(50), 1)
    assert all(len(s.text) <= 100 for s in segments)


def test_every_chunk_is_a_substring_of_the_page():
    text = _sentences(300) + "\nTrailing line without period"
    segments = PageChunker().chunk(text, 1)

    assert all(s.text in text for s in segments)


def test_chunks_cover_the_whole_text():
    text = _sentences(300)
    segments = PageChunker().chunk(text, 1)

    assert text.startswith(segments[0].text)
    assert text.endswith(segments[-1].text)
    # Consecutive chunks overlap, so no text falls between them
    position = 0
    for segment in segments:
        found = text.find(segment.text, max(0, position - DEFAULT_OVERLAP - 1))
        assert found != -1
        assert found <= position + 1
        position = found + len(segment.text)
    assert position == len(text)


def test_snaps_to_newline():
    text = "x" * 90 + "\n" + "y" * 50
    segments = PageChunker(target_length=100, overlap=10, boundary_window=20).chunk(text, 1)

    assert segments[0].text == "x" * 90


def test_ignores_breaks_outside_boundary_window():
    # The only period is far from the cut, so the naive cut is used
    text = "Intro." + "z" * 200
    segments = PageChunker(target_length=100, overlap=10, boundary_window=20).chunk(text, 1)

    assert len(segments[0].text) == 100


def test_overlap_larger_than_target_still_terminates():
    segments = PageChunker(target_length=10, overlap=50).chunk("b" * 40, 1)

    assert 1 < len(segments) <= 40
    assert segments[-1].text.endswith("b")


def test_chunking_is_deterministic():
    text = _sentences(200)
    assert PageChunker().chunk(text, 4) == PageChunker().chunk(text, 4)
