"""Tests for the long-document chunker."""

import pytest

from services.chunker import chunk_text


def _paragraphs(count: int, size: int) -> str:
    return "\n\n".join(f"{i:04d} " + "x" * (size - 5) for i in range(count))


class TestChunkText:
    def test_short_text_is_single_unchanged_chunk(self):
        text = "  Short notification with padding  "
        assert list(chunk_text(text)) == [text]

    def test_exact_budget_is_single_chunk(self):
        text = "a" * 40
        assert list(chunk_text(text, max_tokens=10, chars_per_token=4)) == [text]

    def test_empty_text(self):
        assert list(chunk_text("")) == [""]

    def test_chunk_bound(self):
        text = _paragraphs(40, 300)
        max_tokens, overlap = 500, 100
        chunks = list(chunk_text(text, max_tokens=max_tokens, overlap_chars=overlap))
        assert len(chunks) > 1
        for chunk in chunks:
            assert len(chunk) <= max_tokens * 4 + overlap

    def test_breaks_on_paragraph_boundary(self):
        text = _paragraphs(10, 300)
        chunks = list(chunk_text(text, max_tokens=250, overlap_chars=0))
        # every chunk ends with a whole paragraph when breaks are available
        for chunk in chunks:
            assert chunk.endswith("x")
            assert chunk.split("\n\n")[0][:4].isdigit()

    def test_hard_cut_without_paragraphs(self):
        text = "y" * 10_000
        chunks = list(chunk_text(text, max_tokens=1000, overlap_chars=0))
        assert [len(c) for c in chunks] == [4000, 4000, 2000]

    def test_overlap_repeats_boundary_text(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(10_000))
        chunks = list(chunk_text(text, max_tokens=1000, overlap_chars=200))
        assert chunks[0][-200:] == chunks[1][:200]

    def test_covers_whole_document_in_order(self):
        text = _paragraphs(60, 250)
        chunks = list(chunk_text(text, max_tokens=1000, overlap_chars=300))
        assert chunks[0].startswith("0000")
        assert chunks[-1].endswith(text[-50:])
        for i in range(60):
            assert any(f"{i:04d} " in chunk for chunk in chunks)

    def test_no_trailing_duplicate_chunks(self):
        text = _paragraphs(20, 500)
        chunks = list(chunk_text(text, max_tokens=1000, overlap_chars=500))
        assert len(chunks) == len(set(chunks))

    def test_invalid_budget(self):
        with pytest.raises(ValueError):
            list(chunk_text("text", max_tokens=0))

    def test_fifty_thousand_chars_makes_two_chunks(self):
        text = _paragraphs(200, 260)
        assert len(text) > 50_000
        assert len(list(chunk_text(text))) == 2
