import re

from mindmap_service.services.chunker import split_sentences, split_text


def _squash(text):
    return re.sub(r"\s+", "", text)


class TestSplitSentences:

    def test_keeps_terminators_and_trailing_quotes(self):
        units = split_sentences('He said "stop!" Then left... Why?')
        assert [u.strip() for u in units] == ['He said "stop!"', "Then left...", "Why?"]

    def test_unterminated_remainder_is_kept(self):
        units = split_sentences("First one. and a tail")
        assert [u.strip() for u in units] == ["First one.", "and a tail"]

    def test_text_without_boundaries_is_single_unit(self):
        assert split_sentences("no punctuation at all") == ["no punctuation at all"]

    def test_whitespace_only_units_are_ignored(self):
        assert [u.strip() for u in split_sentences("A.   ")] == ["A."]


class TestSplitText:

    def test_short_text_is_one_chunk(self):
        assert split_text("A. B. C.", max_chunk_size=1000) == ["A. B. C."]

    def test_small_limit_splits_per_sentence(self):
        chunks = split_text("AAAA. BBBB. CCCC.", max_chunk_size=5)
        assert chunks == ["AAAA.", "BBBB.", "CCCC."]
        assert all(chunk and len(chunk) <= 6 for chunk in chunks)

    def test_empty_input_yields_no_chunks(self):
        assert split_text("", max_chunk_size=10) == []
        assert split_text("   \n ", max_chunk_size=10) == []

    def test_oversized_sentence_is_not_cut(self):
        long_sentence = "x" * 50 + "."
        chunks = split_text(f"Hi. {long_sentence} Bye.", max_chunk_size=10)
        assert chunks == ["Hi.", long_sentence, "Bye."]

    def test_oversized_first_sentence_produces_no_empty_chunk(self):
        chunks = split_text("y" * 30 + ". Short.", max_chunk_size=10)
        assert "" not in chunks
        assert chunks[0] == "y" * 30 + "."

    def test_concatenation_preserves_sentence_order(self):
        text = "One fish. Two fish! Red fish? Blue fish. " * 20
        chunks = split_text(text, max_chunk_size=60)
        assert len(chunks) > 1
        assert all(chunk.strip() for chunk in chunks)
        assert _squash("".join(chunks)) == _squash(text)

    def test_chunks_respect_limit_when_sentences_fit(self):
        text = "Alpha beta. " * 30
        for chunk in split_text(text, max_chunk_size=40):
            assert len(chunk) <= 40

    def test_text_without_sentence_breaks(self):
        assert split_text("just some words", max_chunk_size=1000) == ["just some words"]

    def test_default_size_comes_from_settings(self, monkeypatch):
        from mindmap_service.core.config import settings
        monkeypatch.setattr(settings, "CHUNK_SIZE", 8)
        assert split_text("Aaaa. Bbbb.") == ["Aaaa.", "Bbbb."]
