import re

from mindmap_service.core.config import settings

# A run of non-terminators closed by . ! ? (plus trailing quotes/brackets),
# or the unterminated remainder of the text.
_SENTENCE_RE = re.compile(r"""[^.!?]+(?:[.!?]+["'”’)\]]*|$)""")


def split_sentences(text: str) -> list[str]:
    """Break text into sentence-like units, keeping their leading whitespace."""
    units = [u for u in _SENTENCE_RE.findall(text) if u.strip()]
    if not units and text.strip():
        return [text]
    return units


def split_text(text: str, max_chunk_size: int | None = None) -> list[str]:
    """
    Split text into chunks respecting sentence boundaries.

    Sentences are packed greedily; a chunk is closed as soon as the next
    sentence would push it past max_chunk_size. A sentence longer than the
    limit is never cut and ends up alone in its chunk.
    """
    max_chunk_size = max_chunk_size or settings.CHUNK_SIZE

    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text):
        if current.strip() and len(current) + len(sentence) > max_chunk_size:
            chunks.append(current.strip())
            current = sentence
        else:
            current += sentence

    if current.strip():
        chunks.append(current.strip())

    return chunks
