"""
Topic Extractor
===============
Turns free text into a merged topic tree:
  1. Split the text into sentence-aligned chunks
  2. Ask the LLM for a JSON topic tree per chunk (concurrently)
  3. Recover JSON from each response, dropping chunks that don't parse
  4. Merge the surviving trees under one root
"""

import asyncio
import json
import logging
import re
from typing import Any, Callable, Optional

from pydantic import ValidationError as SchemaValidationError

from mindmap_service.core.exceptions import ParseError
from mindmap_service.schemas.mindmap import TopicNode
from mindmap_service.services.chunker import split_text
from mindmap_service.services.llm_gateway import LLMGateway
from mindmap_service.services.tree_merger import merge_topics

logger = logging.getLogger(__name__)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PROMPT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

TOPIC_PROMPT_TEMPLATE = (
    "You are an expert at breaking down information into mind maps.\n\n"
    "Given the following text, extract the main topic, and then break it down "
    "into 3-7 key subtopics. For each subtopic, if possible, break it down "
    "further into sub-subtopics.\n\n"
    "Return the result as a valid JSON object in this format "
    "(no explanation, just JSON):\n\n"
    "{{\n"
    '  "title": "Main Topic",\n'
    '  "content": "Short summary of the main topic",\n'
    '  "children": [\n'
    "    {{\n"
    '      "title": "Subtopic 1",\n'
    '      "content": "Summary of subtopic 1",\n'
    '      "children": [\n'
    "        {{\n"
    '          "title": "Sub-subtopic 1",\n'
    '          "content": "Summary of sub-subtopic 1",\n'
    '          "children": []\n'
    "        }}\n"
    "      ]\n"
    "    }},\n"
    "    {{\n"
    '      "title": "Subtopic 2",\n'
    '      "content": "Summary of subtopic 2",\n'
    '      "children": []\n'
    "    }}\n"
    "  ]\n"
    "}}\n\n"
    "Text to analyze:\n"
    "{chunk}\n\n"
    "Return only the JSON, no explanation or extra text."
)


def build_topic_prompt(chunk: str) -> str:
    return TOPIC_PROMPT_TEMPLATE.format(chunk=chunk)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# JSON RECOVERY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
_BRACE_RE = re.compile(r"\{.*\}", re.DOTALL)


def _fenced_block(text: str) -> Optional[str]:
    match = _FENCE_RE.search(text)
    return match.group(1) if match else None


def _brace_span(text: str) -> Optional[str]:
    match = _BRACE_RE.search(text)
    return match.group(0) if match else None


def _raw_text(text: str) -> Optional[str]:
    return text


# Tried in order; the first candidate that parses into a TopicNode wins.
JSON_STRATEGIES: list[tuple[str, Callable[[str], Optional[str]]]] = [
    ("fenced-block", _fenced_block),
    ("brace-span", _brace_span),
    ("raw", _raw_text),
]


def _assign_levels(node: TopicNode, level: int = 0) -> TopicNode:
    node.level = level
    for child in node.children:
        _assign_levels(child, level + 1)
    return node


def parse_topic_tree(raw_text: str) -> TopicNode:
    """
    Recover a topic tree from an LLM response.

    Raises ParseError when no strategy yields a valid tree.
    """
    if not raw_text or not raw_text.strip():
        raise ParseError("Empty AI response received", raw=raw_text)

    errors: list[str] = []
    for name, strategy in JSON_STRATEGIES:
        candidate = strategy(raw_text)
        if candidate is None:
            continue
        try:
            data: Any = json.loads(candidate)
            return _assign_levels(TopicNode.model_validate(data))
        except (json.JSONDecodeError, SchemaValidationError) as e:
            errors.append(f"{name}: {str(e).splitlines()[0]}")

    raise ParseError(f"AI returned invalid topic JSON ({'; '.join(errors)})", raw=raw_text)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# EXTRACTION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TopicExtractor:
    """Runs one LLM call per chunk and merges the resulting trees."""

    def __init__(self, gateway: LLMGateway, chunk_size: int = 1000, max_concurrency: int = 5):
        self.gateway = gateway
        self.chunk_size = chunk_size
        self.max_concurrency = max_concurrency

    async def _extract_chunk(self, index: int, chunk: str, semaphore: asyncio.Semaphore) -> TopicNode:
        async with semaphore:
            raw = await self.gateway.generate(build_topic_prompt(chunk))
        logger.debug(f"[EXTRACT] Chunk {index} raw output: {raw}")
        return parse_topic_tree(raw)

    async def extract_chunk_trees(self, text: str) -> list[TopicNode]:
        """Topic trees for every chunk that parsed, in chunk order."""
        chunks = split_text(text, self.chunk_size)
        logger.info(f"[EXTRACT] {len(chunks)} chunk(s) to analyse")

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(
            *(self._extract_chunk(i, chunk, semaphore) for i, chunk in enumerate(chunks)),
            return_exceptions=True,
        )

        trees: list[TopicNode] = []
        failure: Optional[BaseException] = None
        for index, result in enumerate(results):
            if isinstance(result, ParseError):
                logger.warning(
                    f"[EXTRACT] Chunk {index} dropped: {result}. "
                    f"Raw (first 500 chars): {(result.raw or '')[:500]}"
                )
            elif isinstance(result, BaseException):
                failure = failure or result
            else:
                trees.append(result)

        if failure is not None:
            raise failure

        logger.info(f"[EXTRACT] ✓ {len(trees)}/{len(chunks)} chunk(s) parsed")
        return trees

    async def extract_topics(self, text: str) -> TopicNode:
        trees = await self.extract_chunk_trees(text)
        return merge_topics(trees)
