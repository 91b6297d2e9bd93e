"""
Mind map pipeline: (URL →) text → summary + topic tree → positioned graph.
"""

import asyncio
import logging
from typing import Optional

from mindmap_service.core.exceptions import ExtractionError
from mindmap_service.schemas.mindmap import MindMapGraph
from mindmap_service.services.graph_layout import layout_mind_map
from mindmap_service.services.llm_gateway import LLMGateway
from mindmap_service.services.page_extractor import PageExtractor
from mindmap_service.services.topic_extractor import TopicExtractor

logger = logging.getLogger(__name__)

SUMMARY_PROMPT_TEMPLATE = (
    "Please provide a concise summary of the following text, "
    "highlighting the main topics and key points:\n\n{text}"
)


class MindMapPipeline:
    """Sequences extraction, summarisation, topic extraction and layout."""

    def __init__(
        self,
        gateway: LLMGateway,
        page_extractor: Optional[PageExtractor] = None,
        topic_extractor: Optional[TopicExtractor] = None,
    ):
        self.gateway = gateway
        self.page_extractor = page_extractor or PageExtractor()
        self.topic_extractor = topic_extractor or TopicExtractor(gateway)

    async def generate_summary(self, text: str) -> str:
        logger.info("[PIPELINE] Generating summary...")
        summary = await self.gateway.generate(SUMMARY_PROMPT_TEMPLATE.format(text=text))
        return summary.strip()

    async def resolve_text(self, content: str, content_type: str) -> str:
        if content_type != "url":
            return content

        text = await self.page_extractor.extract(content)
        if not text.strip():
            raise ExtractionError(f"No text content found at {content}")
        return text

    async def process(self, content: str, content_type: str = "text") -> MindMapGraph:
        text = await self.resolve_text(content, content_type)

        logger.info(f"[PIPELINE] Running summary + topic extraction concurrently ({len(text)} chars)...")
        summary, topics = await asyncio.gather(
            self.generate_summary(text),
            self.topic_extractor.extract_topics(text),
        )

        topics.content = summary
        graph = layout_mind_map(topics)
        logger.info(f"[PIPELINE] ✓ {len(graph.nodes)} node(s), {len(graph.edges)} edge(s)")
        return graph
