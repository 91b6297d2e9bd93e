import asyncio

import pytest

from conftest import FakeGateway, FakePageExtractor, is_summary_prompt, topic_json
from mindmap_service.core.exceptions import ExtractionError, ProviderError
from mindmap_service.services.pipeline import MindMapPipeline
from mindmap_service.services.topic_extractor import TopicExtractor


def respond(prompt):
    if is_summary_prompt(prompt):
        return "  The dedicated summary.  "
    return topic_json("Chunk", "chunk guess", [{"title": "Alpha"}, {"title": "Beta"}])


def test_text_input_builds_graph_with_summary_on_root():
    gateway = FakeGateway(respond)
    pages = FakePageExtractor()
    graph = asyncio.run(MindMapPipeline(gateway, pages).process("Some text. More text.", "text"))

    assert pages.urls == []
    assert graph.nodes[0].id == "root"
    assert graph.nodes[0].data.content == "The dedicated summary."
    assert [n.data.label for n in graph.nodes[1:]] == ["Alpha", "Beta"]
    assert len(graph.edges) == 2


def test_summary_and_topics_use_full_text():
    gateway = FakeGateway(respond)
    asyncio.run(MindMapPipeline(gateway, FakePageExtractor()).process("Full body.", "text"))

    summary_prompts = [p for p in gateway.prompts if is_summary_prompt(p)]
    assert len(summary_prompts) == 1
    assert summary_prompts[0].endswith("Full body.")
    assert len(gateway.prompts) == 2


def test_url_input_goes_through_page_extractor():
    gateway = FakeGateway(respond)
    pages = FakePageExtractor(text="Fetched article text.")
    asyncio.run(MindMapPipeline(gateway, pages).process("https://example.com/post", "url"))

    assert pages.urls == ["https://example.com/post"]
    assert all("Fetched article text." in p for p in gateway.prompts)


def test_blank_page_is_an_extraction_error():
    pipeline = MindMapPipeline(FakeGateway(respond), FakePageExtractor(text="  \n "))
    with pytest.raises(ExtractionError):
        asyncio.run(pipeline.process("https://example.com", "url"))


def test_extraction_failure_propagates():
    pages = FakePageExtractor(error=ExtractionError("Read timed out"))
    gateway = FakeGateway(respond)
    with pytest.raises(ExtractionError, match="Read timed out"):
        asyncio.run(MindMapPipeline(gateway, pages).process("https://example.com", "url"))
    assert gateway.prompts == []


def test_all_malformed_topics_still_yield_root_graph():
    def malformed(prompt):
        return "summary" if is_summary_prompt(prompt) else "<html>oops</html>"

    graph = asyncio.run(MindMapPipeline(FakeGateway(malformed), FakePageExtractor()).process("A. B.", "text"))
    assert len(graph.nodes) == 1
    assert graph.edges == []
    assert graph.nodes[0].data.content == "summary"


def test_summary_failure_propagates_as_provider_error():
    def failing_summary(prompt):
        if is_summary_prompt(prompt):
            raise PermissionError("API key not valid")
        return topic_json("Chunk")

    with pytest.raises(ProviderError, match="API key not valid"):
        asyncio.run(MindMapPipeline(FakeGateway(failing_summary), FakePageExtractor()).process("Text.", "text"))


def test_injected_topic_extractor_is_used():
    gateway = FakeGateway(respond)
    extractor = TopicExtractor(gateway, chunk_size=5)
    graph = asyncio.run(MindMapPipeline(gateway, FakePageExtractor(), extractor).process("One. Two.", "text"))

    # two chunks, both yielding Alpha/Beta, deduplicated
    assert len(gateway.prompts) == 3
    assert [n.data.label for n in graph.nodes[1:]] == ["Alpha", "Beta"]
