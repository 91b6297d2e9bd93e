"""Shared test doubles: in-memory stand-ins for the LLM provider and page fetcher."""

import asyncio
import json

from mindmap_service.core.exceptions import ProviderError
from mindmap_service.services.llm_gateway import LLMGateway
from mindmap_service.services.page_extractor import PageExtractor


def topic_json(title, content="", children=()):
    return json.dumps({"title": title, "content": content, "children": list(children)})


class FakeGateway(LLMGateway):
    """
    Answers prompts with a callable; records every prompt it receives.

    `respond(prompt)` returns the text to send back or raises to simulate
    a provider failure.
    """

    name = "Fake"

    def __init__(self, respond):
        self.respond = respond
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        await asyncio.sleep(0)
        try:
            return self.respond(prompt)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.name, e) from e


class FakePageExtractor(PageExtractor):
    def __init__(self, text="", error=None):
        super().__init__(timeout=1)
        self.text = text
        self.error = error
        self.urls = []

    async def extract(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.text


def is_summary_prompt(prompt: str) -> bool:
    return prompt.startswith("Please provide a concise summary")
