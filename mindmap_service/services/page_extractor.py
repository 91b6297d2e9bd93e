import asyncio
import logging

import requests
from bs4 import BeautifulSoup

from mindmap_service.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

# Main-content containers, most specific first. <body> is the fallback.
CONTENT_SELECTORS = ("article", ".article", ".post", "main")

_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def extract_main_text(html: str) -> str:
    """Return the visible text of the main content block of an HTML page."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    for selector in CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None:
            break
    else:
        node = soup.body or soup

    return node.get_text(separator="\n", strip=True)


class PageExtractor:
    """
    Fetches a URL and extracts its main text.

    This is a plain HTTP fetch with no JavaScript execution, so only the
    server-rendered HTML is seen. Pages that build their content
    client-side yield little more than their static shell.
    """

    def __init__(self, timeout: float = 30):
        self.timeout = timeout

    def _fetch(self, url: str) -> str:
        response = requests.get(url, headers={"User-Agent": _USER_AGENT}, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    async def extract(self, url: str) -> str:
        logger.info(f"[PAGE] Fetching {url}")
        try:
            html = await asyncio.to_thread(self._fetch, url)
        except requests.RequestException as e:
            logger.error(f"[PAGE] ✗ Failed to fetch {url}: {e}")
            raise ExtractionError(str(e)) from e

        text = await asyncio.to_thread(extract_main_text, html)
        logger.info(f"[PAGE] ✓ Extracted {len(text)} chars from {url}")
        return text
