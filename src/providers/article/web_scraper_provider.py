"""Web scraper article provider using httpx and BeautifulSoup.

Fetches raw HTML via httpx and reduces it to the blocks a reader would
call "the article": the headline, meaningful sub-headings, and paragraphs
long enough to be prose.  The paragraph length floor is the only
boilerplate filter; navigation links, captions and ad slugs are short.
"""

from __future__ import annotations

import httpx
import structlog
from bs4 import BeautifulSoup

from src.interfaces.article_provider import ArticleContent, IArticleProvider
from src.utils.errors import ExtractionError, FetchError
from src.utils.result import FailureReason, Result

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 15.0
# A realistic desktop browser UA; many news sites block unknown clients.
_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
}

_MIN_SUBHEADING_CHARS = 5  # h2/h3 must be longer than this
_MIN_PARAGRAPH_CHARS = 50  # p must be longer than this


def _failure(reason: FailureReason, message: str) -> Result[ArticleContent]:
    error_cls = FetchError if reason is FailureReason.TRANSPORT else ExtractionError
    return Result.failure(reason, error_cls(message, provider_name="web_scraper"))


def extract_blocks(html: str) -> tuple[str, list[str]]:
    """Return ``(title, blocks)`` for *html*.

    ``title`` is the first ``<h1>``'s text (``""`` if absent).  ``blocks``
    are in output order: the title (if non-empty), then every
    ``<h2>``/``<h3>`` longer than 5 characters in document order, then
    every ``<p>`` longer than 50 characters in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    blocks: list[str] = []

    title = ""
    headline = soup.find("h1")
    if headline is not None:
        title = headline.get_text().strip()
        if title:
            blocks.append(title)

    for heading in soup.find_all(["h2", "h3"]):
        text = heading.get_text().strip()
        if len(text) > _MIN_SUBHEADING_CHARS:
            blocks.append(text)

    for paragraph in soup.find_all("p"):
        text = paragraph.get_text().strip()
        if len(text) > _MIN_PARAGRAPH_CHARS:
            blocks.append(text)

    return title, blocks


class WebScraperProvider(IArticleProvider):
    """Article extraction backed by httpx + BeautifulSoup.

    A shared ``httpx.AsyncClient`` may be injected; otherwise the provider
    creates and owns one, and :meth:`aclose` releases it.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(_DEFAULT_TIMEOUT),
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # IArticleProvider implementation
    # ------------------------------------------------------------------

    async def extract_content(self, url: str) -> Result[ArticleContent]:
        """Fetch *url* and extract headline, sub-headings and paragraphs."""
        try:
            response = await self._client.get(url, headers=_DEFAULT_HEADERS)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("article_fetch_timeout", url=url, error=str(exc))
            return _failure(FailureReason.TRANSPORT, f"Timeout fetching {url}")
        except httpx.HTTPStatusError as exc:
            logger.warning("article_fetch_http_status", url=url, status=exc.response.status_code)
            return _failure(
                FailureReason.TRANSPORT, f"HTTP {exc.response.status_code} for {url}"
            )
        except httpx.HTTPError as exc:
            logger.warning("article_fetch_failed", url=url, error=str(exc))
            return _failure(FailureReason.TRANSPORT, f"HTTP error fetching {url}: {exc}")

        content_type = response.headers.get("content-type", "")
        if content_type and "html" not in content_type.lower():
            logger.warning("article_not_html", url=url, content_type=content_type)
            return _failure(FailureReason.NOT_HTML, content_type)

        try:
            title, blocks = extract_blocks(response.text)
        except Exception as exc:  # noqa: BLE001 - any parser failure skips this page
            logger.warning("article_parse_failed", url=url, error=str(exc))
            return _failure(FailureReason.MALFORMED, str(exc))

        if not blocks:
            logger.warning("article_extraction_empty", url=url)
            return _failure(FailureReason.EMPTY, f"No qualifying text at {url}")

        text = " ".join(blocks)
        logger.info("article_extracted", url=url, blocks=len(blocks), text_length=len(text))

        return Result.success(
            ArticleContent(url=url, text=text, blocks=tuple(blocks), title=title)
        )

    def is_available(self) -> bool:
        """Always available — no external credentials required."""
        return True

    def get_provider_name(self) -> str:
        return "web_scraper"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
