"""Article extraction providers.

WebScraperProvider implements IArticleProvider: it downloads a page with
httpx and keeps the headline, sub-headings and prose paragraphs via
BeautifulSoup.
"""

from src.providers.article.web_scraper_provider import WebScraperProvider

__all__ = ["WebScraperProvider"]
