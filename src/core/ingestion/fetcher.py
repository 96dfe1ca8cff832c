"""
Content fetcher for extracting article text from a URL.
Retries transient failures with exponential backoff.
"""

import json
import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import requests
import trafilatura
from bs4 import BeautifulSoup

from core.exceptions import ErrorRecovery, ExtractionError, FetchError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


@dataclass
class ExtractedContent:
    url: str
    title: str
    text: str
    extraction_method: str


class ContentFetcher:
    """Downloads a page and extracts its readable text."""

    def __init__(self,
                 max_retries: int = 3,
                 timeout: int = 20,
                 user_agent: str = "Mozilla/5.0 (compatible; ArticleAssistant/1.0)",
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize content fetcher.

        Args:
            max_retries: Maximum attempts per URL
            timeout: Request timeout in seconds
            user_agent: User-Agent string for requests
            session: Pre-built session (tests inject fakes)
            sleep: Backoff sleep function
        """
        self.max_retries = max_retries
        self.timeout = timeout
        self._sleep = sleep

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en;q=0.9",
        })

    def fetch_html(self, url: str) -> str:
        """
        Fetch HTML content from URL.

        Raises:
            FetchError: After the last failed attempt, or at once on a non-retryable HTTP error
        """
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Fetching {url} (attempt {attempt + 1}/{self.max_retries})")
                response = self.session.get(url, timeout=self.timeout)

                if response.status_code in RETRYABLE_STATUS:
                    raise requests.exceptions.RequestException(f"HTTP {response.status_code}")

                response.raise_for_status()
                logger.debug(f"Fetched {url} ({len(response.text)} chars)")
                return response.text

            except requests.exceptions.HTTPError as e:
                logger.error(f"Non-retryable HTTP error for {url}: {e}")
                raise FetchError(url, e) from e

            except requests.exceptions.RequestException as e:
                last_error = e
                logger.warning(f"Request failed for {url}: {e}")
                if attempt < self.max_retries - 1:
                    self._sleep(ErrorRecovery.get_retry_delay(e, attempt))

        logger.error(f"Failed to fetch {url} after {self.max_retries} attempts")
        raise FetchError(url, last_error)

    def extract_text_simple(self, html: str, url: str) -> ExtractedContent:
        """Text extraction with BeautifulSoup (fallback method)."""
        soup = BeautifulSoup(html, 'html.parser')

        for element in soup(["script", "style", "nav", "header", "footer", "aside"]):
            element.decompose()

        content_selectors = [
            'article',
            '.article-content',
            '.article-body',
            '.content',
            '.post-content',
            '[data-article-body]'
        ]

        article_text = ""
        for selector in content_selectors:
            content_elem = soup.select_one(selector)
            if content_elem:
                article_text = content_elem.get_text(" ", strip=True)
                break

        if not article_text:
            article_text = soup.get_text(" ", strip=True)

        title_elem = soup.find('title')
        title = title_elem.get_text(strip=True) if title_elem else ""

        return ExtractedContent(url=url, title=title, text=article_text, extraction_method='beautifulsoup')

    def extract_text_trafilatura(self, html: str, url: str) -> ExtractedContent:
        """Text extraction with trafilatura, falling back to BeautifulSoup when it finds nothing."""
        result = trafilatura.extract(
            html,
            url=url,
            output_format='json',
            with_metadata=True,
            include_comments=False,
            include_tables=True
        )

        if not result:
            logger.warning(f"Trafilatura extraction failed for {url}, using fallback")
            return self.extract_text_simple(html, url)

        data = json.loads(result)
        return ExtractedContent(
            url=url,
            title=data.get('title') or '',
            text=data.get('text') or '',
            extraction_method='trafilatura'
        )

    def fetch_and_extract(self, url: str) -> ExtractedContent:
        """
        Fetch URL and extract text content.

        Raises:
            FetchError: If the page cannot be downloaded
            ExtractionError: If no text could be extracted
        """
        html = self.fetch_html(url)
        content = self.extract_text_trafilatura(html, url)
        if not content.text.strip():
            raise ExtractionError(url)
        return content
