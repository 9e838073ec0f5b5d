"""
Crawler scheduler that discovers categories and crawls them concurrently.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional
from dataclasses import dataclass

from .fetcher import WebFetcher, RetryingFetcher, FetchFailure
from .models import Category, CrawlDocument, Quote
from .parser import QuoteExtractor
from ..utils.config import Config
from ..utils.logger import get_crawler_logger


class DiscoveryError(Exception):
    """Raised when the category index cannot be fetched."""
    pass


@dataclass
class CrawlStats:
    """Statistics for crawl operations."""
    start_time: float
    categories_discovered: int = 0
    categories_failed: int = 0
    pages_failed: int = 0
    total_pages: int = 0
    total_quotes: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class CrawlerScheduler:
    """
    Coordinates the crawl: one discovery fetch, then one task per category,
    each fanning out one task per additional listing page.

    A category is only ever mutated by its own task, so the join in run()
    is the only synchronization needed.
    """

    def __init__(self, config: Config, fetcher: Optional[WebFetcher] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.config = config
        self.logger = logging.getLogger(__name__)

        # Components
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or WebFetcher(
            user_agent=config.crawler.user_agent,
            request_timeout=config.crawler.request_timeout,
            max_concurrent_requests=config.crawler.max_concurrent_requests
        )
        self.retrying_fetcher = RetryingFetcher(
            self.fetcher,
            retry_attempts=config.crawler.retry_attempts,
            retry_delay=config.crawler.retry_delay,
            sleep=sleep
        )
        self.extractor = QuoteExtractor()

        self.stats = CrawlStats(start_time=time.time())

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def discover_categories(self) -> List[Category]:
        """
        Fetch the index page once and list its categories in document order.

        Raises:
            DiscoveryError: the index page could not be fetched
        """
        index_url = self.config.crawler.index_url
        try:
            soup = await self.retrying_fetcher.fetch_document_once(index_url)
        except FetchFailure as e:
            raise DiscoveryError(f"Error while fetching themes: {e}") from e

        categories = self.extractor.extract_categories(soup, index_url)
        if not categories:
            self.logger.warning(f"No categories found at {index_url}")
        return categories

    async def crawl_page(self, url: str) -> List[Quote]:
        """
        Return the quotes of a single continuation page.

        A page that cannot be fetched contributes no quotes. Pagination
        links on continuation pages are not followed.
        """
        try:
            soup = await self.retrying_fetcher.fetch_document(url)
        except FetchFailure as e:
            self.stats.pages_failed += 1
            self.logger.warning(f"Failed for {url}: {e.error}")
            return []

        return self.extractor.extract_quotes(soup)

    async def crawl_category(self, category: Category):
        """
        Crawl the first page of ``category`` and all pages it links to.

        Quotes from continuation pages are appended in completion order.
        A category whose first page cannot be fetched is left empty.
        """
        log = get_crawler_logger(__name__, category=category.name)

        try:
            try:
                soup = await self.retrying_fetcher.fetch_document(category.source_url)
            except FetchFailure as e:
                self.stats.categories_failed += 1
                log.log_url_event(logging.WARNING, category.source_url,
                                  f"Failed for '{category.name}': {e.error}")
                return

            extraction = self.extractor.extract(soup, category.source_url)
            category.quotes = list(extraction.quotes)
            category.page_count = 1 + len(extraction.next_page_urls)

            if extraction.next_page_urls:
                log.debug(f"Fetching {len(extraction.next_page_urls)} more pages")
                pages = [asyncio.create_task(self.crawl_page(url))
                         for url in extraction.next_page_urls]
                try:
                    for next_page in asyncio.as_completed(pages):
                        category.quotes.extend(await next_page)
                finally:
                    # Collect every page task even if one of them raised
                    await asyncio.gather(*pages, return_exceptions=True)
        finally:
            category.quote_count = len(category.quotes)
            log.info(f"Done with '{category.name}' category")

    async def run(self) -> CrawlDocument:
        """
        Crawl every category and return the populated document.

        Raises:
            DiscoveryError: the index page could not be fetched
        """
        self.stats = CrawlStats(start_time=time.time())

        categories = await self.discover_categories()
        self.stats.categories_discovered = len(categories)
        self.logger.info(f"Discovered {len(categories)} categories")

        tasks = [asyncio.create_task(self.crawl_category(category)) for category in categories]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for category, result in zip(categories, results):
            if isinstance(result, Exception):
                self.stats.categories_failed += 1
                self.logger.error(f"Error crawling category '{category.name}': {result}",
                                  exc_info=result)

        self.stats.total_pages = sum(category.page_count for category in categories)
        self.stats.total_quotes = sum(category.quote_count for category in categories)

        return CrawlDocument(
            categories=categories,
            total_pages=self.stats.total_pages,
            total_quotes=self.stats.total_quotes,
            elapsed_time=self.stats.elapsed_time
        )

    async def close(self):
        """Close the fetcher session if this scheduler created it."""
        if self._owns_fetcher:
            await self.fetcher.close()

    def get_stats(self) -> Dict:
        """Get crawl statistics."""
        return {
            'categories_discovered': self.stats.categories_discovered,
            'categories_failed': self.stats.categories_failed,
            'pages_failed': self.stats.pages_failed,
            'total_pages': self.stats.total_pages,
            'total_quotes': self.stats.total_quotes,
            'elapsed_time': self.stats.elapsed_time,
            'fetcher': self.fetcher.get_stats()
        }
