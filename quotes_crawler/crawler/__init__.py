"""
Quotes crawler core components.
"""

from .models import Quote, Category, CrawlDocument
from .fetcher import WebFetcher, RetryingFetcher, FetchResult, FetchFailure
from .parser import QuoteExtractor, PageExtraction, parse_html
from .scheduler import CrawlerScheduler, CrawlStats, DiscoveryError

__all__ = [
    'Quote', 'Category', 'CrawlDocument',
    'WebFetcher', 'RetryingFetcher', 'FetchResult', 'FetchFailure',
    'QuoteExtractor', 'PageExtraction', 'parse_html',
    'CrawlerScheduler', 'CrawlStats', 'DiscoveryError'
]
