"""
Quotes Crawler

Concurrent crawler for a paginated, categorized quotation website.
"""

__version__ = "1.0.0"
__description__ = "Crawls quote categories and their listing pages into a JSON document"
