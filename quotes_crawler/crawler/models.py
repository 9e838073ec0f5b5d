"""
Data containers for crawled categories and quotes.
"""

from typing import Any, Dict, List
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Quote:
    """A single quotation with its author and book."""
    text: str = ""
    author: str = ""
    book: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            'quote': self.text,
            'author': self.author,
            'book': self.book
        }


@dataclass
class Category:
    """
    A themed group of quotes backed by one listing page and its continuations.

    Only the crawler task that owns a category mutates it.
    """
    name: str
    source_url: str
    quotes: List[Quote] = field(default_factory=list)
    quote_count: int = 0
    page_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form; the page count stays internal."""
        data: Dict[str, Any] = {
            'name': self.name,
            'source': self.source_url
        }
        if self.quotes:
            data['quotes'] = [quote.to_dict() for quote in self.quotes]
        data['quotes_number'] = self.quote_count
        return data


@dataclass
class CrawlDocument:
    """Categories in discovery order, plus crawl totals."""
    categories: List[Category] = field(default_factory=list)
    total_pages: int = 0
    total_quotes: int = 0
    elapsed_time: float = 0.0

    def to_list(self) -> List[Dict[str, Any]]:
        return [category.to_dict() for category in self.categories]
