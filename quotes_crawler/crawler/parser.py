"""
Parsers for category index pages and quote listing pages.
"""

import re
import logging
from typing import List, Optional
from urllib.parse import urljoin
from dataclasses import dataclass, field
from bs4 import BeautifulSoup, Tag

from .models import Category, Quote


QUOTATION_CLASS = 'quotation'
PAGINATION_CLASS = 'wp-pagenavi'
NEXT_POST_CLASS = 'nextpostslink'
CATEGORY_NAME_CLASS = 'name'

# Child class -> Quote field
QUOTE_ROLES = {
    'quote': 'text',
    'author': 'author',
    'book': 'book'
}


def parse_html(html_content: str) -> BeautifulSoup:
    """Build a document tree from raw HTML."""
    return BeautifulSoup(html_content, 'lxml')


@dataclass
class PageExtraction:
    """Quotes and pagination links found on one listing page."""
    quotes: List[Quote] = field(default_factory=list)
    next_page_urls: List[str] = field(default_factory=list)


class QuoteExtractor:
    """
    Extracts quote records, pagination links and categories from parsed pages.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.whitespace_pattern = re.compile(r'\s+')

    def extract(self, soup: BeautifulSoup, base_url: Optional[str] = None) -> PageExtraction:
        """
        Extract everything a listing page offers.

        Args:
            soup: Parsed listing page
            base_url: URL of the page, used to resolve relative links

        Returns:
            PageExtraction with quotes and next page URLs in document order
        """
        extraction = PageExtraction(
            quotes=self.extract_quotes(soup),
            next_page_urls=self.extract_page_links(soup, base_url)
        )
        self.logger.debug(f"Extracted {len(extraction.quotes)} quotes and "
                          f"{len(extraction.next_page_urls)} page links from {base_url}")
        return extraction

    def extract_quotes(self, soup: BeautifulSoup) -> List[Quote]:
        """Extract one Quote per quotation container."""
        quotes = []
        for container in soup.find_all(class_=QUOTATION_CLASS):
            fields = {'text': '', 'author': '', 'book': ''}
            for child in container.find_all(recursive=False):
                role = self._quote_role(child)
                if role:
                    fields[role] = self._clean_text(child.get_text(' '))
            quotes.append(Quote(**fields))
        return quotes

    def extract_page_links(self, soup: BeautifulSoup, base_url: Optional[str] = None) -> List[str]:
        """
        Collect distinct links to further pages, skipping the "next post" link.

        Links are deduplicated after resolution, keeping first-seen order.
        """
        links = []
        seen = set()
        for navigation in soup.find_all(class_=PAGINATION_CLASS):
            for child in navigation.find_all('a', recursive=False):
                if NEXT_POST_CLASS in child.get('class', []):
                    continue
                href = (child.get('href') or '').strip()
                if not href:
                    continue
                url = urljoin(base_url, href) if base_url else href
                if url in seen:
                    continue
                seen.add(url)
                links.append(url)
        return links

    def extract_categories(self, soup: BeautifulSoup, base_url: Optional[str] = None) -> List[Category]:
        """
        Extract categories from the theme index page.

        Each ``<span class="name">`` gives the category name; the enclosing
        link gives its listing URL.
        """
        categories = []
        for span in soup.find_all('span', class_=CATEGORY_NAME_CLASS):
            name = self._clean_text(span.get_text(' '))
            link = span.find_parent('a')
            href = (link.get('href') or '').strip() if link else ''
            if not href:
                self.logger.warning(f"Category '{name}' has no link, skipping")
                continue
            source_url = urljoin(base_url, href) if base_url else href
            categories.append(Category(name=name, source_url=source_url))
        return categories

    @staticmethod
    def _quote_role(node: Tag) -> Optional[str]:
        for css_class in node.get('class', []):
            if css_class in QUOTE_ROLES:
                return QUOTE_ROLES[css_class]
        return None

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace runs."""
        if not text:
            return ""
        return self.whitespace_pattern.sub(' ', text.strip())
