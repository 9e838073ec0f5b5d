"""Tests for quote, pagination and category extraction."""

from quotes_crawler.crawler.models import Quote
from quotes_crawler.crawler.parser import QuoteExtractor, parse_html
from tests.helpers import index_page, listing_page, quotation


class TestExtractQuotes:
    def test_reads_each_role(self) -> None:
        soup = parse_html(listing_page(
            quotation("Love is patient", "Paul", "Corinthians"),
            quotation("All you need is love", "Lennon", "Songs"),
        ))
        quotes = QuoteExtractor().extract_quotes(soup)
        assert quotes == [
            Quote("Love is patient", "Paul", "Corinthians"),
            Quote("All you need is love", "Lennon", "Songs"),
        ]

    def test_missing_role_is_empty_string(self) -> None:
        soup = parse_html(listing_page(quotation("Anonymous wisdom")))
        assert QuoteExtractor().extract_quotes(soup) == [Quote("Anonymous wisdom", "", "")]

    def test_normalizes_whitespace(self) -> None:
        html = ('<div class="quotation"><p class="quote">\n  Two   words\n</p>'
                '<span class="author"> Some <b>One</b> </span></div>')
        quotes = QuoteExtractor().extract_quotes(parse_html(html))
        assert quotes == [Quote("Two words", "Some One", "")]

    def test_only_direct_children_are_read(self) -> None:
        html = ('<div class="quotation"><p class="quote">Top</p>'
                '<div><span class="author">Nested</span></div></div>')
        quotes = QuoteExtractor().extract_quotes(parse_html(html))
        assert quotes == [Quote("Top", "", "")]

    def test_no_quotations(self) -> None:
        assert QuoteExtractor().extract_quotes(parse_html("<html><body></body></html>")) == []

    def test_extraction_is_deterministic(self) -> None:
        html = listing_page(*(quotation(f"q{i}", f"a{i}", f"b{i}") for i in range(10)),
                            pages=["/p/2/", "/p/3/"])
        extractor = QuoteExtractor()
        first = extractor.extract(parse_html(html), "http://quotes.test/p/")
        second = extractor.extract(parse_html(html), "http://quotes.test/p/")
        assert first == second
        assert [q.text for q in first.quotes] == [f"q{i}" for i in range(10)]


class TestExtractPageLinks:
    def test_collects_links_and_skips_next_post(self) -> None:
        soup = parse_html(listing_page(quotation("x"), pages=["/life/2/", "/life/3/"]))
        links = QuoteExtractor().extract_page_links(soup, "http://quotes.test/life/")
        assert links == ["http://quotes.test/life/2/", "http://quotes.test/life/3/"]

    def test_no_navigation_container(self) -> None:
        soup = parse_html(listing_page(quotation("x")))
        assert QuoteExtractor().extract_page_links(soup, "http://quotes.test/love/") == []

    def test_repeated_links_collected_once(self) -> None:
        html = ('<div class="wp-pagenavi"><span class="current">1</span>'
                '<a class="page larger" href="/life/2/">2</a>'
                '<a class="nextpostslink" href="/life/2/">»</a>'
                '<a class="last" href="http://quotes.test/life/2/">Last »</a></div>')
        links = QuoteExtractor().extract_page_links(parse_html(html), "http://quotes.test/life/")
        assert links == ["http://quotes.test/life/2/"]

    def test_absolute_links_kept(self) -> None:
        soup = parse_html(listing_page(pages=["http://other.test/life/2/"]))
        links = QuoteExtractor().extract_page_links(soup, "http://quotes.test/life/")
        assert links == ["http://other.test/life/2/"]

    def test_ignores_nested_links(self) -> None:
        html = ('<div class="wp-pagenavi"><a href="/a/2/">2</a>'
                '<span><a href="/a/3/">3</a></span></div>')
        links = QuoteExtractor().extract_page_links(parse_html(html))
        assert links == ["/a/2/"]

    def test_extract_combines_quotes_and_links(self) -> None:
        soup = parse_html(listing_page(quotation("a"), quotation("b"), pages=["/life/2/"]))
        extraction = QuoteExtractor().extract(soup, "http://quotes.test/life/")
        assert len(extraction.quotes) == 2
        assert extraction.next_page_urls == ["http://quotes.test/life/2/"]


class TestExtractCategories:
    def test_names_and_urls_in_document_order(self) -> None:
        soup = parse_html(index_page({"Love": "/love/", "Life": "/life/"}))
        categories = QuoteExtractor().extract_categories(soup, "http://quotes.test/themes/")
        assert [(c.name, c.source_url) for c in categories] == [
            ("Love", "http://quotes.test/love/"),
            ("Life", "http://quotes.test/life/"),
        ]

    def test_categories_start_empty(self) -> None:
        soup = parse_html(index_page({"Love": "/love/"}))
        category = QuoteExtractor().extract_categories(soup, "http://quotes.test/themes/")[0]
        assert category.quotes == []
        assert category.quote_count == 0
        assert category.page_count == 0

    def test_name_without_link_is_skipped(self) -> None:
        html = ('<ul><li><span class="name">Orphan</span></li>'
                '<li><a href="/hope/"><span class="name">Hope</span></a></li></ul>')
        categories = QuoteExtractor().extract_categories(parse_html(html), "http://quotes.test/")
        assert [c.name for c in categories] == ["Hope"]
