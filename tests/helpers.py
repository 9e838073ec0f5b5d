"""HTML builders and an in-memory fetcher for crawler tests."""

from typing import Dict, List, Optional, Union

from quotes_crawler.crawler.fetcher import FetchResult, WebFetcher


def quotation(text: str, author: str = "", book: str = "") -> str:
    parts = [f'<p class="quote">{text}</p>']
    if author:
        parts.append(f'<span class="author">{author}</span>')
    if book:
        parts.append(f'<span class="book">{book}</span>')
    return f'<div class="quotation">{"".join(parts)}</div>'


def listing_page(*blocks: str, pages: Optional[List[str]] = None) -> str:
    body = "".join(blocks)
    if pages is not None:
        links = "".join(f'<a class="page larger" href="{href}">{i}</a>'
                        for i, href in enumerate(pages, start=2))
        body += (f'<div class="wp-pagenavi"><span class="current">1</span>{links}'
                 f'<a class="nextpostslink" href="{pages[0] if pages else "#"}">»</a></div>')
    return f"<html><body>{body}</body></html>"


def index_page(categories: Dict[str, str]) -> str:
    items = "".join(f'<li><a href="{href}"><span class="name">{name}</span></a></li>'
                    for name, href in categories.items())
    return f"<html><body><ul>{items}</ul></body></html>"


Response = Union[str, FetchResult]


class FakeFetcher(WebFetcher):
    """
    Serves canned responses by URL.

    Each URL maps to a list consumed one entry per request; the last entry
    repeats. A string is a successful body, a FetchResult is returned as is.
    """

    def __init__(self, responses: Dict[str, List[Response]]):
        super().__init__()
        self.responses = responses
        self.requests: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requests.append(url)
        queue = self.responses.get(url)
        if not queue:
            return error_result(url, "HTTP status 404", 404)
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, FetchResult):
            return response
        return FetchResult(url=url, status_code=200, content=response)


def error_result(url: str, error: str = "Client error: connection refused",
                 status_code: int = 0) -> FetchResult:
    return FetchResult(url=url, status_code=status_code, error=error)


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
