"""Pytest fixtures for Keyword Crawler tests."""

import asyncio
from typing import Callable, Dict, Union

import httpx
import pytest

from keyword_crawler.crawler.fetcher import PageFetcher
from keyword_crawler.models.requests import CrawlRequest


Route = Union[str, httpx.Response, Callable[[httpx.Request], object]]


class FakeSite:
    """
    In-memory web served through ``httpx.MockTransport``.

    Routes map absolute URLs (without fragment) to an HTML string, a
    prepared ``httpx.Response`` or a (possibly async) handler. Unknown
    URLs return 404. Every request is recorded in ``requests``.
    """

    def __init__(self, routes: Dict[str, Route] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.requests = []

    def add(self, url: str, route: Route):
        self.routes[url] = route

    async def handler(self, request: httpx.Request):
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, html="<html><body>Not found</body></html>")
        if isinstance(route, str):
            return httpx.Response(200, html=route)
        if isinstance(route, httpx.Response):
            # Fresh copy per request; the client mutates responses it receives
            return httpx.Response(route.status_code, headers=route.headers, content=route.content)
        result = route(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher(self, **kwargs) -> PageFetcher:
        return PageFetcher(transport=self.transport(), **kwargs)


def page(title: str = "", body: str = "", head: str = "") -> str:
    """Build a small HTML document."""
    return (
        f"<!DOCTYPE html><html><head><title>{title}</title>{head}</head>"
        f"<body>{body}</body></html>"
    )


@pytest.fixture
def site() -> FakeSite:
    """Empty fake site; tests add routes."""
    return FakeSite()


@pytest.fixture
def make_request() -> Callable[..., CrawlRequest]:
    """Factory for crawl requests with test-friendly defaults."""

    def _make(urls=("https://example.com/",), keywords=("example",), **kwargs) -> CrawlRequest:
        return CrawlRequest(urls=list(urls), keywords=list(keywords), **kwargs)

    return _make


@pytest.fixture
def test_html_content() -> str:
    """Sample article page with metadata, boilerplate and links."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Knowledge Graphs Explained</title>
        <meta property="article:published_time" content="2024-03-05T10:00:00Z">
        <meta property="article:modified_time" content="2024-04-01">
        <style>body { color: red; }</style>
        <script>var knowledge = "graph";</script>
    </head>
    <body>
        <nav><a href="/">Home</a> <a href="/about">About</a></nav>
        <header><h1>Site header</h1></header>
        <article>
            <h2>Introduction to Knowledge Graphs</h2>
            <p>A knowledge graph is a structured representation of real-world entities
            and their relationships.</p>
            <p>Graph databases store knowledge as nodes and edges.</p>
            <a href="/articles/graphs?page=2" rel="next">Next</a>
            <a href="https://other.org/elsewhere">Elsewhere</a>
            <a href="mailto:team@example.com">Mail</a>
            <a href="#comments">Comments</a>
            <a href="/files/report.pdf">Report</a>
        </article>
        <footer>Copyright knowledge inc.</footer>
    </body>
    </html>
    """
