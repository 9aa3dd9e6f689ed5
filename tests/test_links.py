"""Unit tests for link discovery and pagination detection."""

from bs4 import BeautifulSoup

from keyword_crawler.crawler.links import LinkDiscoverer, PaginationClassifier


def _anchor(markup: str):
    return BeautifulSoup(markup, "html.parser").find(["a", "link"])


def test_discover_keeps_only_in_domain_pages(test_html_content):
    """Off-domain, non-http, fragment-only and document links are dropped."""
    discovered = LinkDiscoverer().discover(test_html_content, "https://example.com/articles/graphs")

    assert discovered.links == [
        "https://example.com/",
        "https://example.com/about",
        "https://example.com/articles/graphs?page=2",
    ]


def test_rel_next_is_pagination(test_html_content):
    """Pagination links are a subset of the discovered links."""
    discovered = LinkDiscoverer().discover(test_html_content, "https://example.com/articles/graphs")

    assert discovered.pagination_links == ["https://example.com/articles/graphs?page=2"]
    assert set(discovered.pagination_links) <= set(discovered.links)


def test_subdomains_share_registrable_domain():
    """Links to other subdomains of the seed's domain stay in scope."""
    html = '<a href="https://blog.example.com/post">post</a><a href="https://example.org/">org</a>'

    discovered = LinkDiscoverer().discover(html, "https://www.example.com/")

    assert discovered.links == ["https://blog.example.com/post"]


def test_scope_follows_seed_not_page():
    """The seed URL, not the current page, bounds the crawl."""
    html = '<a href="https://example.com/a">a</a><a href="https://example.net/b">b</a>'

    discovered = LinkDiscoverer().discover(
        html, "https://example.net/start", seed_url="https://example.com/"
    )

    assert discovered.links == ["https://example.com/a"]


def test_links_are_deduplicated_and_fragments_stripped():
    """Variants of the same URL are reported once, without fragments."""
    html = (
        '<a href="/docs#intro">intro</a>'
        '<a href="/docs">docs</a>'
        '<a href="HTTPS://EXAMPLE.COM:443/docs">upper</a>'
    )

    discovered = LinkDiscoverer().discover(html, "https://example.com/")

    assert discovered.links == ["https://example.com/docs"]


def test_base_href_is_honoured():
    """Relative links resolve against <base href>."""
    html = '<html><head><base href="https://example.com/blog/"></head><body><a href="post-1">p</a></body></html>'

    discovered = LinkDiscoverer().discover(html, "https://example.com/index")

    assert discovered.links == ["https://example.com/blog/post-1"]


def test_localhost_scope_matches_exact_host():
    """Hosts without a public suffix only match themselves."""
    html = '<a href="http://localhost:8000/a">a</a><a href="http://otherhost/b">b</a>'

    discovered = LinkDiscoverer().discover(html, "http://localhost:8000/")

    assert discovered.links == ["http://localhost:8000/a"]


def test_numbered_pager_links_are_pagination():
    """Digit links inside a pager container count as pagination."""
    html = (
        '<div class="pagination"><a href="/list/2">2</a><a href="/list/3">3</a></div>'
        '<p><a href="/list/archive">archive</a></p>'
    )

    discovered = LinkDiscoverer().discover(html, "https://example.com/list")

    assert discovered.pagination_links == [
        "https://example.com/list/2",
        "https://example.com/list/3",
    ]
    assert "https://example.com/list/archive" in discovered.links


def test_classifier_heuristics():
    """Common next-page markers are recognised."""
    classifier = PaginationClassifier()
    url = "https://example.com/posts"

    assert classifier.is_pagination(_anchor('<a href="x" rel="next">more</a>'), url)
    assert classifier.is_pagination(_anchor('<a href="x" class="btn next-link">go</a>'), url)
    assert classifier.is_pagination(_anchor('<a href="x" aria-label="Next page">»</a>'), url)
    assert classifier.is_pagination(_anchor('<a href="x">Next Page</a>'), url)
    assert classifier.is_pagination(_anchor('<a href="x">4</a>'), "https://example.com/posts?page=4")


def test_classifier_rejects_ordinary_links():
    """Plain content links are not pagination."""
    classifier = PaginationClassifier()

    assert not classifier.is_pagination(_anchor('<a href="x">Read the next chapter</a>'), "https://example.com/c")
    assert not classifier.is_pagination(_anchor('<a href="x" class="nextgen">Gen</a>'), "https://example.com/g")
    assert not classifier.is_pagination(_anchor('<a href="x">2024</a>'), "https://example.com/archive/2024")
