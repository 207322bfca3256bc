# File: tests/test_links.py
from sitesweep.crawler.crawler import batched, build_queue
from sitesweep.parser.html_parser import DomSnapshot
from sitesweep.parser.links import discover_links, is_content_link

SEED = "https://example.com/"


def links_of(body: str, url: str = SEED, hostname: str = "example.com"):
    return discover_links(DomSnapshot(url=url, html=f"<html><body>{body}</body></html>"), hostname)


def anchors(*hrefs: str) -> str:
    return "".join(f'<a href="{href}">x</a>' for href in hrefs)


def test_internal_external_and_documents():
    internal = [f"/page{i}" for i in range(15)]
    external = ["https://other.org/a", "http://partner.net/"]
    documents = ["/files/a.pdf", "/files/b.PDF", "/img/photo.jpg"]
    links = links_of(anchors(*internal, *external, *documents))

    assert len(links) == 15
    assert all(link.startswith("https://example.com/page") for link in links)

    queue = build_queue(links, [SEED], max_pages=10)
    assert queue == [f"https://example.com/page{i}" for i in range(10)]


def test_fragment_and_trailing_slash_collapse():
    links = links_of(anchors("/about", "/about/", "/about#team", "https://example.com/about/#x"))
    assert links == ["https://example.com/about"]


def test_skipped_hrefs():
    body = anchors("#top", "", "javascript:void(0)", "mailto:a@example.com", "tel:+49301234567", "/ok")
    assert links_of(body) == ["https://example.com/ok"]


def test_subdomains_are_other_hosts():
    body = anchors("https://shop.example.com/cart", "https://www.example.com/x", "https://example.com/y")
    assert links_of(body) == ["https://example.com/y"]


def test_links_resolved_against_page_url():
    links = links_of(anchors("contact", "../impressum"), url="https://example.com/de/team/")
    assert links == ["https://example.com/de/team/contact", "https://example.com/de/impressum"]


def test_first_seen_order():
    links = links_of(anchors("/c", "/a", "/b", "/a"))
    assert links == ["https://example.com/c", "https://example.com/a", "https://example.com/b"]


def test_query_is_kept():
    assert links_of(anchors("/search?q=1", "/search?q=2")) == [
        "https://example.com/search?q=1",
        "https://example.com/search?q=2",
    ]


def test_is_content_link():
    assert is_content_link("https://example.com/about")
    assert is_content_link("https://example.com/pdf-guide")
    assert not is_content_link("https://example.com/a.docx")
    assert not is_content_link("https://example.com/a.zip?download=1")


def test_build_queue_excludes_every_seed_form():
    links = ["https://example.com", "https://example.com/start", "https://example.com/a"]
    queue = build_queue(links, ["https://example.com/", "https://example.com/start/"], max_pages=10)
    assert queue == ["https://example.com/a"]


def test_build_queue_zero_pages():
    assert build_queue(["https://example.com/a"], [SEED], max_pages=0) == []


def test_batched():
    assert batched(list("abcdefg"), 3) == [["a", "b", "c"], ["d", "e", "f"], ["g"]]
    assert batched([], 3) == []
