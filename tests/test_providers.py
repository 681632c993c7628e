import pytest

from ranobe.providers import readlightnovel
from ranobe.providers.models import ProviderError, Ranobe
from ranobe.providers.readlightnovel import (
    ReadLightNovel,
    get_provider,
    parse_latest,
    parse_text,
)

LATEST = (
    '<ul><li><a itemprop="url" href="https://readlightnovel.me/first/chapter-3" rel="bookmark">'
    "First Novel - Chapter 3</a></li>"
    '<li><a itemprop="url" href=" https://readlightnovel.me/second/chapter-10 " rel="bookmark">'
    " Second Novel - Chapter 10 </a></li></ul>"
)

CHAPTER = (
    '<h1><a href="/first">First Novel</a> - Chapter 3</h1>\n'
    "<div><!-- audio --><span>player</span><!-- audio -->\n"
    '<p>It was raining.</p><p>He said "hi".</p><p>One<br/>Two</p>\n'
    "<!-- mobile desktop start --></div>"
)


def test_parse_latest_keeps_page_order_and_strips() -> None:
    assert parse_latest(LATEST) == [
        Ranobe("First Novel - Chapter 3", "https://readlightnovel.me/first/chapter-3"),
        Ranobe("Second Novel - Chapter 10", "https://readlightnovel.me/second/chapter-10"),
    ]


def test_parse_latest_without_entries() -> None:
    assert parse_latest("<html><body>maintenance</body></html>") == []


def test_relative_urls_are_rejected() -> None:
    with pytest.raises(ValueError, match="absolute"):
        Ranobe("Broken", "/first/chapter-3")


def test_parse_text_builds_markdown() -> None:
    assert parse_text(CHAPTER) == (
        "# First Novel - Chapter 3\n"
        "\n"
        "It was raining.\n"
        'He said  _"hi"_ .\n'
        "One\n"
        "Two\n"
    )


def test_parse_text_falls_back_to_raw_body() -> None:
    html = "<!-- audio -->x<!-- audio -->Plain text<BR>more<!-- ad desktop start -->"

    assert parse_text(html) == "Plain text\nmore"


def test_parse_text_requires_body_markers() -> None:
    with pytest.raises(ProviderError):
        parse_text("<p>no markers here</p>")


def test_get_latest_fetches_and_advances_page(monkeypatch) -> None:
    fetched = []

    def fake_fetch(url):
        fetched.append(url)
        return LATEST

    monkeypatch.setattr(readlightnovel, "fetch_url", fake_fetch)
    provider = ReadLightNovel(page=2)

    assert len(provider.get_latest()) == 2
    provider.get_latest()
    assert fetched == [
        "https://readlightnovel.me/latest-update/2",
        "https://readlightnovel.me/latest-update/3",
    ]
    assert provider.page == 4


def test_get_text_parses_the_fetched_page(monkeypatch) -> None:
    monkeypatch.setattr(readlightnovel, "fetch_url", lambda url: CHAPTER)

    assert ReadLightNovel().get_text("https://readlightnovel.me/x").startswith("# First Novel")


def test_get_provider() -> None:
    provider = get_provider("readlightnovel", page=5)

    assert isinstance(provider, ReadLightNovel)
    assert provider.page == 5
    with pytest.raises(ProviderError, match="unknown provider"):
        get_provider("nope")
