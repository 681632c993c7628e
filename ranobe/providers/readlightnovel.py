"""Scraper for readlightnovel.me — latest updates list and chapter text."""
from __future__ import annotations

import logging
import re

from ..http import fetch_url
from ..utils import italicize, normalize_breaks
from .models import ProviderError, Ranobe

logger = logging.getLogger(__name__)

BASE_URL = "https://readlightnovel.me"

LATEST_RE = re.compile(r'<a itemprop="url" href="(.+?)" rel="bookmark">(.+?)</a>')
TITLE_RE = re.compile(r"<h1><a .+?>(.+?)</a>(.+?)</h1>")
TEXT_RE = re.compile(r"<p>(.+?)</p>")
RAW_TEXT_RE = re.compile(
    r"<!-- audio -->[\S\s]+?<!-- audio -->([\S\s]+?)<!-- .+ desktop start -->"
)


def parse_latest(html: str) -> list[Ranobe]:
    """Extract every bookmarked chapter link from a latest-update page."""
    return [
        Ranobe(title=title.strip(), url=url.strip())
        for url, title in LATEST_RE.findall(html)
    ]


def parse_text(html: str) -> str:
    """
    Turn a chapter page into markdown-ish text: one paragraph per line,
    quoted speech italicized, <br> turned into newlines, and a heading
    when the page title is present.
    """
    raw = "".join(block.strip() for block in RAW_TEXT_RE.findall(html))
    if not raw:
        raise ProviderError("chapter body markers not found")

    # Only keep block content; some chapters have no <p> at all
    paragraphs = TEXT_RE.findall(raw)
    text = "".join(f"{p}\n" for p in paragraphs) if paragraphs else raw

    text = normalize_breaks(italicize(text))

    title = TITLE_RE.search(html)
    if title:
        heading = f"{title.group(1)}{title.group(2)}".strip()
        text = f"# {heading}\n\n{text}"
    return text


class ReadLightNovel:
    """Pages through the latest-update listing, one page per get_latest() call."""

    name = "readlightnovel"

    def __init__(self, page: int = 0) -> None:
        self.page = page

    def latest_url(self) -> str:
        return f"{BASE_URL}/latest-update/{self.page}"

    def get_latest(self) -> list[Ranobe]:
        novels = parse_latest(fetch_url(self.latest_url()))
        logger.info("page %d: %d entries", self.page, len(novels))
        self.page += 1
        return novels

    def get_text(self, url: str) -> str:
        return parse_text(fetch_url(url))


PROVIDERS = {ReadLightNovel.name: ReadLightNovel}


def get_provider(name: str, page: int = 0) -> ReadLightNovel:
    try:
        return PROVIDERS[name](page=page)
    except KeyError:
        raise ProviderError(f"unknown provider: {name}") from None
