"""Records shared by the providers."""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse


class ProviderError(RuntimeError):
    """A provider page did not have the structure the scraper expects."""


@dataclass(frozen=True)
class Ranobe:
    """One light novel chapter entry: display title and absolute URL."""

    title: str
    url: str

    def __post_init__(self) -> None:
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not an absolute http(s) URL: {self.url!r}")
