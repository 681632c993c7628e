"""Process-wide HTTP session shared by the providers."""
from __future__ import annotations

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
TIMEOUT_SECONDS = 30

_client: Optional[requests.Session] = None


def client_init() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    # requests follows redirects for GET by default
    return session


def get_client() -> requests.Session:
    """Return the shared session, creating it on first use."""
    global _client
    if _client is None:
        _client = client_init()
    return _client


def fetch_url(url: str) -> str:
    """GET `url` and return the body text. Raises requests.RequestException on failure."""
    logger.debug("GET %s", url)
    response = get_client().get(url, timeout=TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.text
