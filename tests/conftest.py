import threading

import pytest
import requests

from pharmacy_search.models import PlatformConfig
from pharmacy_search.scrapers import PharmacyScraper, ResultCache
from pharmacy_search.scrapers.platforms import reset_platform_configs


def product_page(*products):
    """Build a search results page from (name, price, href) tuples."""
    cards = []
    for name, price, href in products:
        price_html = f'<span class="price">{price}</span>' if price is not None else ''
        cards.append(
            f'<div class="card"><a class="link" href="{href}">'
            f'<span class="name">{name}</span></a>{price_html}</div>'
        )
    return f"<html><body>{''.join(cards)}</body></html>"


def make_platform(name, enabled=True, **overrides):
    fields = {
        "name": name,
        "url_template": f"https://{name.lower()}.example/search?q={{medicine}}",
        "name_selector": ".name",
        "price_selector": ".price",
        "enabled": enabled,
    }
    fields.update(overrides)
    return PlatformConfig(**fields)


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """
    Stands in for requests.Session. Routes are matched by URL prefix and may be
    a FakeResponse, a string (200 body) or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, headers=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        for prefix, outcome in self.routes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, str):
                    return FakeResponse(outcome)
                return outcome
        return FakeResponse("<html></html>")

    def calls_to(self, prefix):
        return [c for c in self.calls if c["url"].startswith(prefix)]


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def scraper(fake_session, sleeps):
    return PharmacyScraper(session=fake_session, sleep=sleeps.append,
                           timeout=15, max_retries=2, retry_delay=1.0)


@pytest.fixture
def cache(clock):
    return ResultCache(ttl_seconds=3 * 3600, clock=clock)


@pytest.fixture(autouse=True)
def _reset_registry():
    reset_platform_configs()
    yield
    reset_platform_configs()
