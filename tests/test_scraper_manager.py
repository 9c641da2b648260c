import requests

from pharmacy_search import config
from pharmacy_search.scrapers import PharmacyScraper, ScraperManager
from pharmacy_search.scrapers.scraper_manager import (
    EMPTY_QUERY_MESSAGE,
    NO_PLATFORMS_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
)

from conftest import make_platform, product_page

TRUEMEDS = "https://truemeds.example/"
NETMEDS = "https://netmeds.example/"
PHARMEASY = "https://pharmeasy.example/"


def three_platforms():
    return {name: make_platform(name) for name in ("Truemeds", "Netmeds", "PharmEasy")}


def ibuprofen_page(label):
    return product_page(
        (f"Ibuprofen 200mg {label}", "Rs. 45.00", "/p/1"),
        ("Paracetamol 500mg", "Rs. 20.00", "/p/2"),
    )


def test_blank_query_is_rejected_without_network(scraper, fake_session, cache):
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    for term in ["", "   ", "\t\n"]:
        response = manager.search(term)
        assert response.error == EMPTY_QUERY_MESSAGE
        assert response.data is None

    assert fake_session.calls == []


def test_no_platforms_is_a_hard_failure(scraper, cache):
    manager = ScraperManager(platforms={}, cache=cache, scraper=scraper)

    response = manager.search("ibuprofen")

    assert response.data is None
    assert response.error == NO_PLATFORMS_MESSAGE


def test_failing_platform_does_not_affect_the_others(scraper, fake_session, sleeps, cache):
    fake_session.routes.update({
        TRUEMEDS: ibuprofen_page("Truemeds"),
        NETMEDS: requests.ConnectionError("boom"),
        PHARMEASY: ibuprofen_page("PharmEasy"),
    })
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    response = manager.search("ibuprofen")

    assert response.error is None
    assert [(r.pharmacy_name, r.drug_name) for r in response.data] == [
        ("Truemeds", "Ibuprofen 200mg Truemeds"),
        ("PharmEasy", "Ibuprofen 200mg PharmEasy"),
    ]
    # One attempt plus two retries
    assert len(fake_session.calls_to(NETMEDS)) == 3
    # The failure is remembered as an empty result
    assert cache.get("Netmeds", "ibuprofen").results == []


def test_exception_inside_a_platform_task_is_contained(scraper, fake_session, cache):
    class ExplodingScraper:
        def search(self, platform, query):
            if platform.name == "Netmeds":
                raise RuntimeError("selector engine crashed")
            return scraper.search(platform, query)

    fake_session.routes[PHARMEASY] = ibuprofen_page("PharmEasy")
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=ExplodingScraper())

    response = manager.search("ibuprofen")

    assert [r.pharmacy_name for r in response.data] == ["PharmEasy"]


def test_results_follow_registry_order(scraper, fake_session, cache):
    fake_session.routes.update({
        TRUEMEDS: ibuprofen_page("Truemeds"),
        NETMEDS: ibuprofen_page("Netmeds"),
        PHARMEASY: ibuprofen_page("PharmEasy"),
    })
    platforms = {name: make_platform(name) for name in ("PharmEasy", "Netmeds", "Truemeds")}
    manager = ScraperManager(platforms=platforms, cache=cache, scraper=scraper, max_workers=2)

    response = manager.search("ibuprofen")

    assert [r.pharmacy_name for r in response.data] == ["PharmEasy", "Netmeds", "Truemeds"]


def test_second_search_within_ttl_is_served_from_cache(scraper, fake_session, cache, clock):
    fake_session.routes.update({
        TRUEMEDS: ibuprofen_page("Truemeds"),
        NETMEDS: ibuprofen_page("Netmeds"),
        PHARMEASY: ibuprofen_page("PharmEasy"),
    })
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    first = manager.search("ibuprofen")
    assert len(fake_session.calls) == 3

    clock.advance(2 * 3600)
    second = manager.search("  IBUPROFEN ")

    assert len(fake_session.calls) == 3
    assert second.data == first.data


def test_search_after_ttl_hits_the_network_again(scraper, fake_session, cache, clock):
    fake_session.routes.update({
        TRUEMEDS: ibuprofen_page("Truemeds"),
        NETMEDS: ibuprofen_page("Netmeds"),
        PHARMEASY: ibuprofen_page("PharmEasy"),
    })
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    manager.search("ibuprofen")
    clock.advance(3 * 3600 + 1)
    manager.search("ibuprofen")

    assert len(fake_session.calls) == 6
    for prefix in (TRUEMEDS, NETMEDS, PHARMEASY):
        assert len(fake_session.calls_to(prefix)) == 2


def test_no_matches_is_an_empty_success(scraper, fake_session, cache):
    fake_session.routes.update({
        TRUEMEDS: product_page(("Paracetamol 500mg", "Rs. 20", "/p/1")),
        NETMEDS: "<html></html>",
        PHARMEASY: product_page(("Cetirizine 10mg", "Rs. 15", "/p/1")),
    })
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    response = manager.search(" ibuprofen ")

    assert response.data == []
    assert response.error.startswith('No results found for "ibuprofen"')


def test_disabled_and_misconfigured_platforms_are_skipped(scraper, fake_session, cache):
    fake_session.routes[TRUEMEDS] = ibuprofen_page("Truemeds")
    platforms = {
        "Truemeds": make_platform("Truemeds"),
        "Netmeds": make_platform("Netmeds", enabled=False),
        "PharmEasy": make_platform("PharmEasy", name_selector=""),
    }
    manager = ScraperManager(platforms=platforms, cache=cache, scraper=scraper)

    response = manager.search("ibuprofen")

    assert [r.pharmacy_name for r in response.data] == ["Truemeds"]
    assert fake_session.calls_to(NETMEDS) == []
    assert fake_session.calls_to(PHARMEASY) == []
    assert [p.name for p in manager.enabled_platforms()] == ["Truemeds", "PharmEasy"]


def test_orchestration_failure_becomes_generic_error(scraper, cache, monkeypatch):
    manager = ScraperManager(platforms=three_platforms(), cache=cache, scraper=scraper)

    def broken(platforms, medicine_name):
        raise RuntimeError("executor unavailable")

    monkeypatch.setattr(manager, "_search_platforms", broken)

    response = manager.search("ibuprofen")

    assert response.data is None
    assert response.error == UNEXPECTED_ERROR_MESSAGE


def test_registry_is_loaded_when_no_platforms_are_given(scraper, cache, monkeypatch, tmp_path):
    monkeypatch.setattr(config, "PLATFORMS_FILE", str(tmp_path / "missing.json"))

    manager = ScraperManager(cache=cache, scraper=scraper)

    assert list(manager.platforms) == ["Truemeds", "PharmEasy", "Tata 1mg", "Netmeds"]


def test_extraction_failure_is_cached_as_empty(fake_session, sleeps, cache):
    fake_session.routes[NETMEDS] = ibuprofen_page("Netmeds")
    scraper = PharmacyScraper(session=fake_session, sleep=sleeps.append)
    platforms = {"Netmeds": make_platform("Netmeds", price_selector="span[")}
    manager = ScraperManager(platforms=platforms, cache=cache, scraper=scraper)

    first = manager.search("ibuprofen")
    second = manager.search("ibuprofen")

    assert first.data == [] and second.data == []
    assert len(fake_session.calls_to(NETMEDS)) == 1
    assert cache.get("Netmeds", "ibuprofen").results == []


def test_platform_names_follow_registry_order(scraper, cache):
    platforms = {name: make_platform(name) for name in ("PharmEasy", "Netmeds", "Truemeds")}
    manager = ScraperManager(platforms=platforms, cache=cache, scraper=scraper)

    assert manager.platform_names() == ["PharmEasy", "Netmeds", "Truemeds"]


def test_zero_workers_is_clamped(scraper, fake_session, cache, monkeypatch):
    monkeypatch.setattr(config, "MAX_WORKERS", 0)
    fake_session.routes[TRUEMEDS] = ibuprofen_page("Truemeds")
    manager = ScraperManager(platforms={"Truemeds": make_platform("Truemeds")},
                             cache=cache, scraper=scraper, max_workers=0)

    response = manager.search("ibuprofen")

    assert manager.max_workers == 1
    assert [r.pharmacy_name for r in response.data] == ["Truemeds"]
