# pharmacy_search/search.py - Entry point used by the API and the CLI

import asyncio
import logging

from . import config
from .models import PharmacySearchResponse
from .scrapers import ScraperManager

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Process-wide manager; its cache is shared by every request
scraper_manager = ScraperManager()


def search_pharmacies(search_term: str) -> PharmacySearchResponse:
    """Search every enabled pharmacy platform for a medicine name."""
    return scraper_manager.search(search_term)


async def search_pharmacies_async(search_term: str) -> PharmacySearchResponse:
    # Scraping is blocking; keep it off the event loop
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, search_pharmacies, search_term)


def get_platforms():
    platforms = scraper_manager.platforms
    return [
        {"name": name, "enabled": platforms[name].enabled, "searchable": platforms[name].is_searchable}
        for name in scraper_manager.platform_names()
    ]


def get_cache_stats():
    return scraper_manager.cache.stats()
