import logging
import concurrent.futures
import time
from typing import Dict, List, Optional

from .. import config
from ..models import MedicineResult, PharmacySearchResponse, PlatformConfig
from .base_scraper import PharmacyScraper
from .cache import ResultCache
from .platforms import load_platform_configs

logger = logging.getLogger('scraper_manager')

EMPTY_QUERY_MESSAGE = "Please enter a medicine name to search."
NO_PLATFORMS_MESSAGE = ("Platform configurations could not be loaded. "
                        "Please check server logs or platforms.json.")
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during the search. Please try again."
NO_RESULTS_TEMPLATE = ('No results found for "{term}" across all enabled platforms. '
                       'This could be due to outdated selectors in platforms.json, network issues, '
                       'or the medicine not being listed. Check server logs for detailed scraping '
                       'attempts per platform.')


class ScraperManager:
    """
    Searches every enabled pharmacy platform concurrently and merges the results
    """

    def __init__(self, platforms: Optional[Dict[str, PlatformConfig]] = None,
                 cache: Optional[ResultCache] = None,
                 scraper: Optional[PharmacyScraper] = None,
                 max_workers: Optional[int] = None):
        """
        Initialize the scraper manager

        Args:
            platforms (dict): Platform registry; loaded from platforms.json when None
            cache (ResultCache): Result cache owned by this manager
            scraper (PharmacyScraper): Single-platform scraper
            max_workers (int): Upper bound on concurrent platform searches
        """
        self._platforms = platforms
        self.cache = cache or ResultCache()
        self.scraper = scraper or PharmacyScraper()
        self.max_workers = max(1, max_workers or config.MAX_WORKERS)

    @property
    def platforms(self) -> Dict[str, PlatformConfig]:
        if self._platforms is not None:
            return self._platforms
        return load_platform_configs()

    def platform_names(self) -> List[str]:
        return list(self.platforms)

    def enabled_platforms(self) -> List[PlatformConfig]:
        return [p for p in self.platforms.values() if p.enabled]

    def search(self, search_term: str) -> PharmacySearchResponse:
        """
        Search all enabled platforms for a medicine

        Args:
            search_term (str): Medicine name as typed by the user

        Returns:
            PharmacySearchResponse: data and/or a user-facing error message
        """
        if not search_term or not search_term.strip():
            return PharmacySearchResponse(error=EMPTY_QUERY_MESSAGE)

        medicine_name = search_term.strip()
        logger.info(f"Starting pharmacy search for \"{medicine_name}\"")

        try:
            platforms = self.platforms
            if not platforms:
                logger.error("No platforms loaded. Aborting search.")
                return PharmacySearchResponse(error=NO_PLATFORMS_MESSAGE)

            results = self._search_platforms(platforms, medicine_name)
        except Exception as e:
            logger.exception(f"Unexpected error orchestrating search for \"{medicine_name}\": {e}")
            return PharmacySearchResponse(error=UNEXPECTED_ERROR_MESSAGE)

        if not results:
            return PharmacySearchResponse(data=[], error=NO_RESULTS_TEMPLATE.format(term=medicine_name))
        return PharmacySearchResponse(data=results)

    def _search_platforms(self, platforms, medicine_name):
        start_time = time.time()

        active = []
        for name, platform in platforms.items():
            if platform.enabled:
                active.append(platform)
            else:
                logger.info(f"Skipping disabled platform: {name}")

        if not active:
            logger.warning(f"No enabled platforms for query: {medicine_name}")
            return []

        workers = min(len(active), self.max_workers)
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            # Futures are kept in registry order so the merge is deterministic
            futures = [
                (platform, executor.submit(self._search_platform, platform, medicine_name))
                for platform in active
            ]

            results = []
            for platform, future in futures:
                try:
                    products = future.result()
                except Exception as e:
                    logger.error(f"Critical error searching {platform.name}: {e}")
                    products = []
                logger.info(f"Got {len(products)} results from {platform.name}")
                results.extend(products)

        duration = time.time() - start_time
        logger.info(f"Search for \"{medicine_name}\" completed in {duration:.2f}s "
                    f"with {len(results)} total results")
        return results

    def _search_platform(self, platform: PlatformConfig, medicine_name: str) -> List[MedicineResult]:
        """Cache check, scrape on miss, cache store. Never raises."""
        try:
            if platform.is_misconfigured:
                logger.warning(f"Platform {platform.name} is enabled but missing name or price "
                               f"selectors. Skipping.")
                return []

            cached = self.cache.get(platform.name, medicine_name)
            if cached is not None:
                logger.info(f"[CACHE HIT] Serving from cache for {platform.name} - {medicine_name}")
                return list(cached.results)

            logger.info(f"[CACHE MISS] Scraping {platform.name} for {medicine_name}")
            products = self.scraper.search(platform, medicine_name)
            # Failed scrapes are stored too, as an empty list
            self.cache.put(platform.name, medicine_name, products)
            return products
        except Exception as e:
            logger.error(f"Error searching {platform.name} for {medicine_name}: {e}", exc_info=True)
            return []
