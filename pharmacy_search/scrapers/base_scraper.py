import requests
import logging
import time
import random
from typing import List, Optional
from urllib.parse import quote

from .. import config
from ..models import MedicineResult, PlatformConfig, RawCandidate
from .extractors import DocumentExtractor, SoupExtractor
from .matching import reconcile

logger = logging.getLogger('base_scraper')

QUERY_PLACEHOLDER = '{medicine}'

USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.5 Safari/605.1.15',
    'Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0'
]


def build_search_url(platform: PlatformConfig, query: str) -> str:
    return platform.url_template.replace(QUERY_PLACEHOLDER, quote(query, safe=''))


class PharmacyScraper:
    """Scrapes one pharmacy platform per call, with retries"""

    def __init__(self, session=None, extractor: Optional[DocumentExtractor] = None, sleep=time.sleep,
                 timeout=None, max_retries=None, retry_delay=None):
        """
        Initialize the scraper

        Args:
            session: requests-compatible session (a new requests.Session by default)
            extractor (DocumentExtractor): Selector engine (BeautifulSoup by default)
            sleep: Callable used for the backoff delay
            timeout (float): Per-request timeout in seconds
            max_retries (int): Retries after the first failed attempt
            retry_delay (float): Base backoff delay; attempt n waits n * retry_delay
        """
        self.session = session or requests.Session()
        self.extractor = extractor or SoupExtractor()
        self.user_agents = list(USER_AGENTS)
        self._sleep = sleep
        self.timeout = config.REQUEST_TIMEOUT_SECONDS if timeout is None else timeout
        self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = config.RETRY_DELAY_SECONDS if retry_delay is None else retry_delay

    def get_page_content(self, url):
        headers = {'User-Agent': random.choice(self.user_agents)}
        response = self.session.get(url, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def fetch(self, platform: PlatformConfig, query: str) -> List[RawCandidate]:
        """
        Fetch raw candidates for a query from one platform.

        Disabled or misconfigured platforms are skipped without a request.
        Network errors, timeouts and non-2xx responses are retried up to
        max_retries times; once retries are exhausted the platform simply
        contributes nothing.

        Returns:
            list: RawCandidate objects, unfiltered
        """
        if not platform.enabled:
            logger.info(f"Skipping disabled platform: {platform.name}")
            return []
        if platform.is_misconfigured:
            logger.warning(f"Platform {platform.name} is enabled but missing name or price "
                           f"selectors. Skipping.")
            return []

        url = build_search_url(platform, query)
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            logger.info(f"Scraping {platform.name} for {query} (attempt {attempt}): {url}")
            try:
                html = self.get_page_content(url)
            except requests.RequestException as e:
                status = getattr(e.response, 'status_code', None)
                logger.error(f"Error scraping {platform.name} for {query} (attempt {attempt}): {e}"
                             + (f" [status {status}]" if status else ""))
                if attempt < attempts:
                    delay = self.retry_delay * attempt
                    logger.info(f"Retrying {platform.name} - {query} in {delay:.1f}s...")
                    self._sleep(delay)
                continue

            try:
                return self.extractor.extract(html, platform, page_url=url)
            except Exception as e:
                # Bad selectors are not transient; report no data so the miss is cached
                logger.error(f"Could not extract results from {platform.name} for {query}: {e}")
                return []

        logger.error(f"Max retries reached for {platform.name} - {query}. Giving up.")
        return []

    def search(self, platform: PlatformConfig, query: str) -> List[MedicineResult]:
        candidates = self.fetch(platform, query)
        return reconcile(query, platform.name, candidates)
