import logging
from abc import ABC, abstractmethod
from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..models import PlatformConfig, RawCandidate

logger = logging.getLogger('extractors')


def element_text(elem):
    """Text of an element with inline children joined as rendered ('₹<span>45</span>' -> '₹45')."""
    return " ".join(elem.get_text().split())


class DocumentExtractor(ABC):
    """Turns a fetched page into raw (name, price) candidates"""

    @abstractmethod
    def extract(self, html: str, platform: PlatformConfig, page_url: str = "") -> List[RawCandidate]:
        raise NotImplementedError("Extractors must implement extract")


class SoupExtractor(DocumentExtractor):
    """Applies a platform's CSS selectors with BeautifulSoup"""

    def __init__(self, parser='html.parser'):
        self.parser = parser

    def parse_html(self, html):
        if not html:
            return None
        return BeautifulSoup(html, self.parser)

    def extract(self, html, platform, page_url=""):
        """
        Extract candidates from a search results page.

        The i-th name element is paired with the i-th price element (and the
        i-th link element when the platform defines a link selector). A page
        where either the name or the price selector matches nothing yields no
        candidates.

        Args:
            html (str): Page content
            platform (PlatformConfig): Platform whose selectors to apply
            page_url (str): URL the page was fetched from, used for relative links

        Returns:
            list: RawCandidate objects in document order
        """
        soup = self.parse_html(html)
        if soup is None:
            return []

        names = soup.select(platform.name_selector)
        prices = soup.select(platform.price_selector)
        if not names or not prices:
            logger.warning(f"No data found on {platform.name} "
                           f"(names={len(names)}, prices={len(prices)})")
            return []

        links = soup.select(platform.link_selector) if platform.link_selector else []
        base_url = platform.link_base_url or page_url

        candidates = []
        for i, name_elem in enumerate(names):
            price = element_text(prices[i]) if i < len(prices) else None
            link = None
            if i < len(links) and links[i].get('href'):
                link = urljoin(base_url, links[i]['href'])

            candidates.append(RawCandidate(
                name=element_text(name_elem),
                price=price,
                link=link,
            ))
        return candidates
