from .base_scraper import PharmacyScraper
from .cache import ResultCache
from .extractors import DocumentExtractor, SoupExtractor
from .platforms import DEFAULT_PLATFORMS, load_platform_configs
from .scraper_manager import ScraperManager

__all__ = ['PharmacyScraper', 'ResultCache', 'DocumentExtractor', 'SoupExtractor',
           'DEFAULT_PLATFORMS', 'load_platform_configs', 'ScraperManager']
