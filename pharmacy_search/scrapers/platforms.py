import json
import logging
import threading
from typing import Dict, Optional

from pydantic import ValidationError

from .. import config
from ..models import PlatformConfig

logger = logging.getLogger('platforms')

# Built-in platforms, used whenever platforms.json cannot be read
DEFAULT_PLATFORMS: Dict[str, PlatformConfig] = {
    "Truemeds": PlatformConfig(
        name="Truemeds",
        url_template="https://www.truemeds.in/search/{medicine}",
        name_selector=".sc-a39eeb4f-12.daYLth",
        price_selector=".sc-a39eeb4f-17.iwZSqt",
    ),
    "PharmEasy": PlatformConfig(
        name="PharmEasy",
        url_template="https://pharmeasy.in/search/all?name={medicine}",
        name_selector=".ProductCard_medicineName__Uzjm7",
        price_selector=".ProductCard_unitPriceDecimal__Ur26V",
    ),
    "Tata 1mg": PlatformConfig(
        name="Tata 1mg",
        url_template="https://www.1mg.com/search/all?filter=true&name={medicine}",
        name_selector=".style__pro-title___3G3rr",
        price_selector=".style__price-tag___KzOkY",
    ),
    "Netmeds": PlatformConfig(
        name="Netmeds",
        url_template="https://www.netmeds.com/catalogsearch/result/{medicine}/all",
        name_selector=".clsgetname",
        price_selector=".final-price",
    ),
}

_platforms: Optional[Dict[str, PlatformConfig]] = None
_platforms_lock = threading.Lock()


def _read_platforms_file(path):
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object of platforms, got {type(raw).__name__}")

    platforms = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict):
            raise ValueError(f"platform '{name}' must be a JSON object")
        platforms[name] = PlatformConfig(**{**entry, "name": name})
    return platforms


def load_platform_configs(path=None, force_reload=False) -> Dict[str, PlatformConfig]:
    """
    Load the platform registry.

    The first successful call is memoized for the lifetime of the process.
    Any problem with the external file (missing, unreadable, invalid JSON,
    failing validation or simply empty) falls back to DEFAULT_PLATFORMS, so
    the returned mapping is never empty.

    Args:
        path (str): Path to the platforms JSON file (defaults to PLATFORMS_FILE)
        force_reload (bool): Ignore the memoized registry and read again

    Returns:
        dict: Platform name -> PlatformConfig, in file order
    """
    global _platforms

    with _platforms_lock:
        if _platforms is not None and not force_reload:
            return _platforms

        path = path or config.PLATFORMS_FILE
        try:
            platforms = _read_platforms_file(path)
            if not platforms:
                raise ValueError("no platforms defined")
            logger.info(f"Loaded {len(platforms)} platform configurations from {path}")
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Using default platform configurations ({path}: {e})")
            platforms = dict(DEFAULT_PLATFORMS)

        _platforms = platforms
        return _platforms


def reset_platform_configs():
    """Forget the memoized registry so the next load reads the file again."""
    global _platforms
    with _platforms_lock:
        _platforms = None
