"""
Fuzzy reconciliation of scraped candidates against the search term.

Search pages list plenty of loosely related products (combination packs,
other brands). A candidate survives two gates: its name must be an
approximate match for the query, and it must contain the query as a
case-insensitive substring.

The approximate score is rapidfuzz's best partial alignment, minus a penalty
for how far into the name that alignment starts (MATCH_DISTANCE characters
cost 100 points). A name that only mentions the query deep inside, such as
"Paracetamol 325mg + Caffeine 30mg + Ibuprofen 400mg", falls below the
threshold even though it contains the query.
"""
import logging
import re
from typing import List, Optional, Set
from urllib.parse import quote

from rapidfuzz import fuzz, utils

from .. import config
from ..models import MedicineResult, RawCandidate

logger = logging.getLogger('matching')

MISSING_PRICE = "N/A"
THUMBNAIL_TEMPLATE = "https://placehold.co/100x100.png?text={text}"

_RUPEE_WORD = re.compile(r'^\s*rs\.?\s*', re.IGNORECASE)
_RUPEE_SIGN = re.compile(r'^\s*₹\s*')


def clean_price(price_text: Optional[str]) -> str:
    """Strip a leading 'Rs.' prefix and tighten a leading rupee sign."""
    if not price_text or not price_text.strip():
        return MISSING_PRICE
    price = _RUPEE_WORD.sub('', price_text)
    price = _RUPEE_SIGN.sub('₹', price)
    return price.strip() or MISSING_PRICE


def thumbnail_url(name: str) -> str:
    return THUMBNAIL_TEMPLATE.format(text=quote(name[:10], safe=''))


def match_score(query: str, name: str, distance: Optional[float] = None) -> float:
    """Partial-match score (0-100) penalized by where in the name the match starts."""
    if distance is None:
        distance = config.MATCH_DISTANCE
    alignment = fuzz.partial_ratio_alignment(query, name, processor=utils.default_process)
    if alignment is None:
        return 0.0
    penalty = 100.0 * alignment.dest_start / distance if distance > 0 else 0.0
    return max(0.0, alignment.score - penalty)


def fuzzy_matches(query: str, names: List[str], threshold: float) -> Set[int]:
    """Indices of names whose match score reaches the threshold."""
    return {i for i, name in enumerate(names) if match_score(query, name) >= threshold}


def reconcile(query: str, platform_name: str, candidates: List[RawCandidate],
              threshold: Optional[float] = None) -> List[MedicineResult]:
    if threshold is None:
        threshold = config.FUZZY_THRESHOLD

    search_term = query.strip().lower()
    if not search_term or not candidates:
        return []

    matched = fuzzy_matches(search_term, [c.name for c in candidates], threshold)

    results = []
    for i, candidate in enumerate(candidates):
        if i not in matched or search_term not in candidate.name.lower():
            continue
        results.append(MedicineResult(
            pharmacy_name=platform_name,
            drug_name=candidate.name,
            price=clean_price(candidate.price),
            image_url=thumbnail_url(candidate.name),
            product_url=candidate.link,
        ))

    logger.debug(f"{platform_name}: kept {len(results)} of {len(candidates)} candidates for '{query}'")
    return results
