# pharmacy_search/models.py - Pharmacy search models

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class PlatformConfig(BaseModel):
    """Scraping rules for one pharmacy website.

    Accepts both the snake_case field names and the camelCase keys used in
    platforms.json (``urlTemplate``, ``nameClass``, ``priceClass`` ...).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = ""
    url_template: str = Field(alias="urlTemplate")
    name_selector: str = Field(default="", alias="nameClass")
    price_selector: str = Field(default="", alias="priceClass")
    link_selector: Optional[str] = Field(default=None, alias="linkSelector")
    link_base_url: Optional[str] = Field(default=None, alias="linkBaseUrl")
    enabled: bool = True

    @property
    def is_misconfigured(self) -> bool:
        # Enabled platforms need both selectors to be usable
        return self.enabled and (not self.name_selector.strip() or not self.price_selector.strip())

    @property
    def is_searchable(self) -> bool:
        return self.enabled and not self.is_misconfigured


class RawCandidate(BaseModel):
    name: str
    price: Optional[str] = None
    link: Optional[str] = None


class MedicineResult(BaseModel):
    pharmacy_name: str
    drug_name: str
    price: str
    image_url: str
    product_url: Optional[str] = None


class CacheEntry(BaseModel):
    results: List[MedicineResult] = []
    fetched_at: float


class PharmacySearchRequest(BaseModel):
    query: str


class PharmacySearchResponse(BaseModel):
    data: Optional[List[MedicineResult]] = None
    error: Optional[str] = None
