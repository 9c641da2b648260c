# pharmacy_search/main.py

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging

from . import __version__
from .models import PharmacySearchRequest, PharmacySearchResponse
from . import search

logger = logging.getLogger("api")

app = FastAPI(
    title="Pharmacy Price Search",
    version=__version__,
    description="Compares medicine prices across online pharmacies"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {
        "message": "Pharmacy Price Search API",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "search": "/v1/pharmacies:search",
            "platforms": "/v1/platforms",
            "cache_stats": "/v1/cache:stats"
        }
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/v1/pharmacies:search", response_model=PharmacySearchResponse,
          response_model_exclude_none=True)
async def search_pharmacies(request: PharmacySearchRequest):
    """
    Search all enabled pharmacy platforms for a medicine.

    Validation problems and empty results come back as ``error`` strings in a
    200 response; callers should check ``data`` rather than ``error``.
    """
    try:
        logger.info(f"Received search request: {request.model_dump()}")
        result = await search.search_pharmacies_async(request.query)
        logger.info(f"Search returned {len(result.data or [])} results")
        return result
    except Exception as e:
        logger.error(f"Pharmacy search failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Pharmacy search failed: {str(e)}")


# Alias without colon to avoid %3A encoding issues in some clients
@app.post("/v1/pharmacies/search", response_model=PharmacySearchResponse,
          response_model_exclude_none=True)
async def search_pharmacies_alias(request: PharmacySearchRequest):
    return await search_pharmacies(request)


@app.get("/v1/platforms")
async def list_platforms():
    try:
        platforms = search.get_platforms()
        return {
            "platforms": platforms,
            "total": len(platforms)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to load platforms: {str(e)}")


@app.get("/v1/cache:stats")
async def cache_stats():
    return search.get_cache_stats()


# Alias without colon
@app.get("/v1/cache/stats")
async def cache_stats_alias():
    return search.get_cache_stats()
