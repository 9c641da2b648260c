#!/usr/bin/env python3
"""
Startup script for the pharmacy price search service.
"""

import uvicorn

from pharmacy_search import config

if __name__ == "__main__":
    uvicorn.run(
        "pharmacy_search.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True,
        log_level=config.LOG_LEVEL.lower()
    )
