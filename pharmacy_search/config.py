import os
from dotenv import load_dotenv

load_dotenv()


def env_int(name, default, minimum=None):
    value = int(os.getenv(name, str(default)))
    if minimum is not None:
        value = max(minimum, value)
    return value


PLATFORMS_FILE = os.getenv("PLATFORMS_FILE", "platforms.json")

CACHE_TTL_HOURS = float(os.getenv("CACHE_TTL_HOURS", "3"))
MAX_RETRIES = env_int("MAX_RETRIES", 2, minimum=0)            # retries after the first attempt
RETRY_DELAY_SECONDS = float(os.getenv("RETRY_DELAY_SECONDS", "1.0"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
FUZZY_THRESHOLD = float(os.getenv("FUZZY_THRESHOLD", "70"))   # 0-100, position-penalized score
MATCH_DISTANCE = float(os.getenv("MATCH_DISTANCE", "100"))    # chars into a name that cost 100 points
MAX_WORKERS = env_int("MAX_WORKERS", 8, minimum=1)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8003"))
