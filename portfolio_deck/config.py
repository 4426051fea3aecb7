# config.py
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv(Path(__file__).parent.parent / ".env")

@lru_cache
def settings():
    seed = os.getenv("RANDOM_SEED", "")
    catch_up = os.getenv("MAX_CATCH_UP_TICKS", "")
    return {
        "API_URL": os.getenv("API_URL", "https://dummyjson.com/c/60b7-70a6-4ee3-bae8"),
        "REQUEST_TIMEOUT": float(os.getenv("REQUEST_TIMEOUT", "3")),
        # Live pipeline knobs
        "TICK_INTERVAL_MS": int(os.getenv("TICK_INTERVAL_MS", "1000")),
        "MAX_PRICE_DELTA": float(os.getenv("MAX_PRICE_DELTA", "0.10")),
        "PRICE_FLOOR": float(os.getenv("PRICE_FLOOR", "0.01")),
        # Which currency to express the aggregate balance in
        "REPORTING_CURRENCY": os.getenv("REPORTING_CURRENCY", "USD"),
        "RANDOM_SEED": int(seed) if seed else None,
        # Bound on ticks replayed per rerun after a long pause (unset: no bound)
        "MAX_CATCH_UP_TICKS": int(catch_up) if catch_up else None,
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
    }
