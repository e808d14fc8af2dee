# frontend/config.py
"""
Frontend settings, read from the environment (and a local .env file).
"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

API_BASE = os.getenv("OPS_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Selectable analytics windows: label -> days
TIME_RANGES = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_TIME_RANGE = "7d"


def configure_logging():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
