"""
Configuration Management - Bookstore Query Runner
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable"""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 't', 'y', 'yes')


def get_int_env(key: str, default: int = 0) -> int:
    """Get integer from environment variable"""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


# ============== MONGODB CONFIGURATION ==============
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "plp_bookstore")
MONGODB_COLLECTION = os.getenv("MONGODB_COLLECTION", "books")
MONGODB_CONNECT_TIMEOUT_MS = get_int_env("MONGODB_CONNECT_TIMEOUT_MS", 5000)
MONGODB_SERVER_SELECTION_TIMEOUT_MS = get_int_env("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000)

# ============== LOGGING CONFIGURATION ==============
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = get_bool_env("LOG_TO_FILE", False)
LOG_DIR = os.getenv("LOG_DIR", "logs")

MONGODB_URI_SCHEMES = ("mongodb://", "mongodb+srv://")


# ============== VALIDATION ==============
def validate_config():
    """Validate critical configuration"""
    errors = []

    # MongoDB URI validation
    if not MONGODB_URI:
        errors.append("MONGODB_URI is required")
    elif not MONGODB_URI.startswith(MONGODB_URI_SCHEMES):
        errors.append(f"MONGODB_URI must start with one of {', '.join(MONGODB_URI_SCHEMES)}")

    if not MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if not MONGODB_COLLECTION:
        errors.append("MONGODB_COLLECTION is required")

    if MONGODB_CONNECT_TIMEOUT_MS <= 0:
        errors.append("MONGODB_CONNECT_TIMEOUT_MS must be positive")

    if MONGODB_SERVER_SELECTION_TIMEOUT_MS <= 0:
        errors.append("MONGODB_SERVER_SELECTION_TIMEOUT_MS must be positive")

    if not isinstance(logging.getLevelName(LOG_LEVEL), int):
        errors.append(f"LOG_LEVEL '{LOG_LEVEL}' is not a valid logging level")

    if errors:
        raise ValueError("\n".join(errors))


# Validate on import
validate_config()
