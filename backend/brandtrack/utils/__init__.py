"""
Utility modules for AI Brand Track
"""

from .database import (
    get_db,
    init_db,
    close_db,
    is_serverless,
)
from .security import (
    create_access_token,
    decode_token,
    verify_access_token,
)
from .url_normalizer import normalize_url, urls_match
from .logger import configure_logging
from .numbers import round_half_up

__all__ = [
    # Database
    "get_db",
    "init_db",
    "close_db",
    "is_serverless",
    # Security
    "create_access_token",
    "decode_token",
    "verify_access_token",
    # URLs
    "normalize_url",
    "urls_match",
    # Logging
    "configure_logging",
    # Numbers
    "round_half_up",
]
