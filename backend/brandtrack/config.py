"""
Configuration management for AI Brand Track
Environment-based settings with secure defaults
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "aibrandtrack"
    APP_ENV: str = "development"  # development, staging, production
    DEBUG: bool = False
    API_VERSION: str = "v1"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 4

    # Database
    DATABASE_URL: str  # Required
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10

    # JWT Auth (tokens are issued by the auth provider)
    JWT_SECRET_KEY: str  # Required
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # AI Provider API Keys
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    PERPLEXITY_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None

    # Billing
    DEFAULT_ANALYSIS_CREDITS: int = 10

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def configured_providers(self) -> List[str]:
        """Providers with an API key set, in display order"""
        keys = {
            "openai": self.OPENAI_API_KEY,
            "anthropic": self.ANTHROPIC_API_KEY,
            "perplexity": self.PERPLEXITY_API_KEY,
            "google": self.GOOGLE_API_KEY,
        }
        return [provider for provider, key in keys.items() if key]

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings loader"""
    return Settings()


# AI Brand Strength weights (must sum to 1.0)
BRAND_STRENGTH_WEIGHTS = {
    "visibility": 0.35,
    "sentiment": 0.25,
    "share_of_voice": 0.20,
    "ranking": 0.20,
}

SENTIMENT_SCORES = {
    "positive": 100,
    "neutral": 50,
    "negative": 0,
}

# (upper bound of average position, ranking sub-score), checked in order
RANKING_TIERS = [
    (1, 100),
    (3, 80),
    (5, 60),
    (10, 40),
]
RANKING_FLOOR_SCORE = 20
NO_RANKING_SCORE = 50  # no position data, not "worst rank"

# Consistency tolerances
VISIBILITY_TOLERANCE = 0.1       # percentage points, after rounding to 1 decimal
SHARE_OF_VOICE_TOLERANCE = 1.0   # percentage points off 100
BRAND_MENTION_TOLERANCE = 1      # responses

# Trend direction threshold
TREND_EPSILON = 0.1

# Trailing words dropped when normalizing a company name for matching
BRAND_NAME_SUFFIXES = [
    "inc", "incorporated", "llc", "ltd", "limited", "corp", "corporation",
    "co", "company", "plc", "gmbh", "ag", "sa", "srl",
    "services", "solutions", "platform", "technologies", "tech",
]

AI_PROVIDERS = {
    "openai": "ChatGPT",
    "anthropic": "Claude",
    "perplexity": "Perplexity",
    "google": "Gemini",
}
