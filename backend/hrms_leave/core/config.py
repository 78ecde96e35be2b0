"""
Application configuration using Pydantic BaseSettings.
Loads environment variables and provides typed configuration.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Project metadata
    PROJECT_NAME: str = "HRMS Leave Eligibility Engine"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"
    
    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8081",
    ]
    
    # HR backend (source of date facts, policies and submissions)
    HR_API_BASE_URL: str = "http://localhost:5000/apps/api/v1"
    HR_API_TIMEOUT: int = 30
    HR_API_MAX_RETRIES: int = 3
    HR_API_RETRY_DELAY: float = 1.0
    
    # Longest date range a single leave form may evaluate (inclusive days)
    MAX_RANGE_DAYS: int = 366
    
    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
