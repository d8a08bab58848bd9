from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings
from starlette.requests import Request


class Settings(BaseSettings):

    # Application
    APP_NAME: str = "Personal Finance Tracker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./finance.db"
    DB_POOL_SIZE: int = 20
    DB_POOL_TIMEOUT: int = 20
    DB_POOL_RECYCLE: int = 1800
    DB_ECHO: bool = False

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8501",
    ]

    # Rate limiting (fixed window per client address)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REDIS_URL: Optional[str] = None
    AUTH_RATE_LIMIT: int = 5
    AUTH_RATE_WINDOW_SECONDS: int = 15 * 60
    TRANSACTION_RATE_LIMIT: int = 100
    TRANSACTION_RATE_WINDOW_SECONDS: int = 60 * 60
    ANALYTICS_RATE_LIMIT: int = 50
    ANALYTICS_RATE_WINDOW_SECONDS: int = 60 * 60

    # Streamlit client
    API_BASE_URL: str = "http://localhost:8000/api"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_request_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the running app was built with."""
    return request.app.state.settings
