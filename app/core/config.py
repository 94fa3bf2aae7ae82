"""
Application configuration management using Pydantic Settings
Handles all environment variables and application settings
"""

from pydantic_settings import BaseSettings
from typing import List, Literal
from decimal import Decimal
from functools import lru_cache

class Settings(BaseSettings):
    """Main application settings"""

    # Application Settings
    APP_NAME: str = "Velvet Crumbs"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 1

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./velvet_crumbs.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_ECHO: bool = False

    # Security Settings
    SECRET_KEY: str = "change-me-in-production"
    SESSION_COOKIE_NAME: str = "velvet_session"
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60  # one week
    SESSION_HTTPS_ONLY: bool = False
    PASSWORD_MIN_LENGTH: int = 6

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:5173"
    ALLOWED_HOSTS: List[str] = ["*"]
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # Email Configuration
    EMAIL_BACKEND: Literal["smtp", "console"] = "console"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT: int = 30
    SMTP_FROM_EMAIL: str = "orders@velvetcrumbs.lk"
    SMTP_FROM_NAME: str = "Velvet Crumbs"
    ADMIN_EMAIL: str = "admin@velvetcrumbs.lk"

    # Store Settings
    CURRENCY: str = "LKR"
    DELIVERY_FEE: Decimal = Decimal("500.00")
    DEFAULT_PRODUCT_RATING: Decimal = Decimal("5.0")

    # Business Policies
    ORDER_PRICE_POLICY: Literal["trust_client", "verify"] = "trust_client"
    ORDER_STATUS_POLICY: Literal["free", "strict"] = "free"
    CART_MERGE_ON_LOGIN: bool = True

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_AUTH: str = "10/minute"
    RATE_LIMIT_CONTACT: str = "5/minute"

    # Admin bootstrap (seed command)
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me-admin"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def database_url_async(self) -> str:
        """Convert database URL to async version"""
        if self.DATABASE_URL.startswith("sqlite:///"):
            return self.DATABASE_URL.replace("sqlite:///", "sqlite+aiosqlite:///")
        elif self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")
        return self.DATABASE_URL

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

settings = get_settings()
