from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "FinModel"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database - PostgreSQL when a connection string is present, SQLite file otherwise
    DATABASE_URL: Optional[str] = None
    DATABASE_PUBLIC_URL: Optional[str] = None
    DATABASE_PATH: str = "finmodel.db"

    # PostgreSQL pool
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 3600

    # Server-sent events
    EVENTS_HEARTBEAT_SECONDS: float = 30.0
    EVENTS_QUEUE_SIZE: int = 100

    # Health score endpoint
    HEALTH_SCORE_MAX_METRICS: int = 120

    # Startup
    SEED_ON_STARTUP: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL", "DATABASE_PUBLIC_URL", mode="before")
    @classmethod
    def blank_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        # An empty DATABASE_URL= line in .env must not select PostgreSQL
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @property
    def database_url(self) -> Optional[str]:
        url = self.DATABASE_URL or self.DATABASE_PUBLIC_URL
        if url and url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def use_postgres(self) -> bool:
        return bool(self.database_url)

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")


settings = Settings()
