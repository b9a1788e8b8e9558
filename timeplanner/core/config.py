from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Time Planner API"
    API_V1_PREFIX: str = "/api/v1"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # DB
    DATABASE_URL: str = "sqlite:///./data/timeplanner.db"
    DATABASE_ECHO: bool = False

    # Categories
    FALLBACK_CATEGORY_NAME: str = "Other"
    FALLBACK_CATEGORY_COLOR: str = "#8B949E"

    # Accounts
    PASSWORD_MIN_LENGTH: int = 8

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"

settings = Settings()
