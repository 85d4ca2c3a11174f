from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./mechconnect.db"  # Default to SQLite

    # Token signing
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Apply Alembic migrations when the app starts
    RUN_MIGRATIONS: bool = True

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


settings = Settings()
