"""Application settings and configuration."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    env: str = Field(default="dev", alias="ENV")

    # Database
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")
    postgres_db: str = Field(default="schoolhub", alias="POSTGRES_DB")
    postgres_user: str = Field(default="schoolhub", alias="POSTGRES_USER")
    postgres_password: str = Field(default="schoolhub", alias="POSTGRES_PASSWORD")
    # Full URL override, e.g. sqlite+aiosqlite:///./schoolhub.db for local runs
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Security
    secret_key: str = Field(default="change-me-in-production", alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(
        default=4320, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Back-office credentials
    admin_email: str = Field(default="admin@schoolhub.local", alias="ADMIN_EMAIL")
    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")
    staff_email: str = Field(default="staff@schoolhub.local", alias="STAFF_EMAIL")
    staff_password: str = Field(default="staff123", alias="STAFF_PASSWORD")

    # Student distribution
    auto_allocate_seed: Optional[int] = Field(default=None, alias="AUTO_ALLOCATE_SEED")
    enforce_plan_quota_on_move: bool = Field(
        default=True, alias="ENFORCE_PLAN_QUOTA_ON_MOVE"
    )

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
