from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "PortfolioForge API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = "INFO"

    # AI/LLM Configuration
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "google_api_key"),
    )
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.1

    # Storage - "memory" (single process), "database" (SQLAlchemy) or "supabase"
    storage_backend: str = "memory"

    # Database - supports both SQLite (local) and PostgreSQL (production)
    database_url: str = "sqlite+aiosqlite:///./portfolioforge.db"

    # Supabase (hosted table)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_table: str = "portfolios"

    # Public URL used to build absolute share links; empty = derive from request
    public_base_url: str = ""
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "*"

    # Upload limits
    max_upload_mb: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    return Settings()
