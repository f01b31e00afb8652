"""Configuration management for the editorial summary tree importer."""

from typing import Any

from pydantic_settings import BaseSettings

from summarytree.models import DanglingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "summarytree"
    postgres_password: str = "localdev"
    postgres_db: str = "summarytree"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    # Scraper output
    scraper_results_dir: str = "src/scraper/output/scraperResults"
    scraper_results_pattern: str = "*.json"
    images_dir: str = "src/scraper/output/images"

    # Processing
    import_concurrency: int = 20

    # Reconstruction
    dangling_policy: DanglingPolicy = DanglingPolicy.WARN

    # Logging
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        """Construct async database URL."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for the async SQLAlchemy engine."""
        return {
            "echo": self.db_echo or self.log_level == "DEBUG",
            "pool_size": self.db_pool_size,
            "max_overflow": self.db_max_overflow,
        }

    @property
    def sync_database_url(self) -> str:
        """Construct sync database URL."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
