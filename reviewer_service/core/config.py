# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


def _default_database_url() -> str:
    user = os.getenv("POSTGRES_USER", "reviewer")
    password = os.getenv("POSTGRES_PASSWORD", "reviewer")
    host = os.getenv("POSTGRES_HOST", "reviewer-db")
    port = os.getenv("POSTGRES_PORT", "5432")
    database = os.getenv("POSTGRES_DB", "reviewer_db")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "reviewer-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8080"))

    DATABASE_URL: str = os.getenv("DATABASE_URL") or _default_database_url()
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))
    DB_POOL_TIMEOUT: float = float(os.getenv("DB_POOL_TIMEOUT", "5.0"))
    DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))
    AUTO_CREATE_SCHEMA: bool = (
        os.getenv("AUTO_CREATE_SCHEMA", "true").lower() == "true"
    )

    # "MaxCountReviewers" is the name older deployments export.
    MAX_REVIEWERS: int = int(
        os.getenv("MAX_REVIEWERS", os.getenv("MaxCountReviewers", "2"))
    )

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
