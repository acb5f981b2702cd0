# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Database engine and table definitions — single source of truth for DB
connectivity and schema.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from reviewer_service.core.config import settings

metadata = MetaData()

teams = Table(
    "teams",
    metadata,
    Column("team_name", String(255), primary_key=True),
)

users = Table(
    "users",
    metadata,
    Column("user_id", String(255), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("team_name", String(255), ForeignKey("teams.team_name"), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Index("idx_users_team_active", "team_name", "is_active"),
)

pull_requests = Table(
    "pull_requests",
    metadata,
    Column("pull_request_id", String(255), primary_key=True),
    Column("pull_request_name", String(500), nullable=False),
    Column("author_id", String(255), ForeignKey("users.user_id"), nullable=False),
    Column("status", String(16), nullable=False, default="OPEN"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("merged_at", DateTime(timezone=True), nullable=True),
    Index("idx_pull_requests_author", "author_id"),
)

pr_reviewers = Table(
    "pr_reviewers",
    metadata,
    Column(
        "pull_request_id",
        String(255),
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("user_id", String(255), ForeignKey("users.user_id"), primary_key=True),
    Index("idx_pr_reviewers_user", "user_id"),
)


def build_engine(url: str | None = None) -> Engine:
    """Create the pooled engine; SQLite URLs get a single shared connection."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        connect_args=connect_args,
    )


engine = build_engine()
