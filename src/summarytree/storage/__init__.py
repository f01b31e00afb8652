"""Storage layer for reconstructed editorial summaries.

Provides database access via SQLAlchemy with PostgreSQL.
"""

from .database import (
    Base,
    async_session_factory,
    close_db,
    engine,
    get_session,
    init_db,
)
from .orm_models import (
    EditorialSummaryNodeORM,
    EditorialSummaryORM,
)
from .repositories import (
    EditorialSummaryRepository,
    flatten_document,
    rebuild_document,
)

__all__ = [
    # Database
    "Base",
    "engine",
    "async_session_factory",
    "get_session",
    "init_db",
    "close_db",
    # ORM Models
    "EditorialSummaryORM",
    "EditorialSummaryNodeORM",
    # Repositories
    "EditorialSummaryRepository",
    "flatten_document",
    "rebuild_document",
]
