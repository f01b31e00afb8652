"""Base models and common types for editorial summary reconstruction."""

from datetime import datetime, timezone
from enum import Enum
from typing import Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# Keys handed out by the scraper for pieces: small integers or strings.
SourceKey = Union[int, str]


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class PieceKind(str, Enum):
    """Structural role of a scraped content piece."""

    BLOCK = "block"  # container, may own children
    INLINE = "inline"  # terminal leaf with text and attribution


class DanglingPolicy(str, Enum):
    """What to do with pieces whose parent never appears in the tree."""

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


class BaseIRModel(BaseModel):
    """Base class for reconstructed models with common fields."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True  # For SQLAlchemy compatibility
