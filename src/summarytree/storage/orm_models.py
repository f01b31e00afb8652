"""SQLAlchemy ORM models for persisted editorial summaries.

Nodes are stored flat with a self-referencing parent key and a per-parent
``order`` column, which is enough to rebuild the tree.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from summarytree.models.base import PieceKind

from .database import Base


class EditorialSummaryORM(Base):
    """Editorial summary table - one per notable person."""

    __tablename__ = "editorial_summaries"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    person_slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    author: Mapped[str] = mapped_column(String(255), nullable=False)
    last_updated_on: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    nodes: Mapped[list["EditorialSummaryNodeORM"]] = relationship(
        back_populates="editorial_summary", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_editorial_summaries_person_slug", "person_slug"),)


class EditorialSummaryNodeORM(Base):
    """Editorial summary node table - flattened content tree."""

    __tablename__ = "editorial_summary_nodes"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), primary_key=True, default=uuid4
    )
    editorial_summary_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("editorial_summaries.id", ondelete="CASCADE"),
    )
    parent_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("editorial_summary_nodes.id", ondelete="CASCADE"),
        nullable=True,
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    kind: Mapped[PieceKind] = mapped_column(Enum(PieceKind), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)

    # Inline content
    source_title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    editorial_summary: Mapped["EditorialSummaryORM"] = relationship(
        back_populates="nodes"
    )

    __table_args__ = (
        Index("ix_editorial_summary_nodes_summary_id", "editorial_summary_id"),
        Index("ix_editorial_summary_nodes_parent_order", "parent_id", "order"),
    )
