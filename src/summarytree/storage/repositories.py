"""Repository layer for persisting reconstructed editorial summaries."""

from collections import defaultdict
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from summarytree.models import ContentNode, Document, PieceKind

from .orm_models import EditorialSummaryNodeORM, EditorialSummaryORM


def flatten_document(
    document: Document, summary_id: UUID
) -> list[EditorialSummaryNodeORM]:
    """Flatten a tree into node rows, every parent ahead of its children."""
    return [
        EditorialSummaryNodeORM(
            id=node.id,
            editorial_summary_id=summary_id,
            parent_id=node.parent_id,
            order=node.order,
            kind=node.kind,
            type=node.type,
            source_title=node.source_title,
            source_url=node.source_url,
            text=node.text,
        )
        for node in document.walk()
    ]


def rebuild_document(summary: EditorialSummaryORM) -> Document:
    """Rebuild the Document tree from a summary and its loaded node rows."""
    by_parent: dict[Optional[UUID], list[EditorialSummaryNodeORM]] = defaultdict(list)
    for row in summary.nodes:
        by_parent[row.parent_id].append(row)

    def build(parent_id: Optional[UUID]) -> list[ContentNode]:
        nodes = []
        for row in sorted(by_parent.get(parent_id, ()), key=lambda r: r.order):
            node = ContentNode(
                id=row.id,
                kind=PieceKind(row.kind),
                type=row.type,
                order=row.order,
                parent_id=row.parent_id,
                source_title=row.source_title,
                source_url=row.source_url,
                text=row.text,
                children=build(row.id),
            )
            for child in node.children:
                child.link_parent(node)
            nodes.append(node)
        return nodes

    return Document(
        id=summary.id,
        author=summary.author,
        last_updated_on=summary.last_updated_on,
        nodes=build(None),
    )


class EditorialSummaryRepository:
    """Repository for EditorialSummary operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, person_slug: str, document: Document) -> EditorialSummaryORM:
        """Store a summary for a person, replacing any previous one."""
        existing = await self.get_by_slug(person_slug)
        if existing:
            await self.session.delete(existing)
            await self.session.flush()

        orm_summary = EditorialSummaryORM(
            id=document.id,
            person_slug=person_slug,
            author=document.author,
            last_updated_on=document.last_updated_on,
        )
        self.session.add(orm_summary)
        await self.session.flush()

        self.session.add_all(flatten_document(document, orm_summary.id))
        await self.session.flush()
        return orm_summary

    async def get_by_slug(
        self, person_slug: str, include_nodes: bool = False
    ) -> Optional[EditorialSummaryORM]:
        """Get the summary of a person."""
        query = select(EditorialSummaryORM).where(
            EditorialSummaryORM.person_slug == person_slug
        )
        if include_nodes:
            query = query.options(selectinload(EditorialSummaryORM.nodes))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def load_document(self, person_slug: str) -> Optional[Document]:
        """Get the reconstructed tree of a person's summary."""
        summary = await self.get_by_slug(person_slug, include_nodes=True)
        return rebuild_document(summary) if summary else None

    async def list_slugs(self, limit: int = 100) -> Sequence[str]:
        """List slugs that have a stored summary."""
        result = await self.session.execute(
            select(EditorialSummaryORM.person_slug)
            .order_by(EditorialSummaryORM.person_slug)
            .limit(limit)
        )
        return result.scalars().all()

    async def count_all(self) -> int:
        """Count stored summaries."""
        result = await self.session.execute(
            select(func.count()).select_from(EditorialSummaryORM)
        )
        return result.scalar_one()
