"""Document-level models for reconstructed editorial summaries."""

from datetime import datetime
from typing import Iterator, Optional
from uuid import UUID

from pydantic import Field

from .base import BaseIRModel
from .node import ContentNode


class Document(BaseIRModel):
    """
    Top-level reconstructed editorial summary.

    Wraps the ordered root nodes together with authorship metadata. This is
    the unit handed to persistence.
    """

    author: str
    last_updated_on: Optional[datetime] = None
    nodes: list[ContentNode] = Field(default_factory=list)

    def walk(self) -> Iterator[ContentNode]:
        """Iterate every node depth-first, pre-order, roots in order."""
        for node in self.nodes:
            yield from node.walk()

    @property
    def node_count(self) -> int:
        """Total number of nodes in the tree."""
        return sum(1 for _ in self.walk())

    def find(self, node_id: UUID) -> Optional[ContentNode]:
        """Find a node by identifier."""
        for node in self.walk():
            if node.id == node_id:
                return node
        return None
