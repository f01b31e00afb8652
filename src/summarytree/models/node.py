"""Reconstructed content tree nodes."""

import weakref
from typing import Iterator, Optional
from uuid import UUID

from pydantic import BaseModel, Field, PrivateAttr

from .base import PieceKind


class ContentNode(BaseModel):
    """
    One node of a reconstructed editorial summary.

    Block nodes may own children; inline nodes are leaves and carry the
    text and attribution of the source piece. ``order`` is the position
    among siblings, taken from first appearance in the flat piece list.

    ``parent`` is a navigational link only. It is held weakly so a child
    never keeps its owner alive and is excluded from serialization.
    """

    id: UUID
    kind: PieceKind
    type: str
    order: int = Field(..., ge=0, description="Position among siblings (0-indexed)")
    parent_id: Optional[UUID] = Field(None, description="Owning node; None for roots")

    # Inline-only fields
    source_title: Optional[str] = None
    source_url: Optional[str] = None
    text: Optional[str] = None

    children: list["ContentNode"] = Field(default_factory=list)

    _parent_ref: Optional[weakref.ReferenceType] = PrivateAttr(default=None)

    @property
    def parent(self) -> Optional["ContentNode"]:
        """Owning node, or None for roots."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_inline(self) -> bool:
        return self.kind == PieceKind.INLINE

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __eq__(self, other: object) -> bool:
        # Field-wise only; comparing the parent link would recurse upwards.
        if not isinstance(other, ContentNode):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def link_parent(self, parent: "ContentNode") -> None:
        """Set the weak back-reference to ``parent``."""
        self._parent_ref = weakref.ref(parent)

    def walk(self) -> Iterator["ContentNode"]:
        """Yield this node and its descendants depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def plain_text(self) -> str:
        """Concatenated text of all inline descendants."""
        return "".join(n.text or "" for n in self.walk() if n.is_inline)


ContentNode.model_rebuild()
