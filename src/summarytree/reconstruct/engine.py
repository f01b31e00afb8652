"""Tree Reconstruction - Turn flat scraper pieces into an ordered node tree.

The scraper emits an editorial summary as a flat list of pieces in reading
order. Block pieces are containers, inline pieces are leaves, and nesting is
expressed only by ``parentId`` keys. Reconstruction:

1. Roots are block pieces without a parent, in source order.
2. Children of a node are all pieces whose parent key resolves (through the
   run's IdentifierAllocator) to that node's identifier, in source order.
3. Block children recurse; inline children are leaves with fresh ids.

Pieces that never land under a constructed node are reported as unplaced and
handled according to the DanglingPolicy.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence, Union
from uuid import UUID

from summarytree.config import settings
from summarytree.exceptions import (
    CyclicReferenceError,
    DanglingReferenceError,
    DuplicateNodeError,
    ReconstructionError,
)
from summarytree.models import (
    BasePiece,
    BlockPiece,
    ContentNode,
    DanglingPolicy,
    Document,
    InlinePiece,
    PieceKind,
)

from .allocator import IdentifierAllocator

logger = logging.getLogger(__name__)

# (position in the flat list, piece)
IndexedPiece = tuple[int, BasePiece]


@dataclass
class UnplacedPiece:
    """A piece that did not end up anywhere in the tree."""

    position: int
    piece: BasePiece
    reason: str


class TreeBuilder:
    """Builds ContentNode trees from flat piece lists.

    Owns one IdentifierAllocator. Use a new builder (or at least a new
    allocator) for every unrelated document.
    """

    def __init__(
        self,
        allocator: Optional[IdentifierAllocator] = None,
        dangling_policy: Union[DanglingPolicy, str, None] = None,
    ):
        """Initialize builder.

        Args:
            allocator: Identifier allocator for this run (new one if None).
            dangling_policy: ignore, warn or error (default from settings).
        """
        self.allocator = allocator or IdentifierAllocator()
        self.dangling_policy = DanglingPolicy(
            dangling_policy or settings.dangling_policy
        )
        self.unplaced: list[UnplacedPiece] = []
        self._built: set[UUID] = set()

    def build(self, pieces: Sequence[BasePiece]) -> list[ContentNode]:
        """Reconstruct the ordered root nodes of a flat piece list.

        Args:
            pieces: Pieces in source order.

        Returns:
            Root ContentNodes with their full subtrees attached.

        Raises:
            CyclicReferenceError: A block is its own ancestor.
            DuplicateNodeError: Two blocks share a source key.
            DanglingReferenceError: Unplaced pieces under the error policy.
            ReconstructionError: Blocks nest deeper than the interpreter stack.
        """
        pieces = list(pieces)
        self.unplaced = []
        self._built = set()

        index = self._index_by_parent(pieces)
        placed: set[int] = set()

        root_entries = [
            (position, piece)
            for position, piece in enumerate(pieces)
            if isinstance(piece, BlockPiece) and not piece.has_parent
        ]

        roots = []
        try:
            for order, (position, piece) in enumerate(root_entries):
                placed.add(position)
                roots.append(
                    self._make_block(piece, order, None, index, placed, frozenset())
                )
        except RecursionError as e:
            raise ReconstructionError(
                f"Blocks nest too deeply to reconstruct ({len(pieces)} pieces)"
            ) from e

        self._collect_unplaced(pieces, placed)

        logger.debug(
            "Built %d root(s) from %d piece(s), %d unplaced",
            len(roots),
            len(pieces),
            len(self.unplaced),
        )
        return roots

    def build_document(
        self,
        pieces: Sequence[BasePiece],
        author: str,
        last_updated_on: Optional[datetime] = None,
    ) -> Document:
        """Reconstruct pieces and wrap the roots in a Document."""
        return Document(
            author=author,
            last_updated_on=last_updated_on,
            nodes=self.build(pieces),
        )

    def _index_by_parent(
        self, pieces: list[BasePiece]
    ) -> dict[UUID, list[IndexedPiece]]:
        """Group parented pieces by resolved parent identifier.

        Built once per run and reused at every depth. Grouping preserves
        source order within each parent.
        """
        index: dict[UUID, list[IndexedPiece]] = defaultdict(list)
        for position, piece in enumerate(pieces):
            if piece.has_parent:
                index[self.allocator.resolve(piece.parent_id)].append(
                    (position, piece)
                )
        return index

    def _expand(
        self,
        parent_id: UUID,
        index: dict[UUID, list[IndexedPiece]],
        placed: set[int],
        ancestry: frozenset,
    ) -> list[ContentNode]:
        """Build the ordered children of the node ``parent_id``."""
        children = []
        for order, (position, piece) in enumerate(index.get(parent_id, ())):
            placed.add(position)
            if isinstance(piece, InlinePiece):
                children.append(self._make_leaf(piece, order, parent_id))
            else:
                children.append(
                    self._make_block(piece, order, parent_id, index, placed, ancestry)
                )
        return children

    def _make_block(
        self,
        piece: BlockPiece,
        order: int,
        parent_id: Optional[UUID],
        index: dict[UUID, list[IndexedPiece]],
        placed: set[int],
        ancestry: frozenset,
    ) -> ContentNode:
        node_id = self.allocator.resolve(piece.id)
        if node_id in ancestry:
            raise CyclicReferenceError(piece.id)
        if node_id in self._built:
            raise DuplicateNodeError(piece.id)
        self._built.add(node_id)

        children = self._expand(node_id, index, placed, ancestry | {node_id})
        node = ContentNode(
            id=node_id,
            kind=PieceKind.BLOCK,
            type=piece.type,
            order=order,
            parent_id=parent_id,
            children=children,
        )
        for child in node.children:
            child.link_parent(node)
        return node

    def _make_leaf(
        self, piece: InlinePiece, order: int, parent_id: UUID
    ) -> ContentNode:
        # Leaves are never referenced as parents, so they skip the memo.
        return ContentNode(
            id=self.allocator.fresh(),
            kind=PieceKind.INLINE,
            type=piece.type,
            order=order,
            parent_id=parent_id,
            source_title=piece.source_title or None,
            source_url=piece.source_url.rstrip() if piece.source_url else None,
            text=piece.text or None,
        )

    def _collect_unplaced(self, pieces: list[BasePiece], placed: set[int]) -> None:
        for position, piece in enumerate(pieces):
            if position in placed:
                continue
            if piece.has_parent:
                reason = f"parent {piece.parent_id!r} is not in the tree"
            else:
                reason = "inline piece without a parent"
            self.unplaced.append(UnplacedPiece(position, piece, reason))

        if not self.unplaced or self.dangling_policy == DanglingPolicy.IGNORE:
            return
        if self.dangling_policy == DanglingPolicy.ERROR:
            raise DanglingReferenceError(self.unplaced)
        logger.warning(
            "Dropped %d piece(s) with no place in the tree: %s",
            len(self.unplaced),
            ", ".join(f"{u.piece.id!r} ({u.reason})" for u in self.unplaced),
        )


def reconstruct_document(
    pieces: Sequence[BasePiece],
    author: str,
    last_updated_on: Optional[datetime] = None,
    dangling_policy: Union[DanglingPolicy, str, None] = None,
    id_factory: Optional[Callable[[], UUID]] = None,
) -> Document:
    """Reconstruct a Document with a fresh allocator.

    Args:
        pieces: Flat pieces in source order.
        author: Summary author.
        last_updated_on: Last update timestamp, if known.
        dangling_policy: How to treat unplaced pieces.
        id_factory: Identifier factory (default uuid4).

    Returns:
        Document with ordered root nodes.
    """
    builder = TreeBuilder(IdentifierAllocator(id_factory), dangling_policy)
    return builder.build_document(pieces, author, last_updated_on)
