"""Models for editorial summary reconstruction.

Pieces are the flat, immutable scraper output. ContentNodes form the
reconstructed tree and a Document wraps the root nodes with authorship
metadata.

Model Hierarchy:
- Document → ContentNode (roots) → ContentNode (children) ...
- Piece = BlockPiece | InlinePiece
"""

from .base import (
    BaseIRModel,
    DanglingPolicy,
    PieceKind,
    SourceKey,
)
from .document import Document
from .node import ContentNode
from .piece import (
    BasePiece,
    BlockPiece,
    InlinePiece,
    Piece,
    is_block_piece,
    is_inline_piece,
    parse_pieces,
)

__all__ = [
    # Base types
    "BaseIRModel",
    "DanglingPolicy",
    "PieceKind",
    "SourceKey",
    # Pieces
    "BasePiece",
    "BlockPiece",
    "InlinePiece",
    "Piece",
    "is_block_piece",
    "is_inline_piece",
    "parse_pieces",
    # Tree
    "ContentNode",
    "Document",
]
