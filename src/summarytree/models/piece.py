"""Flat content pieces as emitted by the upstream scraper."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from .base import PieceKind, SourceKey


class BasePiece(BaseModel):
    """Fields shared by block and inline pieces.

    Pieces are read-only inputs. ``id`` and ``parent_id`` are scraper keys,
    only meaningful as lookups into an identifier allocator.
    """

    id: SourceKey
    parent_id: Optional[SourceKey] = Field(
        None, alias="parentId", description="Key of the parent piece; None for roots"
    )
    type: str = Field(..., description="Content category, e.g. paragraph, quote, list")

    class Config:
        frozen = True
        populate_by_name = True
        extra = "ignore"

    @property
    def has_parent(self) -> bool:
        return self.parent_id is not None


class BlockPiece(BasePiece):
    """Container piece that may own nested children."""

    kind: Literal["block"] = "block"

    @property
    def piece_kind(self) -> PieceKind:
        return PieceKind.BLOCK


class InlinePiece(BasePiece):
    """Leaf piece carrying text and source attribution."""

    kind: Literal["inline"] = "inline"
    source_title: Optional[str] = Field(None, alias="sourceTitle")
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    text: Optional[str] = None

    @property
    def piece_kind(self) -> PieceKind:
        return PieceKind.INLINE


Piece = Annotated[Union[BlockPiece, InlinePiece], Field(discriminator="kind")]


def is_block_piece(piece: BasePiece) -> bool:
    """Check if piece is a container."""
    return isinstance(piece, BlockPiece)


def is_inline_piece(piece: BasePiece) -> bool:
    """Check if piece is a leaf."""
    return isinstance(piece, InlinePiece)


_piece_list_adapter = TypeAdapter(list[Piece])


def parse_pieces(data: list[dict]) -> list[BasePiece]:
    """Validate raw scraper dicts into block/inline pieces, keeping order."""
    return _piece_list_adapter.validate_python(data)
