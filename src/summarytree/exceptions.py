"""Error types raised while loading and reconstructing editorial summaries."""

from typing import Hashable, Sequence


class SummaryTreeError(Exception):
    """Base class for all summarytree errors."""


class MissingExpectedDataError(SummaryTreeError):
    """Upstream scraper output lacks data the importer requires."""


class IdentifierCollisionError(SummaryTreeError):
    """The identifier factory repeated an identifier already handed out.

    ``key`` and ``other_key`` are None for identifiers minted without a key.
    """

    def __init__(self, key: Hashable, other_key: Hashable):
        self.key = key
        self.other_key = other_key
        other = "a keyless identifier" if other_key is None else f"key {other_key!r}"
        super().__init__(f"Identifier for key {key!r} collides with {other}")


class ReconstructionError(SummaryTreeError):
    """The flat piece list cannot be turned into a well-formed tree."""


class DanglingReferenceError(ReconstructionError):
    """Pieces reference parents that were never constructed."""

    def __init__(self, pieces: Sequence):
        self.pieces = list(pieces)
        ids = ", ".join(repr(u.piece.id) for u in self.pieces)
        super().__init__(f"{len(self.pieces)} piece(s) could not be placed: {ids}")


class CyclicReferenceError(ReconstructionError):
    """A block piece is its own ancestor."""

    def __init__(self, key: Hashable):
        self.key = key
        super().__init__(f"Block {key!r} appears in its own ancestry")


class DuplicateNodeError(ReconstructionError):
    """Two block pieces resolve to the same node identifier."""

    def __init__(self, key: Hashable):
        self.key = key
        super().__init__(f"Block key {key!r} is used by more than one piece")
