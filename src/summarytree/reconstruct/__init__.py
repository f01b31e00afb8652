"""Reconstruction of editorial summary trees from flat scraper pieces.

Components:
1. allocator - stable source-key to UUID mapping per run
2. engine - root selection and recursive child resolution
3. validate - structural invariant checks on the result

Each reconstruction owns its own IdentifierAllocator, so documents can be
built concurrently without sharing identifiers.
"""

from .allocator import IdentifierAllocator
from .engine import TreeBuilder, UnplacedPiece, reconstruct_document
from .validate import TreeValidator, ValidationReport

__all__ = [
    # Allocator
    "IdentifierAllocator",
    # Engine
    "TreeBuilder",
    "UnplacedPiece",
    "reconstruct_document",
    # Validation
    "TreeValidator",
    "ValidationReport",
]
