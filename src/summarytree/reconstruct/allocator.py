"""Stable identifier allocation for one reconstruction run.

The scraper numbers pieces with small, document-local keys. Those keys are
referenced twice: once when the piece itself becomes a node and again when
another piece names it as ``parentId``. The allocator maps each key to one
globally unique identifier so both use sites agree.
"""

from typing import Callable, Hashable, Iterator, Optional
from uuid import UUID, uuid4

from summarytree.exceptions import IdentifierCollisionError


class IdentifierAllocator:
    """Memoizing source-key to UUID mapping.

    One instance belongs to exactly one reconstruction. Sharing an instance
    between unrelated documents would make their trees reuse identifiers.
    Keyless identifiers from ``fresh`` are remembered too, so no identifier
    is ever handed out twice by one allocator.
    """

    def __init__(self, id_factory: Optional[Callable[[], UUID]] = None):
        """Initialize allocator.

        Args:
            id_factory: Callable producing new identifiers (default uuid4).
        """
        self.id_factory = id_factory or uuid4
        self._by_key: dict[Hashable, UUID] = {}
        self._by_id: dict[UUID, Hashable] = {}
        self._fresh: set[UUID] = set()

    def resolve(self, key: Hashable) -> UUID:
        """Return the identifier for ``key``, allocating it on first use."""
        try:
            return self._by_key[key]
        except KeyError:
            pass

        identifier = self._mint(key)
        self._by_key[key] = identifier
        self._by_id[identifier] = key
        return identifier

    def fresh(self) -> UUID:
        """Mint an identifier that is not associated with any key."""
        identifier = self._mint(None)
        self._fresh.add(identifier)
        return identifier

    def _mint(self, key: Optional[Hashable]) -> UUID:
        identifier = self.id_factory()
        if identifier in self._fresh:
            raise IdentifierCollisionError(key, None)
        if identifier in self._by_id:
            raise IdentifierCollisionError(key, self._by_id[identifier])
        return identifier

    def key_for(self, identifier: UUID) -> Optional[Hashable]:
        """Reverse lookup of the key an identifier was allocated for."""
        return self._by_id.get(identifier)

    def known_keys(self) -> Iterator[Hashable]:
        return iter(self._by_key)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)
