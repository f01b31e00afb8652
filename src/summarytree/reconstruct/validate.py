"""Structural checks for reconstructed editorial summary trees."""

from dataclasses import dataclass, field
from typing import Optional, Sequence
from uuid import UUID

from summarytree.models import BasePiece, BlockPiece, ContentNode, Document


@dataclass
class ValidationReport:
    """Result of validating one Document."""

    node_count: int = 0
    issues: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues


class TreeValidator:
    """Checks the structural invariants of a reconstructed tree.

    - node identifiers are unique
    - sibling ``order`` values run 0..n-1 without gaps
    - inline nodes have no children
    - ``parent_id`` and the weak ``parent`` link name the actual owner
    - given the source pieces: every parentless block is exactly one root
      and no piece produced more than one node
    """

    def validate(
        self,
        document: Document,
        pieces: Optional[Sequence[BasePiece]] = None,
    ) -> ValidationReport:
        """Validate a document, optionally against its source pieces."""
        report = ValidationReport()
        seen: set[UUID] = set()

        self._check_siblings(document.nodes, None, report)
        for root in document.nodes:
            self._check_node(root, seen, report)
        report.node_count = len(seen)

        if pieces is not None:
            self._check_against_pieces(document, list(pieces), report)

        return report

    def _check_siblings(
        self,
        siblings: list[ContentNode],
        owner: Optional[ContentNode],
        report: ValidationReport,
    ) -> None:
        orders = [n.order for n in siblings]
        if orders != list(range(len(siblings))):
            where = f"node {owner.id}" if owner else "document root"
            report.issues.append(f"Sibling order under {where} is {orders}")

        owner_id = owner.id if owner else None
        for node in siblings:
            if node.parent_id != owner_id:
                report.issues.append(
                    f"Node {node.id} has parent_id {node.parent_id}, expected {owner_id}"
                )
            if node.parent is not owner:
                report.issues.append(f"Node {node.id} has a stale parent link")

    def _check_node(
        self, node: ContentNode, seen: set[UUID], report: ValidationReport
    ) -> None:
        if node.id in seen:
            report.issues.append(f"Duplicate node id {node.id}")
        seen.add(node.id)

        if node.is_inline and node.children:
            report.issues.append(f"Inline node {node.id} has children")

        self._check_siblings(node.children, node, report)
        for child in node.children:
            self._check_node(child, seen, report)

    def _check_against_pieces(
        self,
        document: Document,
        pieces: list[BasePiece],
        report: ValidationReport,
    ) -> None:
        root_pieces = [
            p for p in pieces if isinstance(p, BlockPiece) and not p.has_parent
        ]
        if len(root_pieces) != len(document.nodes):
            report.issues.append(
                f"Expected {len(root_pieces)} root(s), found {len(document.nodes)}"
            )
        for piece, root in zip(root_pieces, document.nodes):
            if piece.type != root.type:
                report.issues.append(
                    f"Root {root.order} has type {root.type!r}, "
                    f"source piece {piece.id!r} has {piece.type!r}"
                )

        if report.node_count > len(pieces):
            report.issues.append(
                f"{report.node_count} nodes built from only {len(pieces)} pieces"
            )
