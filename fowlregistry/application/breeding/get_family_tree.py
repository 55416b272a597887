"""
Use case: Build and lay out a fowl's family tree.

Input: fowl id
Output: FamilyTreeResult (tree + radial layout centred on the origin)
Failure cases: PedigreeRootNotFoundError if the fowl does not exist.
"""

import logging

from fowlregistry.application.breeding.dtos import FamilyTreeResult
from fowlregistry.domain.breeding.family_tree import (
    DEFAULT_LEVEL_RADIUS,
    FamilyTreeBuilder,
    layout_tree,
)

logger = logging.getLogger(__name__)


class GetFamilyTreeUseCase:
    """Builds the tree with FamilyTreeBuilder and computes node positions."""

    def __init__(
        self,
        builder: FamilyTreeBuilder,
        level_radius: float = DEFAULT_LEVEL_RADIUS,
    ) -> None:
        self._builder = builder
        self._level_radius = level_radius

    def execute(self, fowl_id: str) -> FamilyTreeResult:
        tree = self._builder.build(fowl_id)
        positions = layout_tree(tree, 0.0, 0.0, self._level_radius)
        logger.info(
            "Family tree for fowl=%s: %d nodes over %d generations",
            fowl_id,
            len(tree.nodes),
            tree.generations,
        )
        return FamilyTreeResult(tree=tree, positions=positions)
