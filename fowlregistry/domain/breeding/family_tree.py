"""
Family tree reconstruction and radial layout.

FamilyTreeBuilder walks stored lineage links breadth-first from one fowl,
upwards through parents and downwards through offspring, and places every
reached fowl on a ring whose index is its link distance from the root.

Layout is a pure function of (generation, position, sibling_count):

    radius = generation * level_radius
    angle  = position / sibling_count * 2π
    (x, y) = (cx + radius·cos(angle), cy + radius·sin(angle))

so the same input always yields the same picture.
"""

import logging
import math

from fowlregistry.domain.breeding.entities import (
    ConnectionType,
    FamilyTree,
    LineageLink,
    NodePosition,
    TreeConnection,
    TreeNode,
)
from fowlregistry.domain.breeding.errors import PedigreeRootNotFoundError
from fowlregistry.domain.breeding.ports import PedigreeRepository

logger = logging.getLogger(__name__)

DEFAULT_LEVEL_RADIUS = 100.0
DEFAULT_MAX_GENERATIONS = 3

GENDER_COLORS = {
    "male": "blue",
    "female": "magenta",
}
DEFAULT_NODE_COLOR = "gray"

_ANCESTOR = -1
_ROOT = 0
_DESCENDANT = 1


def node_color(gender: str) -> str:
    """Return the marker colour for a gender label."""
    return GENDER_COLORS.get((gender or "").lower(), DEFAULT_NODE_COLOR)


def calculate_node_position(
    node: TreeNode,
    center_x: float,
    center_y: float,
    level_radius: float = DEFAULT_LEVEL_RADIUS,
) -> NodePosition:
    """Return the canvas position of a node. Pure and side-effect free."""
    angle = 0.0
    if node.sibling_count > 0:
        angle = node.position * 2 * math.pi / node.sibling_count
    radius = node.generation * level_radius
    return NodePosition(
        x=center_x + radius * math.cos(angle),
        y=center_y + radius * math.sin(angle),
    )


def layout_tree(
    tree: FamilyTree,
    center_x: float,
    center_y: float,
    level_radius: float = DEFAULT_LEVEL_RADIUS,
) -> dict[str, NodePosition]:
    """Return the position of every node keyed by node id."""
    return {
        node.id: calculate_node_position(node, center_x, center_y, level_radius)
        for node in tree.nodes
    }


def drawable_connections(
    tree: FamilyTree, positions: dict[str, NodePosition]
) -> list[tuple[TreeConnection, NodePosition, NodePosition]]:
    """Pair each connection with its endpoint positions.

    Connections whose endpoint is not a laid-out node are skipped.
    """
    drawable = []
    for connection in tree.connections:
        start = positions.get(connection.from_id)
        end = positions.get(connection.to_id)
        if start is None or end is None:
            continue
        drawable.append((connection, start, end))
    return drawable


class FamilyTreeBuilder:
    """Builds the ancestor/descendant graph of one fowl.

    Args:
        pedigree: Repository of display records and lineage links.
        max_generations: How many links to walk away from the root.
    """

    def __init__(
        self,
        pedigree: PedigreeRepository,
        max_generations: int = DEFAULT_MAX_GENERATIONS,
    ) -> None:
        self._pedigree = pedigree
        self._max_generations = max_generations

    def build(self, fowl_id: str) -> FamilyTree:
        """Reconstruct the family tree rooted at fowl_id.

        Raises:
            PedigreeRootNotFoundError: If fowl_id has no record.
        """
        if not self._pedigree.get_records([fowl_id]):
            raise PedigreeRootNotFoundError(fowl_id)

        distance: dict[str, int] = {fowl_id: 0}
        side: dict[str, int] = {fowl_id: _ROOT}
        connections: list[TreeConnection] = []
        seen_links: set[tuple[str, str]] = set()
        frontier = [fowl_id]

        for generation in range(1, self._max_generations + 1):
            if not frontier:
                break
            frontier_ids = set(frontier)
            next_frontier: list[str] = []
            links = sorted(
                self._pedigree.get_links(frontier),
                key=lambda link: (link.parent_id, link.offspring_id),
            )
            for link in links:
                step = self._step(link, frontier_ids, side)
                if step is None:
                    continue
                key = (link.parent_id, link.offspring_id)
                if key in seen_links:
                    continue
                seen_links.add(key)

                reached, direction, connection = step
                connections.append(connection)
                if reached not in distance:
                    distance[reached] = generation
                    side[reached] = direction
                    next_frontier.append(reached)
            frontier = next_frontier

        records = {r.id: r for r in self._pedigree.get_records(sorted(distance))}
        nodes = self._place(distance, side, records)
        logger.debug(
            "Built family tree root=%s nodes=%d connections=%d",
            fowl_id,
            len(nodes),
            len(connections),
        )
        return FamilyTree(
            root_id=fowl_id,
            nodes=tuple(nodes),
            connections=tuple(connections),
        )

    @staticmethod
    def _step(
        link: LineageLink, frontier_ids: set[str], side: dict[str, int]
    ) -> tuple[str, int, TreeConnection] | None:
        """Return (reached id, direction, connection) for a usable link."""
        child, parent = link.offspring_id, link.parent_id
        if child in frontier_ids and side[child] <= _ROOT:
            return (
                parent,
                _ANCESTOR,
                TreeConnection(from_id=child, to_id=parent, type=ConnectionType.PARENT),
            )
        if parent in frontier_ids and side[parent] >= _ROOT:
            return (
                child,
                _DESCENDANT,
                TreeConnection(from_id=parent, to_id=child, type=ConnectionType.OFFSPRING),
            )
        return None

    @staticmethod
    def _place(distance, side, records) -> list[TreeNode]:
        rings: dict[int, list[str]] = {}
        for node_id, generation in distance.items():
            if node_id in records:
                rings.setdefault(generation, []).append(node_id)

        nodes = []
        for generation in sorted(rings):
            ring = sorted(rings[generation], key=lambda nid: (side[nid], nid))
            for position, node_id in enumerate(ring):
                record = records[node_id]
                nodes.append(
                    TreeNode(
                        id=node_id,
                        name=record.name,
                        breed=record.breed,
                        gender=record.gender,
                        generation=generation,
                        position=position,
                        sibling_count=len(ring),
                        birth_date=record.birth_date,
                    )
                )
        return nodes
