"""Per-domain tag relation graph.

A MetaRelation wraps one domain's co-occurrence data:

    relation_map: tag name -> [ConnectedTag(name, count), ...]

Neighbour lists are sorted by count (descending) once, when the relation is
built, so top-N queries just slice the front of the list.

Shortest paths use the distance

    weight = 1000 // count

so strongly co-occurring tags are "closer" to each other.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import networkx as nx

logger = logging.getLogger(__name__)

# Numerator of the edge weight formula
WEIGHT_SCALE = 1000


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ConnectedTag:
    """A related tag and the number of co-occurrences backing the relation."""

    name: str
    count: int

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"name": self.name, "count": self.count}


def edge_weight(count: int) -> int:
    """Distance of an edge backed by `count` co-occurrences.

    Raises:
        ValueError: If count is not positive.
    """
    if count <= 0:
        raise ValueError(f"Co-occurrence count must be positive, got {count}")
    return WEIGHT_SCALE // count


# =============================================================================
# META RELATION
# =============================================================================

class MetaRelation:
    """Relation graph of a single domain (e.g. one Stack Exchange site).

    The relation map is not modified after construction. Path searches run
    on a networkx DiGraph built once here and shared by every query.
    """

    def __init__(self, domain: str, relation_map: dict[str, list[ConnectedTag]]):
        """Initialize and sort every neighbour list by count, descending.

        Args:
            domain: Domain name (e.g. "stackoverflow")
            relation_map: Tag name -> related tags, in any order
        """
        self.domain = domain
        # sorted() is stable, equal counts keep their file order
        self.relation_map: dict[str, list[ConnectedTag]] = {
            tag: sorted(tags, key=lambda t: t.count, reverse=True)
            for tag, tags in relation_map.items()
        }
        self.graph = self._build_graph()

    def __repr__(self) -> str:
        return f"MetaRelation(domain={self.domain!r}, tags={len(self.relation_map)})"

    def _build_graph(self) -> nx.DiGraph:
        """Build the weighted adjacency graph used for path searches."""
        graph = nx.DiGraph()
        for tag, connected_tags in self.relation_map.items():
            graph.add_node(tag)
            for t in connected_tags:
                # First entry has the highest count, so the lowest weight
                if graph.has_edge(tag, t.name):
                    continue
                graph.add_edge(tag, t.name, weight=edge_weight(t.count), count=t.count)
        return graph

    def neighbours(self, tag: str) -> list[tuple[ConnectedTag, int]]:
        """Return (neighbour, weight) pairs for a tag.

        A tag that is not a key of the relation map has no neighbours.
        """
        return [(t, edge_weight(t.count)) for t in self.relation_map.get(tag, [])]

    def find_top_n(self, tag_query: str, n: int) -> list[ConnectedTag]:
        """Return the n most strongly related tags.

        Args:
            tag_query: Tag to look up
            n: Maximum number of results

        Returns:
            Up to n tags, highest count first. Empty if the tag is unknown.
        """
        if n <= 0:
            return []
        return self.relation_map.get(tag_query, [])[:n]

    def find_path(
        self,
        start: str,
        goal: str,
    ) -> Optional[tuple[list[ConnectedTag], int]]:
        """Find the cheapest path between two tags with Dijkstra.

        Args:
            start: Tag to start from
            goal: Tag to reach

        Returns:
            (path, total_cost) or None if there is no path. The path includes
            both ends; the start tag is reported with count 0 and every other
            tag with the count of the edge used to reach it.
        """
        # Without this check the whole graph would be searched for a tag that
        # can only ever be a leaf
        if goal not in self.relation_map:
            return None

        if start == goal:
            return [ConnectedTag(name=start, count=0)], 0

        try:
            cost, names = nx.single_source_dijkstra(
                self.graph, start, target=goal, weight="weight"
            )
        except (nx.NodeNotFound, nx.NetworkXNoPath):
            logger.debug("No path from %r to %r in %s", start, goal, self.domain)
            return None

        path = [ConnectedTag(name=start, count=0)]
        for source, target in zip(names, names[1:]):
            path.append(ConnectedTag(name=target, count=self.graph[source][target]["count"]))

        return path, cost


def merge_relations(meta_relations: list[MetaRelation]) -> list[MetaRelation]:
    """Combine relations that share a domain into one relation per domain.

    Neighbour lists of a tag found in several relations are concatenated in
    input order and sorted again by count.

    Returns:
        One MetaRelation per domain, in order of first appearance
    """
    grouped: dict[str, list[MetaRelation]] = {}
    for meta in meta_relations:
        grouped.setdefault(meta.domain, []).append(meta)

    merged = []
    for domain, metas in grouped.items():
        if len(metas) == 1:
            merged.append(metas[0])
            continue

        logger.info("Merging %d datasets into domain %s", len(metas), domain)
        relation_map: dict[str, list[ConnectedTag]] = {}
        for meta in metas:
            for tag, connected_tags in meta.relation_map.items():
                relation_map.setdefault(tag, []).extend(connected_tags)
        merged.append(MetaRelation(domain, relation_map))

    return merged
