"""Universe assembler: merges every domain's relation graph into one model.

Naming follows the map metaphor used by the presentation layer:

    Galaxy     - a domain (e.g. "stackoverflow", "askubuntu")
    Planet     - a tag name, shared by every domain it appears in
    Connection - an undirected edge between two planets

Connections are bidirectional in the source data (a -> b and b -> a), so
the merge keeps an explored set and skips edges whose target has already
been processed as a source.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .config import get_datasets_dir, get_dedup_scope, get_skip_malformed
from .dataset_loader import get_all_relations
from .relation_graph import ConnectedTag, MetaRelation, merge_relations

logger = logging.getLogger(__name__)


class DedupScope(str, Enum):
    """How far the explored set reaches while merging domains."""

    GLOBAL = "global"          # one set for all domains
    PER_DOMAIN = "per_domain"  # reset for every domain


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class Connection:
    """A single connection between two planets."""

    planet_pair: tuple[str, str]  # (source planet, peer planet)
    count: int
    galaxy: str  # Domain whose merge pass created the connection

    @property
    def peer(self) -> str:
        return self.planet_pair[1]

    @property
    def pair(self) -> frozenset[str]:
        """Unordered identity of the edge."""
        return frozenset(self.planet_pair)


@dataclass
class Planet:
    """A tag and its connections. One planet can belong to multiple galaxies.

    belong_galaxy holds every domain where the tag has its own entry; a tag
    that is only ever listed as a neighbour belongs to the domains that
    list it.
    """

    name: str
    conns: list[Connection] = field(default_factory=list)
    belong_galaxy: set[str] = field(default_factory=set)

    @property
    def total_count(self) -> int:
        """Sum of the co-occurrence counts of all connections."""
        return sum(conn.count for conn in self.conns)


@dataclass
class Galaxy:
    """A domain grouping a bunch of planets."""

    name: str


@dataclass
class Universe:
    """The merged cross-domain model handed to the presentation layer."""

    galaxies: dict[str, Galaxy]
    planets: dict[str, Planet]
    relations: dict[str, MetaRelation]
    dedup_scope: DedupScope = DedupScope.GLOBAL

    def connections(self) -> Iterator[Connection]:
        """Iterate over every connection in the universe."""
        for planet in self.planets.values():
            yield from planet.conns

    def top_n(self, domain: str, tag: str, n: int) -> list[ConnectedTag]:
        """Top-N related tags within one domain. Empty for unknown domains."""
        relation = self.relations.get(domain)
        if relation is None:
            return []
        return relation.find_top_n(tag, n)

    def shortest_path(
        self,
        domain: str,
        start: str,
        goal: str,
    ) -> Optional[tuple[list[ConnectedTag], int]]:
        """Cheapest path between two tags within one domain, or None."""
        relation = self.relations.get(domain)
        if relation is None:
            return None
        return relation.find_path(start, goal)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "dedup_scope": self.dedup_scope.value,
            "galaxies": sorted(self.galaxies),
            "planets": [
                {
                    "name": p.name,
                    "belong_galaxy": sorted(p.belong_galaxy),
                    "total_count": p.total_count,
                }
                for p in self.planets.values()
            ],
            "connections": [
                {
                    "source": c.planet_pair[0],
                    "target": c.planet_pair[1],
                    "count": c.count,
                    "galaxy": c.galaxy,
                }
                for c in self.connections()
            ],
        }


# =============================================================================
# ASSEMBLER
# =============================================================================

def generate_universe_cartography(
    meta_relations: list[MetaRelation],
    dedup_scope: Union[DedupScope, str] = DedupScope.GLOBAL,
) -> Universe:
    """Merge per-domain relation graphs into galaxies, planets and connections.

    Domains and tags are processed in name order so the surviving edge of a
    duplicated pair is the same on every run.

    Args:
        meta_relations: One relation graph per domain
        dedup_scope: GLOBAL shares the explored set across domains (an edge
            b -> a from a later domain is dropped once a was explored in an
            earlier one); PER_DOMAIN resets it for every domain.

    Returns:
        Universe with galaxies and planets keyed by name
    """
    dedup_scope = DedupScope(dedup_scope)

    relations = {meta.domain: meta for meta in merge_relations(meta_relations)}
    ordered = [relations[domain] for domain in sorted(relations)]

    # Generate galaxies
    galaxies = {meta.domain: Galaxy(name=meta.domain) for meta in ordered}

    # Discover all planets across each galaxy
    planets: dict[str, Planet] = {}
    for meta in ordered:
        for planet_name in meta.relation_map:
            planet = planets.setdefault(planet_name, Planet(name=planet_name))
            planet.belong_galaxy.add(meta.domain)

    # Tags that only ever appear as a neighbour still need a planet to
    # connect to; they belong to the galaxies that reference them
    keyed = set(planets)
    for meta in ordered:
        for connected_tags in meta.relation_map.values():
            for t in connected_tags:
                if t.name in keyed:
                    continue
                planet = planets.setdefault(t.name, Planet(name=t.name))
                planet.belong_galaxy.add(meta.domain)

    explored: set[str] = set()
    for meta in ordered:
        if dedup_scope is DedupScope.PER_DOMAIN:
            explored = set()

        for planet_name in sorted(meta.relation_map):
            planet = planets[planet_name]
            linked = {planet_name}
            for t in meta.relation_map[planet_name]:
                # Skip the reverse of an edge that was already created
                if t.name in explored or t.name in linked:
                    continue
                linked.add(t.name)
                planet.conns.append(Connection(
                    planet_pair=(planet_name, t.name),
                    count=t.count,
                    galaxy=meta.domain,
                ))
            explored.add(planet_name)

    universe = Universe(
        galaxies=galaxies,
        planets=planets,
        relations=relations,
        dedup_scope=dedup_scope,
    )
    logger.info(
        "Universe: %d galaxies, %d planets, %d connections (%s dedup)",
        len(galaxies),
        len(planets),
        sum(len(p.conns) for p in planets.values()),
        dedup_scope.value,
    )
    return universe


def load_universe(
    relation_dir: Optional[Union[str, Path]] = None,
    skip_malformed: Optional[bool] = None,
    dedup_scope: Optional[Union[DedupScope, str]] = None,
) -> Universe:
    """Load every dataset and assemble the universe.

    Arguments left as None fall back to the environment config.
    """
    if relation_dir is None:
        relation_dir = get_datasets_dir()
    if skip_malformed is None:
        skip_malformed = get_skip_malformed()
    if dedup_scope is None:
        dedup_scope = get_dedup_scope()

    meta_relations = get_all_relations(relation_dir, skip_malformed=skip_malformed)
    return generate_universe_cartography(meta_relations, dedup_scope=dedup_scope)
