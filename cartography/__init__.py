"""Tag relation graphs for Stack Exchange style co-occurrence datasets."""

from .dataset_loader import CartographyError, DatasetLoadError, get_all_relations, load_relation_file
from .relation_graph import ConnectedTag, MetaRelation, edge_weight, merge_relations
from .universe import (
    Connection,
    DedupScope,
    Galaxy,
    Planet,
    Universe,
    generate_universe_cartography,
    load_universe,
)

__all__ = [
    "CartographyError",
    "DatasetLoadError",
    "get_all_relations",
    "load_relation_file",
    "ConnectedTag",
    "MetaRelation",
    "edge_weight",
    "merge_relations",
    "Connection",
    "DedupScope",
    "Galaxy",
    "Planet",
    "Universe",
    "generate_universe_cartography",
    "load_universe",
]
