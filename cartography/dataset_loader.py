"""Dataset loader for per-domain tag relation files.

Each file in the datasets directory holds one domain, named after the file
(stackoverflow.json -> "stackoverflow"):

    {
        "python": [{"t": "django", "n": 1234}, {"t": "pandas", "n": 987}],
        ...
    }

Records use the short keys t/n (name/count); the long keys are accepted too.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .relation_graph import ConnectedTag, MetaRelation, merge_relations

logger = logging.getLogger(__name__)

NAME_KEYS = ("t", "name")
COUNT_KEYS = ("n", "count")


class CartographyError(Exception):
    """Base class for errors raised by the cartography package."""


class DatasetLoadError(CartographyError):
    """A dataset file could not be read or does not match the expected schema."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


def domain_from_filename(filename: str) -> str:
    """Get the domain name from a dataset file name (text before the first '.')."""
    return filename.split(".")[0]


def _pick(record: dict, keys: tuple[str, ...]):
    """Return the value of the first key present in the record, or None."""
    for key in keys:
        if key in record:
            return record[key]
    return None


def _parse_record(record, tag: str, path: Path) -> ConnectedTag:
    """Validate one {t, n} record."""
    if not isinstance(record, dict):
        raise DatasetLoadError(path, f"record under {tag!r} is not an object: {record!r}")

    name = _pick(record, NAME_KEYS)
    count = _pick(record, COUNT_KEYS)

    if not isinstance(name, str):
        raise DatasetLoadError(path, f"record under {tag!r} has no tag name: {record!r}")
    # bool is a subclass of int
    if isinstance(count, bool) or not isinstance(count, int):
        raise DatasetLoadError(path, f"record under {tag!r} has no integer count: {record!r}")

    return ConnectedTag(name=name, count=count)


def parse_relation_map(data, path: Path) -> dict[str, list[ConnectedTag]]:
    """Validate decoded JSON and convert it to a relation map.

    Records with a count of zero or less are dropped, since their edge
    weight would be undefined.

    Args:
        data: Decoded JSON content
        path: File the data came from (for messages)

    Returns:
        Tag name -> related tags, in file order

    Raises:
        DatasetLoadError: If the content does not match the schema.
    """
    if not isinstance(data, dict):
        raise DatasetLoadError(path, "top level is not a JSON object")

    relation_map = {}
    dropped = 0
    for tag, records in data.items():
        if not isinstance(records, list):
            raise DatasetLoadError(path, f"value of {tag!r} is not a list")

        connected_tags = []
        for record in records:
            connected = _parse_record(record, tag, path)
            if connected.count <= 0:
                dropped += 1
                continue
            connected_tags.append(connected)
        relation_map[tag] = connected_tags

    if dropped:
        logger.warning("Dropped %d record(s) with non-positive count from %s", dropped, path.name)

    return relation_map


def load_relation_file(
    json_path: Union[str, Path],
    domain: Optional[str] = None,
) -> MetaRelation:
    """Load one dataset file into a MetaRelation.

    Args:
        json_path: Path to the domain's JSON file
        domain: Domain name, defaults to the file name without extension

    Returns:
        MetaRelation with neighbour lists sorted by count

    Raises:
        DatasetLoadError: If the file cannot be read or parsed.
    """
    path = Path(json_path)
    domain = domain or domain_from_filename(path.name)

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DatasetLoadError(path, f"cannot open file ({e})") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DatasetLoadError(path, f"invalid JSON ({e})") from e

    return MetaRelation(domain, parse_relation_map(data, path))


def get_all_relations(
    relation_dir: Union[str, Path],
    skip_malformed: bool = False,
) -> list[MetaRelation]:
    """Load every dataset file in a directory.

    Args:
        relation_dir: Directory with one JSON file per domain
        skip_malformed: Log and skip bad files instead of failing

    Returns:
        One MetaRelation per domain, in file name order; files sharing a
        domain are merged

    Raises:
        DatasetLoadError: If the directory cannot be listed, or a file is bad
            and skip_malformed is off.
    """
    relation_dir = Path(relation_dir)
    try:
        entries = sorted(relation_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DatasetLoadError(relation_dir, f"cannot list directory ({e})") from e

    meta_relations = []
    for entry in entries:
        if entry.name.startswith(".") or not entry.is_file():
            continue

        domain = domain_from_filename(entry.name)
        logger.info("[READING] Domain: %s @ %s", domain, entry)

        try:
            meta_relations.append(load_relation_file(entry, domain))
        except DatasetLoadError as e:
            if not skip_malformed:
                raise
            logger.warning("Skipping malformed dataset %s", e)

    # so.json and so.2023.json both feed the "so" domain
    return merge_relations(meta_relations)
