"""Command line harness for the relation graph engine.

Usage:
  python -m cartography top stackoverflow python -n 5
  python -m cartography path stackoverflow python linux
  python -m cartography summary
  python -m cartography export universe.json
"""

import argparse
import json
import logging
import sys

from .dataset_loader import DatasetLoadError
from .universe import DedupScope, Universe, load_universe


def cmd_top(universe: Universe, args) -> None:
    if args.domain not in universe.galaxies:
        print(f"Unknown domain: {args.domain}")
        return
    tags = universe.top_n(args.domain, args.tag, args.n)
    if not tags:
        print(f"No related tags for '{args.tag}' in {args.domain}")
        return
    print(f"\nTop {len(tags)} tags related to '{args.tag}' ({args.domain}):")
    for i, t in enumerate(tags, 1):
        print(f"  {i}. {t.name} ({t.count})")


def cmd_path(universe: Universe, args) -> None:
    result = universe.shortest_path(args.domain, args.start, args.goal)
    if result is None:
        print(f"No path found from '{args.start}' to '{args.goal}' in {args.domain}")
        return
    path, cost = result
    print(" -> ".join(t.name for t in path))
    print(f"Cost: {cost} ({len(path) - 1} hops)")


def cmd_summary(universe: Universe, args) -> None:
    print("\n=== Universe ===\n")
    print(f"Galaxies: {len(universe.galaxies)}")
    for name in sorted(universe.galaxies):
        tags = len(universe.relations[name].relation_map)
        print(f"  - {name}: {tags} tags")
    print(f"Planets: {len(universe.planets)}")
    print(f"Connections: {sum(1 for _ in universe.connections())}")
    print(f"Dedup scope: {universe.dedup_scope.value}")


def cmd_export(universe: Universe, args) -> None:
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(universe.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    print(f"Wrote {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartography",
        description="Query tag co-occurrence graphs across Stack Exchange domains",
    )
    parser.add_argument("--datasets", help="Directory with one JSON file per domain")
    parser.add_argument(
        "--skip-malformed",
        action="store_true",
        default=None,
        help="Skip bad dataset files instead of aborting",
    )
    parser.add_argument(
        "--dedup-scope",
        choices=[s.value for s in DedupScope],
        help="Explored-set scope when merging domains",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show load progress")

    sub = parser.add_subparsers(dest="command", required=True)

    top = sub.add_parser("top", help="Most strongly related tags")
    top.add_argument("domain")
    top.add_argument("tag")
    top.add_argument("-n", type=int, default=10, help="Number of tags (default 10)")
    top.set_defaults(func=cmd_top)

    path = sub.add_parser("path", help="Cheapest path between two tags")
    path.add_argument("domain")
    path.add_argument("start")
    path.add_argument("goal")
    path.set_defaults(func=cmd_path)

    summary = sub.add_parser("summary", help="Galaxy, planet and connection counts")
    summary.set_defaults(func=cmd_summary)

    export = sub.add_parser("export", help="Write the merged model as JSON")
    export.add_argument("output")
    export.set_defaults(func=cmd_export)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        universe = load_universe(
            relation_dir=args.datasets,
            skip_malformed=args.skip_malformed,
            dedup_scope=args.dedup_scope,
        )
    except (DatasetLoadError, ValueError) as e:
        print(f"❌ Failed to load datasets: {e}")
        return 1

    try:
        args.func(universe, args)
    except OSError as e:
        print(f"❌ {args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
