#!/usr/bin/env python
"""
Trait search CLI that matches the API stack.
- Builds the same CatalogSearchService as the API from configs/runtime.yaml, so rankings are identical.
- Accepts the same parameters as the HTTP endpoints (q, name, description, tags, effects, limit).
- Pretty output by default, JSON lines with --json.

Usage:
  python -m scripts.query_traits --q "brave" --limit 3
  python -m scripts.query_traits --endpoint zoldy --q "^thunder" --json

Example:
  >>> python -m scripts.query_traits --name "iron"
   1  Iron Skin [defense, armor]  Hardened hide that turns aside light blows.
"""

import argparse
import json
import sys

from traitsearch.errors import SearchError
from traitsearch.factory import build_trait_service, load_runtime_config
from traitsearch.services.formatting import format_effect, format_snippet, format_tags


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Fuzzy search the trait catalogs")
    ap.add_argument("--config", default=None, help="runtime config (default: configs/runtime.yaml)")
    ap.add_argument("--data-dir", default=None, help="dataset root (default: data/)")
    ap.add_argument("--endpoint", default="traits", help="endpoint name from the runtime config")
    ap.add_argument("--q", help="global query across all weighted fields")
    ap.add_argument("--name")
    ap.add_argument("--description")
    ap.add_argument("--tags")
    ap.add_argument("--effects")
    ap.add_argument("--limit", help="max results (same policy as the endpoint)")
    ap.add_argument("--json", action="store_true", help="output JSON lines instead of pretty text")
    ap.add_argument("--show-effects", action="store_true", help="print effect lines under each trait")
    args = ap.parse_args(argv)

    cfg = load_runtime_config(args.config)
    service = build_trait_service(cfg, args.endpoint, data_dir=args.data_dir)

    query = {
        k: v
        for k, v in (
            ("q", args.q),
            ("name", args.name),
            ("description", args.description),
            ("tags", args.tags),
            ("effects", args.effects),
            ("limit", args.limit),
        )
        if v is not None
    }

    try:
        payload = service.search_service(query)
    except SearchError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    records = [r.model_dump(exclude_none=True) for r in payload["results"]]

    if args.json:
        for rec in records:
            print(json.dumps(rec, ensure_ascii=False))
        return 0

    print(f"# {payload['returned']} of {payload['total']} matches")
    for rank, rec in enumerate(records, 1):
        header = f"{rank:>2}  {rec['name']}"
        tags = format_tags(rec.get("tags", []))
        if tags:
            header = f"{header} {tags}"
        print(f"{header}  {format_snippet(rec.get('description', ''))}")
        if args.show_effects:
            for effect in rec.get("effects", []):
                print(f"     - {format_effect(effect)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
