"""Command line: transform a saved world-data response into GeoJSON files.

    python -m gw2map region.json --out build/ --lang de --extra-layers jumpingpuzzle_icon

Writes one <layer>.geojson per non-empty layer plus rects.json with the
continent rectangle of every map.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from gw2map.app import build_map
from gw2map.config import settings
from gw2map.world.tables import StaticTables, load_tables, read_json
from gw2map.world.transformer import InvalidResponseShape


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gw2map",
        description="Transform a GW2 floor/region response into per-layer GeoJSON",
    )
    parser.add_argument("response", type=Path, help="World-data JSON (regions, region or map)")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--lang", type=str, default="", help="Language code or index")
    parser.add_argument("--extra-layers", type=str, default="", help="Comma separated layer names")
    parser.add_argument("--data-dir", type=Path, default=None, help="Static tables directory")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    data_dir = args.data_dir or settings.data_dir
    tables = load_tables(data_dir) if data_dir.is_dir() else StaticTables()

    try:
        response = read_json(args.response)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.response}: {e}")
        return 1

    attributes = {"language": args.lang, "extra_layers": args.extra_layers}
    try:
        store = build_map(response, attributes, tables, settings).store
    except InvalidResponseShape as e:
        logger.error(str(e))
        return 2

    args.out.mkdir(parents=True, exist_ok=True)
    for key, collection in store.to_geojson().items():
        path = args.out / f"{key}.geojson"
        path.write_text(json.dumps(collection, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Wrote {path} ({len(collection['features'])} features)")

    rects = {str(map_id): rect.to_dict() for map_id, rect in store.map_rects.items()}
    (args.out / "rects.json").write_text(json.dumps(rects), encoding="utf-8")
    return 0


if __name__ == "__main__":
    sys.exit(main())
