#!/usr/bin/env python3
"""
Ingest a site source directory

Reads content/, layouts/ and includes/ under the source root and prints a
summary of the resulting collections. Parameters come from the environment
(see sitesource.settings) and can be overridden with flags.

Usage:
    python scripts/ingest.py
    python scripts/ingest.py --source-root site/src --attribute-syntax json
    python scripts/ingest.py --list
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sitesource.exceptions import SourceException
from sitesource.ingest import ingest_source
from sitesource.logging_config import setup_logging
from sitesource.settings import settings


def build_params(args: argparse.Namespace) -> dict:
    params = settings.as_params()
    if args.source_root:
        params["source_root"] = args.source_root
    if args.attribute_syntax:
        params["attribute_syntax"] = args.attribute_syntax
    if args.include:
        params["include"] = args.include
    if args.exclude:
        params["exclude"] = args.exclude
    return params


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ingest a site source directory")
    parser.add_argument("--source-root", help="Directory holding content/, layouts/, includes/")
    parser.add_argument("--attribute-syntax", help="yaml or json")
    parser.add_argument("--include", action="append", help="Force-include a path (repeatable)")
    parser.add_argument("--exclude", action="append", help="Force-exclude a path (repeatable)")
    parser.add_argument("--list", action="store_true", help="List every item id")
    args = parser.parse_args(argv)

    setup_logging()
    logger = logging.getLogger(__name__)

    params = build_params(args)
    logger.info(f"Source root: {params['source_root']}")

    try:
        result = ingest_source(params)
    except SourceException as e:
        logger.error(f"Ingestion failed: {e.message}")
        return 1

    print(f"Items:    {len(result.items)}")
    print(f"Layouts:  {len(result.layouts)}")
    print(f"Includes: {len(result.includes)}")
    print(f"Binary:   {result.stats.binary_files}")

    if args.list:
        for label, collection in (
            ("item", result.items),
            ("layout", result.layouts),
            ("include", result.includes),
        ):
            for item_id, item in collection.items():
                marker = " (binary)" if item.is_binary else ""
                print(f"  {label:<8} {item_id}{marker}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
