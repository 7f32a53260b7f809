# SPDX-License-Identifier: MIT
"""
█████╗ ██████╗  █████╗ ███████╗
██╔══██╗██╔══██╗██╔══██╗██╔════╝
███████║██████╔╝███████║███████╗
██╔══██║██╔══██╗██╔══██║╚════██║
██║  ██║██║  ██║██║  ██║███████║
╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>

Licensed under the MIT License.
See LICENSE and THIRD_PARTY_LICENSES for details.

Relation Discovery — CLI

Asks a SPARQL endpoint which entities the given entities link to and
prints the normalized statements as JSON.

Probe -> (Properties -> Per-property fan-out) -> JSON

Usage: relation-discovery --entity=http://www.wikidata.org/entity/Q42
       python -m relation_discovery --config=discovery.yaml --entity=... --entity=...
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from relation_discovery.config import DiscoveryConfig, load_config
from relation_discovery.logger import get_logger
from relation_discovery.models import EntityId
from relation_discovery.pipeline import run_discovery

log = get_logger("main")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="relation-discovery",
        description="Discover statements relating entities to others via SPARQL",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (default: built-in settings)",
    )
    parser.add_argument(
        "--entity",
        action="append",
        required=True,
        help="Entity URI to inspect; repeat for several entities",
    )
    parser.add_argument(
        "--properties-only",
        action="store_true",
        help="Print relating properties instead of statements",
    )
    args = parser.parse_args(argv)

    config = DiscoveryConfig()
    if args.config is not None:
        cfg_result = load_config(args.config.resolve())
        if not cfg_result.ok:
            log.error(cfg_result.error)
            return 1
        config = cfg_result.data

    log.info("Endpoint: %s", config.sparql.endpoint)

    entity_ids = [EntityId(e) for e in args.entity]
    result = asyncio.run(run_discovery(config, entity_ids, properties_only=args.properties_only))
    if not result.ok:
        log.error("Discovery failed for %s: %s", result.context, result.error)
        return 1

    json.dump(result.data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
