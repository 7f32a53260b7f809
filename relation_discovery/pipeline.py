# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.

"""Batch runner — discovery for a list of entities, one after another.

Opens the HTTP transport, runs the orchestrator per entity and returns a
Result. The first DiscoveryError stops the run and becomes a Fail whose
context is the entity being processed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from relation_discovery.config import DiscoveryConfig
from relation_discovery.discovery import RelationDiscovery
from relation_discovery.errors import DiscoveryError
from relation_discovery.logger import RunSummary, get_logger
from relation_discovery.models import EntityId
from relation_discovery.result import Fail, Ok, Result
from relation_discovery.sparql.client import HttpTransport, SparqlExecutor, Transport

log = get_logger(__name__)


async def _discover_all(
    discovery: RelationDiscovery,
    entity_ids: Sequence[EntityId],
    properties_only: bool,
) -> Result[dict[str, list[Any]]]:
    output: dict[str, list[Any]] = {}
    counter = discovery.summary.counter("entities")

    for entity_id in entity_ids:
        try:
            if properties_only:
                output[entity_id] = list(await discovery.fetch_relating_properties(entity_id))
            else:
                statements = await discovery.discover_related_statements(entity_id)
                output[entity_id] = [s.to_dict() for s in statements]
        except DiscoveryError as exc:
            counter.failed += 1
            log.error("Discovery failed for %s: %s", entity_id, exc)
            return Fail.from_exception(exc, context=entity_id)
        counter.ok += 1

    return Ok(data=output)


async def run_discovery(
    config: DiscoveryConfig,
    entity_ids: Sequence[EntityId],
    properties_only: bool = False,
    transport: Transport | None = None,
    summary: RunSummary | None = None,
) -> Result[dict[str, list[Any]]]:
    """Discover relations for every entity, keyed by entity id.

    Args:
        config: Endpoint, limits and prefixes.
        entity_ids: Entities to process, in order.
        properties_only: Return relating properties instead of statements.
        transport: Transport to use; an HttpTransport is opened when omitted.
        summary: Counters to fill; a fresh one is used when omitted.
    """
    summary = summary or RunSummary()

    if transport is not None:
        discovery = RelationDiscovery(SparqlExecutor(transport, config), config, summary)
        result = await _discover_all(discovery, entity_ids, properties_only)
    else:
        async with HttpTransport(
            timeout=config.sparql.timeout,
            user_agent=config.sparql.user_agent,
        ) as http:
            discovery = RelationDiscovery(SparqlExecutor(http, config), config, summary)
            result = await _discover_all(discovery, entity_ids, properties_only)

    log.info(summary.report())
    return result
