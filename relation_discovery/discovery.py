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

"""Relation discovery orchestrator.

Two phases at most:
  1. Probe: one query for every relation of the entity.
  2. Fan-out, only when the probe hit the batch ceiling: list the relating
     properties, then one bounded query per property, run concurrently.

No retries, no re-probing. Errors from any query abort the whole call.
"""

from __future__ import annotations

from relation_discovery.config import DiscoveryConfig
from relation_discovery.logger import RunSummary, get_logger
from relation_discovery.models import EntityId, PropertyValue, Statement
from relation_discovery.sparql.client import SparqlExecutor
from relation_discovery.sparql.processor import (
    properties_from_bindings,
    property_values_from_bindings,
    statements_from_bindings,
)
from relation_discovery.sparql.queries import (
    per_property_relations_query,
    property_objects_query,
    property_subjects_query,
    relating_properties_query,
    relation_probe_query,
)

log = get_logger(__name__)


class RelationDiscovery:
    """Finds the statements relating an entity to other entities."""

    def __init__(
        self,
        executor: SparqlExecutor,
        config: DiscoveryConfig,
        summary: RunSummary | None = None,
    ) -> None:
        self._executor = executor
        self._config = config
        self._summary = summary or RunSummary()

    @property
    def summary(self) -> RunSummary:
        return self._summary

    async def discover_related_statements(self, entity_id: EntityId) -> list[Statement]:
        """All statements relating ``entity_id`` to other entities.

        A probe returning fewer rows than ``max_related_batch`` is complete.
        Otherwise the probe may be truncated and relations are fetched per
        property instead, concatenated in property order.
        """
        limits = self._config.limits
        prefixes = self._config.prefixes

        log.info("── Probe: %s ──", entity_id)
        probe = self._summary.counter("probe")
        try:
            rows = await self._executor.execute_one(relation_probe_query(entity_id, limits.probe_limit))
        except Exception:
            probe.failed += 1
            raise
        probe.ok += 1

        if len(rows) < limits.max_related_batch:
            log.info("Probe complete for %s: %d statements", entity_id, len(rows))
            return statements_from_bindings(rows, prefixes)

        log.info(
            "Probe for %s returned %d rows (ceiling %d), fetching per property",
            entity_id,
            len(rows),
            limits.max_related_batch,
        )
        properties = await self.fetch_relating_properties(entity_id)

        fan_out = self._summary.counter("fan_out")
        queries = [
            per_property_relations_query(entity_id, property_id, limits.max_related_batch)
            for property_id in properties
        ]
        try:
            results = await self._executor.execute_many(queries)
        except Exception:
            fan_out.failed += 1
            raise
        fan_out.ok += 1

        statements: list[Statement] = []
        for bindings in results:
            statements.extend(statements_from_bindings(bindings, prefixes))
        log.info("Fan-out for %s: %d properties, %d statements", entity_id, len(properties), len(statements))
        return statements

    async def fetch_relating_properties(self, entity_id: EntityId) -> list[EntityId]:
        """Distinct properties for which ``entity_id`` is a subject."""
        counter = self._summary.counter("properties")
        try:
            rows = await self._executor.execute_one(relating_properties_query(entity_id))
        except Exception:
            counter.failed += 1
            raise
        counter.ok += 1
        properties = properties_from_bindings(rows)
        log.info("Found %d relating properties for %s", len(properties), entity_id)
        return properties

    async def fetch_property_subjects(
        self,
        property_id: EntityId,
        limit: int | None = None,
        entity_id: EntityId | None = None,
    ) -> list[PropertyValue]:
        """Labelled subjects ``?p`` of ``?p <property> <entity>``."""
        rows = await self._executor.execute_one(property_subjects_query(property_id, entity_id, limit))
        return property_values_from_bindings(rows)

    async def fetch_property_objects(
        self,
        property_id: EntityId,
        limit: int | None = None,
        entity_id: EntityId | None = None,
    ) -> list[PropertyValue]:
        """Labelled objects ``?p`` of ``<entity> <property> ?p``."""
        rows = await self._executor.execute_one(property_objects_query(property_id, entity_id, limit))
        return property_values_from_bindings(rows)
