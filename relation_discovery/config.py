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

"""Endpoint, limit and URI-prefix settings as typed dataclasses.

Defaults live in the module constants below. A YAML file may override any
of them; sections it leaves out keep their defaults. The resulting
DiscoveryConfig is handed to the executor and orchestrator explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from relation_discovery.result import Fail, Ok, Result

SPARQL_ENDPOINT = "https://query.wikidata.org/sparql"
SPARQL_TIMEOUT = 30
USER_AGENT = "relation-discovery/0.1 (SPARQL relation fetcher)"

MAX_RELATED_BATCH = 101
MAX_SIMULTANEOUS_REQUESTS = 4

RANK_PREFIX = "http://wikiba.se/ontology#"
ENTITY_PREFIX = "http://www.wikidata.org/entity/"
STATEMENT_PREFIX = "http://www.wikidata.org/entity/statement/"
RANK_PREFIX_LEN = len(RANK_PREFIX)
ENTITY_PREFIX_LEN = len(ENTITY_PREFIX)
STATEMENT_PREFIX_LEN = len(STATEMENT_PREFIX)


# ── SPARQL ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class SparqlConfig:
    endpoint: str = SPARQL_ENDPOINT
    timeout: int = SPARQL_TIMEOUT
    user_agent: str = USER_AGENT


# ── Limits ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Batch ceiling, concurrency ceiling and probe bound.

    ``probe_limit`` 0 means the probe query carries no LIMIT clause.
    """
    max_related_batch: int = MAX_RELATED_BATCH
    max_simultaneous_requests: int = MAX_SIMULTANEOUS_REQUESTS
    probe_limit: int = 0


# ── Prefixes ───────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class PrefixConfig:
    entity: str = ENTITY_PREFIX
    statement: str = STATEMENT_PREFIX
    rank: str = RANK_PREFIX

    @property
    def entity_len(self) -> int:
        return len(self.entity)

    @property
    def statement_len(self) -> int:
        return len(self.statement)

    @property
    def rank_len(self) -> int:
        return len(self.rank)


# ── Top-level ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class DiscoveryConfig:
    sparql: SparqlConfig = field(default_factory=SparqlConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    prefixes: PrefixConfig = field(default_factory=PrefixConfig)


# ── Loader ─────────────────────────────────────────────────────

def _check_limits(limits: LimitsConfig) -> str | None:
    if limits.max_related_batch < 1:
        return "limits.max_related_batch must be >= 1"
    if limits.max_simultaneous_requests < 1:
        return "limits.max_simultaneous_requests must be >= 1"
    if limits.probe_limit < 0:
        return "limits.probe_limit must be >= 0"
    return None


def build_config(raw: dict[str, Any]) -> Result[DiscoveryConfig]:
    """Build a DiscoveryConfig from an already-parsed mapping."""
    try:
        config = DiscoveryConfig(
            sparql=SparqlConfig(**(raw.get("sparql") or {})),
            limits=LimitsConfig(**(raw.get("limits") or {})),
            prefixes=PrefixConfig(**(raw.get("prefixes") or {})),
        )
    except (AttributeError, TypeError) as exc:
        return Fail(error=f"Config structure error: {exc}")

    problem = _check_limits(config.limits)
    if problem:
        return Fail(error=f"Config value error: {problem}")

    return Ok(data=config)


def load_config(path: Path) -> Result[DiscoveryConfig]:
    """Load a YAML settings file into DiscoveryConfig."""
    if not path.exists():
        return Fail(error=f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path))

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return Fail(error="Config structure error: top level must be a mapping", context=str(path))

    result = build_config(raw)
    if not result.ok:
        return Fail(error=result.error, context=str(path))
    return result
