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

"""SPARQL result processor — turns result bindings into Statement records.

An unbound variable is a normal SPARQL outcome (OPTIONAL patterns), so
absent values become empty strings rather than errors.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from relation_discovery.config import PrefixConfig
from relation_discovery.errors import UnrecognizedRankError
from relation_discovery.models import Binding, EntityId, PropertyValue, Rank, Statement

SparqlValue = Mapping[str, str] | None

_RANKS = {
    "PreferredRank": Rank.PREFERRED,
    "NormalRank": Rank.NORMAL,
    "DeprecatedRank": Rank.DEPRECATED,
}


def entity_value(value: SparqlValue) -> EntityId:
    if value:
        return EntityId(value.get("value", ""))
    return EntityId("")


def statement_value(value: SparqlValue, prefix: str) -> str:
    """Statement id with the statement namespace removed."""
    if not value:
        return ""
    raw = value.get("value", "")
    if raw.startswith(prefix):
        return raw[len(prefix):]
    return raw


def claim_guid(statement_id: str) -> str:
    """``Q1-abcd-1234`` → ``Q1$abcd-1234``: only the first dash changes."""
    return statement_id.replace("-", "$", 1)


def strip_entity_prefix(value: SparqlValue, prefix: str) -> EntityId:
    """Entity value without its namespace (``.../entity/Q42`` → ``Q42``)."""
    entity = entity_value(value)
    if entity.startswith(prefix):
        return EntityId(entity[len(prefix):])
    return entity


def rank_value(value: SparqlValue, prefix: str) -> Rank:
    """Decode a ``wikibase:rank`` URI into a Rank.

    Raises:
        UnrecognizedRankError: for anything other than the three known ranks.
    """
    raw = value.get("value", "") if value else ""
    name = raw[len(prefix):] if raw.startswith(prefix) else raw
    try:
        return _RANKS[name]
    except KeyError:
        raise UnrecognizedRankError(name) from None


def statements_from_bindings(
    bindings: Iterable[Binding],
    prefixes: PrefixConfig,
) -> list[Statement]:
    # Rank is not selected by the active queries; every relation is preferred.
    return [
        Statement(
            item=entity_value(binding.get("item")),
            statement=claim_guid(statement_value(binding.get("statement"), prefixes.statement)),
            property=entity_value(binding.get("property")),
            rank=Rank.PREFERRED,
        )
        for binding in bindings
    ]


def properties_from_bindings(bindings: Iterable[Binding]) -> list[EntityId]:
    return [entity_value(binding.get("property")) for binding in bindings]


def property_values_from_bindings(
    bindings: Iterable[Binding],
    result_variable: str = "p",
) -> list[PropertyValue]:
    label_variable = f"{result_variable}Label"
    return [
        PropertyValue(
            entity_id=entity_value(binding.get(result_variable)),
            label=entity_value(binding.get(label_variable)),
        )
        for binding in bindings
    ]
