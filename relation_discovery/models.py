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

"""Records produced by relation discovery."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NewType

EntityId = NewType("EntityId", str)

# One SPARQL JSON result row: variable name → {"type": ..., "value": ...}.
Binding = dict[str, dict[str, str]]


class Rank(str, Enum):
    PREFERRED = "preferred"
    NORMAL = "normal"
    DEPRECATED = "deprecated"


@dataclass(frozen=True, slots=True)
class Statement:
    """One relation between the queried entity and ``item``."""

    item: EntityId
    statement: str
    property: EntityId
    rank: Rank

    def to_dict(self) -> dict[str, str]:
        return {
            "item": self.item,
            "statement": self.statement,
            "property": self.property,
            "rank": self.rank.value,
        }


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """A subject or object of a property, with its label."""

    entity_id: EntityId
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"entity_id": self.entity_id, "label": self.label}
