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

"""SPARQL query builders for relation discovery.

Each builder fills {{placeholder}} slots of a fixed template. Entity and
property ids are trusted URIs and go in verbatim as <uri> terms.
"""

from __future__ import annotations

from relation_discovery.models import EntityId

PREFIXES = """PREFIX rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX owl: <http://www.w3.org/2002/07/owl#>
"""

RELATION_PROBE = """SELECT DISTINCT ?item ?statement ?entity WHERE {
  <{{entity}}> ?property ?item .
  ?property rdf:type owl:ObjectProperty .
  BIND(str(?item) AS ?statement) .
  BIND(<{{entity}}> AS ?entity) .
  OPTIONAL { ?item rdfs:label ?statement . } .
}{{limit}}"""

RELATING_PROPERTIES = """SELECT DISTINCT ?property WHERE {
  <{{entity}}> ?property ?item .
}"""

PER_PROPERTY_RELATIONS = """SELECT DISTINCT ?item ?statement ?property WHERE {
  BIND(<{{property}}> AS ?property) .
  ?statement <{{property}}> <{{entity}}> .
  ?item <{{property}}> ?statement .
}{{limit}}"""

PROPERTY_SUBJECTS = """SELECT ?{{var}} ?{{var}}Label WHERE {
  ?{{var}} <{{property}}> {{object}} .
  ?{{var}} rdfs:label ?{{var}}Label .
}{{limit}}"""

PROPERTY_OBJECTS = """SELECT ?{{var}} ?{{var}}Label WHERE {
  {{subject}} <{{property}}> ?{{var}} .
  ?{{var}} rdfs:label ?{{var}}Label .
}{{limit}}"""


def render_template(template: str, variables: dict[str, str]) -> str:
    """Replace all {{key}} placeholders in template with variable values."""
    rendered = template
    for key, value in variables.items():
        rendered = rendered.replace("{{" + key + "}}", value)
    return rendered


def limit_clause(limit: int | None) -> str:
    """``LIMIT n`` on its own line, or nothing for 0/None."""
    return f"\nLIMIT {limit}" if limit else ""


def _term(entity_id: EntityId | None) -> str:
    # blank node stands in for "any entity"
    return f"<{entity_id}>" if entity_id else "[]"


def relation_probe_query(entity_id: EntityId, limit: int) -> str:
    """Entities the given entity points to through an object property.

    ``limit`` 0 renders an unbounded query.
    """
    return PREFIXES + render_template(
        RELATION_PROBE,
        {"entity": entity_id, "limit": limit_clause(limit)},
    )


def relating_properties_query(entity_id: EntityId) -> str:
    """Distinct properties for which the entity is a subject."""
    return PREFIXES + render_template(RELATING_PROPERTIES, {"entity": entity_id})


def per_property_relations_query(entity_id: EntityId, property_id: EntityId, limit: int) -> str:
    return PREFIXES + render_template(
        PER_PROPERTY_RELATIONS,
        {"entity": entity_id, "property": property_id, "limit": limit_clause(limit)},
    )


def property_subjects_query(
    property_id: EntityId,
    object_id: EntityId | None = None,
    limit: int | None = None,
    result_variable: str = "p",
) -> str:
    """Labelled subjects of ``property_id``, optionally pinned to one object."""
    return PREFIXES + render_template(
        PROPERTY_SUBJECTS,
        {
            "var": result_variable,
            "property": property_id,
            "object": _term(object_id),
            "limit": limit_clause(limit),
        },
    )


def property_objects_query(
    property_id: EntityId,
    subject_id: EntityId | None = None,
    limit: int | None = None,
    result_variable: str = "p",
) -> str:
    """Labelled objects of ``property_id``, optionally pinned to one subject."""
    return PREFIXES + render_template(
        PROPERTY_OBJECTS,
        {
            "var": result_variable,
            "property": property_id,
            "subject": _term(subject_id),
            "limit": limit_clause(limit),
        },
    )
