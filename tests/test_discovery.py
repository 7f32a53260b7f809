from __future__ import annotations

import pytest

from relation_discovery.config import DiscoveryConfig
from relation_discovery.discovery import RelationDiscovery
from relation_discovery.errors import MalformedResponseError, TransportError
from relation_discovery.models import Rank
from relation_discovery.sparql.client import SparqlExecutor

from .conftest import ENTITY, STATEMENT, FakeTransport, row, table

E1 = ENTITY + "E1"
E2 = ENTITY + "E2"
P1 = ENTITY + "P1"
P2 = ENTITY + "P2"


def _kind(query: str) -> str:
    if "owl:ObjectProperty" in query:
        return "probe"
    if "SELECT DISTINCT ?property WHERE" in query:
        return "properties"
    for prop in (P1, P2):
        if f"BIND(<{prop}> AS ?property)" in query:
            return prop
    raise AssertionError(f"unexpected query: {query}")


def _rows(prefix: str, count: int, prop: str = P1) -> list[dict]:
    return [row(f"{ENTITY}{prefix}{i}", f"{STATEMENT}{prefix}{i}-guid-{i}", prop) for i in range(count)]


class Endpoint:
    """In-memory endpoint keyed by query kind."""

    def __init__(self, answers: dict[str, list[dict]], failures: dict[str, Exception] | None = None):
        self.answers = answers
        self.failures = failures or {}

    def __call__(self, query: str):
        kind = _kind(query)
        if kind in self.failures:
            raise self.failures[kind]
        return table(self.answers[kind])


def _discovery(transport: FakeTransport, config: DiscoveryConfig) -> RelationDiscovery:
    return RelationDiscovery(SparqlExecutor(transport, config), config)


@pytest.mark.asyncio
async def test_small_probe_is_final(config):
    probe_rows = _rows("Q", 5)
    transport = FakeTransport(Endpoint({"probe": probe_rows}))

    statements = await _discovery(transport, config).discover_related_statements(E1)

    assert len(transport.calls) == 1
    assert "LIMIT" not in transport.queries[0]
    assert [s.item for s in statements] == [ENTITY + f"Q{i}" for i in range(5)]
    assert [s.statement for s in statements] == [f"Q{i}$guid-{i}" for i in range(5)]
    assert all(s.rank is Rank.PREFERRED for s in statements)


@pytest.mark.asyncio
async def test_probe_at_ceiling_fans_out_per_property(config):
    transport = FakeTransport(
        Endpoint(
            {
                "probe": _rows("X", 101),
                "properties": [{"property": {"type": "uri", "value": P1}}, {"property": {"type": "uri", "value": P2}}],
                P1: _rows("A", 3, P1),
                P2: _rows("B", 4, P2),
            }
        ),
        # property 1 answers last
        delay=lambda q: 0.02 if P1 in q and "BIND" in q else 0.0,
    )

    statements = await _discovery(transport, config).discover_related_statements(E2)

    assert len(transport.calls) == 1 + 1 + 2
    assert len(statements) == 7
    assert [s.property for s in statements] == [P1] * 3 + [P2] * 4
    assert [s.item for s in statements[:3]] == [ENTITY + f"A{i}" for i in range(3)]
    assert [s.item for s in statements[3:]] == [ENTITY + f"B{i}" for i in range(4)]
    per_property = [q for q in transport.queries if _kind(q) in (P1, P2)]
    assert len(per_property) == 2
    assert all(q.rstrip().endswith("LIMIT 101") for q in per_property)


@pytest.mark.asyncio
async def test_probe_just_below_ceiling_does_not_fan_out(small_config):
    transport = FakeTransport(Endpoint({"probe": _rows("Q", 2)}))

    statements = await _discovery(transport, small_config).discover_related_statements(E1)

    assert len(statements) == 2
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_fan_out_respects_concurrency_ceiling(small_config):
    props = [ENTITY + f"P{i}" for i in range(1, 3)]
    transport = FakeTransport(
        Endpoint(
            {
                "probe": _rows("X", 3),
                "properties": [{"property": {"type": "uri", "value": p}} for p in props],
                P1: _rows("A", 1, P1),
                P2: _rows("B", 1, P2),
            }
        ),
        delay=lambda q: 0.01,
    )

    statements = await _discovery(transport, small_config).discover_related_statements(E2)

    assert len(statements) == 2
    assert transport.peak <= small_config.limits.max_simultaneous_requests


@pytest.mark.asyncio
async def test_fan_out_with_no_properties_returns_empty(small_config):
    transport = FakeTransport(Endpoint({"probe": _rows("X", 3), "properties": []}))

    assert await _discovery(transport, small_config).discover_related_statements(E2) == []
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_fan_out_failure_aborts_whole_call(config):
    boom = TransportError("SPARQL HTTP 429: Too Many Requests", status=429)
    transport = FakeTransport(
        Endpoint(
            {
                "probe": _rows("X", 101),
                "properties": [{"property": {"type": "uri", "value": P1}}, {"property": {"type": "uri", "value": P2}}],
                P1: _rows("A", 3, P1),
            },
            failures={P2: boom},
        )
    )
    discovery = _discovery(transport, config)

    with pytest.raises(TransportError) as info:
        await discovery.discover_related_statements(E2)

    assert info.value is boom
    assert discovery.summary.counter("fan_out").failed == 1


@pytest.mark.asyncio
async def test_probe_failure_propagates(config):
    transport = FakeTransport(Endpoint({}, failures={"probe": MalformedResponseError("bad")}))
    discovery = _discovery(transport, config)

    with pytest.raises(MalformedResponseError):
        await discovery.discover_related_statements(E1)
    assert discovery.summary.counter("probe").failed == 1


@pytest.mark.asyncio
async def test_fetch_relating_properties(config):
    transport = FakeTransport(
        Endpoint({"properties": [{"property": {"type": "uri", "value": P2}}, {"property": {"type": "uri", "value": P1}}]})
    )

    assert await _discovery(transport, config).fetch_relating_properties(E1) == [P2, P1]


@pytest.mark.asyncio
async def test_fetch_property_subjects_and_objects(config):
    answer = table([{"p": {"type": "uri", "value": E1}, "pLabel": {"type": "literal", "value": "Entity one"}}])
    transport = FakeTransport(lambda q: answer)
    discovery = _discovery(transport, config)

    subjects = await discovery.fetch_property_subjects(P1, limit=5, entity_id=E2)
    objects = await discovery.fetch_property_objects(P1, entity_id=E2)

    assert [(v.entity_id, v.label) for v in subjects] == [(E1, "Entity one")]
    assert [v.to_dict() for v in objects] == [{"entity_id": E1, "label": "Entity one"}]
    assert f"?p <{P1}> <{E2}> ." in transport.queries[0]
    assert f"<{E2}> <{P1}> ?p ." in transport.queries[1]


@pytest.mark.asyncio
async def test_unbounded_pass_rows_carry_no_property(config):
    # the probe projects ?item ?statement ?entity only
    probe_rows = [
        {"item": {"type": "uri", "value": ENTITY + "Q5"}, "statement": {"type": "literal", "value": "human"},
         "entity": {"type": "uri", "value": E1}},
    ]
    transport = FakeTransport(Endpoint({"probe": probe_rows}))

    [statement] = await _discovery(transport, config).discover_related_statements(E1)

    assert (statement.item, statement.statement, statement.property) == (ENTITY + "Q5", "human", "")


@pytest.mark.asyncio
async def test_malformed_binding_cell_raises_malformed_response(config):
    transport = FakeTransport(Endpoint({"probe": [{"item": "not-an-object"}]}))

    with pytest.raises(MalformedResponseError):
        await _discovery(transport, config).discover_related_statements(E1)
