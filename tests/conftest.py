from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from relation_discovery.config import DiscoveryConfig, LimitsConfig
from relation_discovery.sparql.client import TransportResponse

ENTITY = "http://www.wikidata.org/entity/"
STATEMENT = "http://www.wikidata.org/entity/statement/"


def uri(value: str) -> dict[str, str]:
    return {"type": "uri", "value": value}


def row(item: str | None = None, statement: str | None = None, prop: str | None = None) -> dict:
    binding: dict[str, dict[str, str]] = {}
    if item is not None:
        binding["item"] = uri(item)
    if statement is not None:
        binding["statement"] = uri(statement)
    if prop is not None:
        binding["property"] = uri(prop)
    return binding


def table(rows: list[dict]) -> dict[str, Any]:
    return {"head": {"vars": []}, "results": {"bindings": rows}}


class FakeTransport:
    """Answers queries through ``responder`` and records what was asked.

    ``delay`` maps a query to seconds of simulated latency.
    """

    def __init__(
        self,
        responder: Callable[[str], Any],
        delay: Callable[[str], float] | None = None,
    ) -> None:
        self.responder = responder
        self.delay = delay
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.in_flight = 0
        self.peak = 0

    @property
    def queries(self) -> list[str]:
        return [params["query"] for _, params in self.calls]

    async def get(self, url: str, params: Mapping[str, str]) -> TransportResponse:
        self.calls.append((url, dict(params)))
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            if self.delay is not None:
                await asyncio.sleep(self.delay(params["query"]))
            else:
                await asyncio.sleep(0)
            return TransportResponse(data=self.responder(params["query"]))
        finally:
            self.in_flight -= 1


@pytest.fixture
def config() -> DiscoveryConfig:
    return DiscoveryConfig()


@pytest.fixture
def small_config() -> DiscoveryConfig:
    return DiscoveryConfig(limits=LimitsConfig(max_related_batch=3, max_simultaneous_requests=2))
