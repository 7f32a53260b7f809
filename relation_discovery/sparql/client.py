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
"""Async SPARQL client: GET transport plus a bounded query executor.

The transport only knows how to GET a URL and decode JSON. The executor
knows the SPARQL JSON result shape and caps how many queries are in
flight against the endpoint at once.
"""

from __future__ import annotations

import asyncio
import ssl
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import certifi
import httpx

from relation_discovery.config import DiscoveryConfig
from relation_discovery.errors import MalformedResponseError, TransportError
from relation_discovery.logger import get_logger
from relation_discovery.models import Binding

log = get_logger(__name__)

_ssl_ctx = ssl.create_default_context(cafile=certifi.where())


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Parsed JSON body of a successful GET."""

    data: Any


class Transport(Protocol):
    async def get(self, url: str, params: Mapping[str, str]) -> TransportResponse: ...


class HttpTransport:
    """GET transport on httpx.AsyncClient.

    Pass ``client`` to reuse an existing AsyncClient; it is then left open
    on ``aclose``.
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._timeout = timeout
        if client is None:
            headers = {"Accept": "application/sparql-results+json"}
            if user_agent:
                headers["User-Agent"] = user_agent
            client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(timeout),
                verify=_ssl_ctx,
                follow_redirects=True,
            )
        self._client = client

    async def get(self, url: str, params: Mapping[str, str]) -> TransportResponse:
        try:
            resp = await self._client.get(url, params=dict(params))
        except httpx.TimeoutException as exc:
            raise TransportError(f"SPARQL timeout after {self._timeout}s", url=url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"SPARQL connection error: {exc}", url=url) from exc

        if not resp.is_success:
            raise TransportError(
                f"SPARQL HTTP {resp.status_code}: {resp.reason_phrase}",
                url=url,
                status=resp.status_code,
            )

        try:
            return TransportResponse(data=resp.json())
        except ValueError as exc:
            raise MalformedResponseError(
                f"SPARQL response is not JSON: {exc}",
                context=resp.text[:500],
            ) from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def parse_bindings(data: Any) -> list[Binding]:
    """Pull ``results.bindings`` out of a SPARQL JSON result document."""
    try:
        bindings = data["results"]["bindings"]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(
            f"SPARQL result has no results.bindings: {exc!r}",
            context=repr(data)[:500],
        ) from exc

    if not isinstance(bindings, list) or not all(isinstance(row, dict) for row in bindings):
        raise MalformedResponseError(
            "SPARQL results.bindings is not a list of objects",
            context=repr(bindings)[:500],
        )

    for row in bindings:
        for variable, cell in row.items():
            if not isinstance(cell, dict) or not isinstance(cell.get("value"), str):
                raise MalformedResponseError(
                    f"SPARQL binding for ?{variable} has no string value",
                    context=repr(row)[:500],
                )
    return bindings


class SparqlExecutor:
    """Runs SPARQL queries against one endpoint, at most N at a time."""

    def __init__(self, transport: Transport, config: DiscoveryConfig) -> None:
        self._transport = transport
        self._endpoint = config.sparql.endpoint
        self._limit = config.limits.max_simultaneous_requests
        self._gate = asyncio.Semaphore(self._limit)
        self.in_flight = 0
        self.peak_in_flight = 0

    async def execute_one(self, query: str) -> list[Binding]:
        """GET one query and return its result rows.

        Raises:
            TransportError: the request failed or returned a non-2xx status.
            MalformedResponseError: the body is not a SPARQL result table.
        """
        log.info("SPARQL query → %s (%d chars)", self._endpoint, len(query))
        response = await self._transport.get(
            self._endpoint,
            params={"format": "json", "query": query},
        )
        bindings = parse_bindings(response.data)
        log.info("SPARQL returned %d bindings", len(bindings))
        return bindings

    async def _gated(self, query: str) -> list[Binding]:
        async with self._gate:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            try:
                return await self.execute_one(query)
            finally:
                self.in_flight -= 1

    async def execute_many(self, queries: Sequence[str]) -> list[list[Binding]]:
        """Run every query, ``result[i]`` answering ``queries[i]``.

        The first failure is raised unchanged and the other results are
        dropped. Nothing is cancelled: queries already running and queries
        still waiting for a slot both go on to run, so the transport must
        stay open until they finish or they fail against a closed client.
        """
        if not queries:
            return []
        log.info("Running %d SPARQL queries, at most %d at once", len(queries), self._limit)
        return list(await asyncio.gather(*(self._gated(q) for q in queries)))
