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

"""Errors raised by the discovery core.

None of these are recovered inside the core. They reach the caller as-is;
``pipeline.run_discovery`` is where they become ``Fail`` results.
"""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for every error the discovery core raises."""


class TransportError(DiscoveryError):
    """The remote call failed: network error, timeout, or non-2xx status."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class MalformedResponseError(DiscoveryError):
    """The response body is not a SPARQL JSON result table."""

    def __init__(self, message: str, context: str | None = None) -> None:
        super().__init__(message)
        self.context = context


class UnrecognizedRankError(DiscoveryError):
    """A rank value is none of PreferredRank, NormalRank, DeprecatedRank."""

    def __init__(self, rank: str) -> None:
        super().__init__(f"unknown rank value {rank!r}")
        self.rank = rank
