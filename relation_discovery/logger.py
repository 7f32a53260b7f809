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

"""Logger factory plus per-phase counters for discovery runs.

Discovery phases (probe, properties, fan-out) bump their counters so a
batch run can print one summary block when it finishes.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

_FMT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger configured with a consistent format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FMT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


@dataclass
class PhaseCounter:
    """Success/fail counts for one discovery phase."""

    name: str
    ok: int = 0
    failed: int = 0


@dataclass
class RunSummary:
    """Counters across every phase of a discovery run."""

    phases: dict[str, PhaseCounter] = field(default_factory=dict)

    def counter(self, name: str) -> PhaseCounter:
        if name not in self.phases:
            self.phases[name] = PhaseCounter(name=name)
        return self.phases[name]

    def report(self) -> str:
        """Format a human-readable summary block."""
        lines: list[str] = ["", "Discovery Summary", "=" * 40]
        for phase in self.phases.values():
            parts = [f"{phase.name}: {phase.ok} ok"]
            if phase.failed:
                parts.append(f"{phase.failed} failed")
            lines.append("  ".join(parts))
        lines.append("=" * 40)
        return "\n".join(lines)
