"""
Result reporter interface.
"""

from __future__ import annotations

from typing import Protocol

from models.observation import Observation


class ResultReporter(Protocol):
    """Consumes observations. report() must return quickly and never raise into the caller."""

    def report(self, observation: Observation) -> None:
        ...

    def close(self) -> None:
        ...
