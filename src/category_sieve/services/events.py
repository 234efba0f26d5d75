"""Optional observability for scoring and ranking decisions.

The scorer and ranker call an injected sink but never depend on it; with no sink
configured nothing is emitted and results are unaffected.
"""

import logging
from typing import Protocol

from category_sieve.models.model_score import ScoringEvent

logger = logging.getLogger(__name__)


class ScoringEventSink(Protocol):
    def emit(self, event: ScoringEvent) -> None: ...


class LoggingEventSink:
    """Writes each event to the module logger at DEBUG."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def emit(self, event: ScoringEvent) -> None:
        self.log.debug(
            "pmid=%s category=%s stage=%s delta=%+d score=%d %s",
            event.pmid,
            event.category_path,
            event.stage,
            event.delta,
            event.score,
            event.detail,
        )


class CollectingEventSink:
    """Keeps events in memory, e.g. to explain a ranking in a response or test."""

    def __init__(self) -> None:
        self.events: list[ScoringEvent] = []

    def emit(self, event: ScoringEvent) -> None:
        self.events.append(event)

    def for_pmid(self, pmid: str) -> list[ScoringEvent]:
        return [e for e in self.events if e.pmid == pmid]

    def stages(self, pmid: str, category_path: str | None = None) -> list[str]:
        return [
            e.stage
            for e in self.for_pmid(pmid)
            if category_path is None or e.category_path == category_path
        ]
