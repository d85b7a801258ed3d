"""
Structured stage records for scrape calls.

`scrape_tides` reports every stage transition to an injected observer. The
default observer writes one log record per stage, carrying the stage,
location and outcome as `extra` fields so handlers can index them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class StageRecord:
    stage: str
    state: str
    city: Optional[str]
    outcome: str
    fields: Dict[str, Any] = field(default_factory=dict)


class ScrapeObserver:
    """Log each stage of a scrape call through `logging`."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def record(self, stage: str, state: str, city: Optional[str], outcome: str, **fields: Any) -> None:
        level = logging.WARNING if outcome in ("failed", "rejected") else logging.INFO
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        self.log.log(
            level,
            "stage=%s location=%s/%s outcome=%s %s",
            stage,
            state,
            city or "-",
            outcome,
            details,
            extra={"stage": stage, "state": state, "city": city, "outcome": outcome, "fields": fields},
        )


class RecordingObserver(ScrapeObserver):
    """Keep stage records in memory in addition to logging them."""

    def __init__(self, log: Optional[logging.Logger] = None):
        super().__init__(log)
        self.records: List[StageRecord] = []

    def record(self, stage: str, state: str, city: Optional[str], outcome: str, **fields: Any) -> None:
        self.records.append(StageRecord(stage=stage, state=state, city=city, outcome=outcome, fields=dict(fields)))
        super().record(stage, state, city, outcome, **fields)

    def stages(self) -> List[str]:
        return [record.stage for record in self.records]


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging once using the given level name.
    Safe to call multiple times.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_value = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=level_value, format=LOG_FORMAT)
