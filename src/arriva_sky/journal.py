"""JSONL audit trail of CLI runs: startup settings and each composed payload."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .exceptions import JournalError
from .models import WeatherPayload
from .redaction import sanitize_for_logging
from .weather.chain import ChainResult


class JournalWriter:
    """Appends redacted event records to ``sky-YYYYMMDD.jsonl`` under ``journal_dir``."""

    def __init__(self, journal_dir: Path, session_id: str) -> None:
        self.journal_dir = Path(journal_dir)
        self.session_id = session_id
        try:
            self.journal_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise JournalError(f"Cannot create journal directory {self.journal_dir}: {exc}") from exc
        self.events_path = self.journal_dir / f"sky-{datetime.now(UTC):%Y%m%d}.jsonl"

    def write_event(
        self,
        event_type: str,
        payload: dict[str, Any],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        record = {
            "ts": datetime.now(UTC).isoformat(),
            "event_type": event_type,
            "session_id": self.session_id,
            "payload": sanitize_for_logging(payload),
            "metadata": sanitize_for_logging(metadata or {}),
        }
        try:
            line = json.dumps(record, default=str)
            with self.events_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            raise JournalError(f"Cannot append to {self.events_path}: {exc}") from exc

    def record_composition(
        self,
        payload: WeatherPayload,
        chain_result: ChainResult | None,
    ) -> None:
        """Log which provider (if any) fed ``payload`` and how each attempt went."""
        attempts = chain_result.attempts if chain_result is not None else []
        self.write_event(
            "payload_composed",
            payload={
                "sky_phase": payload.sky_phase,
                "source": payload.weather.source,
                "condition": payload.weather.condition,
                "cached": payload.cached,
                "attempts": [attempt.model_dump() for attempt in attempts],
            },
            metadata={"session_id": self.session_id},
        )
