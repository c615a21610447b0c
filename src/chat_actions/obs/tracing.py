"""Per-turn resolution traces and summary metrics."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(slots=True)
class ResolutionTrace:
    trace_id: str
    timestamp_utc: str
    message_preview: str
    tool_names: list[str]
    evidence_layer: str | None
    resolved_ids: list[str]
    mentioned_ids: list[str]
    action_types: list[str]
    latency_ms: float
    fallback: bool = False
    error: str | None = None
    tags: dict[str, str] = field(default_factory=dict)


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self, max_records: int = 1000) -> None:
        self._records: dict[str, ResolutionTrace] = {}
        self._max_records = max_records

    def create_record(
        self,
        *,
        message: str,
        tool_names: list[str],
        evidence_layer: str | None,
        resolved_ids: list[str],
        mentioned_ids: list[str],
        action_types: list[str],
        latency_ms: float,
        fallback: bool = False,
        error: str | None = None,
    ) -> ResolutionTrace:
        record = ResolutionTrace(
            trace_id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            message_preview=message[:200],
            tool_names=tool_names,
            evidence_layer=evidence_layer,
            resolved_ids=resolved_ids,
            mentioned_ids=mentioned_ids,
            action_types=action_types,
            latency_ms=latency_ms,
            fallback=fallback,
            error=error,
        )
        self._records[record.trace_id] = record
        while len(self._records) > self._max_records:
            del self._records[next(iter(self._records))]
        return record

    def get(self, trace_id: str) -> ResolutionTrace:
        record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[ResolutionTrace]:
        return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate resolution metrics for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_turns": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "tool_layer_turns": 0,
                "text_layer_turns": 0,
                "fallback_turns": 0,
                "avg_actions_per_turn": 0.0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        return {
            "total_turns": total,
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "tool_layer_turns": sum(1 for r in records if r.evidence_layer == "tool"),
            "text_layer_turns": sum(1 for r in records if r.evidence_layer == "text"),
            "fallback_turns": sum(1 for r in records if r.fallback),
            "avg_actions_per_turn": sum(len(r.action_types) for r in records) / total,
        }


class Timer:
    """Simple context timer used by the engine."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
