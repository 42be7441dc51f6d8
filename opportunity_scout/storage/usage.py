"""API usage and cost recording.

Recorders are owned by the caller and injected into the clients; the
pipeline itself holds no module-level usage state.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections import defaultdict
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from opportunity_scout.models.usage import UsageEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class UsageRecorder(Protocol):
    def record(self, entry: UsageEntry) -> None: ...


class CostSummary(BaseModel):
    total: float = 0.0
    by_service: dict[str, float] = Field(default_factory=dict)
    by_operation: dict[str, float] = Field(default_factory=dict)
    request_count: int = 0


def summarize_entries(entries: list[UsageEntry]) -> CostSummary:
    by_service: dict[str, float] = defaultdict(float)
    by_operation: dict[str, float] = defaultdict(float)
    for entry in entries:
        cost = entry.cost()
        by_service[entry.service] += cost
        by_operation[entry.operation] += cost
    return CostSummary(
        total=sum(by_service.values()),
        by_service=dict(by_service),
        by_operation=dict(by_operation),
        request_count=len(entries),
    )


def format_cost(cost: float) -> str:
    if cost < 0.001:
        return "$0.00"
    if cost < 1:
        return f"${cost:.4f}"
    return f"${cost:.2f}"


def cost_recommendations(summary: CostSummary) -> list[str]:
    recommendations: list[str] = []
    if summary.total > 10:
        recommendations.append("High API costs detected. Consider caching more aggressively.")
    if summary.by_service.get("openai", 0.0) > 5:
        recommendations.append("Reasoning model usage is high. Review prompt lengths.")
    if summary.by_service.get("tavily", 0.0) > 1:
        recommendations.append("Search costs are accumulating. Lower queries or results per run.")
    return recommendations


def cost_report(summary: CostSummary) -> str:
    """Plain-text cost report."""
    lines = ["API Cost Report", "=" * 40, ""]
    lines.append(f"Total Cost: {format_cost(summary.total)}")
    lines.append(f"Total Requests: {summary.request_count}")
    lines.append("")
    lines.append("By Service:")
    for service, cost in summary.by_service.items():
        lines.append(f"  {service}: {format_cost(cost)}")
    lines.append("")
    lines.append("By Operation:")
    for operation, cost in summary.by_operation.items():
        lines.append(f"  {operation}: {format_cost(cost)}")
    recommendations = cost_recommendations(summary)
    if recommendations:
        lines.append("")
        lines.append("Recommendations:")
        lines.extend(f"  {rec}" for rec in recommendations)
    return "\n".join(lines)


class InMemoryUsageRecorder:
    """Thread-safe in-process usage log."""

    def __init__(self) -> None:
        self._entries: list[UsageEntry] = []
        self._lock = threading.Lock()

    def record(self, entry: UsageEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> list[UsageEntry]:
        with self._lock:
            return list(self._entries)

    def summary(self) -> CostSummary:
        return summarize_entries(self.entries)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS api_usage (
    usage_id       INTEGER PRIMARY KEY AUTOINCREMENT,
    service        TEXT NOT NULL,
    operation      TEXT NOT NULL,
    model          TEXT,
    requests       INTEGER DEFAULT 1,
    input_tokens   INTEGER DEFAULT 0,
    output_tokens  INTEGER DEFAULT 0,
    estimated_cost REAL NOT NULL,
    metadata       TEXT,  -- JSON object
    recorded_at    TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_usage_service ON api_usage(service);
CREATE INDEX IF NOT EXISTS idx_usage_recorded_at ON api_usage(recorded_at);
"""


class SqliteUsageRecorder:
    """SQLite-backed usage ledger that survives process restarts."""

    def __init__(self, db_path: str = "usage.db") -> None:
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        # Clients record from worker threads
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(SCHEMA_SQL)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def record(self, entry: UsageEntry) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO api_usage (
                    service, operation, model, requests, input_tokens,
                    output_tokens, estimated_cost, metadata, recorded_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.service,
                    entry.operation,
                    entry.model,
                    entry.requests,
                    entry.input_tokens,
                    entry.output_tokens,
                    entry.cost(),
                    json.dumps(entry.metadata, default=str),
                    entry.recorded_at.isoformat(),
                ),
            )
            self._conn.commit()
        logger.debug("Recorded %s/%s usage", entry.service, entry.operation)

    def get_entries(self, service: str | None = None) -> list[UsageEntry]:
        query = "SELECT * FROM api_usage"
        params: tuple = ()
        if service:
            query += " WHERE service = ?"
            params = (service,)
        query += " ORDER BY usage_id"
        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [
            UsageEntry(
                service=row["service"],
                operation=row["operation"],
                model=row["model"],
                requests=row["requests"],
                input_tokens=row["input_tokens"],
                output_tokens=row["output_tokens"],
                estimated_cost=row["estimated_cost"],
                metadata=json.loads(row["metadata"] or "{}"),
                recorded_at=row["recorded_at"],
            )
            for row in rows
        ]

    def summary(self) -> CostSummary:
        return summarize_entries(self.get_entries())
