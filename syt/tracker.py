"""SQLite-backed record of command runs and token savings."""

from __future__ import annotations

import contextlib
import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

_SCHEMA = """
CREATE TABLE IF NOT EXISTS syt_log (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp     TEXT    NOT NULL DEFAULT (datetime('now','utc')),
    project_path  TEXT,
    original_cmd  TEXT    NOT NULL,
    syt_cmd       TEXT    NOT NULL,
    input_tokens  INTEGER NOT NULL DEFAULT 0,
    output_tokens INTEGER NOT NULL DEFAULT 0,
    savings_pct   REAL    NOT NULL DEFAULT 0.0,
    execution_ms  INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_timestamp ON syt_log(timestamp);

CREATE TABLE IF NOT EXISTS syt_meta (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_SQL_TIME = "%Y-%m-%dT%H:%M:%S"
_CLEANUP_INTERVAL = timedelta(hours=24)
_AUTO_RETENTION_DAYS = 90


@dataclass
class Record:
    """One tracked command execution."""

    original_cmd: str
    syt_cmd: str
    project_path: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    execution_ms: int = 0


@dataclass
class CommandStat:
    """Aggregated statistics for one command."""

    command: str
    runs: int
    tokens_saved: int
    avg_savings_pct: float


@dataclass
class DayStat:
    """Statistics for one day."""

    date: str
    commands: int
    tokens_saved: int


@dataclass
class Summary:
    """Aggregated statistics over a period."""

    total_commands: int = 0
    total_saved: int = 0
    avg_savings_pct: float = 0.0
    by_command: list[CommandStat] = field(default_factory=list)
    by_day: list[DayStat] = field(default_factory=list)
    period_days: int = 0


def _utc_cutoff(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).strftime(_SQL_TIME)


class Tracker:
    """Token-savings database; usable as a context manager."""

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        db_path = os.fspath(db_path)
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db = sqlite3.connect(db_path, isolation_level=None)
        try:
            self._db.execute("PRAGMA journal_mode=WAL")
            self._db.executescript(_SCHEMA)
        except sqlite3.Error:
            self._db.close()
            raise
        with contextlib.suppress(sqlite3.Error):
            self._maybe_cleanup()

    def _maybe_cleanup(self) -> None:
        row = self._db.execute(
            "SELECT value FROM syt_meta WHERE key='last_cleanup'"
        ).fetchone()
        if row is not None:
            try:
                last = datetime.fromisoformat(row[0])
            except (TypeError, ValueError):
                last = None
            if last is not None and last.tzinfo is not None:
                if datetime.now(timezone.utc) - last < _CLEANUP_INTERVAL:
                    return
        self.cleanup(_AUTO_RETENTION_DAYS)
        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._db.execute(
            "INSERT OR REPLACE INTO syt_meta (key, value) VALUES ('last_cleanup', ?)",
            (now,),
        )

    def track(self, record: Record) -> None:
        """Insert one record."""
        savings_pct = 0.0
        if record.input_tokens > 0:
            savings_pct = 100.0 - record.output_tokens / record.input_tokens * 100.0
            savings_pct = max(savings_pct, 0.0)
        self._db.execute(
            """
            INSERT INTO syt_log (project_path, original_cmd, syt_cmd, input_tokens,
                                 output_tokens, savings_pct, execution_ms)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                record.project_path,
                record.original_cmd,
                record.syt_cmd,
                record.input_tokens,
                record.output_tokens,
                savings_pct,
                record.execution_ms,
            ),
        )

    def get_summary(self, since: datetime) -> Summary:
        """Return aggregated statistics for records since ``since``."""
        since_utc = since.astimezone(timezone.utc)
        since_str = since_utc.strftime(_SQL_TIME)
        elapsed = datetime.now(timezone.utc) - since_utc
        period_days = int(elapsed.total_seconds() / 3600 / 24)

        total, saved, avg = self._db.execute(
            """
            SELECT COUNT(*), COALESCE(SUM(input_tokens - output_tokens), 0),
                   COALESCE(AVG(savings_pct), 0)
            FROM syt_log WHERE timestamp >= ?""",
            (since_str,),
        ).fetchone()

        by_command = [
            CommandStat(cmd, runs, tokens_saved, float(avg_pct))
            for cmd, runs, tokens_saved, avg_pct in self._db.execute(
                """
                SELECT syt_cmd,
                       COUNT(*) AS runs,
                       COALESCE(SUM(input_tokens - output_tokens), 0) AS tokens_saved,
                       COALESCE(AVG(savings_pct), 0) AS avg_pct
                FROM syt_log
                WHERE timestamp >= ?
                GROUP BY syt_cmd
                ORDER BY tokens_saved DESC
                LIMIT 20""",
                (since_str,),
            )
        ]

        by_day = [
            DayStat(day, commands, tokens_saved)
            for day, commands, tokens_saved in self._db.execute(
                """
                SELECT date(timestamp) AS day, COUNT(*),
                       COALESCE(SUM(input_tokens - output_tokens), 0)
                FROM syt_log
                WHERE timestamp >= ?
                GROUP BY day
                ORDER BY day DESC
                LIMIT 30""",
                (since_str,),
            )
        ]

        return Summary(
            total_commands=total,
            total_saved=saved,
            avg_savings_pct=float(avg),
            by_command=by_command,
            by_day=by_day,
            period_days=period_days,
        )

    def get_history(self, limit: int) -> list[Record]:
        """Return the most recent records, newest first."""
        rows = self._db.execute(
            """
            SELECT original_cmd, syt_cmd, COALESCE(project_path, ''), input_tokens,
                   output_tokens, execution_ms
            FROM syt_log
            ORDER BY id DESC
            LIMIT ?""",
            (limit,),
        )
        return [
            Record(
                original_cmd=original,
                syt_cmd=syt_cmd,
                project_path=project,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                execution_ms=execution_ms,
            )
            for original, syt_cmd, project, input_tokens, output_tokens, execution_ms in rows
        ]

    def get_daily_stats(self, days: int) -> list[DayStat]:
        """Return per-day statistics for the last ``days`` days, newest first."""
        rows = self._db.execute(
            """
            SELECT date(timestamp) AS day, COUNT(*),
                   COALESCE(SUM(input_tokens - output_tokens), 0)
            FROM syt_log
            WHERE timestamp >= ?
            GROUP BY day
            ORDER BY day DESC""",
            (_utc_cutoff(days),),
        )
        return [DayStat(day, commands, saved) for day, commands, saved in rows]

    def cleanup(self, retention_days: int) -> None:
        """Delete records older than ``retention_days`` days."""
        self._db.execute(
            "DELETE FROM syt_log WHERE timestamp < ?", (_utc_cutoff(retention_days),)
        )

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def __enter__(self) -> Tracker:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()