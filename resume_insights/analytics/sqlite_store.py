from __future__ import annotations

import asyncio
import json
import logging
import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from resume_insights.schemas import (
    AnalyticsSnapshot,
    ResumeSnapshotInput,
    SnapshotDraft,
    SourceCount,
    ViewEvent,
)

from .repository import DateRange, SortOrder

logger = logging.getLogger(__name__)

_SOURCE_LIMIT = 10


def _to_utc_iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_iso(raw: str) -> datetime:
    return datetime.fromisoformat(raw)


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class SQLiteAnalyticsRepository:
    """SQLite implementation of the analytics repository port.

    One connection is shared by all requests; statements run on a worker
    thread so the event loop never blocks on disk I/O.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS resumes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    industry TEXT,
                    is_public INTEGER NOT NULL,
                    payload_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_resumes_industry_public
                ON resumes (industry, is_public);
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS resume_view_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    resume_id TEXT NOT NULL,
                    visitor_id TEXT NOT NULL,
                    user_agent TEXT,
                    referer TEXT,
                    country TEXT,
                    city TEXT,
                    source TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_resume_view_events_lookup
                ON resume_view_events (resume_id, created_at);
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS resume_analytics_snapshots (
                    id TEXT PRIMARY KEY,
                    resume_id TEXT NOT NULL,
                    ats_score INTEGER NOT NULL,
                    keyword_score INTEGER NOT NULL,
                    completeness_score INTEGER NOT NULL,
                    industry_rank INTEGER,
                    total_in_industry INTEGER,
                    top_keywords_json TEXT NOT NULL,
                    missing_keywords_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_resume_analytics_snapshots_lookup
                ON resume_analytics_snapshots (resume_id, created_at);
                """
            )
            self._conn = conn
            logger.info("insights_db_ready path=%s", self.db_path)
            return conn

    def _fetch_all(self, query: str, params: tuple) -> list[dict[str, Any]]:
        conn = self._get_connection()
        with self._conn_lock:
            cur = conn.execute(query, params)
            rows = cur.fetchall()
            return [_row_to_dict(cur, row) for row in rows]

    def _write(self, query: str, params: tuple) -> None:
        conn = self._get_connection()
        with self._conn_lock:
            conn.execute(query, params)
            conn.commit()

    def init_db(self) -> None:
        self._get_connection()

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # Resumes

    def _upsert_resume(self, resume: ResumeSnapshotInput) -> None:
        self._write(
            """
            INSERT INTO resumes (id, user_id, industry, is_public, payload_json, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                user_id = excluded.user_id,
                industry = excluded.industry,
                is_public = excluded.is_public,
                payload_json = excluded.payload_json,
                updated_at = excluded.updated_at
            """,
            (
                resume.id,
                resume.user_id,
                resume.industry,
                1 if resume.is_public else 0,
                resume.model_dump_json(),
                _to_utc_iso(datetime.now(timezone.utc)),
            ),
        )

    async def upsert_resume(self, resume: ResumeSnapshotInput) -> None:
        await asyncio.to_thread(self._upsert_resume, resume)

    async def find_resume_by_id(self, resume_id: str) -> ResumeSnapshotInput | None:
        rows = await asyncio.to_thread(
            self._fetch_all,
            "SELECT payload_json FROM resumes WHERE id = ?",
            (resume_id,),
        )
        if not rows:
            return None
        return ResumeSnapshotInput.model_validate_json(rows[0]["payload_json"])

    async def find_public_resumes_by_industry(self, industry: str) -> list[ResumeSnapshotInput]:
        rows = await asyncio.to_thread(
            self._fetch_all,
            "SELECT payload_json FROM resumes WHERE industry = ? AND is_public = 1 ORDER BY id",
            (industry,),
        )
        return [ResumeSnapshotInput.model_validate_json(row["payload_json"]) for row in rows]

    # View events

    async def create_view_event(self, event: ViewEvent) -> None:
        await asyncio.to_thread(
            self._write,
            """
            INSERT INTO resume_view_events (
                resume_id, visitor_id, user_agent, referer, country, city, source, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.resume_id,
                event.visitor_id,
                event.user_agent,
                event.referer,
                event.country,
                event.city,
                event.source,
                _to_utc_iso(event.created_at),
            ),
        )

    @staticmethod
    def _window_clause(resume_id: str, date_range: DateRange | None) -> tuple[str, tuple]:
        if date_range is None:
            return "resume_id = ?", (resume_id,)
        return (
            "resume_id = ? AND created_at >= ? AND created_at <= ?",
            (resume_id, _to_utc_iso(date_range.start), _to_utc_iso(date_range.end)),
        )

    async def count_view_events(self, resume_id: str, date_range: DateRange | None = None) -> int:
        where, params = self._window_clause(resume_id, date_range)
        rows = await asyncio.to_thread(
            self._fetch_all,
            f"SELECT COUNT(*) AS total FROM resume_view_events WHERE {where}",
            params,
        )
        return int(rows[0]["total"] or 0) if rows else 0

    async def group_view_events_by_visitor(
        self, resume_id: str, date_range: DateRange | None = None
    ) -> list[str]:
        where, params = self._window_clause(resume_id, date_range)
        rows = await asyncio.to_thread(
            self._fetch_all,
            f"SELECT visitor_id FROM resume_view_events WHERE {where} GROUP BY visitor_id",
            params,
        )
        return [row["visitor_id"] for row in rows]

    async def find_view_events_for_date_range(self, resume_id: str, date_range: DateRange) -> list[ViewEvent]:
        where, params = self._window_clause(resume_id, date_range)
        rows = await asyncio.to_thread(
            self._fetch_all,
            f"""
            SELECT resume_id, visitor_id, user_agent, referer, country, city, source, created_at
            FROM resume_view_events
            WHERE {where}
            ORDER BY created_at ASC, id ASC
            """,
            params,
        )
        events: list[ViewEvent] = []
        for row in rows:
            row["created_at"] = _from_iso(row["created_at"])
            events.append(ViewEvent(**row))
        return events

    async def group_view_events_by_source(self, resume_id: str, date_range: DateRange) -> list[SourceCount]:
        where, params = self._window_clause(resume_id, date_range)
        rows = await asyncio.to_thread(
            self._fetch_all,
            f"""
            SELECT source, COUNT(*) AS count
            FROM resume_view_events
            WHERE {where}
            GROUP BY source
            ORDER BY count DESC, source ASC
            LIMIT ?
            """,
            params + (_SOURCE_LIMIT,),
        )
        return [SourceCount(source=row["source"], count=int(row["count"])) for row in rows]

    # Snapshots

    async def create_analytics_snapshot(self, draft: SnapshotDraft) -> AnalyticsSnapshot:
        snapshot = AnalyticsSnapshot(id=uuid.uuid4().hex, **draft.model_dump())
        await asyncio.to_thread(
            self._write,
            """
            INSERT INTO resume_analytics_snapshots (
                id, resume_id, ats_score, keyword_score, completeness_score,
                industry_rank, total_in_industry, top_keywords_json, missing_keywords_json, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                snapshot.id,
                snapshot.resume_id,
                snapshot.ats_score,
                snapshot.keyword_score,
                snapshot.completeness_score,
                snapshot.industry_rank,
                snapshot.total_in_industry,
                json.dumps(snapshot.top_keywords, ensure_ascii=False),
                json.dumps(snapshot.missing_keywords, ensure_ascii=False),
                _to_utc_iso(snapshot.created_at),
            ),
        )
        return snapshot

    def _select_snapshots(self, resume_id: str, limit: int | None, order_by: SortOrder) -> list[AnalyticsSnapshot]:
        direction = "ASC" if order_by == "asc" else "DESC"
        query = f"""
            SELECT id, resume_id, ats_score, keyword_score, completeness_score,
                   industry_rank, total_in_industry, top_keywords_json, missing_keywords_json, created_at
            FROM resume_analytics_snapshots
            WHERE resume_id = ?
            ORDER BY created_at {direction}, rowid {direction}
        """
        params: tuple = (resume_id,)
        if limit is not None:
            query += " LIMIT ?"
            params += (limit,)

        snapshots: list[AnalyticsSnapshot] = []
        for row in self._fetch_all(query, params):
            snapshots.append(
                AnalyticsSnapshot(
                    id=row["id"],
                    resume_id=row["resume_id"],
                    ats_score=row["ats_score"],
                    keyword_score=row["keyword_score"],
                    completeness_score=row["completeness_score"],
                    industry_rank=row["industry_rank"],
                    total_in_industry=row["total_in_industry"],
                    top_keywords=json.loads(row["top_keywords_json"] or "[]"),
                    missing_keywords=json.loads(row["missing_keywords_json"] or "[]"),
                    created_at=_from_iso(row["created_at"]),
                )
            )
        return snapshots

    async def find_analytics_snapshots(
        self,
        resume_id: str,
        *,
        limit: int | None = None,
        order_by: SortOrder = "desc",
    ) -> list[AnalyticsSnapshot]:
        return await asyncio.to_thread(self._select_snapshots, resume_id, limit, order_by)

    async def find_analytics_score_progression(self, resume_id: str) -> list[AnalyticsSnapshot]:
        return await asyncio.to_thread(self._select_snapshots, resume_id, None, "asc")
