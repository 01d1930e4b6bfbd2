"""Repository for decisions and their full-text search index.

Every write carries the decision's fields and its recomputed search
index in a single statement; FTS5 external-content triggers then keep
decisions_fts in step with the row.
"""

import json
import logging
from datetime import UTC, date, datetime
from typing import Any

from decision_log.db.client import DatabaseClient
from decision_log.models.decision import Decision
from decision_log.models.enums import DecisionCategory
from decision_log.search.analytics import AnalyticsSummary, success_rate
from decision_log.search.index import SEARCH_INDEX_COLUMNS, SearchIndex, reindex
from decision_log.search.planner import QueryPlan
from decision_log.search.schemas import (
    ConfidenceRange,
    DecisionPage,
    OutcomeStats,
    ReindexReport,
)

logger = logging.getLogger(__name__)

# Persisted decision columns, in row order
DECISION_COLUMNS = (
    "id",
    "created_at",
    "updated_at",
    "title",
    "category",
    "project_name",
    "tags",
    "business_context",
    "problem_statement",
    "chosen_option",
    "reasoning",
    "notes",
    "stakeholders",
    "confidence_level",
    "decision_type",
    "options_considered",
    "tradeoffs_accepted",
    "tradeoffs_rejected",
    "optimized_for",
    "assumptions",
    "invalidation_conditions",
    "flagged_for_review",
    "next_review_date",
    "revisit_reason",
    "outcome",
    "outcome_date",
    "outcome_success",
    "lessons_learned",
    "similar_decision_ids",
    "related_decision_ids",
    "similarity_notes",
)

# Columns holding JSON-encoded lists
JSON_COLUMNS = frozenset(
    {
        "tags",
        "stakeholders",
        "options_considered",
        "tradeoffs_accepted",
        "tradeoffs_rejected",
        "optimized_for",
        "assumptions",
        "invalidation_conditions",
        "similar_decision_ids",
        "related_decision_ids",
        "similarity_notes",
    }
)

TIMESTAMP_COLUMNS = frozenset({"created_at", "updated_at", "outcome_date"})

WRITE_COLUMNS = DECISION_COLUMNS + SEARCH_INDEX_COLUMNS

SELECT_COLUMNS = ", ".join(f"d.{column}" for column in DECISION_COLUMNS)


def format_timestamp(value: datetime) -> str:
    """Fixed-width UTC ISO text so stored timestamps sort lexically."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def decision_to_params(decision: Decision) -> list[Any]:
    """Encode a decision and its search index as row parameters.

    Returns:
        Values in WRITE_COLUMNS order
    """
    data = decision.model_dump(mode="json")
    params: list[Any] = []
    for column in DECISION_COLUMNS:
        value = data[column]
        if column in JSON_COLUMNS:
            value = json.dumps(value)
        elif column in TIMESTAMP_COLUMNS and value is not None:
            value = format_timestamp(getattr(decision, column))
        elif isinstance(value, bool):
            value = int(value)
        params.append(value)
    params.extend(reindex(decision).as_params())
    return params


def row_to_decision(row: Any) -> Decision:
    """Decode a row selected with SELECT_COLUMNS into a Decision."""
    data: dict[str, Any] = {}
    for index, column in enumerate(DECISION_COLUMNS):
        value = row[index]
        if column in JSON_COLUMNS:
            value = json.loads(value) if value else []
        data[column] = value

    data["flagged_for_review"] = bool(data["flagged_for_review"])
    if data["outcome_success"] is not None:
        data["outcome_success"] = bool(data["outcome_success"])

    return Decision.model_validate(data)


class DecisionRepository:
    """Repository for decision rows and the decisions_fts index.

    Implements the facet queries consumed by MetadataAggregator.
    """

    def __init__(self, db_client: DatabaseClient):
        """Initialize repository with database client.

        Args:
            db_client: DatabaseClient instance for database operations
        """
        self._db = db_client

    async def initialize(self) -> None:
        """Create the decisions table, FTS5 index and sync triggers.

        Safe to call on every startup.
        """
        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS decisions (
                row_id INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT UNIQUE NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                title TEXT NOT NULL,
                category TEXT NOT NULL,
                project_name TEXT,
                tags TEXT NOT NULL DEFAULT '[]',
                business_context TEXT,
                problem_statement TEXT,
                chosen_option TEXT,
                reasoning TEXT,
                notes TEXT,
                stakeholders TEXT NOT NULL DEFAULT '[]',
                confidence_level INTEGER,
                decision_type TEXT,
                options_considered TEXT NOT NULL DEFAULT '[]',
                tradeoffs_accepted TEXT NOT NULL DEFAULT '[]',
                tradeoffs_rejected TEXT NOT NULL DEFAULT '[]',
                optimized_for TEXT NOT NULL DEFAULT '[]',
                assumptions TEXT NOT NULL DEFAULT '[]',
                invalidation_conditions TEXT NOT NULL DEFAULT '[]',
                flagged_for_review INTEGER NOT NULL DEFAULT 0,
                next_review_date TEXT,
                revisit_reason TEXT,
                outcome TEXT,
                outcome_date TEXT,
                outcome_success INTEGER,
                lessons_learned TEXT,
                similar_decision_ids TEXT NOT NULL DEFAULT '[]',
                related_decision_ids TEXT NOT NULL DEFAULT '[]',
                similarity_notes TEXT NOT NULL DEFAULT '[]',
                search_heading TEXT,
                search_context TEXT,
                search_choice TEXT,
                search_notes TEXT
            )
        """)

        await self._db.execute("""
            CREATE INDEX IF NOT EXISTS idx_decisions_created
            ON decisions(created_at DESC, id DESC)
        """)
        await self._db.execute("""
            CREATE INDEX IF NOT EXISTS idx_decisions_category
            ON decisions(category)
        """)
        await self._db.execute("""
            CREATE INDEX IF NOT EXISTS idx_decisions_project
            ON decisions(project_name)
        """)

        # External content table over the four weighted index sections
        await self._db.execute("""
            CREATE VIRTUAL TABLE IF NOT EXISTS decisions_fts USING fts5(
                search_heading,
                search_context,
                search_choice,
                search_notes,
                content='decisions',
                content_rowid='row_id',
                tokenize='unicode61'
            )
        """)

        await self._db.execute(
            """
            CREATE TRIGGER IF NOT EXISTS decisions_ai
            AFTER INSERT ON decisions
            BEGIN
                INSERT INTO decisions_fts(
                    rowid, search_heading, search_context, search_choice, search_notes
                )
                VALUES (
                    new.row_id, new.search_heading, new.search_context,
                    new.search_choice, new.search_notes
                );
            END
            """
        )

        await self._db.execute(
            """
            CREATE TRIGGER IF NOT EXISTS decisions_ad
            AFTER DELETE ON decisions
            BEGIN
                INSERT INTO decisions_fts(
                    decisions_fts, rowid, search_heading, search_context,
                    search_choice, search_notes
                )
                VALUES (
                    'delete', old.row_id, old.search_heading, old.search_context,
                    old.search_choice, old.search_notes
                );
            END
            """
        )

        # No column list: fires on an update of any field
        await self._db.execute(
            """
            CREATE TRIGGER IF NOT EXISTS decisions_au
            AFTER UPDATE ON decisions
            BEGIN
                INSERT INTO decisions_fts(
                    decisions_fts, rowid, search_heading, search_context,
                    search_choice, search_notes
                )
                VALUES (
                    'delete', old.row_id, old.search_heading, old.search_context,
                    old.search_choice, old.search_notes
                );
                INSERT INTO decisions_fts(
                    rowid, search_heading, search_context, search_choice, search_notes
                )
                VALUES (
                    new.row_id, new.search_heading, new.search_context,
                    new.search_choice, new.search_notes
                );
            END
            """
        )

        logger.info("Decisions table and FTS5 index initialized")

    async def create(self, decision: Decision) -> Decision:
        """Insert a new decision with its search index.

        Args:
            decision: Decision to persist

        Returns:
            The persisted decision
        """
        placeholders = ", ".join("?" for _ in WRITE_COLUMNS)
        await self._db.execute(
            f"INSERT INTO decisions ({', '.join(WRITE_COLUMNS)}) VALUES ({placeholders})",
            decision_to_params(decision),
        )
        logger.debug(f"Created decision: {decision.id}")
        return decision

    async def get(self, decision_id: str) -> Decision | None:
        """Get a decision by ID.

        Args:
            decision_id: UUID string of the decision

        Returns:
            Decision if found, None otherwise
        """
        result = await self._db.execute(
            f"SELECT {SELECT_COLUMNS} FROM decisions AS d WHERE d.id = ?",
            [decision_id],
        )
        if not result.rows:
            return None
        return row_to_decision(result.rows[0])

    async def get_search_index(self, decision_id: str) -> SearchIndex | None:
        """Get the stored search index of a decision.

        Returns:
            Stored SearchIndex, or None if the decision does not exist
        """
        result = await self._db.execute(
            f"SELECT {', '.join(SEARCH_INDEX_COLUMNS)} FROM decisions WHERE id = ?",
            [decision_id],
        )
        if not result.rows:
            return None
        row = result.rows[0]
        return SearchIndex(*(value or "" for value in row))

    async def save(self, decision: Decision) -> bool:
        """Overwrite a stored decision and recompute its search index.

        Fields and index columns are written by one UPDATE, so the index
        can never lag behind the fields it was derived from.

        Args:
            decision: Decision with its final field values

        Returns:
            True if a row was updated, False if the decision no longer exists
        """
        # id and created_at are never rewritten
        columns = WRITE_COLUMNS[2:]
        assignments = ", ".join(f"{column} = ?" for column in columns)
        params = decision_to_params(decision)[2:]
        params.append(str(decision.id))

        result = await self._db.execute(
            f"UPDATE decisions SET {assignments} WHERE id = ?",
            params,
        )
        saved = result.rows_affected > 0
        if saved:
            logger.debug(f"Saved decision: {decision.id}")
        return saved

    async def delete(self, decision_id: str) -> bool:
        """Delete a decision; the delete trigger removes its FTS entry.

        Returns:
            True if a row was deleted
        """
        result = await self._db.execute(
            "DELETE FROM decisions WHERE id = ?",
            [decision_id],
        )
        deleted = result.rows_affected > 0
        if deleted:
            logger.info(f"Deleted decision: {decision_id}")
        return deleted

    async def search(self, plan: QueryPlan) -> DecisionPage:
        """Execute a query plan.

        Args:
            plan: Predicates, sort and page window

        Returns:
            DecisionPage with the windowed rows and the total match count
        """
        params = plan.params

        count_result = await self._db.execute(
            f"SELECT COUNT(*) FROM {plan.from_clause} {plan.where_clause}",
            params,
        )
        total = count_result.rows[0][0] if count_result.rows else 0

        result = await self._db.execute(
            f"""
            SELECT {SELECT_COLUMNS}
            FROM {plan.from_clause}
            {plan.where_clause}
            {plan.order_clause}
            LIMIT ? OFFSET ?
            """,
            [*params, plan.window.limit, plan.window.offset],
        )

        return DecisionPage(
            decisions=[row_to_decision(row) for row in result.rows],
            total=total,
            limit=plan.window.limit,
            offset=plan.window.offset,
        )

    async def distinct_categories(self) -> list[str]:
        result = await self._db.execute(
            "SELECT DISTINCT category FROM decisions ORDER BY category"
        )
        return [row[0] for row in result.rows]

    async def distinct_projects(self) -> list[str]:
        result = await self._db.execute(
            """
            SELECT DISTINCT project_name FROM decisions
            WHERE project_name IS NOT NULL AND project_name != ''
            ORDER BY project_name
            """
        )
        return [row[0] for row in result.rows]

    async def distinct_tags(self) -> list[str]:
        result = await self._db.execute(
            """
            SELECT DISTINCT json_each.value
            FROM decisions, json_each(decisions.tags)
            ORDER BY json_each.value
            """
        )
        return [row[0] for row in result.rows]

    async def confidence_range(self) -> ConfidenceRange | None:
        result = await self._db.execute(
            "SELECT MIN(confidence_level), MAX(confidence_level) FROM decisions"
        )
        row = result.rows[0] if result.rows else None
        if row is None or row[0] is None:
            return None
        return ConfidenceRange(min=row[0], max=row[1])

    async def outcome_stats(self) -> OutcomeStats:
        result = await self._db.execute(
            """
            SELECT
                COUNT(*),
                SUM(CASE WHEN outcome_success IS NULL THEN 1 ELSE 0 END),
                SUM(CASE WHEN outcome_success = 1 THEN 1 ELSE 0 END),
                SUM(CASE WHEN outcome_success = 0 THEN 1 ELSE 0 END)
            FROM decisions
            """
        )
        row = result.rows[0]
        return OutcomeStats(
            total=row[0] or 0,
            pending=row[1] or 0,
            success=row[2] or 0,
            failed=row[3] or 0,
        )

    async def analytics_summary(
        self,
        since: datetime | None,
        category: DecisionCategory | None,
        today: date,
    ) -> AnalyticsSummary:
        """Aggregate counts and success rates for the analytics dashboard.

        Args:
            since: Earliest created_at to include, None for all time
            category: Restrict to one category
            today: Review dates before this day count as past due

        Returns:
            AnalyticsSummary over the matching decisions
        """
        conditions: list[str] = []
        params: list[Any] = []
        if since is not None:
            conditions.append("d.created_at >= ?")
            params.append(format_timestamp(since))
        if category is not None:
            conditions.append("d.category = ?")
            params.append(category.value)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        totals = await self._db.execute(
            f"""
            SELECT
                COUNT(*),
                AVG(d.confidence_level),
                SUM(CASE WHEN d.outcome_success IS NOT NULL THEN 1 ELSE 0 END),
                SUM(CASE WHEN d.outcome_success = 1 THEN 1 ELSE 0 END),
                SUM(CASE WHEN d.flagged_for_review = 1 THEN 1 ELSE 0 END),
                SUM(CASE WHEN d.next_review_date < ? THEN 1 ELSE 0 END)
            FROM decisions AS d
            {where}
            """,
            [today.isoformat(), *params],
        )
        row = totals.rows[0]
        with_outcomes = row[2] or 0

        by_category = await self._db.execute(
            f"""
            SELECT
                d.category,
                COUNT(*),
                SUM(CASE WHEN d.outcome_success IS NOT NULL THEN 1 ELSE 0 END),
                SUM(CASE WHEN d.outcome_success = 1 THEN 1 ELSE 0 END)
            FROM decisions AS d
            {where}
            GROUP BY d.category
            ORDER BY COUNT(*) DESC, d.category
            """,
            params,
        )

        return AnalyticsSummary(
            total_decisions=row[0] or 0,
            decisions_by_category={r[0]: r[1] for r in by_category.rows},
            success_rate_by_category={
                r[0]: success_rate(r[3] or 0, r[2]) for r in by_category.rows if r[2]
            },
            optimized_for_frequency=await self._frequency("optimized_for", where, params),
            tradeoffs_accepted_frequency=await self._frequency(
                "tradeoffs_accepted", where, params
            ),
            tradeoffs_rejected_frequency=await self._frequency(
                "tradeoffs_rejected", where, params
            ),
            average_confidence=round(row[1], 1) if row[1] is not None else 0.0,
            decisions_with_outcomes=with_outcomes,
            overall_success_rate=success_rate(row[3] or 0, with_outcomes),
            flagged_for_review_count=row[4] or 0,
            decisions_past_review_date=row[5] or 0,
        )

    async def _frequency(self, column: str, where: str, params: list[Any]) -> dict[str, int]:
        """Count each value of a JSON list column, most frequent first."""
        result = await self._db.execute(
            f"""
            SELECT item.value, COUNT(*)
            FROM decisions AS d, json_each(d.{column}) AS item
            {where}
            GROUP BY item.value
            ORDER BY COUNT(*) DESC, item.value
            """,
            params,
        )
        return {row[0]: row[1] for row in result.rows}

    async def reindex_all(self) -> ReindexReport:
        """Recompute the search index of every decision.

        A row is rewritten only when its stored index differs from the
        recomputed one. The rewrite is guarded by the updated_at value that
        was read; a row changed in the meantime has already been reindexed
        by that write and is skipped.

        Returns:
            ReindexReport; stale and missing counts are logged as a warning
        """
        result = await self._db.execute(
            f"""
            SELECT {SELECT_COLUMNS}, {", ".join(f"d.{c}" for c in SEARCH_INDEX_COLUMNS)}
            FROM decisions AS d
            ORDER BY d.row_id
            """
        )

        report = ReindexReport()
        width = len(DECISION_COLUMNS)
        assignments = ", ".join(f"{column} = ?" for column in SEARCH_INDEX_COLUMNS)

        for row in result.rows:
            report.scanned += 1
            decision = row_to_decision(row)
            stored_values = [row[width + i] for i in range(len(SEARCH_INDEX_COLUMNS))]
            expected = reindex(decision)

            if all(value is None for value in stored_values):
                report.missing += 1
            elif SearchIndex(*(value or "" for value in stored_values)) == expected:
                continue
            else:
                report.stale += 1

            update = await self._db.execute(
                f"""
                UPDATE decisions SET {assignments}, updated_at = ?
                WHERE id = ? AND updated_at = ?
                """,
                [
                    *expected.as_params(),
                    format_timestamp(datetime.now(UTC)),
                    str(decision.id),
                    row[DECISION_COLUMNS.index("updated_at")],
                ],
            )
            if update.rows_affected > 0:
                report.updated += 1
            else:
                report.skipped_concurrent += 1

        if not report.consistent:
            logger.warning(
                f"Search index drift repaired: stale={report.stale} "
                f"missing={report.missing} skipped_concurrent={report.skipped_concurrent}"
            )
        logger.info(
            f"Reindex complete: scanned={report.scanned} updated={report.updated}"
        )
        return report
