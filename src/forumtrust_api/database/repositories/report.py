"""Report repository for content reporting and appeals."""

from datetime import datetime
from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.models.base import AppealStatus
from forumtrust_api.database.models.base import ReportStatus
from forumtrust_api.database.models.base import ResolutionType
from forumtrust_api.database.models.report import Report
from forumtrust_api.database.repositories.base import BaseRepository
from forumtrust_api.pagination import Cursor
from forumtrust_api.pagination import keyset_predicate


class ReportRepository(BaseRepository[Report]):
    """Repository for report database operations.

    State transitions are conditional updates: each one names the state it
    expects and returns ``None`` when the row has moved on.
    """

    def __init__(self, db):
        super().__init__(db, "reports")

    def _record_to_model(self, record: Record) -> Report:
        """Convert database record to Report model."""
        return Report.model_validate(dict(record))

    async def has_pending(self, reporter_did: str, target_uri: str) -> bool:
        """Check if a reporter already has a pending report on a target."""
        query = f"""
            SELECT EXISTS(
                SELECT 1 FROM {self.table_name}
                WHERE reporter_did = $1 AND target_uri = $2 AND status = $3
            )
        """  # nosec B608

        async with self.db.use(None) as conn:
            result = await conn.fetchval(
                query, reporter_did, target_uri, ReportStatus.PENDING.value
            )
            return bool(result)

    async def resolve(
        self,
        pk: UUID,
        *,
        resolution_type: ResolutionType,
        resolved_by: str,
        resolved_at: datetime,
        expected_appeal_status: AppealStatus,
        appeal_status: AppealStatus,
        connection: Connection | None = None,
    ) -> Report | None:
        """Resolve a pending report still in the expected appeal state."""
        query = f"""
            UPDATE {self.table_name}
            SET status = $2,
                resolution_type = $3,
                resolved_by = $4,
                resolved_at = $5,
                appeal_status = $6
            WHERE pk = $1 AND status = $7 AND appeal_status = $8
            RETURNING *
        """  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(
                query,
                pk,
                ReportStatus.RESOLVED.value,
                resolution_type.value,
                resolved_by,
                resolved_at,
                appeal_status.value,
                ReportStatus.PENDING.value,
                expected_appeal_status.value,
            )
            return self._record_to_model(record) if record else None

    async def appeal(
        self,
        pk: UUID,
        *,
        reporter_did: str,
        reason: str,
        appealed_at: datetime,
        connection: Connection | None = None,
    ) -> Report | None:
        """Re-open a dismissed report for review under appeal."""
        query = f"""
            UPDATE {self.table_name}
            SET status = $3,
                resolution_type = NULL,
                appeal_status = $4,
                appeal_reason = $5,
                appealed_at = $6
            WHERE pk = $1
            AND reporter_did = $2
            AND status = $7
            AND resolution_type = $8
            AND appeal_status = $9
            RETURNING *
        """  # nosec B608

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(
                query,
                pk,
                reporter_did,
                ReportStatus.PENDING.value,
                AppealStatus.PENDING.value,
                reason,
                appealed_at,
                ReportStatus.RESOLVED.value,
                ResolutionType.DISMISSED.value,
                AppealStatus.NONE.value,
            )
            return self._record_to_model(record) if record else None

    async def list_reports(
        self,
        *,
        community_did: str | None = None,
        reporter_did: str | None = None,
        status: ReportStatus | None = None,
        cursor: Cursor | None,
        limit: int,
    ) -> list[Report]:
        """List reports newest first, returning up to ``limit + 1`` rows."""
        params: list[Any] = []
        conditions: list[str] = []

        if community_did is not None:
            params.append(community_did)
            conditions.append(f"community_did = ${len(params)}")

        if reporter_did is not None:
            params.append(reporter_did)
            conditions.append(f"reporter_did = ${len(params)}")

        if status is not None:
            params.append(status.value)
            conditions.append(f"status = ${len(params)}")

        if cursor is not None:
            conditions.append(
                keyset_predicate(
                    ordering_column="created_at",
                    tiebreak_column="pk::text",
                    cursor=cursor,
                    params=params,
                )
            )

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit + 1)
        query = f"""
            SELECT * FROM {self.table_name}
            {where}
            ORDER BY created_at DESC, pk::text DESC
            LIMIT ${len(params)}
        """  # nosec B608

        async with self.db.use(None) as conn:
            records = await conn.fetch(query, *params)
            return [self._record_to_model(record) for record in records]

    async def most_reported(self, community_did: str, limit: int) -> list[tuple[str, int]]:
        """Accounts with the most reports against them in a community."""
        query = f"""
            SELECT target_did, COUNT(*)::int AS report_count
            FROM {self.table_name}
            WHERE community_did = $1
            GROUP BY target_did
            ORDER BY report_count DESC, target_did
            LIMIT $2
        """  # nosec B608

        async with self.db.use(None) as conn:
            records = await conn.fetch(query, community_did, limit)
            return [(record["target_did"], record["report_count"]) for record in records]
