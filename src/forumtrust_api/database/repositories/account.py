"""Account repository for the forum trust layer."""

from asyncpg import Connection
from asyncpg import Record

from forumtrust_api.database.models.account import Account
from forumtrust_api.database.models.base import TrustStatus
from forumtrust_api.database.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for account operations."""

    def __init__(self, db):
        super().__init__(db, "accounts", key_column="did")

    def _record_to_model(self, record: Record) -> Account:
        """Convert database record to Account model."""
        return Account.model_validate(dict(record))

    async def ensure(
        self, account: Account, connection: Connection | None = None
    ) -> Account:
        """Insert the account if it has never been seen, then return it.

        ``account_created_at`` is only written on first sight.
        """
        query = """
            INSERT INTO accounts (did, account_created_at, approved_contribution_count, trust_status)
            VALUES ($1, $2, 0, $3)
            ON CONFLICT (did) DO UPDATE SET did = EXCLUDED.did
            RETURNING *
        """

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(
                query,
                account.did,
                account.account_created_at,
                account.trust_status.value,
            )
            return self._record_to_model(record)

    async def increment_approved(
        self, did: str, connection: Connection | None = None
    ) -> Account | None:
        """Count one more approved contribution for an account."""
        query = """
            UPDATE accounts
            SET approved_contribution_count = approved_contribution_count + 1
            WHERE did = $1
            RETURNING *
        """

        async with self.db.use(connection) as conn:
            record = await conn.fetchrow(query, did)
            return self._record_to_model(record) if record else None

    async def set_trust_status(
        self, did: str, trust_status: TrustStatus, connection: Connection | None = None
    ) -> None:
        """Refresh the denormalized trust status."""
        query = "UPDATE accounts SET trust_status = $2 WHERE did = $1"

        async with self.db.use(connection) as conn:
            await conn.execute(query, did, trust_status.value)
