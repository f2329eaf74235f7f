"""Interfaces of the federation collaborators this layer depends on.

The identity write client, the federation trust signal and the repo tracker
live outside this package; the application wires concrete implementations
in at startup.
"""

from typing import Any
from typing import Protocol

from pydantic import BaseModel


class WriteResult(BaseModel):
    """Location of a record written to an identity's repository."""

    uri: str
    cid: str


class ContentWriteClient(Protocol):
    """Writes records to the author's own federated repository.

    Implementations raise any exception on failure; callers report it as an
    upstream write failure.
    """

    async def write(
        self, identity: str, record_type: str, record: dict[str, Any]
    ) -> WriteResult: ...

    async def delete(self, identity: str, record_type: str, rkey: str) -> None: ...


class FederationTrustSignal(Protocol):
    """Federation-wide reputation for an identity."""

    async def is_flagged(self, identity: str) -> bool: ...


class RepoTracker(Protocol):
    """Keeps the ingestion process following an identity's repository."""

    async def is_tracked(self, identity: str) -> bool: ...

    async def track(self, identity: str) -> None: ...


class NullTrustSignal:
    """Trust signal used when no label service is configured."""

    async def is_flagged(self, identity: str) -> bool:
        return False


class UnconfiguredWriteClient:
    """Write client that refuses every call until a real one is wired in."""

    async def write(
        self, identity: str, record_type: str, record: dict[str, Any]
    ) -> WriteResult:
        raise RuntimeError("No content write client configured")

    async def delete(self, identity: str, record_type: str, rkey: str) -> None:
        raise RuntimeError("No content write client configured")


class NullRepoTracker:
    """Repo tracker that treats every identity as already followed."""

    async def is_tracked(self, identity: str) -> bool:
        return True

    async def track(self, identity: str) -> None:
        return None
