"""Persistence provider protocol.

The background core needs exactly four things from a database: get a
handle, begin, commit or roll back, and release. Schema and queries are
the business of whatever the operation does with the handle.

Example:
    >>> from frcpm.protocols.persistence import PersistenceProvider, TransactionalHandle
    >>> hasattr(PersistenceProvider, "acquire_handle")
    True
    >>> sorted(n for n in ("begin", "commit", "rollback", "release") if hasattr(TransactionalHandle, n))
    ['begin', 'commit', 'release', 'rollback']
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransactionalHandle(Protocol):
    """A scoped connection with at most one open transaction."""

    def begin(self) -> None:
        """Start a transaction."""
        ...

    def commit(self) -> None:
        """Commit the open transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the open transaction."""
        ...

    def release(self) -> None:
        """Give the underlying connection back."""
        ...


@runtime_checkable
class PersistenceProvider(Protocol):
    """Source of transactional handles.

    Implementations: SQLAlchemyProvider, in-memory fakes for tests.
    """

    def acquire_handle(self) -> TransactionalHandle:
        """Open a new handle. Each call returns an independent handle."""
        ...
