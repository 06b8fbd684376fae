"""Asynchronous repository services.

Every operation runs as a DatabaseTask on the executor: the caller gets a
future immediately, and the optional callbacks run on the interactive
thread once the transaction has committed (or rolled back).

Example:
    >>> from frcpm.database.models import Subteam
    >>> from frcpm.database.provider import SQLAlchemyProvider
    >>> from frcpm.executor.sync import SyncExecutor
    >>> from frcpm.services.base import RepositoryService
    >>> provider = SQLAlchemyProvider("sqlite://")
    >>> provider.create_schema()
    >>> service = RepositoryService(provider, SyncExecutor(), Subteam)
    >>> service.save_async(Subteam(name="Programming")).result().id
    1
    >>> service.count_async().result()
    1
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select

from frcpm.database.models import Base
from frcpm.database.provider import SessionHandle
from frcpm.database.task import DatabaseTask
from frcpm.executor.delivery import failed_future
from frcpm.protocols.executor import Executor, FailureCallback, SuccessCallback
from frcpm.protocols.persistence import PersistenceProvider

M = TypeVar("M", bound=Base)
R = TypeVar("R")


class RepositoryService(Generic[M]):
    """CRUD for one mapped model, executed in the background.

    Subclasses set ``model`` as a class attribute; the base class can also
    be used directly by passing ``model``.

    Args:
        provider: Source of transactional handles.
        executor: Executor running the database tasks.
        model: Mapped class, overriding the class attribute.
    """

    model: type[M]

    def __init__(
        self,
        provider: PersistenceProvider,
        executor: Executor,
        model: type[M] | None = None,
    ) -> None:
        if model is not None:
            self.model = model
        if getattr(self, "model", None) is None:
            raise TypeError(f"{type(self).__name__} needs a model")
        self._provider = provider
        self._executor = executor

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def find_by_id_async(
        self,
        entity_id: Any,
        on_success: SuccessCallback[M | None] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[M | None]:
        """Load one entity, resolving to None when it does not exist."""
        return self.execute_async(
            f"Find {self.entity_name} by ID: {entity_id}",
            lambda handle: handle.session.get(self.model, entity_id),
            on_success,
            on_failure,
        )

    def find_all_async(
        self,
        on_success: SuccessCallback[list[M]] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[list[M]]:
        return self.execute_async(
            f"Find all {self.entity_name}",
            lambda handle: list(handle.session.scalars(select(self.model)).all()),
            on_success,
            on_failure,
        )

    def save_async(
        self,
        entity: M | None,
        on_success: SuccessCallback[M] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[M]:
        """Insert or update ``entity``; resolves to the persisted instance."""
        if entity is None:
            return failed_future(ValueError("Entity cannot be None"))

        def save(handle: SessionHandle) -> M:
            saved = handle.session.merge(entity)
            handle.session.flush()
            return saved

        return self.execute_async(f"Save {self.entity_name}", save, on_success, on_failure)

    def delete_async(
        self,
        entity: M | None,
        on_success: SuccessCallback[None] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[None]:
        if entity is None:
            return failed_future(ValueError("Entity cannot be None"))

        def delete(handle: SessionHandle) -> None:
            handle.session.delete(handle.session.merge(entity))

        return self.execute_async(f"Delete {self.entity_name}", delete, on_success, on_failure)

    def delete_by_id_async(
        self,
        entity_id: Any,
        on_success: SuccessCallback[bool] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[bool]:
        """Delete by primary key; resolves to False if nothing matched."""
        if entity_id is None:
            return failed_future(ValueError("ID cannot be None"))

        def delete(handle: SessionHandle) -> bool:
            entity = handle.session.get(self.model, entity_id)
            if entity is None:
                return False
            handle.session.delete(entity)
            return True

        return self.execute_async(f"Delete {self.entity_name} by ID: {entity_id}", delete, on_success, on_failure)

    def count_async(
        self,
        on_success: SuccessCallback[int] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[int]:
        return self.execute_async(
            f"Count {self.entity_name}",
            lambda handle: handle.session.scalar(select(func.count()).select_from(self.model)),
            on_success,
            on_failure,
        )

    # --- Execution helpers ---

    def execute_async(
        self,
        name: str,
        operation: Callable[[SessionHandle], R],
        on_success: SuccessCallback[R] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[R]:
        """Submit ``operation`` as a database task."""
        task = DatabaseTask(name, operation, self._provider)
        return self._executor.submit_task(task, on_success, on_failure)

    def execute_sync(self, operation: Callable[[SessionHandle], R], name: str = "synchronous operation") -> R:
        """Run ``operation`` transactionally on the calling thread."""
        return DatabaseTask(name, operation, self._provider).run()
