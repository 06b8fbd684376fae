"""Application context and service registry.

The context is the one place where the application's long-lived objects
are built and torn down: settings, the interactive dispatcher, the worker
pool, the database provider and the services on top of them. Nothing is
global; code that needs a collaborator receives the context or resolves
it from the registry.

Example:
    >>> from frcpm.core.config import Settings
    >>> from frcpm.core.context import AppContext
    >>> from frcpm.services import SubteamService
    >>> with AppContext(Settings(database_url="sqlite://")) as context:
    ...     context.provider.create_schema()
    ...     context.resolve(SubteamService).count_async().result(timeout=5)
    0
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from frcpm.core.config import Settings, get_settings
from frcpm.core.exceptions import ServiceNotFoundError
from frcpm.database.provider import SQLAlchemyProvider
from frcpm.dispatch.loop import InteractiveLoop
from frcpm.executor.factory import TaskFactory
from frcpm.executor.threaded import TaskExecutor
from frcpm.integration.frc import FrcEventsClient
from frcpm.integration.tba import TheBlueAllianceClient
from frcpm.protocols.dispatcher import InteractiveDispatcher
from frcpm.protocols.executor import Executor
from frcpm.protocols.persistence import PersistenceProvider
from frcpm.services import (
    MilestoneService,
    ProjectService,
    SubteamService,
    TeamMemberService,
)

S = TypeVar("S")

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Maps service types to instances.

    Instances can be registered directly or through a factory that is
    called once, on first resolution. Resolution is thread-safe.

    Example:
        >>> from frcpm.core.context import ServiceRegistry
        >>> registry = ServiceRegistry()
        >>> registry.register_factory(list, lambda: ["created once"])
        >>> registry.resolve(list) is registry.resolve(list)
        True
    """

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}
        self._factories: dict[type, Callable[[], Any]] = {}
        self._lock = threading.RLock()

    def register(self, service_type: type[S], instance: S) -> None:
        with self._lock:
            self._factories.pop(service_type, None)
            self._instances[service_type] = instance

    def register_factory(self, service_type: type[S], factory: Callable[[], S]) -> None:
        with self._lock:
            self._instances.pop(service_type, None)
            self._factories[service_type] = factory

    def resolve(self, service_type: type[S]) -> S:
        """Return the instance registered for ``service_type``.

        Falls back to the first registered instance that is an instance of
        ``service_type``, so resolving a concrete class registered under a
        protocol works.

        Raises:
            ServiceNotFoundError: If nothing matches.
        """
        with self._lock:
            if service_type in self._instances:
                return self._instances[service_type]
            factory = self._factories.pop(service_type, None)
            if factory is not None:
                instance = factory()
                self._instances[service_type] = instance
                return instance
            for instance in self._instances.values():
                if isinstance(instance, service_type):
                    return instance
        raise ServiceNotFoundError(f"No service registered for {service_type.__name__}")

    def has(self, service_type: type) -> bool:
        with self._lock:
            return service_type in self._instances or service_type in self._factories

    def remove(self, service_type: type) -> None:
        with self._lock:
            self._instances.pop(service_type, None)
            self._factories.pop(service_type, None)

    def __contains__(self, service_type: type) -> bool:
        return self.has(service_type)


class AppContext:
    """Owns the application's runtime objects.

    Anything not passed in is built from ``settings`` and then owned (and
    closed) by the context.

    Args:
        settings: Application settings (default: from the environment).
        dispatcher: Interactive dispatcher; an :class:`InteractiveLoop` is
            created and started by :meth:`start` when omitted.
        provider: Persistence provider.
        executor: Executor; a :class:`TaskExecutor` sized by
            ``settings.worker_count`` when omitted.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        dispatcher: InteractiveDispatcher | None = None,
        provider: PersistenceProvider | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = ServiceRegistry()
        self._cleanups: list[tuple[str, Callable[[], object]]] = []
        self._closed = False
        self._started = False

        self._loop: InteractiveLoop | None = None
        if dispatcher is None:
            self._loop = InteractiveLoop()
            dispatcher = self._loop
        self.dispatcher = dispatcher

        if provider is None:
            owned = SQLAlchemyProvider(self.settings.database_url, echo=self.settings.database_echo)
            self.add_cleanup("database", owned.dispose)
            provider = owned
        self.provider = provider

        self._owns_executor = executor is None
        self.executor = executor or TaskExecutor(dispatcher, max_workers=self.settings.worker_count)

        self._register_defaults()

    def _register_defaults(self) -> None:
        registry = self.registry
        registry.register(Settings, self.settings)
        registry.register(InteractiveDispatcher, self.dispatcher)
        registry.register(PersistenceProvider, self.provider)
        registry.register(Executor, self.executor)
        registry.register_factory(TaskFactory, lambda: TaskFactory(self.executor, self.provider))
        for service in (ProjectService, MilestoneService, SubteamService, TeamMemberService):
            registry.register_factory(service, lambda service=service: service(self.provider, self.executor))
        registry.register_factory(TheBlueAllianceClient, lambda: self._closing(TheBlueAllianceClient.from_settings(self.settings)))
        registry.register_factory(FrcEventsClient, lambda: self._closing(FrcEventsClient.from_settings(self.settings)))

    def _closing(self, client: Any) -> Any:
        self.add_cleanup(type(client).__name__, client.close)
        return client

    def __enter__(self) -> AppContext:
        return self.start()

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> AppContext:
        """Start the owned interactive loop, if any."""
        if self._started:
            return self
        self._started = True
        if self._loop is not None:
            self._loop.start()
        logger.debug("Application context started (%d workers)", self.settings.worker_count)
        return self

    def resolve(self, service_type: type[S]) -> S:
        return self.registry.resolve(service_type)

    def add_cleanup(self, name: str, cleanup: Callable[[], object]) -> None:
        """Run ``cleanup`` on :meth:`close`, in reverse registration order."""
        self._cleanups.append((name, cleanup))

    def close(self) -> None:
        """Shut everything down. Idempotent.

        Running tasks finish and their callbacks are delivered before the
        interactive loop stops.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self.executor.shutdown(wait=True)
        if self._loop is not None:
            self._loop.stop(wait=True, timeout=self.settings.shutdown_timeout)
        for name, cleanup in reversed(self._cleanups):
            try:
                cleanup()
            except Exception:
                logger.exception("Cleanup %r failed", name)
        self._cleanups.clear()
        logger.debug("Application context closed")
