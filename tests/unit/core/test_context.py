"""Tests for frcpm.core.context."""

from __future__ import annotations

import threading

import pytest

from frcpm.core.config import Settings
from frcpm.core.context import AppContext, ServiceRegistry
from frcpm.core.exceptions import ServiceNotFoundError
from frcpm.executor.factory import TaskFactory
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor
from frcpm.integration.tba import TheBlueAllianceClient
from frcpm.protocols.dispatcher import InteractiveDispatcher
from frcpm.protocols.executor import Executor
from frcpm.protocols.persistence import PersistenceProvider
from frcpm.services import ProjectService, SubteamService


class TestServiceRegistry:
    """ServiceRegistry tests."""

    def test_register_and_resolve(self) -> None:
        """Registered instances resolve by type."""
        registry = ServiceRegistry()
        executor = SyncExecutor()
        registry.register(Executor, executor)

        assert registry.resolve(Executor) is executor
        assert Executor in registry

    def test_missing_service(self) -> None:
        """Unknown types raise ServiceNotFoundError."""
        with pytest.raises(ServiceNotFoundError):
            ServiceRegistry().resolve(TaskFactory)

    def test_factory_called_once(self) -> None:
        """Factories are lazy and run once."""
        registry = ServiceRegistry()
        calls: list[int] = []

        def factory() -> dict:
            calls.append(1)
            return {}

        registry.register_factory(dict, factory)
        assert calls == []

        first = registry.resolve(dict)
        second = registry.resolve(dict)

        assert first is second
        assert calls == [1]

    def test_factory_thread_safe(self) -> None:
        """Concurrent resolution creates one instance."""
        registry = ServiceRegistry()
        registry.register_factory(list, list)
        results: list[list] = []

        threads = [threading.Thread(target=lambda: results.append(registry.resolve(list))) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(r is results[0] for r in results)

    def test_resolve_by_concrete_type(self) -> None:
        """An instance registered under a protocol resolves by its class."""
        registry = ServiceRegistry()
        executor = SyncExecutor()
        registry.register(Executor, executor)

        assert registry.resolve(SyncExecutor) is executor

    def test_remove(self) -> None:
        """Removed services no longer resolve."""
        registry = ServiceRegistry()
        registry.register(str, "value")
        registry.remove(str)

        assert registry.has(str) is False
        with pytest.raises(ServiceNotFoundError):
            registry.resolve(str)


class TestAppContext:
    """AppContext wiring and lifecycle."""

    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(database_url="sqlite://", worker_count=2, shutdown_timeout=5)

    def test_default_wiring(self, settings: Settings) -> None:
        """Core services are registered by protocol."""
        with AppContext(settings) as context:
            assert context.resolve(Settings) is settings
            assert isinstance(context.resolve(Executor), TaskExecutor)
            assert context.resolve(InteractiveDispatcher) is context.dispatcher
            assert context.resolve(PersistenceProvider) is context.provider
            assert context.resolve(TaskFactory).executor is context.executor

    def test_services_work_end_to_end(self, settings: Settings) -> None:
        """Resolved services run on the context's executor."""
        with AppContext(settings) as context:
            context.provider.create_schema()
            projects = context.resolve(ProjectService)

            assert context.resolve(ProjectService) is projects
            assert context.resolve(SubteamService).count_async().result(timeout=5) == 0

    def test_close_shuts_down(self, settings: Settings) -> None:
        """close() shuts the executor down and is idempotent."""
        context = AppContext(settings).start()
        context.close()
        context.close()

        assert context.is_closed
        assert context.executor.is_shutdown

    def test_cleanups_run_in_reverse(self, settings: Settings) -> None:
        """Cleanups run last-registered first; failures are logged."""
        order: list[str] = []
        context = AppContext(settings, executor=SyncExecutor())

        def broken() -> None:
            raise RuntimeError("cleanup")

        context.add_cleanup("first", lambda: order.append("first"))
        context.add_cleanup("broken", broken)
        context.add_cleanup("second", lambda: order.append("second"))
        context.close()

        assert order == ["second", "first"]

    def test_lazy_clients_closed(self, settings: Settings) -> None:
        """Integration clients are created on demand and closed with the context."""
        context = AppContext(settings.model_copy(update={"tba_api_key": "k"}), executor=SyncExecutor())
        client = context.resolve(TheBlueAllianceClient)
        client._ensure_client()

        context.close()

        assert client._client is None

    def test_supplied_executor_not_shut_down(self, settings: Settings) -> None:
        """Executors passed in belong to the caller."""
        executor = SyncExecutor()
        AppContext(settings, executor=executor).close()

        assert executor.is_shutdown is False

    def test_start_is_idempotent(self, settings: Settings) -> None:
        """start() twice does not restart the loop."""
        context = AppContext(settings)
        try:
            assert context.start() is context
            assert context.start() is context
        finally:
            context.close()
