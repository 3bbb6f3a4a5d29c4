"""
Unit tests for network.network module.

Tests:
- Accessors and service filtering
- Exactly-once cleanup under concurrency, failure and cancellation
- Cleanup requested from several threads, each with its own event loop
- Async context manager teardown
- Stop callback
- Signal handler installation, dispatch and the post-cleanup hook
- Finalizer safety net
"""

import asyncio
import gc
import logging
import signal
import threading
import weakref
from unittest.mock import AsyncMock

import pytest

from ethnet.core.logger import LOGGER_NAMESPACE
from ethnet.models import ClientCollection, ExecutionClient, Service, Validator
from ethnet.models.constants import ClientType, ServiceType
from ethnet.network import ApacheConfigServer, Network
from ethnet.network.network import _CleanupGate, _dispatch_signal, _finalize


def make_network(**overrides: object) -> Network:
    fields: dict[str, object] = {
        "name": "ethereum-network-devnet",
        "chain_id": 3151908,
        "enclave_name": "devnet",
    }
    fields.update(overrides)
    return Network(**fields)  # type: ignore[arg-type]


def slow_cleanup(delay: float = 0.02) -> AsyncMock:
    async def _cleanup() -> None:
        await asyncio.sleep(delay)

    return AsyncMock(side_effect=_cleanup)


# =============================================================================
# Accessors
# =============================================================================


class TestAccessors:
    def test_defaults(self) -> None:
        network = make_network()
        assert network.name == "ethereum-network-devnet"
        assert network.chain_id == 3151908
        assert network.enclave_name == "devnet"
        assert len(network.execution_clients) == 0
        assert len(network.consensus_clients) == 0
        assert network.validators == []
        assert network.services == []
        assert network.apache_config is None
        assert network.orphan_on_exit is False
        assert network.is_cleaned is False

    def test_collections_and_lists(self) -> None:
        clients: ClientCollection[ExecutionClient] = ClientCollection()
        clients.add(ExecutionClient(name="el-1-geth", type=ClientType.GETH))
        network = make_network(
            execution_clients=clients,
            validators=[Validator(name="vc-1")],
            services=[
                Service(name="el-1-geth", type=ServiceType.EXECUTION_CLIENT),
                Service(name="prometheus", type=ServiceType.PROMETHEUS),
            ],
            apache_config=ApacheConfigServer("http://localhost:80"),
        )
        assert network.execution_clients is clients
        assert [v.name for v in network.validators] == ["vc-1"]
        assert network.apache_config is not None

    def test_lists_are_copies(self) -> None:
        network = make_network(services=[Service(name="a", type=ServiceType.OTHER)])
        network.services.clear()
        assert len(network.services) == 1

    def test_services_by_type(self) -> None:
        network = make_network(
            services=[
                Service(name="el-1-geth", type=ServiceType.EXECUTION_CLIENT),
                Service(name="prometheus", type=ServiceType.PROMETHEUS),
            ]
        )
        assert [s.name for s in network.services_by_type(ServiceType.PROMETHEUS)] == [
            "prometheus"
        ]
        assert [s.name for s in network.services_by_type("execution")] == ["el-1-geth"]
        assert network.services_by_type(ServiceType.DORA) == []

    def test_repr(self) -> None:
        assert "ethereum-network-devnet" in repr(make_network())


# =============================================================================
# Cleanup
# =============================================================================


class TestCleanup:
    async def test_runs_once(self) -> None:
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        await network.cleanup()
        await network.cleanup()
        cleanup_fn.assert_awaited_once()
        assert network.is_cleaned is True

    async def test_concurrent_callers(self) -> None:
        cleanup_fn = slow_cleanup()
        network = make_network(cleanup_fn=cleanup_fn)
        await asyncio.gather(*(network.cleanup() for _ in range(5)))
        assert cleanup_fn.await_count == 1
        assert network.is_cleaned is True

    async def test_without_callback(self) -> None:
        network = make_network()
        await network.cleanup()
        assert network.is_cleaned is True

    async def test_failure_shared_by_concurrent_callers(self) -> None:
        async def _fail() -> None:
            await asyncio.sleep(0.01)
            raise RuntimeError("destroy failed")

        cleanup_fn = AsyncMock(side_effect=_fail)
        network = make_network(cleanup_fn=cleanup_fn)
        results = await asyncio.gather(
            network.cleanup(), network.cleanup(), return_exceptions=True
        )
        assert all(isinstance(r, RuntimeError) for r in results)
        assert cleanup_fn.await_count == 1
        assert network.is_cleaned is True

    async def test_late_caller_after_failure_is_noop(self) -> None:
        cleanup_fn = AsyncMock(side_effect=RuntimeError("destroy failed"))
        network = make_network(cleanup_fn=cleanup_fn)
        with pytest.raises(RuntimeError, match="destroy failed"):
            await network.cleanup()
        await network.cleanup()
        cleanup_fn.assert_awaited_once()

    async def test_cancelled_caller_does_not_abort(self) -> None:
        release = asyncio.Event()
        finished = asyncio.Event()

        async def _cleanup() -> None:
            await release.wait()
            finished.set()

        network = make_network(cleanup_fn=AsyncMock(side_effect=_cleanup))
        first = asyncio.create_task(network.cleanup())
        second = asyncio.create_task(network.cleanup())
        await asyncio.sleep(0)
        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        release.set()
        await second
        assert finished.is_set()
        assert network.is_cleaned is True

    async def test_logs_lifecycle(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger=LOGGER_NAMESPACE)
        await make_network(cleanup_fn=AsyncMock()).cleanup()
        messages = [r.getMessage() for r in caplog.records]
        assert "cleanup_started" in messages
        assert "cleanup_completed" in messages

    async def test_logs_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger=LOGGER_NAMESPACE)
        network = make_network(cleanup_fn=AsyncMock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError):
            await network.cleanup()
        failed = [r for r in caplog.records if r.getMessage() == "cleanup_failed"]
        assert failed[0].structured_kv == {"enclave": "devnet", "error": "boom"}


class TestCleanupAcrossThreads:
    def _cleanup_from_threads(self, network: Network, count: int = 2) -> list[Exception | None]:
        errors: list[Exception | None] = [None] * count
        barrier = threading.Barrier(count)

        def _worker(index: int) -> None:
            barrier.wait()
            try:
                asyncio.run(network.cleanup())
            except Exception as e:  # noqa: BLE001
                errors[index] = e

        threads = [threading.Thread(target=_worker, args=(i,)) for i in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)
        return errors

    def test_destroys_once(self) -> None:
        cleanup_fn = slow_cleanup(0.2)
        network = make_network(cleanup_fn=cleanup_fn)
        assert self._cleanup_from_threads(network) == [None, None]
        assert cleanup_fn.await_count == 1
        assert network.is_cleaned is True

    def test_failure_seen_by_every_thread(self) -> None:
        async def _fail() -> None:
            await asyncio.sleep(0.2)
            raise RuntimeError("destroy failed")

        cleanup_fn = AsyncMock(side_effect=_fail)
        network = make_network(cleanup_fn=cleanup_fn)
        errors = self._cleanup_from_threads(network)
        assert [str(e) for e in errors] == ["destroy failed", "destroy failed"]
        assert all(isinstance(e, RuntimeError) for e in errors)
        assert cleanup_fn.await_count == 1

    def test_late_thread_is_noop(self) -> None:
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        asyncio.run(network.cleanup())
        assert self._cleanup_from_threads(network, count=1) == [None]
        cleanup_fn.assert_awaited_once()


class TestContextManager:
    async def test_async_with_cleans_up(self) -> None:
        cleanup_fn = AsyncMock()
        async with make_network(cleanup_fn=cleanup_fn) as network:
            assert network.is_cleaned is False
        cleanup_fn.assert_awaited_once()
        assert network.is_cleaned is True

    async def test_cleans_up_on_error(self) -> None:
        cleanup_fn = AsyncMock()
        with pytest.raises(ValueError, match="inside"):
            async with make_network(cleanup_fn=cleanup_fn):
                raise ValueError("inside")
        cleanup_fn.assert_awaited_once()


class TestStop:
    async def test_calls_stop_fn(self) -> None:
        stop_fn = AsyncMock()
        cleanup_fn = AsyncMock()
        network = make_network(stop_fn=stop_fn, cleanup_fn=cleanup_fn)
        await network.stop()
        stop_fn.assert_awaited_once()
        cleanup_fn.assert_not_awaited()
        assert network.is_cleaned is False
        await network.cleanup()

    async def test_without_stop_fn(self) -> None:
        await make_network().stop()


# =============================================================================
# Signal handling
# =============================================================================


class TestSignalHandlers:
    async def test_install_and_remove(self) -> None:
        network = make_network(cleanup_fn=AsyncMock())
        assert network.install_signal_handlers(lambda sig: None) is True
        assert network.install_signal_handlers() is False
        network.remove_signal_handlers()
        assert network._signal_loop is None
        await network.cleanup()

    async def test_cleanup_removes_handlers(self) -> None:
        network = make_network(cleanup_fn=AsyncMock())
        assert network.install_signal_handlers(lambda sig: None) is True
        await network.cleanup()
        assert network._signal_loop is None
        assert network.install_signal_handlers() is False

    async def test_orphan_not_installed(self) -> None:
        network = make_network(cleanup_fn=AsyncMock(), orphan_on_exit=True)
        assert network.install_signal_handlers() is False

    async def test_handle_signal_cleans_up_then_calls_hook(self) -> None:
        received: list[signal.Signals] = []
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        network.install_signal_handlers(received.append)
        await network._handle_signal(signal.SIGTERM, received.append)
        cleanup_fn.assert_awaited_once()
        assert received == [signal.SIGTERM]
        assert network._signal_loop is None

    async def test_shutdown_log_carries_enclave(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger=LOGGER_NAMESPACE)
        network = make_network(cleanup_fn=AsyncMock())
        await network._handle_signal(signal.SIGTERM, lambda sig: None)
        (record,) = [r for r in caplog.records if r.getMessage() == "shutdown_signal"]
        assert record.structured_kv == {"enclave": "devnet", "signal": "SIGTERM"}

    async def test_handle_signal_hook_runs_after_failed_cleanup(self) -> None:
        received: list[signal.Signals] = []
        network = make_network(cleanup_fn=AsyncMock(side_effect=RuntimeError("boom")))
        await network._handle_signal(signal.SIGINT, received.append)
        assert received == [signal.SIGINT]
        assert network.is_cleaned is True

    async def test_dispatch_schedules_cleanup(self) -> None:
        received: list[signal.Signals] = []
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        _dispatch_signal(weakref.ref(network), signal.SIGTERM, received.append)
        for _ in range(10):
            if received:
                break
            await asyncio.sleep(0.01)
        cleanup_fn.assert_awaited_once()
        assert received == [signal.SIGTERM]

    async def test_dispatch_after_collection(self) -> None:
        received: list[signal.Signals] = []
        network = make_network(orphan_on_exit=True)
        ref = weakref.ref(network)
        del network
        gc.collect()
        _dispatch_signal(ref, signal.SIGINT, received.append)
        assert received == [signal.SIGINT]

    async def test_real_signal_delivery(self) -> None:
        received: list[signal.Signals] = []
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        assert network.install_signal_handlers(received.append, signals=(signal.SIGUSR1,))
        signal.raise_signal(signal.SIGUSR1)
        for _ in range(20):
            if received:
                break
            await asyncio.sleep(0.01)
        assert received == [signal.SIGUSR1]
        cleanup_fn.assert_awaited_once()


# =============================================================================
# Finalizer
# =============================================================================


class TestFinalizer:
    def test_orphan_has_no_finalizer(self) -> None:
        assert make_network(cleanup_fn=AsyncMock(), orphan_on_exit=True)._finalizer is None

    def test_no_finalizer_without_cleanup_fn(self) -> None:
        assert make_network()._finalizer is None

    def test_runs_without_loop(self) -> None:
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        del network
        gc.collect()
        cleanup_fn.assert_awaited_once()

    async def test_schedules_on_running_loop(self) -> None:
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        del network
        gc.collect()
        for _ in range(10):
            if cleanup_fn.await_count:
                break
            await asyncio.sleep(0.01)
        cleanup_fn.assert_awaited_once()

    async def test_detached_after_cleanup(self) -> None:
        cleanup_fn = AsyncMock()
        network = make_network(cleanup_fn=cleanup_fn)
        await network.cleanup()
        assert network._finalizer is not None
        assert network._finalizer.alive is False
        del network
        gc.collect()
        cleanup_fn.assert_awaited_once()

    def test_finalize_skips_claimed_gate(self) -> None:
        cleanup_fn = AsyncMock()
        gate = _CleanupGate(cleanup_fn, "devnet")
        assert gate.claim() is True
        _finalize(gate, "devnet")
        cleanup_fn.assert_not_awaited()

    def test_finalize_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger=LOGGER_NAMESPACE)
        gate = _CleanupGate(AsyncMock(side_effect=RuntimeError("boom")), "devnet")
        _finalize(gate, "devnet")
        assert gate.done is True
        messages = [r.getMessage() for r in caplog.records]
        assert "finalizer_cleanup" in messages
        assert "finalizer_cleanup_failed" in messages
