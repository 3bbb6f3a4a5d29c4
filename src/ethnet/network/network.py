"""
The discovered network aggregate and its teardown lifecycle.

A [Network][ethnet.network.network.Network] is built once by
[ServiceMapper][ethnet.discovery.mapper.ServiceMapper] and never mutated
afterwards. Its lifecycle has two states, active and cleaned; cleanup is
terminal.

Teardown paths, in order of preference:

1. ``async with network:`` or an explicit ``await network.cleanup()``.
2. Signal handlers installed by
   [install_signal_handlers()][ethnet.network.network.Network.install_signal_handlers]
   (SIGINT/SIGTERM), unless the network is orphaned.
3. A ``weakref.finalize`` safety net that fires when the network is garbage
   collected (or at interpreter exit) without having been cleaned up. It is
   best effort and non-deterministic; never rely on it.

Whatever the path, the destructive action runs at most once.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import signal
import threading
import weakref
from collections.abc import Awaitable, Callable, Iterable, Sequence
from types import TracebackType

from ethnet.core.logger import Logger
from ethnet.models.client import ClientCollection, ConsensusClient, ExecutionClient, Validator
from ethnet.models.service import Service

from .apache import ApacheConfigServer


LifecycleFn = Callable[[], Awaitable[None]]
SignalCallback = Callable[[signal.Signals], None]

HANDLED_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)

logger = Logger("network")

# Strong references to finalizer cleanup tasks scheduled on a running loop.
_background_tasks: set[asyncio.Task[None]] = set()


class _CleanupGate:
    """One-shot guard around the destructive cleanup action.

    Kept separate from [Network][ethnet.network.network.Network] so the
    finalizer can reach it without keeping the network alive. The claim is
    taken under a ``threading.Lock`` because cleanup may be requested from
    several threads, each with its own event loop, and the finalizer may run
    on any thread. The outcome is published on a ``concurrent.futures.Future``
    so callers on a loop other than the one running the action can wait for
    it too.
    """

    def __init__(self, cleanup_fn: LifecycleFn | None, enclave_name: str) -> None:
        self._cleanup_fn = cleanup_fn
        self._logger = logger.bind(enclave=enclave_name)
        self._lock = threading.Lock()
        self._claimed = False
        self._done = False
        self._task: asyncio.Task[None] | None = None
        self._task_loop: asyncio.AbstractEventLoop | None = None
        self._outcome: concurrent.futures.Future[None] = concurrent.futures.Future()

    @property
    def done(self) -> bool:
        return self._done

    def claim(self) -> bool:
        """Claim the single execution. Returns False if already claimed."""
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    async def execute(self) -> None:
        """Run the cleanup action. Callers must hold the claim."""
        self._logger.info("cleanup_started")
        try:
            if self._cleanup_fn is not None:
                await self._cleanup_fn()
        except Exception as e:
            self._logger.error("cleanup_failed", error=str(e))
            self._outcome.set_exception(e)
            raise
        finally:
            self._done = True
            if not self._outcome.done():
                self._outcome.set_result(None)
        self._logger.info("cleanup_completed")

    async def run(self) -> None:
        """Execute once; concurrent callers share the outcome, late callers no-op."""
        loop = asyncio.get_running_loop()
        with self._lock:
            if not self._claimed:
                self._claimed = True
                self._task = loop.create_task(self.execute())
                self._task_loop = loop
            task = self._task if self._task_loop is loop else None
        if self._outcome.done():
            return
        # Shielded so that one cancelled caller does not abort the teardown
        # the others are waiting on.
        if task is not None:
            await asyncio.shield(task)
        else:
            await asyncio.shield(asyncio.wrap_future(self._outcome))


def _log_task_failure(task: asyncio.Task[None]) -> None:
    _background_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("finalizer_cleanup_failed", error=str(task.exception()))


def _finalize(gate: _CleanupGate, enclave_name: str) -> None:
    """Last-resort cleanup for a network collected without explicit cleanup."""
    if not gate.claim():
        return
    enclave_logger = logger.bind(enclave=enclave_name)
    enclave_logger.warning("finalizer_cleanup")
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is None:
        try:
            asyncio.run(gate.execute())
        except Exception as e:  # noqa: BLE001
            enclave_logger.error("finalizer_cleanup_failed", error=str(e))
        return

    task = loop.create_task(gate.execute())
    _background_tasks.add(task)
    task.add_done_callback(_log_task_failure)


def _dispatch_signal(
    ref: weakref.ReferenceType[Network],
    sig: signal.Signals,
    on_signal: SignalCallback | None,
) -> None:
    network = ref()
    if network is None:
        _terminate(sig, on_signal)
        return
    task = asyncio.get_running_loop().create_task(network._handle_signal(sig, on_signal))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


def _terminate(sig: signal.Signals, on_signal: SignalCallback | None) -> None:
    if on_signal is not None:
        on_signal(sig)
        return
    # Restore the default disposition so the process exits the way it
    # would have without our handler.
    signal.signal(sig, signal.SIG_DFL)
    signal.raise_signal(sig)


class Network:
    """A discovered Ethereum test network.

    Attributes:
        name: Network name, ``ethereum-network-<enclave>``.
        chain_id: Chain id (see
            [DEFAULT_CHAIN_ID][ethnet.discovery.mapper.DEFAULT_CHAIN_ID]).
        enclave_name: Enclave hosting the network.
        execution_clients: Execution nodes bucketed by client type.
        consensus_clients: Beacon nodes bucketed by client type.
        validators: Validator clients.
        services: Every service in the enclave, typed.
        apache_config: The config file server, if one was found.

    Args:
        cleanup_fn: Destroys the enclave. Called at most once.
        stop_fn: Stops the enclave without destroying it.
        orphan_on_exit: Leave the enclave running when the process exits:
            no signal handlers and no finalizer.

    Examples:
        ```python
        async with await mapper.map_to_network("devnet") as network:
            for client in network.execution_clients.by_type(ClientType.GETH):
                print(client.rpc_url)
        # enclave destroyed here
        ```
    """

    def __init__(
        self,
        *,
        name: str,
        chain_id: int,
        enclave_name: str,
        execution_clients: ClientCollection[ExecutionClient] | None = None,
        consensus_clients: ClientCollection[ConsensusClient] | None = None,
        validators: Iterable[Validator] = (),
        services: Iterable[Service] = (),
        apache_config: ApacheConfigServer | None = None,
        cleanup_fn: LifecycleFn | None = None,
        stop_fn: LifecycleFn | None = None,
        orphan_on_exit: bool = False,
    ) -> None:
        self._name = name
        self._chain_id = chain_id
        self._enclave_name = enclave_name
        self._execution_clients = (
            execution_clients if execution_clients is not None else ClientCollection()
        )
        self._consensus_clients = (
            consensus_clients if consensus_clients is not None else ClientCollection()
        )
        self._validators = tuple(validators)
        self._services = tuple(services)
        self._apache_config = apache_config
        self._stop_fn = stop_fn
        self._orphan_on_exit = orphan_on_exit

        self._logger = logger.bind(enclave=enclave_name)
        self._gate = _CleanupGate(cleanup_fn, enclave_name)
        self._signal_loop: asyncio.AbstractEventLoop | None = None
        self._signals: tuple[signal.Signals, ...] = ()
        self._finalizer: weakref.finalize | None = None
        if not orphan_on_exit and cleanup_fn is not None:
            self._finalizer = weakref.finalize(self, _finalize, self._gate, enclave_name)

    def __repr__(self) -> str:
        return (
            f"Network(name={self._name!r}, chain_id={self._chain_id}, "
            f"execution={len(self._execution_clients)}, consensus={len(self._consensus_clients)}, "
            f"services={len(self._services)})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def enclave_name(self) -> str:
        return self._enclave_name

    @property
    def execution_clients(self) -> ClientCollection[ExecutionClient]:
        return self._execution_clients

    @property
    def consensus_clients(self) -> ClientCollection[ConsensusClient]:
        return self._consensus_clients

    @property
    def validators(self) -> list[Validator]:
        return list(self._validators)

    @property
    def services(self) -> list[Service]:
        """Every service in the enclave, including unclassified ones."""
        return list(self._services)

    @property
    def apache_config(self) -> ApacheConfigServer | None:
        return self._apache_config

    @property
    def orphan_on_exit(self) -> bool:
        return self._orphan_on_exit

    @property
    def is_cleaned(self) -> bool:
        """Whether the cleanup action has run (successfully or not)."""
        return self._gate.done

    def services_by_type(self, service_type: str) -> list[Service]:
        """Return the services whose type equals *service_type*."""
        return [svc for svc in self._services if svc.type == service_type]

    # -- Lifecycle -----------------------------------------------------------

    async def stop(self) -> None:
        """Stop the enclave's services without destroying it.

        A no-op when the network was built without a stop callback.
        """
        if self._stop_fn is not None:
            await self._stop_fn()

    async def cleanup(self) -> None:
        """Destroy the enclave, exactly once.

        Safe to call concurrently and repeatedly. Callers that overlap with
        the running cleanup receive its outcome (including its exception);
        callers that arrive after it finished return immediately.
        Once cleanup has run, signal handlers are removed and the finalizer
        is detached.
        """
        try:
            await self._gate.run()
        finally:
            if self._gate.done:
                self._detach()

    async def __aenter__(self) -> Network:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.cleanup()

    def install_signal_handlers(
        self,
        on_signal: SignalCallback | None = None,
        signals: Sequence[signal.Signals] = HANDLED_SIGNALS,
    ) -> bool:
        """Clean up the network when the process receives a termination signal.

        Must be called from a coroutine running on the main thread's event
        loop. On receipt of a signal the handler performs best-effort
        cleanup, then calls ``on_signal(sig)``. Without a callback the
        signal's default disposition is restored and the signal re-raised,
        so the process terminates exactly as it would have without the
        handler. The library never exits the process on its own otherwise.

        Args:
            on_signal: Application hook deciding what happens after cleanup.
            signals: Signals to handle.

        Returns:
            True if handlers were installed; False for orphaned networks,
            already cleaned networks, or loops that do not support signal
            handlers (non-main thread, Windows).
        """
        if self._orphan_on_exit or self._gate.done or self._signal_loop is not None:
            return False
        loop = asyncio.get_running_loop()
        ref = weakref.ref(self)
        installed: list[signal.Signals] = []
        try:
            for sig in signals:
                loop.add_signal_handler(sig, _dispatch_signal, ref, sig, on_signal)
                installed.append(sig)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            for sig in installed:
                loop.remove_signal_handler(sig)
            self._logger.debug("signal_handlers_unavailable", error=str(e))
            return False
        self._signal_loop = loop
        self._signals = tuple(installed)
        self._logger.debug("signal_handlers_installed")
        return True

    def remove_signal_handlers(self) -> None:
        """Remove handlers installed by ``install_signal_handlers()``."""
        loop, self._signal_loop = self._signal_loop, None
        if loop is None or loop.is_closed():
            return
        for sig in self._signals:
            loop.remove_signal_handler(sig)

    async def _handle_signal(self, sig: signal.Signals, on_signal: SignalCallback | None) -> None:
        self._logger.warning("shutdown_signal", signal=sig.name)
        self.remove_signal_handlers()
        try:
            await self.cleanup()
        except Exception as e:  # noqa: BLE001
            self._logger.error("signal_cleanup_failed", error=str(e))
        _terminate(sig, on_signal)

    def _detach(self) -> None:
        if self._finalizer is not None:
            self._finalizer.detach()
        with contextlib.suppress(RuntimeError, ValueError):
            self.remove_signal_handlers()
