"""Explicit start/run/stop lifecycle with an owned poll loop.

Usage::

    handle = await start(OilFoxConfig.from_env())
    ...
    result = await run_once(handle)   # optional manual cycle
    ...
    await stop(handle)

Cycles triggered by the scheduler and by :func:`run_once` are serialized
on the handle, so at most one cycle is in flight.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import aiohttp

from pyoilfox.client import OilFoxClient
from pyoilfox.config import OilFoxConfig
from pyoilfox.state.sink import NamedValueSink, StatusSink, TokenStore
from pyoilfox.state.status import StatusRecorder
from pyoilfox.state.store import NamedValueStore
from pyoilfox.state.tokens import MemoryTokenStore
from pyoilfox.sync import CycleResult, SyncEngine

_logger = logging.getLogger(__name__)


class PollScheduler:
    """Run *cycle* every *interval* seconds in a background task.

    A cycle that raises is logged and the loop continues with the next
    period; cycles never overlap because the loop awaits each one.
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[CycleResult]],
        interval: float,
        *,
        run_immediately: bool = True,
    ) -> None:
        self._cycle = cycle
        self._interval = interval
        self._run_immediately = run_immediately
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pyoilfox-poll")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        if not self._run_immediately:
            await asyncio.sleep(self._interval)
        while True:
            started = loop.time()
            try:
                await self._cycle()
            except Exception:
                _logger.exception("Poll cycle raised; continuing with the next period")
            await asyncio.sleep(max(0.0, self._interval - (loop.time() - started)))


@dataclass
class SyncHandle:
    """Everything owned by one started synchronization."""

    config: OilFoxConfig
    client: OilFoxClient
    engine: SyncEngine
    scheduler: PollScheduler
    token_store: TokenStore
    sink: NamedValueSink
    status: StatusSink
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_result: CycleResult | None = None


async def run_once(handle: SyncHandle) -> CycleResult:
    """Run one cycle now, waiting for any cycle already in flight."""
    async with handle.lock:
        result = await handle.engine.run_once()
        handle.last_result = result
        return result


async def start(
    config: OilFoxConfig,
    *,
    token_store: TokenStore | None = None,
    sink: NamedValueSink | None = None,
    status: StatusSink | None = None,
    http_session: aiohttp.ClientSession | None = None,
    run_immediately: bool = True,
) -> SyncHandle:
    """Open the client and start polling every ``config.interval`` minutes.

    Sinks default to in-memory implementations. The first cycle runs
    right away unless *run_immediately* is false.
    """
    client = OilFoxClient(config, session=http_session)
    await client.__aenter__()

    token_store = token_store if token_store is not None else MemoryTokenStore()
    sink = sink if sink is not None else NamedValueStore()
    status = status if status is not None else StatusRecorder()
    engine = SyncEngine(client, token_store=token_store, sink=sink, status=status)

    handle: SyncHandle
    scheduler = PollScheduler(lambda: run_once(handle), config.interval_seconds, run_immediately=run_immediately)
    handle = SyncHandle(
        config=config,
        client=client,
        engine=engine,
        scheduler=scheduler,
        token_store=token_store,
        sink=sink,
        status=status,
    )
    scheduler.start()
    _logger.debug("Started polling for %s every %d minute(s)", config.email, config.interval)
    return handle


async def stop(handle: SyncHandle) -> None:
    """Stop polling and close the client.

    A scheduled cycle in flight is cancelled; a manual :func:`run_once` in
    flight is awaited before the client closes.
    """
    await handle.scheduler.stop()
    async with handle.lock:
        await handle.client.__aexit__(None, None, None)
    _logger.debug("Stopped polling for %s", handle.config.email)
