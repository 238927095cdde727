from __future__ import annotations
import asyncio
import logging
import time
from collections import defaultdict
from typing import Callable, Awaitable, Any, DefaultDict, List, Set

from wolfybot.domain import Event


Handler = Callable[[Event], Any] | Callable[[Event], Awaitable[Any]]

_log = logging.getLogger("wolfybot.eventbus")

SLOW_SYNC_HANDLER_S = 0.05
SLOW_ASYNC_HANDLER_S = 0.1


def _handler_label(handler: Handler) -> str:
    mod = getattr(handler, "__module__", None) or "<?>"
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)
    return f"{mod}.{name}"


async def _run_coro_with_timing(coro: Awaitable[Any], handler: Handler, event: Event) -> None:
    """
    Wrapper for async handlers that records execution time and logs slow or
    crashing handlers. Exceptions never leave the task.
    """
    started = time.perf_counter()
    try:
        await coro
    except Exception:
        _log.warning(
            "event handler crashed handler=%s type=%s",
            _handler_label(handler),
            event.type,
            exc_info=True,
        )
    else:
        duration = time.perf_counter() - started
        if duration >= SLOW_ASYNC_HANDLER_S:
            _log.warning(
                "slow async event handler handler=%s type=%s duration=%.3fs",
                _handler_label(handler),
                event.type,
                duration,
            )


class LocalEventBus:
    """
    In-process, non-blocking event bus.

      - subscribe(prefix, handler)
      - publish(event)

    Notes:
      * prefix "" or "*" subscribes to every event type.
      * async handlers are scheduled as their own task on the running loop,
        so one slow message never holds up the next one.
      * scheduled tasks are tracked until they finish; ``drain()`` waits for them.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def subscribe(self, type_prefix: str, handler: Handler) -> None:
        self._subs[type_prefix].append(handler)
        _log.debug("bus.subscribe prefix=%r handler=%s", type_prefix, _handler_label(handler))

    def _handlers_for(self, event_type: str) -> List[Handler]:
        return [
            h
            for prefix, handlers in list(self._subs.items())
            if prefix in ("", "*") or event_type.startswith(prefix)
            for h in handlers
        ]

    def publish(self, event: Event) -> None:
        handlers = self._handlers_for(event.type)
        _log.debug("bus.publish type=%s source=%s handlers=%d", event.type, event.source, len(handlers))

        for h in handlers:
            started = time.perf_counter()
            try:
                res = h(event)
            except Exception:
                _log.warning(
                    "event handler crashed handler=%s type=%s", _handler_label(h), event.type, exc_info=True
                )
                continue

            if not asyncio.iscoroutine(res):
                duration = time.perf_counter() - started
                if duration >= SLOW_SYNC_HANDLER_S:
                    _log.warning(
                        "slow sync event handler handler=%s type=%s duration=%.3fs",
                        _handler_label(h),
                        event.type,
                        duration,
                    )
                continue

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # no loop (CLI/scripts): run the handler to completion here
                asyncio.run(_run_coro_with_timing(res, h, event))
                continue
            task = loop.create_task(_run_coro_with_timing(res, h, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every task scheduled so far (and any they spawn) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


def emit(bus: LocalEventBus, type_: str, payload: dict, source: str) -> None:
    bus.publish(Event(type=type_, payload=payload, source=source, ts=time.time()))


__all__ = ["Handler", "LocalEventBus", "emit"]
