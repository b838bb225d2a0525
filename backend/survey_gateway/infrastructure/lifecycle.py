"""Process Lifecycle Guard - fail fast on faults that escape every request.

Invariants:
    - Two triggers, both fatal: an unhandled asynchronous failure (asyncio loop
      exception handler) and an uncaught synchronous fault (sys/threading excepthook)
    - Each trigger logs the reason, closes the listener, then exits with status 1
      once the listener reports closed
    - The policy trips at most once; faults after the first are logged only
    - install() runs once per process; there is no recovery path

Design Decisions:
    - Explicit FatalFaultPolicy object wired to the two observation points,
      so tests call the handlers directly instead of raising real faults
    - Exit is deferred to the listener close callback: uvicorn drains open
      connections (best effort) before the process goes away
"""

import asyncio
import logging
import os
import sys
import threading
from types import TracebackType
from typing import Any, Callable, Protocol

import uvicorn

logger = logging.getLogger(__name__)

FATAL_EXIT_CODE = 1


class Listener(Protocol):
    """Anything that can stop accepting connections and report when it has."""

    def close(self, callback: Callable[[], None]) -> None: ...


class UvicornListener:
    """Adapts uvicorn.Server to the Listener contract."""

    def __init__(self, server: uvicorn.Server):
        self.server = server
        self._serving = False
        self._callbacks: list[Callable[[], None]] = []

    async def serve(self) -> None:
        self._serving = True
        try:
            await self.server.serve()
        finally:
            self._serving = False
            callbacks, self._callbacks = self._callbacks, []
            for callback in callbacks:
                callback()

    def close(self, callback: Callable[[], None]) -> None:
        if not self._serving:
            callback()
            return
        self._callbacks.append(callback)
        # uvicorn polls this flag on its main loop tick, from any thread
        self.server.should_exit = True


def _terminate(code: int) -> None:
    logging.shutdown()
    os._exit(code)


class FatalFaultPolicy:
    """Logs a fatal fault, closes the listener, and terminates the process."""

    def __init__(
        self,
        listener: Listener,
        log: logging.Logger | None = None,
        terminate: Callable[[int], Any] = _terminate,
    ):
        self._listener = listener
        self._log = log or logger
        self._exit = terminate
        self._lock = threading.Lock()
        self.tripped = False

    # ─── Observation points ─────────────────────────────────────

    def on_unhandled_rejection(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any],
    ) -> None:
        """asyncio loop exception handler."""
        exc = context.get("exception")
        reason = str(exc) if exc is not None else context.get("message", "unknown")
        self._trip(
            f"Unhandled Rejection: {reason}", "unhandled_rejection",
            _exc_info(exc),
        )

    def on_uncaught_fault(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        """sys.excepthook signature."""
        self._trip(
            f"Uncaught Exception: {exc}", "uncaught_exception",
            (exc_type, exc, tb),
        )

    def on_thread_fault(self, args: threading.ExceptHookArgs) -> None:
        """threading.excepthook signature."""
        if args.exc_type is SystemExit:
            return
        self.on_uncaught_fault(args.exc_type, args.exc_value, args.exc_traceback)

    # ─── Installation ───────────────────────────────────────────

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        loop.set_exception_handler(self.on_unhandled_rejection)
        sys.excepthook = self.on_uncaught_fault
        threading.excepthook = self.on_thread_fault
        logger.debug("Fatal fault handlers installed")

    # ─── Shutdown ───────────────────────────────────────────────

    def _trip(self, message: str, fault: str, exc_info) -> None:
        with self._lock:
            already = self.tripped
            self.tripped = True
        self._log.critical(message, exc_info=exc_info, extra={"fault": fault})
        if already:
            return
        self._listener.close(lambda: self._exit(FATAL_EXIT_CODE))


def _exc_info(exc: BaseException | None):
    if exc is None:
        return None
    return (type(exc), exc, exc.__traceback__)
