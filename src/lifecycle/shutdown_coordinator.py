"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, shutdown sequencing, and error handling across
multiple shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Dict

from lifecycle.task_registry import TaskRegistry, TaskCategory
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(StreamShutdownHandler(scheduler))
        coordinator.register(APIServerShutdownHandler(api_wrapper))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    # A failure of a task in these categories brings the process down
    CRITICAL_CATEGORIES = frozenset({TaskCategory.API})

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Initialize shutdown coordinator.

        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._shutdown_trigger: Dict[str, Optional[str]] = {"reason": None}

    @property
    def reason(self) -> Optional[str]:
        return self._shutdown_trigger["reason"]

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have:
        - shutdown_priority property (int)
        - async shutdown() method
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """
        Install SIGINT (Ctrl+C) and SIGTERM handlers for graceful shutdown.
        """
        self._shutdown_event = asyncio.Event()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.trigger(s.name))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def trigger(self, reason: str) -> None:
        """Request shutdown (signal handler, tests, fatal errors)."""
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        if self._shutdown_trigger["reason"] is None:
            self._shutdown_trigger["reason"] = reason
        log.info(f"Shutdown requested: {reason}")
        self._shutdown_event.set()

    def _critical_failure(self) -> bool:
        for record in TaskRegistry.instance().failed():
            if record.info.category in self.CRITICAL_CATEGORIES:
                log.error(
                    f"❌ Critical task failed: {record.info.description} "
                    f"(category: {record.info.category.name})"
                )
                self._shutdown_trigger["reason"] = f"Task failure: {record.info.description}"
                return True
        return False

    def _critical_tasks(self) -> List[asyncio.Task]:
        return [
            r.task for r in TaskRegistry.instance().active()
            if r.info.category in self.CRITICAL_CATEGORIES
        ]

    async def wait_for_shutdown(self) -> None:
        """
        Wait for a shutdown signal or the end of a critical task.

        Raises:
            RuntimeError: If signal handlers weren't setup
        """
        if self._shutdown_event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._shutdown_event.is_set():
            if self._critical_failure():
                return

            critical = self._critical_tasks()
            shutdown_waiter = asyncio.create_task(self._shutdown_event.wait())
            try:
                done, _ = await asyncio.wait(
                    {shutdown_waiter, *critical},
                    timeout=None if critical else 0.5,
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                if not shutdown_waiter.done():
                    shutdown_waiter.cancel()

            if shutdown_waiter in done:
                log.debug("Shutdown triggered by signal handler")
                return

            for task in done:
                if not task.cancelled() and task.exception() is None:
                    # A critical task returning means the server stopped by itself
                    log.warn(f"Critical task finished: {task.get_name()}")
                    self._shutdown_trigger["reason"] = f"Task finished: {task.get_name()}"
                    return

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Handlers are called in descending priority order (highest first),
        each with its own timeout, the whole sequence with a global one.
        """
        log.info("🛑 Initiating graceful shutdown sequence...")
        log.info(f"   Reason: {self.reason or 'UNKNOWN'}")

        sorted_handlers = sorted(
            self._handlers, key=lambda h: h.shutdown_priority, reverse=True
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(
                    f"⚠️  Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)"
                )
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"⚠️  {handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except Exception as e:
                # Continue with other handlers even if one fails
                log.error(f"❌ Error shutting down {handler_name}: {e}", exc_info=True)

        log.info("✓ Shutdown sequence complete")
