from __future__ import annotations
import asyncio
import contextlib
import uvicorn
from fastapi import FastAPI
from typing import Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)


class APIServerWrapper:
    """
    Runs Uvicorn inside an asyncio task without Uvicorn's signal handlers
    interfering with the shutdown coordinator.

    Behaviour:
      - start() launches uvicorn.Server.serve() as a background task and awaits
        an internal stop event. start() returns only after stop() was called.
      - stop() triggers the stop event, attempts graceful shutdown, and forces
        exit if necessary.
      - Both are safe to call from the shutdown coordinator.
    """

    def __init__(
        self,
        app: FastAPI,
        host: str = "0.0.0.0",
        port: int = 3000,
    ):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    # ----------------------------------------------------------------------
    # INTERNAL
    # ----------------------------------------------------------------------
    def _create_server(self) -> uvicorn.Server:
        """Create a uvicorn.Server instance with disabled signal handlers."""
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )

        server = uvicorn.Server(config)

        # Signals belong to the ShutdownCoordinator (older and newer uvicorn hooks)
        server.install_signal_handlers = lambda: None  # type: ignore
        server.capture_signals = contextlib.nullcontext  # type: ignore

        return server

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    async def start(self, *, wait_started_timeout: float = 5.0) -> None:
        """
        Start uvicorn server in background and wait until stop() is called.

        Schedule start() with create_tracked_task() for a non-blocking start.
        """
        if self._serve_task is not None and not self._serve_task.done():
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"🌐 Launching API server on http://{self.host}:{self.port}")

        self._serve_task = asyncio.create_task(
            self._server.serve(), name="UvicornServeInternal"
        )

        loop = asyncio.get_running_loop()
        deadline = loop.time() + wait_started_timeout
        while loop.time() < deadline:
            if getattr(self._server, "started", False):
                log.info("🌐 API server reported started")
                break
            if self._serve_task.done():
                # serve() returned early: bind failure or startup error
                exc = self._serve_task.exception()
                raise RuntimeError(f"API server failed to start: {exc}")
            await asyncio.sleep(0.05)

        try:
            await self._stop_event.wait()
        except asyncio.CancelledError:
            log.debug("start() cancelled externally, invoking stop()")
            await self.stop()
            raise

        log.debug("APIServerWrapper.start() exiting (stop_event set)")

    async def stop(self, *, shutdown_timeout: float = 2.0, force_exit: bool = True) -> None:
        """
        Stop the API server and release the port.

        Steps:
          1. set stop_event so start() unblocks
          2. set should_exit (and force_exit so open streams do not hold
             shutdown) and let serve() finish on its own
          3. cancel serve task if it overruns shutdown_timeout
        """
        if self._server is None and (self._serve_task is None or self._serve_task.done()):
            log.warn("API server stop() called but server was not running")
            self._stop_event.set()
            return

        log.info("🌐 Stopping API server...")

        self._stop_event.set()

        if self._server is not None:
            self._server.should_exit = True
            if force_exit:
                self._server.force_exit = True

        if self._serve_task and not self._serve_task.done():
            try:
                await asyncio.wait_for(asyncio.shield(self._serve_task), timeout=shutdown_timeout)
                log.info("🌐 API server shutdown completed")
            except asyncio.TimeoutError:
                log.warn("🌐 API server shutdown timeout; cancelling serve task")
            except Exception as e:
                log.error(f"Error during API server shutdown: {e}", exc_info=True)

        if self._serve_task and not self._serve_task.done():
            self._serve_task.cancel()
            try:
                await asyncio.wait_for(self._serve_task, timeout=1.0)
            except asyncio.CancelledError:
                log.debug("Uvicorn serve task cancelled cleanly")
            except asyncio.TimeoutError:
                log.debug("Uvicorn serve task did not stop in time")

        self._server = None
        self._serve_task = None

        log.info("🌐 API server stopped and port released")

    # ----------------------------------------------------------------------
    # PROPERTIES
    # ----------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        """Return whether a uvicorn serve task is active."""
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._serve_task

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
