"""
main_asyncio.py — Application entry point for the ASCII animation server
------------------------------------------------------------------------

Responsible for:
- loading configuration
- wiring services (Dependency Injection)
- starting the HTTP server inside the asyncio loop
- graceful shutdown on Ctrl+C, SIGTERM or fatal errors
"""

import sys

# ---------------------------------------------------------------------------
# UTF-8 ENCODING FIX
# ---------------------------------------------------------------------------

# Frames and log symbols are UTF-8; some consoles default to something else
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio

from utils.logger import get_logger, configure_logger
from models.enums import LogCategory
from managers import ConfigManager
from services import ServiceContainer
from api.main import create_app

# === Lifecycle Management ===
from lifecycle import ShutdownCoordinator, APIServerWrapper
from lifecycle.handlers import (
    APIServerShutdownHandler,
    StreamShutdownHandler,
    TaskCancellationHandler,
)
from lifecycle.task_registry import (
    create_tracked_task,
    TaskCategory,
    TaskRegistry
)

# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main() -> int:
    """Main async entry point (dependency injection and event loop startup)."""

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager()
    config = config_manager.load()
    configure_logger(config_manager.log_level, use_colors=config.logging.colors)

    log.info("Starting ASCII animation server...")

    frames_root = config_manager.frames_root
    if not frames_root.is_dir():
        log.warn("Animation root does not exist yet", path=str(frames_root))

    # ========================================================================
    # 2. SERVICE CONTAINER
    # ========================================================================

    log.info("Initializing services...")
    services = ServiceContainer.build(config, frames_root)

    # ========================================================================
    # 3. API SERVER
    # ========================================================================

    log.info("Starting API server task...")

    app = create_app(services)
    api_wrapper = APIServerWrapper(app, host=config.server.host, port=config.server.port)
    api_task = create_tracked_task(
        api_wrapper.start(),
        category=TaskCategory.API,
        description="FastAPI/Uvicorn Server"
    )

    # ========================================================================
    # 4. SHUTDOWN COORDINATOR
    # ========================================================================

    log.info("Initializing shutdown system...")

    coordinator = ShutdownCoordinator()
    coordinator.register(StreamShutdownHandler(services.scheduler))
    coordinator.register(APIServerShutdownHandler(api_wrapper))
    coordinator.register(TaskCancellationHandler())

    loop = asyncio.get_running_loop()
    coordinator.setup_signal_handlers(loop)

    log.info(f"🏁 Listening on port {config.server.port}. Waiting for exit signal...")

    # Wait for shutdown signal (Ctrl+C, SIGTERM) or API server failure
    await coordinator.wait_for_shutdown()

    # Execute shutdown sequence in priority order
    await coordinator.shutdown_all()

    registry = TaskRegistry.instance()
    log.debug(registry.summary())

    if api_task.done() and not api_task.cancelled() and api_task.exception() is not None:
        log.error(f"API server failed: {api_task.exception()}")
        return 1

    log.info("👋 Server shut down cleanly.")
    return 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run() -> None:
    exit_code = 0
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", exc_info=True)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
