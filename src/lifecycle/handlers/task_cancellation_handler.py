import asyncio
from typing import List, Optional

from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class TaskCancellationHandler(IShutdownHandler):
    """
    Cancels every tracked asyncio task except the one running this handler
    and any explicitly excluded tasks.

    Priority: 40 (last)
    """

    shutdown_priority = 40

    def __init__(self, exclude_tasks: Optional[List[asyncio.Task]] = None, grace: float = 0.5):
        self.exclude_tasks = exclude_tasks or []
        self.grace = grace

    async def shutdown(self) -> None:
        current = asyncio.current_task()
        registry = TaskRegistry.instance()

        exclude = list(self.exclude_tasks)
        if current:
            exclude.append(current)

        tasks = registry.get_tasks_for_shutdown(exclude=exclude)
        if not tasks:
            log.debug("No tasks to cancel")
            return

        log.info(f"Cancelling {len(tasks)} background task{'s' if len(tasks) != 1 else ''}...")

        for task in tasks:
            if not task.done():
                task.cancel(msg="shutdown")
                log.debug(f"Cancelled task: {task.get_name()}")

        _, pending = await asyncio.wait(tasks, timeout=self.grace)
        if pending:
            log.warn(f"{len(pending)} tasks still running after cancellation")
        else:
            log.debug("All tasks cancelled")
