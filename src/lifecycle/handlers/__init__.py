from .api_server_shutdown_handler import APIServerShutdownHandler
from .stream_shutdown_handler import StreamShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "APIServerShutdownHandler",
    "StreamShutdownHandler",
    "TaskCancellationHandler",
]
