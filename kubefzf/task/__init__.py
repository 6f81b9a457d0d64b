"""Task tracking module for kubefzf.

Background activities, such as the dump loop of each Store, run as tasks
owned by a task service. Shutting down the service cancels every task it
owns, which is the cancellation signal for the Stores bound to it.
"""

from .context import task_service_context, get_task_service
from .service import TaskService

__all__ = ["get_task_service", "task_service_context", "TaskService"]
