from taskboard.models.task_model import PRIORITIES, STATUSES, UNSET, Task, TaskPayload
from taskboard.models.user_model import User

__all__ = ["PRIORITIES", "STATUSES", "UNSET", "Task", "TaskPayload", "User"]
