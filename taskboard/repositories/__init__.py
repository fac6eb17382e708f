from taskboard.repositories.task_repository import TaskRepository
from taskboard.repositories.user_repository import UserRepository

__all__ = ["TaskRepository", "UserRepository"]
