"""Board state: a local mirror of the user's tasks grouped into columns.

Deletes and drag-moves are applied locally first and rolled back if the
server rejects them. Creates and edits wait for the server's copy of the
task before touching local state.

Drag lifecycle: idle -> dragging(task) -> over(column)* -> dropped | cancelled.
``drag_end`` always returns to idle.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import requests

from taskboard.client import ApiError
from taskboard.models.task_model import STATUSES
from taskboard.utils.db import isoformat


logger = logging.getLogger(__name__)

COLUMN_TITLES: Dict[str, str] = {"todo": "To Do", "in-progress": "In Progress", "done": "Done"}

LOAD_ERROR = "We could not load your tasks. Please refresh or try again later."
DELETE_ERROR = "We could not delete the task. Please try again."
MOVE_ERROR = "We could not move the task. Please try again."
SAVE_ERROR = "We could not save your changes. Please try again."

# Failures the board recovers from; anything else is a bug and propagates
API_FAILURES: Tuple[type, ...] = (ApiError, requests.RequestException)


@dataclass
class Column:
    id: str
    title: str
    tasks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class DragState:
    task_id: Optional[str] = None
    over_status: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.task_id is not None


class Board:
    def __init__(self, api):
        self.api = api
        self.tasks: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self.loading = False
        self.drag = DragState()

    # -------------------- queries --------------------
    def columns(self) -> List[Column]:
        return [
            Column(id=status, title=COLUMN_TITLES[status], tasks=[t for t in self.tasks if t["status"] == status])
            for status in STATUSES
        ]

    def find(self, task_id: str) -> Optional[Dict[str, Any]]:
        for task in self.tasks:
            if task["id"] == task_id:
                return task
        return None

    def stats(self) -> Dict[str, int]:
        counts = {status: 0 for status in STATUSES}
        for task in self.tasks:
            counts[task["status"]] = counts.get(task["status"], 0) + 1
        total = len(self.tasks)
        completion = 0 if total == 0 else round(counts["done"] / total * 100)
        return {
            "total": total,
            "todo": counts["todo"],
            "in_progress": counts["in-progress"],
            "done": counts["done"],
            "completion": completion,
        }

    # -------------------- server sync --------------------
    def load(self) -> None:
        self.loading = True
        try:
            self.tasks = list(self.api.list_tasks())
            self.error = None
        except API_FAILURES as exc:
            logger.error("Error loading tasks: %s", exc)
            self.error = LOAD_ERROR
        finally:
            self.loading = False

    def save_task(self, data: Dict[str, Any], task_id: Optional[str] = None, default_status: str = "todo"):
        """Create (no ``task_id``) or edit a task and merge the server's copy.

        Re-raises on failure so a form can stay open.
        """
        payload = {key: value for key, value in data.items() if key != "id"}
        payload.setdefault("status", default_status)
        try:
            if task_id:
                saved = self.api.update_task(task_id, payload)
                self._replace(saved)
            else:
                saved = self.api.create_task(payload)
                self.tasks = self.tasks + [saved]
        except API_FAILURES as exc:
            logger.error("Error saving task: %s", exc)
            self.error = SAVE_ERROR
            raise
        self.error = None
        return saved

    def delete_task(self, task_id: str) -> bool:
        previous = self.tasks
        self.tasks = [t for t in self.tasks if t["id"] != task_id]
        try:
            self.api.delete_task(task_id)
        except API_FAILURES as exc:
            logger.error("Error deleting task %s: %s", task_id, exc)
            self.tasks = previous
            self.error = DELETE_ERROR
            return False
        self.error = None
        return True

    # -------------------- drag and drop --------------------
    def drag_start(self, task_id: str) -> None:
        self.drag = DragState(task_id=task_id)

    def drag_enter(self, status: str) -> None:
        if not self.drag.active:
            return
        self.drag.over_status = status

    def drag_leave(self, status: str) -> None:
        if self.drag.over_status == status:
            self.drag.over_status = None

    def drag_end(self) -> None:
        self.drag = DragState()

    def drop(self, status: str) -> bool:
        """Move the dragged task into ``status``. Returns True if the server accepted it."""
        if not self.drag.active:
            return False

        task = self.find(self.drag.task_id)
        if task is None or task["status"] == status:
            self.drag_end()
            return False

        previous = self.tasks
        optimistic = dict(task, status=status, updatedAt=isoformat(datetime.now(timezone.utc)))
        self.tasks = [optimistic if t["id"] == task["id"] else t for t in self.tasks]
        self.drag_end()

        try:
            updated = self.api.update_task(
                task["id"],
                {
                    "title": task["title"],
                    "description": task["description"],
                    "priority": task["priority"],
                    "status": status,
                    "dueDate": task.get("dueDate"),
                },
            )
        except API_FAILURES as exc:
            logger.error("Error moving task %s: %s", task["id"], exc)
            self.tasks = previous
            self.error = MOVE_ERROR
            return False

        self._replace(updated)
        self.error = None
        return True

    def _replace(self, updated: Dict[str, Any]) -> None:
        self.tasks = [updated if t["id"] == updated["id"] else t for t in self.tasks]
