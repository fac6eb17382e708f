from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from taskboard.utils.db import isoformat, utc_now


STATUSES = ("todo", "in-progress", "done")
PRIORITIES = ("low", "medium", "high")


class _Unset:
    """Marker for a payload field that was not sent at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass
class TaskPayload:
    """Normalised create/update input.

    ``due_date`` is tri-state: ``UNSET`` leaves the stored value alone,
    ``None`` clears it, an aware UTC datetime sets it.
    """

    title: str
    description: str
    status: str
    priority: str
    due_date: Union[datetime, None, _Unset] = UNSET


@dataclass
class Task:
    title: str
    description: str
    status: str = "todo"
    priority: str = "medium"  # low | medium | high
    due_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    owner_id: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            description=doc["description"],
            status=doc["status"],
            priority=doc["priority"],
            due_date=doc.get("dueDate"),
            created_at=doc["createdAt"],
            updated_at=doc["updatedAt"],
            owner_id=doc.get("ownerId"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "ownerId": self.owner_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
            "dueDate": isoformat(self.due_date),
        }
