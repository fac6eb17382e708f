from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument

from taskboard.models.task_model import UNSET, Task
from taskboard.utils.db import to_object_id, utc_now


COLLECTION_NAME = "tasks"


class TaskRepository:
    """Owner-scoped CRUD over the ``tasks`` collection.

    The owner id is always part of the query predicate, so a task owned by
    someone else is indistinguishable from one that does not exist.
    """

    def __init__(self, db, clock=None):
        self.collection = db[COLLECTION_NAME]
        self.clock = clock or utc_now

    def list(self, owner_id):
        cursor = self.collection.find({"ownerId": owner_id}).sort("createdAt", ASCENDING)
        return [Task.from_document(doc) for doc in cursor]

    def get(self, task_id, owner_id):
        object_id = to_object_id(task_id)
        if object_id is None:
            return None
        doc = self.collection.find_one({"_id": object_id, "ownerId": owner_id})
        return Task.from_document(doc) if doc else None

    def create(self, payload, owner_id):
        now = self.clock()
        doc = {
            "_id": ObjectId(),
            "title": payload.title.strip(),
            "description": payload.description.strip(),
            "status": payload.status,
            "priority": payload.priority,
            "ownerId": owner_id,
            "createdAt": now,
            "updatedAt": now,
            "dueDate": payload.due_date or None,
        }
        self.collection.insert_one(doc)
        return Task.from_document(doc)

    def update(self, task_id, payload, owner_id):
        object_id = to_object_id(task_id)
        if object_id is None:
            return None

        updates = {
            "title": payload.title.strip(),
            "description": payload.description.strip(),
            "status": payload.status,
            "priority": payload.priority,
            "updatedAt": self.clock(),
        }
        if payload.due_date is not UNSET:
            updates["dueDate"] = payload.due_date

        doc = self.collection.find_one_and_update(
            {"_id": object_id, "ownerId": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        return Task.from_document(doc) if doc else None

    def delete(self, task_id, owner_id):
        object_id = to_object_id(task_id)
        if object_id is None:
            return False
        res = self.collection.delete_one({"_id": object_id, "ownerId": owner_id})
        return res.deleted_count == 1
