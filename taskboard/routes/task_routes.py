from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from taskboard.errors import NotFoundError
from taskboard.repositories.task_repository import TaskRepository
from taskboard.routes import json_body
from taskboard.utils.db import get_db
from taskboard.utils.validation import validate_task_payload


tasks_bp = Blueprint("tasks", __name__)


def _tasks():
    return TaskRepository(get_db())


@tasks_bp.get("")
@jwt_required()
def list_tasks():
    owner_id = get_jwt_identity()
    return jsonify([task.to_dict() for task in _tasks().list(owner_id)]), 200


@tasks_bp.post("")
@jwt_required()
def create_task():
    owner_id = get_jwt_identity()
    payload = validate_task_payload(json_body())
    task = _tasks().create(payload, owner_id)
    return jsonify(task.to_dict()), 201


@tasks_bp.get("/<task_id>")
@jwt_required()
def get_task(task_id):
    task = _tasks().get(task_id, get_jwt_identity())
    if task is None:
        raise NotFoundError("Task not found")
    return jsonify(task.to_dict()), 200


@tasks_bp.put("/<task_id>")
@jwt_required()
def update_task(task_id):
    owner_id = get_jwt_identity()
    payload = validate_task_payload(json_body())
    task = _tasks().update(task_id, payload, owner_id)
    if task is None:
        raise NotFoundError("Task not found")
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<task_id>")
@jwt_required()
def delete_task(task_id):
    if not _tasks().delete(task_id, get_jwt_identity()):
        raise NotFoundError("Task not found")
    return "", 204
