from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.web import api_view, current_name, current_role, current_user_id, json_body, ok
from ..container import Container
from ..core.constants import POLL_OVERLAP_MS
from ..core.exceptions import ValidationError
from .model import ChainStep, FileAttachment


def _since_param() -> Optional[int]:
    raw = (request.args.get("since") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("'since' must be epoch milliseconds")


def _version(data: dict) -> Optional[int]:
    value = data.get("version")
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("'version' must be an integer")


def _steps(data: dict) -> list[ChainStep]:
    raw = data.get("steps")
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("'steps' must be a list")
    return [ChainStep.from_dict(s) for s in raw]


def _completed_flag(data: dict) -> Optional[bool]:
    value = data.get("completed")
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError("'completed' must be true or false")


def register(app: Flask, container: Container) -> None:
    workflow = container.task_service

    def task_reply(task):
        return ok({"task": task.as_dict()})

    @app.route("/api/tasks", methods=["GET"], endpoint="api_tasks")
    @api_view
    def api_tasks():
        # Read before the query and lagged, so the next ?since= poll overlaps this one.
        server_time = to_epoch_ms(now_local()) - POLL_OVERLAP_MS
        tasks = workflow.list_tasks(since=_since_param())
        return ok({"tasks": [t.as_dict() for t in tasks], "serverTime": server_time})

    @app.route("/api/tasks", methods=["POST"], endpoint="api_create_task")
    @api_view
    def api_create_task():
        data = json_body()
        tasks = workflow.create_chain(
            current_role=current_role(),
            sender_id=current_user_id(),
            sender_name=current_name(),
            title=data.get("title", ""),
            description=data.get("description", ""),
            steps=_steps(data),
            attachment=FileAttachment.from_dict(data.get("attachment")),
            hr_reviewer_id=data.get("hrReviewerId") or None,
        )
        return ok({"tasks": [t.as_dict() for t in tasks]}, 201)

    @app.route("/api/tasks/mine", methods=["GET"], endpoint="api_my_tasks")
    @api_view
    def api_my_tasks():
        tasks = workflow.list_for_assignee(user_id=current_user_id())
        return ok({"tasks": [t.as_dict() for t in tasks]})

    @app.route("/api/tasks/hr", methods=["GET"], endpoint="api_hr_tasks")
    @api_view
    def api_hr_tasks():
        lanes = workflow.list_for_hr()
        return ok({lane: [t.as_dict() for t in tasks] for lane, tasks in lanes.items()})

    @app.route("/api/workflows", methods=["GET"], endpoint="api_workflows")
    @api_view
    def api_workflows():
        chains = workflow.list_workflows()
        return ok({"workflows": [[t.as_dict() for t in chain] for chain in chains]})

    @app.route("/api/tasks/<task_id>", methods=["GET"], endpoint="api_task")
    @api_view
    def api_task(task_id: str):
        return task_reply(workflow.get_task(task_id))

    @app.route("/api/tasks/<task_id>", methods=["PUT"], endpoint="api_edit_task")
    @api_view
    def api_edit_task(task_id: str):
        data = json_body()
        task = workflow.edit_task(
            current_role=current_role(),
            task_id=task_id,
            title=data.get("title"),
            description=data.get("description"),
            attachment=FileAttachment.from_dict(data.get("attachment")),
            expected_version=_version(data),
        )
        return task_reply(task)

    @app.route("/api/tasks/<task_id>", methods=["DELETE"], endpoint="api_delete_task")
    @api_view
    def api_delete_task(task_id: str):
        workflow.delete_task(current_role=current_role(), task_id=task_id)
        return ok()

    @app.route("/api/tasks/<task_id>/forward", methods=["POST"], endpoint="api_forward_task")
    @api_view
    def api_forward_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.forward_to_worker(current_role=current_role(), task_id=task_id, expected_version=_version(data))
        )

    @app.route("/api/tasks/<task_id>/start", methods=["POST"], endpoint="api_start_task")
    @api_view
    def api_start_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.start_progress(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/submit", methods=["POST"], endpoint="api_submit_task")
    @api_view
    def api_submit_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.submit_for_review(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                reviewer=data.get("reviewer", "hr"),
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/return", methods=["POST"], endpoint="api_return_task")
    @api_view
    def api_return_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.return_to_hr(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/move", methods=["POST"], endpoint="api_move_task")
    @api_view
    def api_move_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.move(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                target=data.get("status", ""),
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/complete", methods=["POST"], endpoint="api_complete_task")
    @api_view
    def api_complete_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.complete(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                result_attachment=FileAttachment.from_dict(data.get("resultAttachment")),
                report=data.get("report", ""),
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/approve", methods=["POST"], endpoint="api_approve_task")
    @api_view
    def api_approve_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.approve(current_role=current_role(), task_id=task_id, expected_version=_version(data))
        )

    @app.route("/api/tasks/<task_id>/reject", methods=["POST"], endpoint="api_reject_task")
    @api_view
    def api_reject_task(task_id: str):
        data = json_body()
        return task_reply(
            workflow.reject(current_role=current_role(), task_id=task_id, expected_version=_version(data))
        )

    @app.route("/api/tasks/<task_id>/subtasks", methods=["POST"], endpoint="api_add_subtask")
    @api_view
    def api_add_subtask(task_id: str):
        data = json_body()
        return task_reply(
            workflow.add_sub_task(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                title=data.get("title", ""),
                expected_version=_version(data),
            )
        )

    @app.route("/api/tasks/<task_id>/subtasks/<sub_task_id>/toggle", methods=["POST"], endpoint="api_toggle_subtask")
    @api_view
    def api_toggle_subtask(task_id: str, sub_task_id: str):
        data = json_body()
        return task_reply(
            workflow.toggle_sub_task(
                current_role=current_role(),
                user_id=current_user_id(),
                task_id=task_id,
                sub_task_id=sub_task_id,
                completed=_completed_flag(data),
                expected_version=_version(data),
            )
        )
