"""Response shaping and rendering for task creation.

One canonical payload is built per call, then rendered either as pretty JSON
or as markdown display text. Field transforms happen once, in
``shape_task``, never per output shape.
"""

import json
from collections.abc import Mapping
from typing import Any

from trellis.models.requests import ResponseFormat


def shape_task(task: Mapping[str, Any]) -> dict[str, Any]:
    """Expose the stored ``assigned_to_user_id`` as ``assigned_to``.

    The internal field is always removed; ``assigned_to`` is present only when
    the stored value is truthy. Shaping an already shaped task is a no-op.
    """
    shaped = dict(task)
    if "assigned_to_user_id" not in shaped:
        return shaped
    assignee = shaped.pop("assigned_to_user_id")
    if assignee:
        shaped["assigned_to"] = assignee
    else:
        shaped.pop("assigned_to", None)
    return shaped


def is_bulk_payload(payload: Mapping[str, Any]) -> bool:
    return "created" in payload and "errors" in payload


def render_json(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, default=str)


def render_response(payload: Mapping[str, Any], response_format: ResponseFormat) -> str:
    """Render a shaped payload in the requested shape."""
    if response_format == ResponseFormat.JSON:
        return render_json(payload)
    return format_task_create_response(payload)


def format_task_create_response(payload: Mapping[str, Any]) -> str:
    """Render a single task or a bulk result as markdown."""
    if is_bulk_payload(payload):
        return _format_bulk(payload)
    return _format_single(payload)


def _format_single(task: Mapping[str, Any]) -> str:
    lines = [
        "# Task Created Successfully",
        "",
        f"## {task.get('title', '')}",
        "",
        f"**ID:** {task.get('id', '')}",
        f"**Project ID:** {task.get('project_id', '')}",
        f"**Status:** {task.get('status', '')}",
        f"**Priority:** {task.get('priority', '')}",
    ]
    if task.get("task_type"):
        lines.append(f"**Type:** {task['task_type']}")
    if task.get("assigned_to"):
        lines.append(f"**Assigned To:** {task['assigned_to']}")
    if task.get("tags"):
        lines.append(f"**Tags:** {', '.join(task['tags'])}")
    if task.get("created_at"):
        lines.append(f"**Created:** {task['created_at']}")

    for heading, key in (
        ("Description", "description"),
        ("Completion Requirements", "completion_requirements"),
        ("Output Format", "output_format"),
    ):
        if task.get(key):
            lines.extend(["", f"### {heading}", str(task[key])])

    if task.get("urls"):
        lines.extend(["", "### URLs"])
        lines.extend(f"- {url}" for url in task["urls"])

    return "\n".join(lines) + "\n"


def _format_bulk(result: Mapping[str, Any]) -> str:
    created = list(result.get("created", []))
    errors = list(result.get("errors", []))
    total = len(created) + len(errors)
    outcome = "Successfully" if result.get("success") else "with Errors"

    lines = [
        f"# Bulk Task Creation Completed {outcome}",
        "",
        str(result.get("message", "")),
        "",
        "## Summary",
        f"- **Total Tasks:** {total}",
        f"- **Created:** {len(created)}",
        f"- **Errors:** {len(errors)}",
    ]

    if created:
        lines.extend(["", "## Created Tasks"])
        for i, task in enumerate(created, start=1):
            lines.append(f"{i}. **{task.get('title', '')}** (ID: {task.get('id', '')})")
            lines.append(
                f"   Project: {task.get('project_id', '')}"
                f" | Priority: {task.get('priority', '')}"
                f" | Status: {task.get('status', '')}"
            )
            if task.get("assigned_to"):
                lines.append(f"   Assigned To: {task['assigned_to']}")

    if errors:
        lines.extend(["", "## Errors"])
        for entry in errors:
            item = entry.get("task", {})
            error = entry.get("error", {})
            lines.append(
                f"{entry.get('index', 0) + 1}. **{item.get('title', '(untitled)')}**"
                f" ({error.get('code', '')}): {error.get('message', '')}"
            )

    return "\n".join(lines) + "\n"
