"""Tests for response shaping and rendering."""

import json

from trellis.models.requests import ResponseFormat
from trellis.tools.formatting import (
    format_task_create_response,
    is_bulk_payload,
    render_json,
    render_response,
    shape_task,
)


class TestShapeTask:
    """Tests for the assigned_to rename."""

    def test_renames_assignee(self) -> None:
        shaped = shape_task({"id": "t1", "assigned_to_user_id": "u1"})
        assert shaped == {"id": "t1", "assigned_to": "u1"}

    def test_falsy_assignee_omitted(self) -> None:
        assert shape_task({"id": "t1", "assigned_to_user_id": None}) == {"id": "t1"}
        assert shape_task({"id": "t1", "assigned_to_user_id": ""}) == {"id": "t1"}

    def test_is_idempotent(self) -> None:
        once = shape_task({"id": "t1", "assigned_to_user_id": "u1"})
        assert shape_task(once) == once

        unassigned = shape_task({"id": "t2", "assigned_to_user_id": None})
        assert shape_task(unassigned) == unassigned

    def test_does_not_mutate_input(self) -> None:
        task = {"id": "t1", "assigned_to_user_id": "u1"}
        shape_task(task)
        assert task == {"id": "t1", "assigned_to_user_id": "u1"}


class TestRendering:
    """Tests for the two output shapes."""

    def test_render_json_pretty_prints(self) -> None:
        text = render_json({"id": "t1", "tags": ["a"]})
        assert text == '{\n  "id": "t1",\n  "tags": [\n    "a"\n  ]\n}'

    def test_render_response_selects_shape(self) -> None:
        payload = {"id": "t1", "title": "A", "project_id": "P1"}
        assert json.loads(render_response(payload, ResponseFormat.JSON)) == payload
        assert render_response(payload, ResponseFormat.STRUCTURED).startswith(
            "# Task Created Successfully"
        )

    def test_bulk_detection(self) -> None:
        assert is_bulk_payload({"created": [], "errors": []})
        assert not is_bulk_payload({"id": "t1", "title": "A"})

    def test_single_display(self) -> None:
        text = format_task_create_response(
            {
                "id": "t1",
                "title": "Write docs",
                "project_id": "P1",
                "status": "todo",
                "priority": "medium",
                "tags": ["docs", "q3"],
                "urls": ["https://example.com"],
                "description": "Everything",
            }
        )

        assert "## Write docs" in text
        assert "**ID:** t1" in text
        assert "**Tags:** docs, q3" in text
        assert "### Description\nEverything" in text
        assert "- https://example.com" in text
        assert "Assigned To" not in text

    def test_bulk_display(self) -> None:
        text = format_task_create_response(
            {
                "success": False,
                "message": "Created 1 of 2 tasks with 1 errors",
                "created": [
                    {"id": "t1", "title": "A", "project_id": "P1", "priority": "low", "status": "todo"}
                ],
                "errors": [
                    {
                        "index": 1,
                        "task": {"project_id": "missing", "title": "B"},
                        "error": {"code": "PROJECT_NOT_FOUND", "message": "Project with ID missing not found"},
                    }
                ],
            }
        )

        assert text.startswith("# Bulk Task Creation Completed with Errors")
        assert "- **Total Tasks:** 2" in text
        assert "1. **A** (ID: t1)" in text
        assert "2. **B** (PROJECT_NOT_FOUND): Project with ID missing not found" in text

    def test_bulk_display_success(self) -> None:
        text = format_task_create_response(
            {"success": True, "message": "Successfully created 0 tasks", "created": [], "errors": []}
        )
        assert text.startswith("# Bulk Task Creation Completed Successfully")
        assert "## Errors" not in text
