from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from asana_mcp.core.client import AsanaClient, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields, with_opt_fields
from asana_mcp.core.models import SubtaskCreateInput, TaskCreateInput, TaskUpdateInput
from asana_mcp.core.params import parse_optional_json_object, split_list
from asana_mcp.core.tools._collections import data_list, data_object

MAX_TASKS_PER_BATCH = 25

CUSTOM_FIELD_OPERATORS = (
    "value",
    "is_set",
    "starts_with",
    "ends_with",
    "contains",
    "less_than",
    "greater_than",
)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_query_value(v) for v in value)
    return str(value)


def custom_field_params(custom_fields: Mapping[str, Any]) -> Dict[str, str]:
    """
    Translate a custom-field filter mapping into Asana's flat query syntax.

    {"123": "x"}                       -> {"custom_fields.123.value": "x"}
    {"123": ["o1", "o2"]}              -> {"custom_fields.123.value": "o1,o2"}
    {"123": {"is_set": True}}          -> {"custom_fields.123.is_set": "true"}
    {"123.less_than": 5}               -> {"custom_fields.123.less_than": "5"}

    Input key order is preserved in the output.
    """
    params: Dict[str, str] = {}
    for key, spec in custom_fields.items():
        key = str(key).strip()
        if not key:
            raise AsanaValidationError("custom_fields keys must be non-empty.")

        if "." in key:
            params[f"custom_fields.{key}"] = _query_value(spec)
            continue

        if isinstance(spec, Mapping):
            if not spec:
                raise AsanaValidationError(
                    f"custom_fields[{key!r}] must name at least one operator."
                )
            for op, operand in spec.items():
                if op not in CUSTOM_FIELD_OPERATORS:
                    raise AsanaValidationError(
                        f"Unsupported custom field operator {op!r}; "
                        f"expected one of {', '.join(CUSTOM_FIELD_OPERATORS)}."
                    )
                params[f"custom_fields.{key}.{op}"] = _query_value(operand)
            continue

        if spec is None:
            raise AsanaValidationError(
                f"custom_fields[{key!r}] needs a value; use {{'is_set': false}} "
                "to match unset fields."
            )
        params[f"custom_fields.{key}.value"] = _query_value(spec)
    return params


async def search_tasks(
    client: AsanaClient,
    workspace: str,
    text: Optional[str] = None,
    resource_subtype: Optional[str] = None,
    completed: Optional[bool] = None,
    sort_by: Optional[str] = None,
    sort_ascending: Optional[bool] = None,
    custom_fields: Optional[Union[Dict[str, Any], str]] = None,
    opt_fields: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Search tasks in a workspace with advanced filtering options.

    custom_fields maps a custom field gid to a value, a list of enum option gids,
    or an operator mapping such as {"is_set": true} or {"less_than": 10}.
    """
    params: Dict[str, Any] = {}
    if text:
        params["text"] = text
    if resource_subtype:
        params["resource_subtype"] = resource_subtype
    if completed is not None:
        params["completed"] = _query_value(completed)
    if sort_by:
        params["sort_by"] = sort_by
    if sort_ascending is not None:
        params["sort_ascending"] = _query_value(sort_ascending)

    filters = parse_optional_json_object(custom_fields, name="custom_fields")
    if filters:
        params.update(custom_field_params(filters))

    payload = await client.get(
        f"/workspaces/{workspace}/tasks/search",
        params=with_opt_fields(params, opt_fields),
        tool="tasks",
    )
    return data_list(payload)


async def get_task(
    client: AsanaClient, task_id: str, opt_fields: Optional[str] = None
) -> Dict[str, Any]:
    """Get detailed information about a specific task."""
    payload = await client.get(
        f"/tasks/{task_id}", params=build_opt_fields(opt_fields), tool="tasks"
    )
    return data_object(payload)


def _validated(model, **fields: Any):
    try:
        return model(**fields)
    except ValidationError as exc:
        raise AsanaValidationError(str(exc)) from exc


async def create_task(
    client: AsanaClient,
    project_id: str,
    name: str,
    notes: Optional[str] = None,
    html_notes: Optional[str] = None,
    due_on: Optional[str] = None,
    assignee: Optional[str] = None,
    followers: Optional[List[str]] = None,
    parent: Optional[str] = None,
    projects: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Create a new task in a project. Additional projects may be given in projects."""
    data = _validated(
        TaskCreateInput,
        name=name,
        notes=notes,
        html_notes=html_notes,
        due_on=due_on,
        assignee=assignee,
        followers=followers,
        parent=parent,
        projects=projects,
    )
    body = data.to_body()

    memberships = [project_id]
    for gid in data.projects or []:
        if gid not in memberships:
            memberships.append(gid)
    body["projects"] = memberships

    payload = await client.post("/tasks", json={"data": body}, tool="tasks")
    return data_object(payload)


async def update_task(
    client: AsanaClient,
    task_id: str,
    name: Optional[str] = None,
    notes: Optional[str] = None,
    due_on: Optional[str] = None,
    assignee: Optional[str] = None,
    completed: Optional[bool] = None,
) -> Dict[str, Any]:
    """Update an existing task's details. Only provided fields are changed."""
    provided = {
        k: v
        for k, v in {
            "name": name,
            "notes": notes,
            "due_on": due_on,
            "assignee": assignee,
            "completed": completed,
        }.items()
        if v is not None
    }
    if not provided:
        raise AsanaValidationError("Provide at least one field to update.")

    body = _validated(TaskUpdateInput, **provided).to_body()
    payload = await client.put(f"/tasks/{task_id}", json={"data": body}, tool="tasks")
    return data_object(payload)


async def create_subtask(
    client: AsanaClient,
    parent_task_id: str,
    name: str,
    notes: Optional[str] = None,
    due_on: Optional[str] = None,
    assignee: Optional[str] = None,
    opt_fields: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a new subtask for an existing task."""
    body = _validated(
        SubtaskCreateInput, name=name, notes=notes, due_on=due_on, assignee=assignee
    ).to_body()
    payload = await client.post(
        f"/tasks/{parent_task_id}/subtasks",
        json={"data": body},
        params=build_opt_fields(opt_fields),
        tool="tasks",
    )
    return data_object(payload)


async def get_multiple_tasks_by_gid(
    client: AsanaClient,
    task_ids: Union[List[str], str],
    opt_fields: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Get detailed information about multiple tasks by their GIDs (maximum 25 tasks).
    task_ids may be a list or a comma-separated string. Results follow input order.
    """
    ids = split_list(task_ids, name="task_ids")
    if not ids:
        raise AsanaValidationError("task_ids must contain at least one task gid.")
    if len(ids) > MAX_TASKS_PER_BATCH:
        raise AsanaValidationError(
            f"Maximum of {MAX_TASKS_PER_BATCH} task IDs allowed, got {len(ids)}."
        )

    params = build_opt_fields(opt_fields)
    payloads = await asyncio.gather(
        *(client.get(f"/tasks/{gid}", params=params, tool="tasks") for gid in ids)
    )
    return [data_object(p) for p in payloads]
