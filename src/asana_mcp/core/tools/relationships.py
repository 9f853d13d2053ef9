"""
Task relationship mutations.

Dependencies and dependents are additive: ids are forwarded as given and the
backend keeps the union, so repeating a call does not create duplicates. Parent
linkage is an overwrite; re-sending the current parent is a no-op on the backend.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from asana_mcp.core.client import AsanaClient, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields
from asana_mcp.core.models import ParentSpec
from asana_mcp.core.params import (
    parse_json_object,
    parse_optional_json_object,
    split_list,
)
from asana_mcp.core.tools._collections import data_object


def _relationship_ids(value: Union[List[str], str], *, name: str) -> List[str]:
    ids = split_list(value, name=name)
    if not ids:
        raise AsanaValidationError(f"{name} must contain at least one task gid.")
    return ids


async def _add_relations(
    client: AsanaClient, task_id: str, relation: str, ids: List[str]
) -> Dict[str, Any]:
    action = "addDependencies" if relation == "dependencies" else "addDependents"
    payload = await client.post(
        f"/tasks/{task_id}/{action}",
        json={"data": {relation: ids}},
        tool="relationships",
    )
    # Asana answers with an empty data object on success.
    return {"task_id": task_id, relation: ids, "result": payload.get("data", {})}


async def add_task_dependencies(
    client: AsanaClient, task_id: str, dependencies: Union[List[str], str]
) -> Dict[str, Any]:
    """Add dependencies (tasks this task waits on). Existing ones are kept."""
    ids = _relationship_ids(dependencies, name="dependencies")
    return await _add_relations(client, task_id, "dependencies", ids)


async def add_task_dependents(
    client: AsanaClient, task_id: str, dependents: Union[List[str], str]
) -> Dict[str, Any]:
    """Add dependents (tasks that wait on this task). Existing ones are kept."""
    ids = _relationship_ids(dependents, name="dependents")
    return await _add_relations(client, task_id, "dependents", ids)


def _parent_spec(data: Union[Dict[str, Any], str]) -> ParentSpec:
    raw = parse_json_object(data, name="data")
    # A bare task reference {"gid": X} names the new parent.
    if "parent" not in raw and "gid" in raw:
        raw["parent"] = raw.pop("gid")
    if "parent" not in raw:
        raise AsanaValidationError(
            "data must include 'parent' (a task gid, or null to remove the parent) "
            "or a task reference 'gid'."
        )
    try:
        return ParentSpec.model_validate(raw)
    except ValidationError as exc:
        raise AsanaValidationError(f"Invalid parent specification: {exc}") from exc


async def set_parent_for_task(
    client: AsanaClient,
    data: Union[Dict[str, Any], str],
    task_id: str,
    opts: Optional[Union[Dict[str, Any], str]] = None,
) -> Dict[str, Any]:
    """
    Set or clear the parent of a task.

    data: {"parent": "<gid>" | {"gid": ...} | null, "insert_after"?: gid,
          "insert_before"?: gid}, or a bare task reference {"gid": "<parent gid>"},
          as an object or a JSON string.
    opts: optional {"opt_fields": "..."} as an object or JSON string.
    """
    spec = _parent_spec(data)
    options = parse_optional_json_object(opts, name="opts") or {}

    payload = await client.post(
        f"/tasks/{task_id}/setParent",
        json={"data": spec.to_body()},
        params=build_opt_fields(options.get("opt_fields")),
        tool="relationships",
    )
    return data_object(payload)
