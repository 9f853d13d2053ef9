from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from asana_mcp.core.client import AsanaClient, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields
from asana_mcp.core.tools._collections import data_list, data_object

# name is always needed for the client-side pattern match.
SEARCH_DEFAULT_FIELDS = "name"


def _compile_name_pattern(name_pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(name_pattern, re.IGNORECASE)
    except re.error as exc:
        raise AsanaValidationError(
            f"name_pattern is not a valid regular expression: {exc}"
        ) from exc


def _ensure_name_field(opt_fields: Optional[str]) -> Dict[str, str]:
    params = build_opt_fields(opt_fields, default=SEARCH_DEFAULT_FIELDS)
    fields = params["opt_fields"].split(",")
    if "name" not in fields:
        fields.append("name")
    return {"opt_fields": ",".join(fields)}


async def search_projects(
    client: AsanaClient,
    workspace: str,
    name_pattern: str,
    archived: bool = False,
    opt_fields: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Search for projects in a workspace using a case-insensitive regular expression
    on the project name. Archived projects are excluded unless archived=True.
    """
    pattern = _compile_name_pattern(name_pattern)
    params: Dict[str, Any] = {"archived": str(bool(archived)).lower()}
    params.update(_ensure_name_field(opt_fields))

    payload = await client.get(
        f"/workspaces/{workspace}/projects", params=params, tool="projects"
    )
    return [p for p in data_list(payload) if pattern.search(str(p.get("name") or ""))]


async def get_project(
    client: AsanaClient, project_id: str, opt_fields: Optional[str] = None
) -> Dict[str, Any]:
    """Get detailed information about a specific project."""
    payload = await client.get(
        f"/projects/{project_id}", params=build_opt_fields(opt_fields), tool="projects"
    )
    return data_object(payload)


async def get_project_task_counts(
    client: AsanaClient, project_id: str, opt_fields: Optional[str] = None
) -> Dict[str, Any]:
    """Get the number of tasks in a project (task counts must be requested via opt_fields)."""  # noqa: E501
    payload = await client.get(
        f"/projects/{project_id}/task_counts",
        params=build_opt_fields(opt_fields),
        tool="projects",
    )
    return data_object(payload)


async def get_project_sections(
    client: AsanaClient, project_id: str, opt_fields: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Get sections in a project."""
    payload = await client.get(
        f"/projects/{project_id}/sections",
        params=build_opt_fields(opt_fields),
        tool="projects",
    )
    return data_list(payload)


async def get_project_custom_field_settings(
    client: AsanaClient,
    project_id: str,
    opt_fields: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Get the custom field settings configured on a project."""
    payload = await client.get(
        f"/projects/{project_id}/custom_field_settings",
        params=build_opt_fields(opt_fields),
        tool="projects",
    )
    return data_list(payload)
