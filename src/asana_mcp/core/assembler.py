"""
Composite resource documents.

A document combines one required primary fetch with optional secondary
collections. The primary fetch propagates its errors; each secondary fetch is an
independent result-or-default computation, so a failing one degrades to its
default instead of failing the document.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from .client import (
    AsanaClient,
    AsanaClientError,
    AsanaNotFoundError,
    PartialAssemblyWarning,
)
from .models import CustomFieldDefinition
from .observability import warn_partial
from .tools._collections import data_object
from .tools.projects import get_project_custom_field_settings, get_project_sections
from .tools.workspaces import list_workspaces

log = logging.getLogger("asana_mcp.core.assembler")

T = TypeVar("T")

PROJECT_FIELDS = (
    "name,gid,resource_type,created_at,modified_at,archived,public,notes,color,"
    "default_view,due_date,due_on,start_on,workspace,workspace.name,team,team.name"
)
SECTION_FIELDS = "name,gid,created_at"
CUSTOM_FIELD_SETTING_FIELDS = (
    "custom_field.name,custom_field.gid,custom_field.resource_type,"
    "custom_field.type,custom_field.description,custom_field.enum_options,"
    "custom_field.enum_options.gid,custom_field.enum_options.name,"
    "custom_field.enum_options.enabled,custom_field.precision,custom_field.format"
)
WORKSPACE_FIELDS = "name,gid,resource_type,email_domains,is_organization"


async def fetch_or_default(
    label: str,
    fetch: Callable[[], Awaitable[T]],
    default: T,
    *,
    entity_gid: Optional[str] = None,
) -> T:
    """Await fetch(); on a client error log it and return default instead."""
    try:
        return await fetch()
    except AsanaClientError as exc:
        warn_partial(
            f"Error fetching {label} for {entity_gid}: {exc}",
            PartialAssemblyWarning,
            fetch=label,
            entity_gid=entity_gid,
            error_type=type(exc).__name__,
        )
        return default


def _ref(value: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(value, dict):
        return None
    return {"gid": value.get("gid") or None, "name": value.get("name") or None}


def shape_custom_field(raw: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Reduce a custom field definition to the client-facing shape. Returns None
    when the definition is missing or malformed.
    """
    if not isinstance(raw, dict) or not raw:
        return None
    try:
        field = CustomFieldDefinition.model_validate(raw)
    except ValidationError as exc:
        log.warning("Skipping malformed custom field %s: %s", raw.get("gid"), exc)
        return None

    shaped: Dict[str, Any] = {
        "gid": field.gid or None,
        "name": field.name or None,
        "type": field.resource_type or None,
        "field_type": field.type or None,
        "description": field.description or None,
    }

    if field.type in ("enum", "multi_enum"):
        shaped["enum_options"] = [o.to_summary() for o in field.enabled_options]
    elif field.type == "number":
        shaped["precision"] = field.precision or 0

    return shaped


def shape_custom_fields(settings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Shape the custom_field of each project custom field setting."""
    shaped = (
        shape_custom_field(s.get("custom_field"))
        for s in settings or []
        if isinstance(s, dict)
    )
    return [s for s in shaped if s is not None]


def shape_section(section: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "gid": section.get("gid") or None,
        "name": section.get("name") or None,
        "created_at": section.get("created_at") or None,
    }


def merge_project_document(
    project: Dict[str, Any],
    sections: List[Dict[str, Any]],
    custom_fields: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Every key is always present, with null/false/[] standing in for absent data."""
    return {
        "name": project.get("name") or None,
        "id": project.get("gid") or None,
        "type": project.get("resource_type") or None,
        "created_at": project.get("created_at") or None,
        "modified_at": project.get("modified_at") or None,
        "archived": bool(project.get("archived") or False),
        "public": bool(project.get("public") or False),
        "notes": project.get("notes") or None,
        "color": project.get("color") or None,
        "default_view": project.get("default_view") or None,
        "due_date": project.get("due_date") or None,
        "due_on": project.get("due_on") or None,
        "start_on": project.get("start_on") or None,
        "workspace": _ref(project.get("workspace")),
        "team": _ref(project.get("team")),
        "sections": [shape_section(s) for s in sections or []],
        "custom_fields": custom_fields or [],
    }


async def assemble_project_document(
    client: AsanaClient, project_gid: str
) -> Dict[str, Any]:
    """
    Build the project document: project attributes, sections and shaped custom
    field settings. Only a failure to read the project itself is fatal.
    """
    payload = await client.get(
        f"/projects/{project_gid}",
        params={"opt_fields": PROJECT_FIELDS},
        tool="project_resource",
    )
    project = data_object(payload)
    if not project:
        raise AsanaNotFoundError(
            status_code=404,
            method="GET",
            url=f"{client.base_url}/projects/{project_gid}",
            message=f"Project not found: {project_gid}",
        )

    async def fetch_sections() -> List[Dict[str, Any]]:
        return await get_project_sections(client, project_gid, SECTION_FIELDS)

    async def fetch_custom_fields() -> List[Dict[str, Any]]:
        settings = await get_project_custom_field_settings(
            client, project_gid, CUSTOM_FIELD_SETTING_FIELDS
        )
        return shape_custom_fields(settings)

    sections, custom_fields = await asyncio.gather(
        fetch_or_default("sections", fetch_sections, [], entity_gid=project_gid),
        fetch_or_default(
            "custom_fields", fetch_custom_fields, [], entity_gid=project_gid
        ),
    )
    return merge_project_document(project, sections, custom_fields)


async def assemble_workspace_document(
    client: AsanaClient, workspace_gid: str
) -> Dict[str, Any]:
    """Build the workspace document from the workspace listing."""
    workspaces = await list_workspaces(client, WORKSPACE_FIELDS)
    workspace = next((w for w in workspaces if w.get("gid") == workspace_gid), None)
    if workspace is None:
        raise AsanaNotFoundError(
            status_code=404,
            method="GET",
            url=f"{client.base_url}/workspaces",
            message=f"Workspace not found: {workspace_gid}",
        )

    return {
        "name": workspace.get("name") or None,
        "id": workspace.get("gid") or None,
        "type": workspace.get("resource_type") or None,
        "is_organization": bool(workspace.get("is_organization") or False),
        "email_domains": workspace.get("email_domains") or [],
    }


__all__ = [
    "fetch_or_default",
    "shape_custom_field",
    "shape_custom_fields",
    "merge_project_document",
    "assemble_project_document",
    "assemble_workspace_document",
]
