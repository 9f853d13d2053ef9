from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from asana_mcp.core.client import AsanaClient, AsanaNotFoundError, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields, with_opt_fields
from asana_mcp.core.tools._collections import data_list, data_object, next_offset

log = logging.getLogger("asana_mcp.core.tools.project_statuses")

MIN_PAGE_LIMIT = 1
MAX_PAGE_LIMIT = 100

StatusColor = Literal["green", "yellow", "red"]


async def get_project_status(
    client: AsanaClient, project_status_gid: str, opt_fields: Optional[str] = None
) -> Dict[str, Any]:
    """Get a project status update."""
    payload = await client.get(
        f"/project_statuses/{project_status_gid}",
        params=build_opt_fields(opt_fields),
        tool="project_statuses",
    )
    return data_object(payload)


async def get_project_statuses(
    client: AsanaClient,
    project_gid: str,
    limit: Optional[int] = None,
    offset: Optional[str] = None,
    opt_fields: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Get the status update history for a project, newest first.

    Returns:
        {"items": [...], "next_offset": str | None}
    Pass next_offset back as offset to read the following page.
    """
    params: Dict[str, Any] = {}
    if limit is not None:
        if not (MIN_PAGE_LIMIT <= limit <= MAX_PAGE_LIMIT):
            raise AsanaValidationError(
                f"limit must be between {MIN_PAGE_LIMIT} and {MAX_PAGE_LIMIT}."
            )
        params["limit"] = limit
    if offset:
        params["offset"] = offset

    payload = await client.get(
        f"/projects/{project_gid}/project_statuses",
        params=with_opt_fields(params, opt_fields),
        tool="project_statuses",
    )
    return {"items": data_list(payload), "next_offset": next_offset(payload)}


async def create_project_status(
    client: AsanaClient,
    project_gid: str,
    text: str,
    color: Optional[StatusColor] = None,
    title: Optional[str] = None,
    html_text: Optional[str] = None,
    opt_fields: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a new status update for a project."""
    if color is not None and color not in ("green", "yellow", "red"):
        raise AsanaValidationError("color must be one of: green, yellow, red.")

    body: Dict[str, Any] = {"text": text}
    if color is not None:
        body["color"] = color
    if title is not None:
        body["title"] = title
    if html_text is not None:
        body["html_text"] = html_text

    payload = await client.post(
        f"/projects/{project_gid}/project_statuses",
        json={"data": body},
        params=build_opt_fields(opt_fields),
        tool="project_statuses",
    )
    return data_object(payload)


async def delete_project_status(
    client: AsanaClient, project_status_gid: str
) -> Dict[str, Any]:
    """
    Delete a project status update.

    Deleting a status that no longer exists succeeds with already_deleted=True.
    """
    try:
        await client.delete(
            f"/project_statuses/{project_status_gid}", tool="project_statuses"
        )
    except AsanaNotFoundError:
        log.info(
            "Project status %s not found; treating delete as done",
            project_status_gid,
        )
        return {"gid": project_status_gid, "deleted": True, "already_deleted": True}

    return {"gid": project_status_gid, "deleted": True, "already_deleted": False}
