from __future__ import annotations

from typing import Any, Dict, List, Optional

from asana_mcp.core.client import AsanaClient
from asana_mcp.core.fields import build_opt_fields
from asana_mcp.core.tools._collections import data_list


async def get_tasks_for_tag(
    client: AsanaClient, tag_gid: str, opt_fields: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Get tasks associated with a specific tag."""
    payload = await client.get(
        f"/tags/{tag_gid}/tasks", params=build_opt_fields(opt_fields), tool="tags"
    )
    return data_list(payload)


async def get_tags_for_workspace(
    client: AsanaClient, workspace_gid: str, opt_fields: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Get all tags in a workspace."""
    payload = await client.get(
        f"/workspaces/{workspace_gid}/tags",
        params=build_opt_fields(opt_fields),
        tool="tags",
    )
    return data_list(payload)
