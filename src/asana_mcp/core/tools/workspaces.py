from __future__ import annotations

from typing import Any, Dict, List, Optional

from asana_mcp.core.client import AsanaClient
from asana_mcp.core.fields import build_opt_fields
from asana_mcp.core.tools._collections import data_list


async def list_workspaces(
    client: AsanaClient, opt_fields: Optional[str] = None
) -> List[Dict[str, Any]]:
    """List all workspaces available to the authenticated user."""
    payload = await client.get(
        "/workspaces", params=build_opt_fields(opt_fields), tool="workspaces"
    )
    return data_list(payload)
