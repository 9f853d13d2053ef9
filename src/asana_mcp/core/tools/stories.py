from __future__ import annotations

from typing import Any, Dict, List, Optional

from asana_mcp.core.client import AsanaClient, AsanaValidationError
from asana_mcp.core.fields import build_opt_fields
from asana_mcp.core.tools._collections import data_list, data_object


async def get_task_stories(
    client: AsanaClient, task_id: str, opt_fields: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Get comments and stories for a specific task, oldest first."""
    payload = await client.get(
        f"/tasks/{task_id}/stories",
        params=build_opt_fields(opt_fields),
        tool="stories",
    )
    return data_list(payload)


async def create_task_story(
    client: AsanaClient, task_id: str, text: str, opt_fields: Optional[str] = None
) -> Dict[str, Any]:
    """Create a comment on a task."""
    if not text or not text.strip():
        raise AsanaValidationError("text must not be empty.")

    payload = await client.post(
        f"/tasks/{task_id}/stories",
        json={"data": {"text": text}},
        params=build_opt_fields(opt_fields),
        tool="stories",
    )
    return data_object(payload)
