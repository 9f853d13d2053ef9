from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict

from mcp.server.fastmcp import FastMCP

from asana_mcp.core.assembler import (
    assemble_project_document,
    assemble_workspace_document,
)
from asana_mcp.core.client import AsanaClient, AsanaClientError
from asana_mcp.core.registry import error_payload

log = logging.getLogger("asana_mcp.resources")

WORKSPACE_URI = "asana://workspace/{workspace_gid}"
PROJECT_URI = "asana://project/{project_gid}"


async def _render(label: str, build: Callable[[], Awaitable[Dict[str, Any]]]) -> str:
    try:
        document = await build()
    except AsanaClientError as exc:
        log.error("Error reading %s: %s", label, exc)
        return json.dumps(error_payload(exc), indent=2)
    return json.dumps(document, indent=2, ensure_ascii=False)


def register_resources(app: FastMCP, client: AsanaClient) -> None:
    """Expose the composite workspace and project documents as resource templates."""

    @app.resource(WORKSPACE_URI, name="workspace", mime_type="application/json")
    async def workspace_resource(workspace_gid: str) -> str:
        """Workspace name, type, organization flag and email domains."""
        return await _render(
            f"workspace {workspace_gid}",
            lambda: assemble_workspace_document(client, workspace_gid),
        )

    @app.resource(PROJECT_URI, name="project", mime_type="application/json")
    async def project_resource(project_gid: str) -> str:
        """Project details with its sections and custom field configuration."""
        return await _render(
            f"project {project_gid}",
            lambda: assemble_project_document(client, project_gid),
        )


__all__ = ["register_resources", "WORKSPACE_URI", "PROJECT_URI"]
