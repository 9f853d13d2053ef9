from __future__ import annotations

import asyncio
import logging

from mcp.server.fastmcp import FastMCP

from asana_mcp.core.client import AsanaClient
from asana_mcp.core.config import create_client_from_env, load_log_level
from asana_mcp.core.logging import setup_logging
from asana_mcp.core.registry import register_discovered_tools
from asana_mcp.resources import register_resources

SERVER_NAME = "Asana MCP Server"

log = logging.getLogger("asana_mcp.server")


def create_app(client: AsanaClient) -> FastMCP:
    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, client)
    register_resources(app, client)
    return app


# --- Entry point ----------------------------------------------------------- #


async def main() -> None:
    setup_logging(load_log_level())
    client = create_client_from_env()

    log.info("Starting %s on stdio", SERVER_NAME)
    app = create_app(client)
    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
