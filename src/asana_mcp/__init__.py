"""asana_mcp package exports."""

from .core import (
    AsanaClient,
    AsanaClientError,
    AsanaHTTPError,
    AsanaNotFoundError,
    AsanaParseError,
    AsanaResponseParseError,
    AsanaValidationError,
    PartialAssemblyWarning,
    RetryConfig,
    create_client_from_env,
    discover_tool_modules,
    register_discovered_tools,
)
from .server import create_app
from .server import run as run_server

__all__ = [
    # Client
    "AsanaClient",
    "RetryConfig",
    "create_client_from_env",
    # Exceptions
    "AsanaClientError",
    "AsanaValidationError",
    "AsanaParseError",
    "AsanaResponseParseError",
    "AsanaHTTPError",
    "AsanaNotFoundError",
    "PartialAssemblyWarning",
    # Server utilities
    "create_app",
    "run_server",
    "discover_tool_modules",
    "register_discovered_tools",
]
