"""Core domain surface for asana-mcp (transport-agnostic)."""

from .assembler import (
    assemble_project_document,
    assemble_workspace_document,
    fetch_or_default,
    shape_custom_field,
)
from .client import (
    AsanaClient,
    AsanaClientError,
    AsanaHTTPError,
    AsanaNotFoundError,
    AsanaParseError,
    AsanaResponseParseError,
    AsanaValidationError,
    PartialAssemblyWarning,
    RetryConfig,
)
from .config import create_client_from_env, load_env_config, load_log_level
from .fields import build_opt_fields
from .params import parse_json_object, split_list
from .registry import (
    discover_tool_modules,
    error_payload,
    iter_tool_functions,
    register_discovered_tools,
    to_json_text,
)

__all__ = [
    # Client
    "AsanaClient",
    "RetryConfig",
    # Exceptions
    "AsanaClientError",
    "AsanaValidationError",
    "AsanaParseError",
    "AsanaResponseParseError",
    "AsanaHTTPError",
    "AsanaNotFoundError",
    "PartialAssemblyWarning",
    # Normalization
    "split_list",
    "parse_json_object",
    "build_opt_fields",
    # Composite documents
    "fetch_or_default",
    "shape_custom_field",
    "assemble_project_document",
    "assemble_workspace_document",
    # Config helpers
    "create_client_from_env",
    "load_env_config",
    "load_log_level",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    "error_payload",
    "to_json_text",
]
