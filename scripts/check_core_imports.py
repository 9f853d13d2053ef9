#!/usr/bin/env python3
"""
Fail if core imports transport-specific modules.
Checks all Python files under src/asana_mcp/core/:
- no MCP / web framework imports anywhere in core;
- environment loading (dotenv) only in core/config.py;
- tool modules reach the backend only through AsanaClient, never httpx directly.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "asana_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "fastapi",
    "starlette",
    "uvicorn",
    "mcp",
    "fastmcp",
    "asana_mcp.server",
    "asana_mcp.resources",
)

# module prefix -> core-relative paths allowed to import it
RESTRICTED_PREFIXES = {
    "dotenv": {"config.py"},
    "httpx": {"client.py"},
}


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def is_forbidden(module: str) -> bool:
    return any(_matches(module, prefix) for prefix in FORBIDDEN_PREFIXES)


def is_restricted(module: str, rel_path: str) -> bool:
    return any(
        _matches(module, prefix) and rel_path not in allowed
        for prefix, allowed in RESTRICTED_PREFIXES.items()
    )


def _imported_modules(tree: ast.AST) -> list[str]:
    modules: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            modules.append(node.module)
    return modules


def scan_file(path: Path, core_dir: Path = CORE_DIR) -> list[str]:
    errors: list[str] = []
    rel_path = path.relative_to(core_dir).as_posix()
    tree = ast.parse(path.read_text())
    for mod in _imported_modules(tree):
        if is_forbidden(mod):
            errors.append(f"{path}: forbidden import '{mod}'")
        elif is_restricted(mod, rel_path):
            errors.append(f"{path}: '{mod}' may not be imported outside its owner")
    return errors


def main(core_dir: Path = CORE_DIR) -> int:
    violations: list[str] = []
    for py_file in core_dir.rglob("*.py"):
        violations.extend(scan_file(py_file, core_dir))

    if violations:
        for v in violations:
            print(v, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
