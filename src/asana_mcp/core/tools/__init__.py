"""
Tool namespace for Asana MCP.

Every public coroutine here whose first parameter is ``client`` is discovered by
``asana_mcp.core.registry`` and exposed as ``asana_<function name>``.
"""
