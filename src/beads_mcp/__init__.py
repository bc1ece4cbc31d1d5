"""beads-mcp: MCP server that drives the beads (bd) issue tracker CLI.

Every tool call becomes one bd invocation. See `beads-mcp --help`.
"""
