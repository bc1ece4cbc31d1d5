"""Git gateway used to normalize workspace roots.

Import from submodules:
- beads_mcp.gateway.git.abc: Git (ABC)
- beads_mcp.gateway.git.real: RealGit
- beads_mcp.gateway.git.fake: FakeGit
"""
