"""Process runner gateway for the bd CLI.

Import from submodules:
- beads_mcp.gateway.bd.abc: BdRunner (ABC)
- beads_mcp.gateway.bd.real: RealBdRunner, build_bd_env
- beads_mcp.gateway.bd.fake: FakeBdRunner, BdCall
- beads_mcp.gateway.bd.printing: PrintingBdRunner
"""
