"""
MCP tool probe - a smoke-test harness for MCP servers.

This package connects to a Model Context Protocol server over SSE, performs
the initialize handshake, lists resources and tools, and runs fixed
call-and-log scenarios against each remote tool.
"""

__version__ = "0.1.0"

__all__ = [
    '__version__',
]
