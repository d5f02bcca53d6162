"""
Drive Search MCP Server

Exposes content-aware search and single-file text extraction as MCP tools.
"""

from .server import MCPServerApp, main

__all__ = ["MCPServerApp", "main"]
