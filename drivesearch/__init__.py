"""
Drive Search

Content-aware search over Google Docs, Sheets and Slides, served as MCP tools.

Files are found with the Drive query language, then ranked by reading their
content rather than by metadata alone.

Usage:
    from drivesearch.common import load_config, DriveClient, FileCredentialProvider
    from drivesearch.retriever import build_ranker
    from drivesearch.server import MCPServerApp
"""

__version__ = "0.1.0"
