"""
Drive Search Common Module

Shared infrastructure for the retriever, extractors and MCP server.
"""

from .config import DriveSearchConfig, load_config
from .drive_client import DriveClient, DriveError
from .credentials import FileCredentialProvider, CredentialStatus

__all__ = [
    "DriveSearchConfig",
    "load_config",
    "DriveClient",
    "DriveError",
    "FileCredentialProvider",
    "CredentialStatus",
]
