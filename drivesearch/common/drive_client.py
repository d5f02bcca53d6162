"""
Drive Client

Async wrapper around the Google Drive, Docs, Sheets and Slides APIs.

The Google client library is synchronous, so every request is executed in a
worker thread via asyncio.to_thread. httplib2 connections are not thread safe:
each request gets its own authorized transport while the discovery
resources are built once and shared.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httplib2
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger("drivesearch.common.drive_client")

DRIVE_FILE_FIELDS = "files(id, name, mimeType, modifiedTime, webViewLink)"

_SERVICES = {
    "drive": ("drive", "v3"),
    "docs": ("docs", "v1"),
    "sheets": ("sheets", "v4"),
    "slides": ("slides", "v1"),
}


class DriveError(Exception):
    """Error fetching data from the file store."""

    def __init__(self, message: str, status: Optional[int] = None, operation: str = ""):
        super().__init__(message)
        self.status = status
        self.operation = operation

    @classmethod
    def from_http_error(cls, error: HttpError, operation: str) -> "DriveError":
        status = getattr(getattr(error, "resp", None), "status", None)
        if status == 404:
            reason = "not found"
        elif status == 403:
            reason = "permission denied"
        elif status == 401:
            reason = "unauthorized"
        else:
            reason = "request failed"
        return cls(f"{operation}: {reason} ({error})", status=status, operation=operation)


class DriveClient:
    """
    Async client for Google Workspace file content.

    Usage:
        client = DriveClient(credentials)
        files = await client.list_files(q="trashed=false", page_size=10)
        doc = await client.get_document(files[0]["id"])
    """

    def __init__(self, credentials: Any, timeout: float = 60.0):
        """
        Initialize Drive client.

        Args:
            credentials: Pre-authorized google-auth credentials (opaque here)
            timeout: Socket timeout for each HTTP request in seconds
        """
        self._credentials = credentials
        self.timeout = timeout
        self._services: Dict[str, Any] = {}

    def _service(self, service_type: str):
        """Build (once) and return the discovery resource for a service."""
        service = self._services.get(service_type)
        if service is None:
            name, version = _SERVICES[service_type]
            service = build(name, version, credentials=self._credentials, cache_discovery=False)
            self._services[service_type] = service
        return service

    def _new_http(self) -> AuthorizedHttp:
        return AuthorizedHttp(self._credentials, http=httplib2.Http(timeout=self.timeout))

    async def _execute(self, request, operation: str) -> Dict[str, Any]:
        """Run a prepared API request off the event loop."""
        try:
            return await asyncio.to_thread(request.execute, http=self._new_http())
        except HttpError as e:
            raise DriveError.from_http_error(e, operation) from e

    async def list_files(
        self,
        q: str,
        page_size: int,
        fields: str = DRIVE_FILE_FIELDS,
    ) -> List[Dict[str, Any]]:
        """
        Search file metadata.

        Args:
            q: Drive query language expression
            page_size: Maximum number of files to return
            fields: Partial response selector

        Returns:
            List of file metadata dicts
        """
        request = self._service("drive").files().list(q=q, pageSize=page_size, fields=fields)
        response = await self._execute(request, "files.list")
        return response.get("files", [])

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        """Fetch a document including the content of every tab."""
        request = self._service("docs").documents().get(
            documentId=document_id, includeTabsContent=True
        )
        return await self._execute(request, "documents.get")

    async def get_spreadsheet(
        self,
        spreadsheet_id: str,
        fields: str = "properties.title,sheets.properties",
    ) -> Dict[str, Any]:
        """Fetch spreadsheet metadata (sheet titles, indices, grid sizes)."""
        request = self._service("sheets").spreadsheets().get(
            spreadsheetId=spreadsheet_id, fields=fields
        )
        return await self._execute(request, "spreadsheets.get")

    async def get_values(
        self,
        spreadsheet_id: str,
        range_a1: str,
        value_render_option: str = "FORMATTED_VALUE",
    ) -> List[List[Any]]:
        """Fetch cell values for an A1 range."""
        request = self._service("sheets").spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=range_a1,
            valueRenderOption=value_render_option,
        )
        response = await self._execute(request, "spreadsheets.values.get")
        return response.get("values", [])

    async def get_presentation(self, presentation_id: str) -> Dict[str, Any]:
        """Fetch a presentation with all slides and notes pages."""
        request = self._service("slides").presentations().get(presentationId=presentation_id)
        return await self._execute(request, "presentations.get")
