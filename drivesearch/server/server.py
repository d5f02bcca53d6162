"""
Drive Search MCP Server.

Transport: stdio only.

Tools:
- search_with_analysis: find Docs/Sheets/Slides and rank them by content
- get_document_text / get_spreadsheet_text / get_presentation_text:
  plain text of a single file
- get_document_tabs / get_document_tab_text: tab listing and per-tab text
- get_slide_text: text of one slide by page number
- drive_status: credential and configuration report

Failures are reported as MCP tool errors (isError) via ToolError.
"""

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Any, Annotated, Callable, Dict, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from drivesearch.common.config import DriveSearchConfig, load_config
from drivesearch.common.credentials import CredentialProvider, FileCredentialProvider
from drivesearch.common.drive_client import DriveClient, DriveError
from drivesearch.common.schemas import FileFormat
from drivesearch.extractors import DocumentExtractor, PresentationExtractor, build_extractors
from drivesearch.retriever import build_ranker

logger = logging.getLogger("drivesearch.server")

AUTH_FAILURE_MESSAGE = (
    "Google authentication failed: no usable credentials were found. "
    "Set GOOGLE_APPLICATION_CREDENTIALS or provide an authorized-user token file."
)


class MCPServerApp:
    """
    Main application class for the MCP server.

    Every tool resolves credentials first and fails fast with an
    authentication error before any Drive call is made.
    """
    def __init__(
            self,
            credentials_provider: CredentialProvider,
            config: Optional[DriveSearchConfig] = None,
            mcp_server_name: str = "drive_search_mcp_server",
            client_factory: Callable[[Any], DriveClient] = DriveClient,
        ) -> None:
        """
        Initializes the MCPServerApp.
        Args:
            credentials_provider: Zero-argument callable returning credentials or None.
            config: Loaded configuration (defaults when omitted).
            mcp_server_name: The name of the MCP server.
            client_factory: Builds a DriveClient from credentials.
        """
        self._credentials = credentials_provider
        self.config = config or DriveSearchConfig()
        self._client_factory = client_factory
        self._client: Optional[DriveClient] = None
        self._client_credentials = None
        # mcp
        self.mcp = FastMCP(name=mcp_server_name)

        # ---------- MCP Tools: Search With Analysis ---------- #
        @self.mcp.tool(
            name="search_with_analysis",
            description=(
                "Search Google Docs, Sheets and Slides by name and full text, then read "
                "each match and rank the results by content relevance. "
                "Each result carries a relevance score and an extractive summary. "
                "Files whose content cannot be read are still listed with a zero score."
            ),
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_search_with_analysis(
            query: Annotated[str, Field(description="free-text search query")],
            max_results: Annotated[Optional[int], Field(description="number of results wanted (candidates fetched: twice this, at most 20); server default when omitted")] = None,
        ) -> Dict[str, Any]:
            """
            MCP tool to search and rank files by content.

            Args:
                query (str): Free-text search query.
                max_results (Optional[int]): Requested number of results.
                    Defaults to search.default_max_results.

            Returns:
                Dict[str, Any]: {status, query, totalCount, results}.
            """
            if max_results is None:
                max_results = self.config.search.default_max_results
            client = await self._require_client()
            ranker = build_ranker(client, self.config)
            try:
                response = await ranker.rank_search(query, max_results)
            except DriveError as e:
                logger.error("Search failed for %r: %s", query, e)
                raise ToolError(f"Search failed: {e}") from e
            except Exception as e:
                logger.exception("Unexpected search failure for %r", query)
                raise ToolError(f"Search failed: {e}") from e
            return response.to_payload()

        # ---------- MCP Tools: Single-File Text ---------- #
        @self.mcp.tool(
            name="get_document_text",
            description="Get the plain text of a Google Doc, including every tab.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_document_text(
            document_id: Annotated[str, Field(description="document id")],
        ) -> Dict[str, Any]:
            return await self._extract_text(FileFormat.DOCUMENT, document_id)

        @self.mcp.tool(
            name="get_spreadsheet_text",
            description="Get the plain text of a Google Sheet, one section per grid sheet.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_spreadsheet_text(
            spreadsheet_id: Annotated[str, Field(description="spreadsheet id")],
        ) -> Dict[str, Any]:
            return await self._extract_text(FileFormat.SPREADSHEET, spreadsheet_id)

        @self.mcp.tool(
            name="get_presentation_text",
            description="Get the plain text of Google Slides, including speaker notes.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_presentation_text(
            presentation_id: Annotated[str, Field(description="presentation id")],
        ) -> Dict[str, Any]:
            return await self._extract_text(FileFormat.PRESENTATION, presentation_id)

        # ---------- MCP Tools: Tabs and Slides ---------- #
        @self.mcp.tool(
            name="get_document_tabs",
            description="List the tabs of a Google Doc in document order, with nesting level.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_document_tabs(
            document_id: Annotated[str, Field(description="document id")],
        ) -> Dict[str, Any]:
            """
            Lists a document's tabs.

            Returns:
                Dict[str, Any]: {status, id, tabs: [{tabId, title, level, hasChildTabs}]}.
            """
            extractor = DocumentExtractor(await self._require_client())
            try:
                tabs = await extractor.list_tabs(document_id)
            except DriveError as e:
                logger.error("Failed to list tabs of %s: %s", document_id, e)
                raise ToolError(f"Failed to list tabs of document {document_id}: {e}") from e
            return {"status": "success", "id": document_id, "tabs": [tab.to_payload() for tab in tabs]}

        @self.mcp.tool(
            name="get_document_tab_text",
            description="Get the plain text of one tab of a Google Doc (child tabs excluded).",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_document_tab_text(
            document_id: Annotated[str, Field(description="document id")],
            tab_id: Annotated[str, Field(description="tab id from get_document_tabs")],
        ) -> Dict[str, Any]:
            extractor = DocumentExtractor(await self._require_client())
            try:
                text = await extractor.extract_tab_text(document_id, tab_id)
            except DriveError as e:
                logger.error("Failed to read tab %s of %s: %s", tab_id, document_id, e)
                raise ToolError(f"Failed to read tab {tab_id} of document {document_id}: {e}") from e
            return {"status": "success", "id": document_id, "tabId": tab_id, "text": text}

        @self.mcp.tool(
            name="get_slide_text",
            description="Get the plain text of a single slide, addressed by its 1-based page number.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_slide_text(
            presentation_id: Annotated[str, Field(description="presentation id")],
            page_number: Annotated[int, Field(description="1-based slide number")],
        ) -> Dict[str, Any]:
            extractor = PresentationExtractor(await self._require_client())
            try:
                text = await extractor.extract_slide_text(presentation_id, page_number)
            except DriveError as e:
                logger.error("Failed to read slide %s of %s: %s", page_number, presentation_id, e)
                raise ToolError(f"Failed to read slide {page_number} of presentation {presentation_id}: {e}") from e
            return {"status": "success", "id": presentation_id, "pageNumber": page_number, "text": text}

        # ---------- MCP Tools: Status ---------- #
        @self.mcp.tool(
            name="drive_status",
            description="Report whether Google credentials are available and the active search limits.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_drive_status() -> Dict[str, Any]:
            """
            Returns credential and configuration status.

            Returns:
                Dict with credential source and search limits.
            """
            credentials = await asyncio.to_thread(self._credentials)
            status = getattr(self._credentials, "status", None)
            return {
                "ok": True,
                "credentials_loaded": credentials is not None,
                "credentials_method": getattr(status, "method", "unknown"),
                "credentials_source": getattr(status, "source", ""),
                "max_candidates": self.config.search.max_candidates,
                "candidate_timeout": self.config.search.candidate_timeout,
            }

    async def _require_client(self) -> DriveClient:
        # token refresh does blocking network I/O
        credentials = await asyncio.to_thread(self._credentials)
        if credentials is None:
            logger.warning("Tool call rejected: no Google credentials")
            raise ToolError(AUTH_FAILURE_MESSAGE)
        if self._client is None or credentials is not self._client_credentials:
            self._client = self._client_factory(credentials)
            self._client_credentials = credentials
        return self._client

    async def _extract_text(self, file_format: FileFormat, file_id: str) -> Dict[str, Any]:
        client = await self._require_client()
        search = self.config.search
        extractor = build_extractors(
            client, scan_rows=search.scan_rows, scan_columns=search.scan_columns
        )[file_format]
        try:
            text = await extractor.extract_text(file_id)
        except DriveError as e:
            logger.error("Failed to read %s %s: %s", file_format.value, file_id, e)
            raise ToolError(f"Failed to read {file_format.value} {file_id}: {e}") from e
        return {"status": "success", "id": file_id, "text": text}

    def run(self) -> None:
        """Runs the MCP server using stdio transport."""
        self.mcp.run(transport="stdio")


def main() -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Run the Drive Search MCP server (stdio).")
    parser.add_argument(
        "--server-name",
        default=os.getenv("MCP_SERVER_NAME", "drive_search_mcp_server"),
        help="Advertised MCP server name.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (logs go to stderr).",
    )
    args = parser.parse_args()

    # stdout carries the stdio transport
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    provider = FileCredentialProvider(config.google)
    if provider() is None:
        logger.warning("No Google credentials found; tools will report an authentication error")
    else:
        logger.info("Loaded Google credentials (%s) from %s", provider.status.method, provider.status.source)

    app = MCPServerApp(
        credentials_provider=provider,
        config=config,
        mcp_server_name=args.server_name,
    )

    def _handle_shutdown(signum, frame):
        raise SystemExit(0)
    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is not None:
            signal.signal(sig, _handle_shutdown)

    app.run()


if __name__ == "__main__":
    main()
