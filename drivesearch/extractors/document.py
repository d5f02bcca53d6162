"""
Document Extractor

Flattens a word-processor document with nested tabs into plain text.

Tabs are visited depth-first, parent before children. Within a tab:
- headings are surrounded by blank lines
- bulleted paragraphs are prefixed with a bullet, indented two spaces per level
- table rows become pipe-separated cells
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..common.schemas import FileFormat
from .base import BaseExtractor, ExtractionError, collapse_blank_lines, join_cells, require_payload

logger = logging.getLogger("drivesearch.extractors.document")

DEFAULT_TAB_TITLE = "Main document"
BULLET = "•"
HEADING_STYLES = ("TITLE", "SUBTITLE")


@dataclass
class DocumentTab:
    """One tab of a document, detached from the tab tree"""
    tab_id: str
    title: str
    level: int
    content: List[Dict[str, Any]] = field(default_factory=list)
    has_child_tabs: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "tabId": self.tab_id,
            "title": self.title,
            "level": self.level,
            "hasChildTabs": self.has_child_tabs,
        }


def flatten_tabs(document: Dict[str, Any]) -> List[DocumentTab]:
    """
    List the document's tabs in document order (depth-first, parent first).

    A document without tabs is represented by a single synthetic tab built
    from the top-level body.
    """
    tabs = document.get("tabs") or []
    if not tabs:
        return [DocumentTab(
            tab_id="default",
            title=DEFAULT_TAB_TITLE,
            level=0,
            content=document.get("body", {}).get("content", []),
        )]

    ordered: List[DocumentTab] = []
    _walk_tabs(tabs, 0, ordered)
    return ordered


def _walk_tabs(tabs: List[Dict[str, Any]], level: int, ordered: List[DocumentTab]) -> None:
    for tab in tabs:
        properties = tab.get("tabProperties", {})
        children = tab.get("childTabs") or []
        ordered.append(DocumentTab(
            tab_id=properties.get("tabId", ""),
            title=properties.get("title", "Untitled tab"),
            level=properties.get("nestingLevel", level),
            content=tab.get("documentTab", {}).get("body", {}).get("content", []),
            has_child_tabs=bool(children),
        ))
        _walk_tabs(children, level + 1, ordered)


def _paragraph_text(paragraph: Dict[str, Any]) -> str:
    return "".join(
        element.get("textRun", {}).get("content", "")
        for element in paragraph.get("elements", [])
    )


def _is_heading(paragraph: Dict[str, Any]) -> bool:
    style = paragraph.get("paragraphStyle", {}).get("namedStyleType", "")
    return style.startswith("HEADING") or style in HEADING_STYLES


def _render_paragraph(paragraph: Dict[str, Any]) -> str:
    text = _paragraph_text(paragraph)
    line = text.rstrip("\n")

    if "bullet" in paragraph:
        indent = "  " * paragraph["bullet"].get("nestingLevel", 0)
        return f"{indent}{BULLET} {line}\n"

    if _is_heading(paragraph) and line.strip():
        return f"\n{line}\n\n"

    return f"{line}\n" if text else ""


def _cell_text(cell: Dict[str, Any]) -> str:
    parts = []
    for element in cell.get("content", []):
        if "paragraph" in element:
            text = _paragraph_text(element["paragraph"]).strip()
            if text:
                parts.append(text)
    return " ".join(parts)


def _render_table(table: Dict[str, Any]) -> str:
    lines = []
    for row in table.get("tableRows", []):
        cells = [_cell_text(cell) for cell in row.get("tableCells", [])]
        if any(cells):
            lines.append(join_cells(cells))
    if not lines:
        return ""
    return "\n" + "\n".join(lines) + "\n\n"


def render_content(content: List[Dict[str, Any]]) -> str:
    """Flatten a tab body's structural elements to text."""
    parts: List[str] = []
    for element in content:
        if "paragraph" in element:
            parts.append(_render_paragraph(element["paragraph"]))
        elif "table" in element:
            parts.append(_render_table(element["table"]))
    return collapse_blank_lines("".join(parts)).strip()


class DocumentExtractor(BaseExtractor):
    """Extractor for documents organized as a tree of tabs."""

    file_format = FileFormat.DOCUMENT

    async def _fetch_tabs(self, file_id: str) -> List[DocumentTab]:
        document = require_payload(await self._client.get_document(file_id), file_id, "documents.get")
        tabs = flatten_tabs(document)
        logger.debug("Document %s has %d tab(s)", file_id, len(tabs))
        return tabs

    async def extract_text(self, file_id: str) -> str:
        texts = [render_content(tab.content) for tab in await self._fetch_tabs(file_id)]
        return "\n\n".join(text for text in texts if text)

    async def list_tabs(self, file_id: str) -> List[DocumentTab]:
        """
        List a document's tabs in document order.

        A document without tabs is reported as its single synthetic tab.
        """
        return await self._fetch_tabs(file_id)

    async def extract_tab_text(self, file_id: str, tab_id: str) -> str:
        """
        Flatten a single tab (children excluded) to plain text.

        Raises:
            ExtractionError: If no tab has the given id
        """
        tabs = await self._fetch_tabs(file_id)
        for tab in tabs:
            if tab.tab_id == tab_id:
                return render_content(tab.content)

        available = ", ".join(f"{tab.tab_id} ({tab.title})" for tab in tabs)
        raise ExtractionError(
            f"documents.get: tab {tab_id!r} not found in {file_id}; available tabs: {available}",
            operation="documents.get",
        )
