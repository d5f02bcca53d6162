"""
Presentation Extractor

Renders each slide as a header line (with the slide title), body text from
shapes and tables, and speaker notes under a notes marker.
"""

import logging
from typing import Any, Dict, List

from ..common.schemas import FileFormat
from .base import BaseExtractor, ExtractionError, join_cells, require_payload

logger = logging.getLogger("drivesearch.extractors.presentation")

NO_SLIDES_NOTICE = "This presentation has no slides."
NOTES_MARKER = "[Notes]"


def walk_elements(elements: List[Dict[str, Any]], ordered: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten page elements (descending into groups) in drawing order."""
    for element in elements:
        group = element.get("elementGroup")
        if group is not None:
            walk_elements(group.get("children", []), ordered)
        else:
            ordered.append(element)
    return ordered


def text_content(text: Dict[str, Any]) -> str:
    """Concatenate the text runs of a shape or table cell."""
    return "".join(
        element.get("textRun", {}).get("content", "")
        for element in text.get("textElements", [])
    )


def _table_lines(table: Dict[str, Any]) -> List[str]:
    lines = []
    for row in table.get("tableRows", []):
        cells = [text_content(cell.get("text", {})).strip() for cell in row.get("tableCells", [])]
        if any(cells):
            lines.append(join_cells(cells))
    return lines


def speaker_notes(slide: Dict[str, Any]) -> str:
    notes_page = slide.get("slideProperties", {}).get("notesPage", {})
    notes_id = notes_page.get("notesProperties", {}).get("speakerNotesObjectId")
    if not notes_id:
        return ""
    for element in walk_elements(notes_page.get("pageElements", []), []):
        if element.get("objectId") == notes_id:
            return text_content(element.get("shape", {}).get("text", {})).strip()
    return ""


def render_slide(number: int, slide: Dict[str, Any]) -> str:
    title = ""
    body: List[str] = []

    for element in walk_elements(slide.get("pageElements", []), []):
        if "shape" in element:
            text = text_content(element["shape"].get("text", {})).strip()
            if not text:
                continue
            if not title:
                title = text
            else:
                body.append(text)
        elif "table" in element:
            body.extend(_table_lines(element["table"]))

    lines = [f"Slide {number}: {title}" if title else f"Slide {number}"]
    lines.extend(body)

    notes = speaker_notes(slide)
    if notes:
        lines.append(NOTES_MARKER)
        lines.append(notes)
    return "\n".join(lines)


class PresentationExtractor(BaseExtractor):
    """Extractor for slide decks with nested shapes, tables and notes."""

    file_format = FileFormat.PRESENTATION

    async def extract_text(self, file_id: str) -> str:
        presentation = require_payload(
            await self._client.get_presentation(file_id), file_id, "presentations.get"
        )
        slides = presentation.get("slides") or []
        if not slides:
            logger.info("Presentation %s has no slides", file_id)
            return NO_SLIDES_NOTICE

        return "\n\n".join(
            render_slide(number, slide) for number, slide in enumerate(slides, start=1)
        )

    async def extract_slide_text(self, file_id: str, page_number: int) -> str:
        """
        Render one slide, addressed by its 1-based page number.

        Raises:
            ExtractionError: If the page number is outside 1..slide count
        """
        presentation = require_payload(
            await self._client.get_presentation(file_id), file_id, "presentations.get"
        )
        slides = presentation.get("slides") or []
        if not 1 <= page_number <= len(slides):
            available = f"1-{len(slides)}" if slides else "none"
            raise ExtractionError(
                f"presentations.get: page {page_number} is out of range for {file_id} (available pages: {available})",
                operation="presentations.get",
            )
        return render_slide(page_number, slides[page_number - 1])
