"""
Tests for format-specific text extractors

Documents (tabs, headings, bullets, tables), spreadsheets (range sizing,
multiple sheets, cell formatting) and presentations (titles, tables, notes).
"""

import pytest

from drivesearch.tests.fakes import doc_table, document, paragraph, shape, slide


def _tabbed_document():
    def tab(tab_id, title, text, level, children=()):
        return {
            "tabProperties": {"tabId": tab_id, "title": title, "nestingLevel": level},
            "documentTab": {"body": {"content": [paragraph(text)]}},
            "childTabs": list(children),
        }

    return {"tabs": [
        tab("t.parent", "Plan", "Plan body", 0, [tab("t.child", "Risks", "Risk body", 1)]),
        tab("t.other", "Archive", "Old notes", 0),
    ]}


class TestDocumentExtractor:
    """Tests for DocumentExtractor"""

    @pytest.fixture
    def extractor(self, drive):
        from drivesearch.extractors import DocumentExtractor
        return DocumentExtractor(drive)

    @pytest.mark.asyncio
    async def test_plain_paragraphs(self, drive, extractor):
        drive.documents["d1"] = document(paragraph("First line."), paragraph("Second line."))

        text = await extractor.extract_text("d1")

        assert text == "First line.\nSecond line."

    @pytest.mark.asyncio
    async def test_headings_bullets_and_tables(self, drive, extractor):
        drive.documents["d1"] = document(
            paragraph("Overview", style="HEADING_1"),
            paragraph("Goals", bullet_level=0),
            paragraph("Ship v2", bullet_level=1),
            doc_table([["Owner", "Due"], ["Ana", "May"]]),
            paragraph("Done."),
        )

        text = await extractor.extract_text("d1")

        assert text == (
            "Overview\n"
            "\n"
            "• Goals\n"
            "  • Ship v2\n"
            "\n"
            "Owner | Due\n"
            "Ana | May\n"
            "\n"
            "Done."
        )

    @pytest.mark.asyncio
    async def test_nested_tabs_depth_first(self, drive, extractor):
        def tab(tab_id, text, level, children=()):
            return {
                "tabProperties": {"tabId": tab_id, "title": tab_id, "nestingLevel": level},
                "documentTab": {"body": {"content": [paragraph(text)]}},
                "childTabs": list(children),
            }

        drive.documents["d1"] = {"tabs": [
            tab("parent", "Parent text", 0, [tab("child", "Child text", 1)]),
            tab("sibling", "Sibling text", 0),
        ]}

        text = await extractor.extract_text("d1")

        assert text == "Parent text\n\nChild text\n\nSibling text"

    @pytest.mark.asyncio
    async def test_empty_document(self, drive, extractor):
        drive.documents["d1"] = {"body": {"content": []}}

        assert await extractor.extract_text("d1") == ""

    @pytest.mark.asyncio
    async def test_malformed_payload_raises(self, drive, extractor):
        from drivesearch.extractors import ExtractionError

        drive.documents["d1"] = ["not", "a", "document"]

        with pytest.raises(ExtractionError):
            await extractor.extract_text("d1")

    @pytest.mark.asyncio
    async def test_list_tabs(self, drive, extractor):
        drive.documents["d1"] = _tabbed_document()

        tabs = await extractor.list_tabs("d1")

        assert [t.to_payload() for t in tabs] == [
            {"tabId": "t.parent", "title": "Plan", "level": 0, "hasChildTabs": True},
            {"tabId": "t.child", "title": "Risks", "level": 1, "hasChildTabs": False},
            {"tabId": "t.other", "title": "Archive", "level": 0, "hasChildTabs": False},
        ]

    @pytest.mark.asyncio
    async def test_tab_text_excludes_child_tabs(self, drive, extractor):
        drive.documents["d1"] = _tabbed_document()

        assert await extractor.extract_tab_text("d1", "t.parent") == "Plan body"
        assert await extractor.extract_tab_text("d1", "t.child") == "Risk body"

    @pytest.mark.asyncio
    async def test_tab_text_unknown_tab_lists_available(self, drive, extractor):
        from drivesearch.extractors import ExtractionError

        drive.documents["d1"] = _tabbed_document()

        with pytest.raises(ExtractionError, match="t.child \\(Risks\\)"):
            await extractor.extract_tab_text("d1", "t.missing")

    @pytest.mark.asyncio
    async def test_tab_text_of_untabbed_document(self, drive, extractor):
        drive.documents["d1"] = document(paragraph("Body only"))

        assert await extractor.extract_tab_text("d1", "default") == "Body only"

    def test_flatten_tabs_synthetic_main_tab(self):
        from drivesearch.extractors.document import DEFAULT_TAB_TITLE, flatten_tabs

        tabs = flatten_tabs(document(paragraph("x")))

        assert len(tabs) == 1
        assert tabs[0].title == DEFAULT_TAB_TITLE
        assert tabs[0].level == 0


class TestSpreadsheetHelpers:
    """Tests for A1 and cell helpers"""

    def test_column_letters(self):
        from drivesearch.extractors.spreadsheet import column_letter

        assert column_letter(1) == "A"
        assert column_letter(26) == "Z"
        assert column_letter(27) == "AA"
        assert column_letter(52) == "AZ"

    def test_a1_range_quotes_title(self):
        from drivesearch.extractors.spreadsheet import a1_range

        assert a1_range("Bob's data", 3, 2) == "'Bob''s data'!A1:B3"

    def test_format_cell(self):
        from drivesearch.extractors.spreadsheet import format_cell

        assert format_cell(None) == ""
        assert format_cell(True) == "TRUE"
        assert format_cell(3.0) == "3"
        assert format_cell(3.5) == "3.5"
        assert format_cell("x") == "x"

    def test_populated_extent(self):
        from drivesearch.extractors.spreadsheet import populated_extent

        assert populated_extent([["a"], [], ["", "", "c"]]) == (3, 3)
        assert populated_extent([[], [""]]) == (0, 0)


class TestSpreadsheetExtractor:
    """Tests for SpreadsheetExtractor"""

    @pytest.fixture
    def extractor(self, drive):
        from drivesearch.extractors import SpreadsheetExtractor
        return SpreadsheetExtractor(drive)

    @pytest.mark.asyncio
    async def test_single_cell(self, drive, extractor):
        drive.add_sheet("s1", "Sheet1", [["budget forecast"]])

        text = await extractor.extract_text("s1")

        assert text == "===== Sheet: Sheet1 =====\nbudget forecast"

    @pytest.mark.asyncio
    async def test_multiple_sheets_in_index_order(self, drive, extractor):
        drive.add_sheet("s1", "Later", [["b"]], index=1)
        drive.add_sheet("s1", "First", [["Name", "Qty"], ["bolts", 4.0], ["", ""], ["nuts", True]], index=0)

        text = await extractor.extract_text("s1")

        assert text == (
            "===== Sheet: First =====\n"
            "Name | Qty\n"
            "bolts | 4\n"
            "nuts | TRUE\n"
            "\n"
            "===== Sheet: Later =====\n"
            "b"
        )

    @pytest.mark.asyncio
    async def test_fetches_only_populated_range(self, drive, extractor):
        drive.add_sheet("s1", "Data", [["a", "", "c"], ["", "", ""]])

        await extractor.extract_text("s1")

        value_calls = [c for c in drive.calls if c[0] == "spreadsheets.values.get"]
        assert value_calls[0][2] == "'Data'!A1:Z1000"
        assert value_calls[0][3] == "FORMATTED_VALUE"
        assert value_calls[1][2] == "'Data'!A1:C1"
        assert value_calls[1][3] == "UNFORMATTED_VALUE"

    @pytest.mark.asyncio
    async def test_empty_sheets_are_omitted(self, drive, extractor):
        drive.add_sheet("s1", "Empty", [])
        drive.add_sheet("s1", "Full", [["x"]])

        assert await extractor.extract_text("s1") == "===== Sheet: Full =====\nx"

    @pytest.mark.asyncio
    async def test_empty_spreadsheet(self, drive, extractor):
        drive.add_sheet("s1", "Empty", [])

        assert await extractor.extract_text("s1") == ""

    @pytest.mark.asyncio
    async def test_non_grid_sheets_skipped(self, drive, extractor):
        drive.add_sheet("s1", "Chart", [["ignored"]], sheet_type="OBJECT")
        drive.add_sheet("s1", "Grid", [["kept"]])

        assert await extractor.extract_text("s1") == "===== Sheet: Grid =====\nkept"

    @pytest.mark.asyncio
    async def test_unreadable_sheet_range_skipped(self, drive, extractor):
        drive.add_sheet("s1", "Broken", [["x"]])
        drive.add_sheet("s1", "Fine", [["y"]])
        drive.bad_ranges[("s1", "Broken")] = 400

        assert await extractor.extract_text("s1") == "===== Sheet: Fine =====\ny"

    @pytest.mark.asyncio
    async def test_server_error_on_later_sheet_keeps_earlier_text(self, drive, extractor):
        drive.add_sheet("s1", "Summary", [["total", 42.0]])
        drive.add_sheet("s1", "Detail", [["x"]])
        drive.add_sheet("s1", "Notes", [["kept too"]])
        drive.bad_ranges[("s1", "Detail")] = 500

        text = await extractor.extract_text("s1")

        assert text == (
            "===== Sheet: Summary =====\n"
            "total | 42\n"
            "\n"
            "===== Sheet: Notes =====\n"
            "kept too"
        )

    @pytest.mark.asyncio
    async def test_rate_limited_only_sheet_gives_empty_text(self, drive, extractor):
        drive.add_sheet("s1", "Only", [["x"]])
        drive.bad_ranges[("s1", "Only")] = 429

        assert await extractor.extract_text("s1") == ""

    @pytest.mark.asyncio
    async def test_missing_spreadsheet_raises(self, drive, extractor):
        from drivesearch.common.drive_client import DriveError

        drive.errors["s1"] = DriveError("spreadsheets.get: not found", status=404, operation="spreadsheets.get")

        with pytest.raises(DriveError):
            await extractor.extract_text("s1")


class TestPresentationExtractor:
    """Tests for PresentationExtractor"""

    @pytest.fixture
    def extractor(self, drive):
        from drivesearch.extractors import PresentationExtractor
        return PresentationExtractor(drive)

    @pytest.mark.asyncio
    async def test_no_slides_notice(self, drive, extractor):
        from drivesearch.extractors import NO_SLIDES_NOTICE

        drive.presentations["p1"] = {"slides": []}

        assert await extractor.extract_text("p1") == NO_SLIDES_NOTICE

    @pytest.mark.asyncio
    async def test_titles_body_tables_and_notes(self, drive, extractor):
        table = {"objectId": "t", "table": {"tableRows": [{"tableCells": [
            {"text": {"textElements": [{"textRun": {"content": "Q1\n"}}]}},
            {"text": {"textElements": [{"textRun": {"content": "100\n"}}]}},
        ]}]}}
        group = {"objectId": "g", "elementGroup": {"children": [shape("inner", "Grouped point\n")]}}
        drive.presentations["p1"] = {"slides": [
            slide(shape("title", "Roadmap\n"), shape("body", "Ship v2\n"), table, notes="Mention hiring\n"),
            slide(group),
            slide(shape("blank", "   ")),
        ]}

        text = await extractor.extract_text("p1")

        assert text == (
            "Slide 1: Roadmap\n"
            "Ship v2\n"
            "Q1 | 100\n"
            "[Notes]\n"
            "Mention hiring\n"
            "\n"
            "Slide 2: Grouped point\n"
            "\n"
            "Slide 3"
        )


class TestSlideByPageNumber:
    """Tests for PresentationExtractor.extract_slide_text"""

    @pytest.fixture
    def extractor(self, drive):
        from drivesearch.extractors import PresentationExtractor
        return PresentationExtractor(drive)

    @pytest.mark.asyncio
    async def test_one_based_page(self, drive, extractor):
        drive.presentations["p1"] = {"slides": [
            slide(shape("a", "Intro")),
            slide(shape("b", "Timeline"), shape("c", "Q3 launch"), notes="Keep it short"),
        ]}

        text = await extractor.extract_slide_text("p1", 2)

        assert text == "Slide 2: Timeline\nQ3 launch\n[Notes]\nKeep it short"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_number", [0, 3, -1])
    async def test_out_of_range(self, drive, extractor, page_number):
        from drivesearch.extractors import ExtractionError

        drive.presentations["p1"] = {"slides": [slide(shape("a", "Intro")), slide(shape("b", "End"))]}

        with pytest.raises(ExtractionError, match="available pages: 1-2"):
            await extractor.extract_slide_text("p1", page_number)

    @pytest.mark.asyncio
    async def test_no_slides(self, drive, extractor):
        from drivesearch.extractors import ExtractionError

        drive.presentations["p1"] = {}

        with pytest.raises(ExtractionError, match="available pages: none"):
            await extractor.extract_slide_text("p1", 1)


class TestBuildExtractors:
    """Tests for build_extractors"""

    def test_one_extractor_per_format(self, drive):
        from drivesearch.common.schemas import FileFormat
        from drivesearch.extractors import build_extractors

        extractors = build_extractors(drive, scan_rows=10, scan_columns=5)

        assert set(extractors) == set(FileFormat)
        assert extractors[FileFormat.SPREADSHEET].scan_rows == 10
        for file_format, extractor in extractors.items():
            assert extractor.file_format == file_format
