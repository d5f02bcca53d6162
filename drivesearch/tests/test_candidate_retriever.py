"""
Tests for candidate retrieval
"""

import pytest

from drivesearch.tests.fakes import DOC_MIME, SHEET_MIME, SLIDES_MIME


class TestBuildSearchQuery:
    """Tests for Drive query construction"""

    def test_escapes_quotes_and_backslashes(self):
        from drivesearch.retriever.candidate_retriever import escape_query_literal

        assert escape_query_literal("Bob's") == "Bob\\'s"
        assert escape_query_literal("a\\b") == "a\\\\b"

    def test_query_shape(self):
        from drivesearch.retriever import build_search_query

        q = build_search_query("budget")

        assert q.startswith("(name contains 'budget' or fullText contains 'budget')")
        assert f"mimeType='{DOC_MIME}'" in q
        assert f"mimeType='{SHEET_MIME}'" in q
        assert f"mimeType='{SLIDES_MIME}'" in q
        assert "application/pdf" not in q
        assert q.endswith("trashed=false")


class TestCandidateRetriever:
    """Tests for CandidateRetriever.retrieve"""

    @pytest.fixture
    def retriever(self, drive):
        from drivesearch.retriever import CandidateRetriever
        return CandidateRetriever(drive)

    @pytest.mark.asyncio
    async def test_requests_twice_max_results(self, drive, retriever):
        await retriever.retrieve("budget", 3)

        assert drive.calls[0][2] == 6

    @pytest.mark.asyncio
    async def test_page_size_capped_at_twenty(self, drive, retriever):
        await retriever.retrieve("budget", 50)

        assert drive.calls[0][2] == 20

    @pytest.mark.asyncio
    async def test_non_positive_max_results_clamped(self, drive, retriever):
        await retriever.retrieve("budget", 0)

        assert drive.calls[0][2] == 2

    def test_max_candidates_never_exceeds_ceiling(self, drive):
        from drivesearch.retriever import CandidateRetriever

        assert CandidateRetriever(drive, max_candidates=100).max_candidates == 20
        assert CandidateRetriever(drive, max_candidates=4).page_size(10) == 4

    @pytest.mark.asyncio
    async def test_no_matches(self, retriever):
        assert await retriever.retrieve("nothing", 10) == []

    @pytest.mark.asyncio
    async def test_candidates_sorted_by_modified_time_desc(self, drive, retriever):
        drive.add_file("old", "Old", DOC_MIME, "2023-01-01T00:00:00.000Z")
        drive.add_file("new", "New", SHEET_MIME, "2024-06-01T00:00:00.000Z")
        drive.add_file("tie", "Tie", SLIDES_MIME, "2023-01-01T00:00:00.000Z")

        candidates = await retriever.retrieve("x", 10)

        assert [c.id for c in candidates] == ["new", "old", "tie"]

    @pytest.mark.asyncio
    async def test_formats_and_links(self, drive, retriever):
        from drivesearch.common.schemas import FileFormat

        drive.add_file("d1", "Doc", DOC_MIME, link="https://example.test/d1")
        drive.add_file("s1", "Sheet", SHEET_MIME)

        candidates = {c.id: c for c in await retriever.retrieve("x", 10)}

        assert candidates["d1"].file_format == FileFormat.DOCUMENT
        assert candidates["d1"].link == "https://example.test/d1"
        assert candidates["s1"].file_format == FileFormat.SPREADSHEET
        assert candidates["s1"].link == "https://docs.google.com/spreadsheets/d/s1/edit"

    @pytest.mark.asyncio
    async def test_unsupported_entries_skipped(self, drive, retriever):
        drive.add_file("pdf", "Scan", "application/pdf")
        drive.files.append({"name": "No id", "mimeType": DOC_MIME})
        drive.add_file("d1", "Doc", DOC_MIME)

        candidates = await retriever.retrieve("x", 10)

        assert [c.id for c in candidates] == ["d1"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, drive, retriever):
        from drivesearch.common.drive_client import DriveError

        drive.errors["files.list"] = DriveError("files.list: unauthorized", status=401, operation="files.list")

        with pytest.raises(DriveError):
            await retriever.retrieve("budget", 10)
