"""Tests for sequential span formatting with line drift correction."""

import logging

from diff_format.core.applier import ApplyReport, FileResult, apply_changes, apply_requests
from diff_format.core.diff_parser import ChangeRequest, parse_diff_text
from diff_format.core.document import Document
from diff_format.core.grouper import group_requests

SOURCE = """a(); b(); c();
keep();
d(); e();
tail();"""


class FakeSource:
    """In-memory DocumentSource."""

    def __init__(self, files):
        self.files = dict(files)
        self.updated = []

    def open(self, filename):
        if filename not in self.files:
            return None
        return Document(filename, self.files[filename])

    def update(self, document):
        self.files[document.filename] = document.text
        self.updated.append(document.filename)

    def save(self):
        pass


class TestApplyRequests:
    """Per-file drift correction."""

    def test_second_span_shifted_by_lines_added_before_it(self, splitter):
        """The first format adds 2 lines, so the second request moves down by 2."""
        doc = Document("a.cs", SOURCE)
        requests = [ChangeRequest("a.cs", 0, 1), ChangeRequest("a.cs", 2, 1)]

        result = apply_requests(doc, requests, splitter)

        assert len(splitter.calls) == 2
        assert splitter.spanned_text(0) == "a(); b(); c();"
        # Original line 2 is now line 4
        second_doc, second_span = splitter.calls[1]
        assert second_doc.span_for_lines(4, 1) == second_span
        assert splitter.spanned_text(1) == "d(); e();"

        assert result.text == "a();\nb();\nc();\nkeep();\nd();\ne();\ntail();"

    def test_lines_removed_shift_up(self, joiner):
        """A format that removes lines moves later requests up."""
        doc = Document("a.cs", "x\ny\nz\nkeep\np\nq")
        requests = [ChangeRequest("a.cs", 0, 3), ChangeRequest("a.cs", 4, 2)]

        result = apply_requests(doc, requests, joiner)

        assert result.text == "x y z\nkeep\np q"

    def test_line_table_is_reread_for_every_request(self, splitter):
        """Each call sees the document produced by the previous one."""
        doc = Document("a.cs", SOURCE)
        apply_requests(doc, [ChangeRequest("a.cs", 0, 1), ChangeRequest("a.cs", 2, 1)], splitter)

        first_doc, _ = splitter.calls[0]
        second_doc, _ = splitter.calls[1]
        assert first_doc.line_count == 4
        assert second_doc.line_count == 6

    def test_no_requests_returns_document(self, splitter):
        """Nothing to do leaves the document alone."""
        doc = Document("a.cs", SOURCE)
        assert apply_requests(doc, [], splitter) is doc

    def test_text_outside_spans_is_untouched(self, splitter):
        """Lines that were not requested are byte-identical afterwards."""
        doc = Document("a.cs", "x(); y();\r\nkeep(); me();\r\nz(); w();\r\n")
        result = apply_requests(doc, [ChangeRequest("a.cs", 0, 1), ChangeRequest("a.cs", 2, 1)], splitter)

        assert "\r\nkeep(); me();\r\n" in result.text
        assert result.text.endswith("\r\n")

    def test_idempotent_second_pass(self, splitter):
        """Formatting the already formatted ranges again changes nothing."""
        doc = Document("a.cs", SOURCE)
        once = apply_requests(doc, [ChangeRequest("a.cs", 0, 1), ChangeRequest("a.cs", 2, 1)], splitter)

        # The same code now spans lines 0-2 and 4-5
        twice = apply_requests(once, [ChangeRequest("a.cs", 0, 3), ChangeRequest("a.cs", 4, 2)], splitter)

        assert twice.text == once.text

    def test_does_not_sort(self, splitter):
        """Requests are used in the order given."""
        doc = Document("a.cs", SOURCE)
        apply_requests(doc, [ChangeRequest("a.cs", 2, 1), ChangeRequest("a.cs", 0, 1)], splitter)
        assert splitter.spanned_text(0) == "d(); e();"


class TestApplyChanges:
    """Batch processing over a document source."""

    def test_pipeline_from_diff(self, splitter):
        """Parse, group and apply end to end."""
        diff = """--- a/a.cs
+++ b/a.cs
@@ -1,2 +1,2 @@
-a();
+a(); b(); c();
 keep();
@@ -3,2 +3,2 @@
-d();
+d(); e();
 tail();
"""
        source = FakeSource({"a.cs": SOURCE})
        groups = group_requests(parse_diff_text(diff))

        report = apply_changes(source, groups, splitter)

        assert report.ok
        assert source.files["a.cs"] == "a();\nb();\nc();\nkeep();\nd();\ne();\ntail();"

    def test_requests_are_sorted_per_file(self, splitter):
        """Requests out of order in the diff are applied top to bottom."""
        source = FakeSource({"a.cs": SOURCE})
        groups = {"a.cs": [ChangeRequest("a.cs", 2, 1), ChangeRequest("a.cs", 0, 1)]}

        apply_changes(source, groups, splitter)

        assert splitter.spanned_text(0) == "a(); b(); c();"
        assert splitter.spanned_text(1) == "d(); e();"

    def test_failure_in_one_file_does_not_stop_others(self, failing_formatter, caplog):
        """A bad file is reported and the next file is still formatted."""
        source = FakeSource({"Bad.cs": "x(); y();", "Good.cs": "x(); y();"})
        groups = {
            "Bad.cs": [ChangeRequest("Bad.cs", 0, 1)],
            "Good.cs": [ChangeRequest("Good.cs", 0, 1)],
        }

        with caplog.at_level(logging.ERROR, logger="diff_format"):
            report = apply_changes(source, groups, failing_formatter("Bad.cs"))

        assert not report.ok
        assert [r.filename for r in report.failed] == ["Bad.cs"]
        assert "cannot format Bad.cs" in report.failed[0].error
        assert source.files["Bad.cs"] == "x(); y();"
        assert source.files["Good.cs"] == "x();\ny();"
        assert any("Bad.cs" in r.getMessage() for r in caplog.records)

    def test_out_of_range_request_fails_the_file(self, splitter):
        """A request past the end of the document is a per-file error."""
        source = FakeSource({"a.cs": "one line"})
        report = apply_changes(source, {"a.cs": [ChangeRequest("a.cs", 5, 1)]}, splitter)

        assert len(report.failed) == 1
        assert "out of range" in report.failed[0].error

    def test_missing_document_is_skipped(self, splitter):
        """Files the source does not know are skipped, not failed."""
        report = apply_changes(FakeSource({}), {"gone.cs": [ChangeRequest("gone.cs", 0, 1)]}, splitter)

        assert report.ok
        assert report.results[0].skipped
        assert report.formatted == []

    def test_unchanged_document_is_not_updated(self, splitter):
        """Sources only receive documents that changed."""
        source = FakeSource({"a.cs": "already();"})
        report = apply_changes(source, {"a.cs": [ChangeRequest("a.cs", 0, 1)]}, splitter)

        assert source.updated == []
        assert not report.results[0].changed

    def test_progress_callback(self, splitter):
        """progress is called once per file, in order."""
        source = FakeSource({"a.cs": "x", "b.cs": "y"})
        seen = []
        apply_changes(
            source,
            {"a.cs": [ChangeRequest("a.cs", 0, 1)], "b.cs": [ChangeRequest("b.cs", 0, 1)]},
            splitter,
            progress=seen.append,
        )
        assert seen == ["a.cs", "b.cs"]


class TestApplyReport:
    """Test the report views."""

    def test_views(self):
        """failed, formatted and ok are derived from the results."""
        report = ApplyReport(
            [
                FileResult("a.cs", [], changed=True),
                FileResult("b.cs", [], error="boom"),
                FileResult("c.cs", [], skipped=True),
            ]
        )
        assert [r.filename for r in report.formatted] == ["a.cs"]
        assert [r.filename for r in report.failed] == ["b.cs"]
        assert not report.ok
