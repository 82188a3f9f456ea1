"""Tests for the pipeline status model."""

from hiring_board.statuses import PIPELINE, ApplicationStatus, is_terminal, label, parse_status


class TestPipeline:
    def test_canonical_order(self):
        assert [s.value for s in PIPELINE] == [
            "pending", "reviewing", "shortlisted", "interview", "hired", "rejected",
        ]

    def test_terminal_stages(self):
        assert is_terminal("hired")
        assert is_terminal(ApplicationStatus.REJECTED)
        assert not is_terminal("interview")
        assert not is_terminal("withdrawn")


class TestParseStatus:
    def test_known_values(self):
        assert parse_status("interview") is ApplicationStatus.INTERVIEW
        assert parse_status(ApplicationStatus.PENDING) is ApplicationStatus.PENDING

    def test_unknown_values_are_none(self):
        """Legacy or misspelled backend values are not coerced onto a stage."""
        assert parse_status("interview_scheduled") is None
        assert parse_status("Pending") is None
        assert parse_status("") is None
        assert parse_status(None) is None
        assert parse_status(3) is None


class TestLabel:
    def test_labels(self):
        assert label("pending") == "New Applications"
        assert label("interview") == "Interview Stage"

    def test_unknown_label_passes_through(self):
        assert label("offered") == "offered"
