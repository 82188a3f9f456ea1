"""Tests for the pipeline store and column partitioning."""

import pytest

from hiring_board.models import FilterState
from hiring_board.filters import visible
from hiring_board.statuses import PIPELINE, ApplicationStatus
from hiring_board.store import PipelineStore, find_anomalies, summarize, to_columns

from conftest import make_app


def _ids(column):
    return [a.id for a in column.applications]


class TestToColumns:
    def test_one_column_per_status_even_when_empty(self):
        """pending, pending, reviewing, hired -> 2/1/0/0/1/0 in canonical order."""
        apps = [make_app("1", "pending"), make_app("2", "pending"), make_app("3", "reviewing"), make_app("4", "hired")]
        columns = to_columns(apps)

        assert [c.status for c in columns] == list(PIPELINE)
        counts = {c.status.value: c.count for c in columns}
        assert counts == {"pending": 2, "reviewing": 1, "shortlisted": 0, "interview": 0, "hired": 1, "rejected": 0}
        assert columns[0].title == "New Applications"

    def test_no_applications_still_renders_all_columns(self):
        columns = to_columns([])
        assert len(columns) == 6
        assert all(c.count == 0 for c in columns)

    @pytest.mark.parametrize("filters", [
        FilterState(),
        FilterState(search="backend"),
        FilterState(job_id="j2"),
        FilterState(search="zzz"),
    ])
    def test_partition_is_total_and_disjoint(self, applications, filters):
        filtered = visible(applications, filters)
        columns = to_columns(filtered)
        placed = [a.id for c in columns for a in c.applications]

        assert len(placed) == len(set(placed))
        assert sorted(placed) == sorted(a.id for a in filtered)

    def test_unknown_status_is_left_out(self, caplog):
        apps = [make_app("1", "pending"), make_app("2", "offered"), make_app("3", "")]
        columns = to_columns(apps)

        placed = [a.id for c in columns for a in c.applications]
        assert placed == ["1"]
        assert [a.id for a in find_anomalies(apps)] == ["2", "3"]
        assert "unknown status" in caplog.text

    def test_column_order_follows_list_order(self):
        apps = [make_app("b", "interview"), make_app("a", "interview"), make_app("c", "interview")]
        interview = to_columns(apps)[3]
        assert _ids(interview) == ["b", "a", "c"]


class TestSummarize:
    def test_counts(self, applications):
        apps = applications + [make_app("a5", "interview"), make_app("a6", "withdrawn")]
        stats = summarize(apps)

        assert stats.total == 6
        assert stats.in_pipeline == 2  # reviewing + interview
        assert stats.hired == 1
        assert stats.rejected == 0
        assert stats.by_status["pending"] == 2
        assert stats.anomalies == 1


class TestPipelineStore:
    def test_columns_use_filters(self, applications):
        store = PipelineStore(applications)
        store.set_filters(job_id="j1")
        assert _ids(store.columns()[0]) == ["a1"]
        assert _ids(store.columns()[1]) == ["a3"]

    def test_set_filters_keeps_unspecified_fields(self, applications):
        store = PipelineStore(applications)
        store.set_filters(search="ada")
        store.set_filters(job_id="j1")
        assert store.filters == FilterState(search="ada", job_id="j1")
        store.set_filters(job_id="")
        assert store.filters.job_id == "all"

    def test_move_preserves_position(self, applications):
        store = PipelineStore(applications)
        previous = store.move("a2", ApplicationStatus.INTERVIEW)

        assert previous == "pending"
        assert store.get("a2").status == "interview"
        assert [a.id for a in store.applications] == ["a1", "a2", "a3", "a4"]

    def test_move_unknown_returns_none(self, applications):
        store = PipelineStore(applications)
        assert store.move("nope", ApplicationStatus.HIRED) is None

    def test_revert(self, applications):
        store = PipelineStore(applications)
        store.move("a3", ApplicationStatus.HIRED)
        assert store.revert("a3", ApplicationStatus.HIRED, "reviewing")
        assert store.get("a3").status == "reviewing"

    def test_revert_skipped_after_reload(self, applications):
        """A reload that already settled the record wins over a late rollback."""
        store = PipelineStore(applications)
        store.move("a3", ApplicationStatus.HIRED)
        store.replace([make_app("a3", "shortlisted")])

        assert not store.revert("a3", ApplicationStatus.HIRED, "reviewing")
        assert store.get("a3").status == "shortlisted"

    def test_replace_discards_optimism(self, applications):
        store = PipelineStore(applications)
        store.move("a1", ApplicationStatus.REJECTED)
        store.replace(applications)
        assert store.get("a1").status == "pending"
        assert store.loaded_at is not None

    def test_claim_is_exclusive(self):
        store = PipelineStore()
        assert store.claim("a1")
        assert not store.claim("a1")
        assert store.is_pending("a1")
        store.release("a1")
        assert store.claim("a1")
