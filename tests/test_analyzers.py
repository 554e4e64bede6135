from datetime import datetime, timedelta

import pytest

from conftest import NOW
from coursework.analyzers import assignment_analyzer
from coursework.analyzers.analyzer_manager import AnalyzerManager
from coursework.analyzers.assignment_analyzer import AssignmentAnalyzer
from coursework.analyzers.quiz_analyzer import QuizAnalyzer


class TestAssignmentAnalyzer:
    @pytest.fixture
    def analyzer(self, data_repository):
        return AssignmentAnalyzer(data_repository)

    def test_sort_assignments_for_student(self, analyzer):
        result = analyzer.sort_assignments("c1", "s1", now=NOW)

        assert result["current_user_id"] == "s1"
        assert result["buckets"]["overdue"] == ["a_past"]
        assert result["buckets"]["ungraded"] == []
        assert result["buckets"]["unsubmitted"] == []
        assert result["counts"]["past"] == 4
        assert result["counts"]["upcoming"] == 3

    def test_needs_grading_falls_back_to_submission_records(self, analyzer):
        result = analyzer.sort_assignments("c1", "s1", current_user_id="t1", now=NOW)

        # a_past stores no count but has a turned-in, ungraded record
        assert result["buckets"]["ungraded"] == ["a_past_submitted", "a_past"]
        assert "a_past" in result["buckets"]["unsubmitted"]
        assert "a_past_submitted" not in result["buckets"]["unsubmitted"]

    def test_upcoming_window_setting(self, analyzer):
        analyzer.set_upcoming_window(1)
        result = analyzer.sort_assignments("c1", "s1", now=NOW)
        assert result["buckets"]["upcoming"] == ["a_now"]

    def test_unknown_course(self, analyzer):
        assert "error" in analyzer.sort_assignments("nope", "s1", now=NOW)
        assert "error" in analyzer.get_bucket("nope", "past", "s1", now=NOW)

    def test_get_bucket(self, analyzer):
        result = analyzer.get_bucket("c1", "overdue", "s1", now=NOW)
        assert result["user_id"] == "s1"
        assert result["assignments"] == [
            {"id": "a_past", "name": "a_past", "due_at": "2024-05-13T12:00:00+00:00"}
        ]

    def test_get_bucket_for_observer(self, analyzer):
        result = analyzer.get_bucket(
            "c1", "overdue", "observer", observed_user_ids=["s1"], now=NOW
        )
        assert result["user_id"] == "s1"
        assert [a["id"] for a in result["assignments"]] == ["a_past"]

    def test_get_bucket_name_is_case_insensitive(self, analyzer):
        result = analyzer.get_bucket("c1", "Overdue", "s1", now=NOW)
        assert result["bucket"] == "overdue"
        assert [a["id"] for a in result["assignments"]] == ["a_past"]

    def test_get_bucket_rejects_unknown_bucket(self, analyzer):
        assert "Unknown bucket" in analyzer.get_bucket("c1", "later", "s1")["error"]


class TestQuizAnalyzer:
    def test_analyze_quiz(self, data_repository):
        result = QuizAnalyzer(data_repository).analyze_quiz("quiz1")
        assert result["respondents"] == 4
        assert result["items"][2]["point_biserials"][:2] == pytest.approx([0.5, -0.5])

    def test_missing_quiz(self, data_repository):
        analyzer = QuizAnalyzer(data_repository)
        assert analyzer.analyze_quiz("missing") == {"error": "Quiz not found: missing"}
        with pytest.raises(ValueError):
            analyzer.get_report("missing")


class TestAnalyzerManager:
    @pytest.fixture
    def manager(self, data_repository, settings):
        manager = AnalyzerManager(data_repository, settings)
        assert manager.initialize_analyzers()
        return manager

    def test_results_are_cached(self, manager):
        first = manager.run_analysis("assignments", course_id="c1", user_id="s1", now=NOW)
        second = manager.run_analysis("assignments", course_id="c1", user_id="s1", now=NOW)
        assert first is second

    def test_wall_clock_results_follow_the_clock(self, manager, monkeypatch):
        class Clock(datetime):
            current = NOW

            @classmethod
            def now(cls, tz=None):
                return cls.current

        monkeypatch.setattr(assignment_analyzer, "datetime", Clock)

        first = manager.run_analysis("assignments", course_id="c1", user_id="s1")
        Clock.current = NOW + timedelta(days=30)
        second = manager.run_analysis("assignments", course_id="c1", user_id="s1")

        assert first["counts"]["past"] == 4
        assert second["counts"]["past"] == 8
        assert manager._result_cache == {}

    def test_errors_are_not_cached(self, manager):
        manager.run_analysis("item_analysis", quiz_id="missing")
        assert manager._result_cache == {}

    def test_cache_can_be_disabled(self, manager):
        manager.enable_cache(False)
        first = manager.run_analysis("item_analysis", quiz_id="quiz1")
        second = manager.run_analysis("item_analysis", quiz_id="quiz1")
        assert first is not second
        assert first == second

    def test_settings_reach_the_analyzers(self, data_repository, settings):
        settings.UPCOMING_WINDOW_DAYS = 1
        settings.CACHE_ENABLED = False
        manager = AnalyzerManager(data_repository, settings)
        manager.initialize_analyzers()

        result = manager.run_analysis(
            "bucket", course_id="c1", bucket="upcoming", user_id="s1", now=NOW
        )
        assert [a["id"] for a in result["assignments"]] == ["a_now"]
        assert manager._result_cache == {}

    def test_unknown_analysis_type(self, manager):
        with pytest.raises(ValueError):
            manager.run_analysis("gradebook")

    def test_uninitialized_manager(self, data_repository, settings):
        manager = AnalyzerManager(data_repository, settings)
        assert manager.get_all_analyzers() == (None, None)
        assert "error" in manager.run_analysis("item_analysis", quiz_id="quiz1")
