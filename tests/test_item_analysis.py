import pytest

from coursework.analyzers.item_analysis import ItemAnalysisItem, ItemAnalysisSummary
from coursework.data.models import (
    PerformanceGroup,
    Quiz,
    QuizAnswer,
    QuizQuestion,
    QuizQuestionResponse,
    QuizSubmission,
    RespondentFilter,
)


@pytest.fixture
def summary(quiz, quiz_submissions):
    return ItemAnalysisSummary(quiz, quiz_submissions)


def test_unsupported_question_types_are_skipped(summary, quiz):
    assert [item.id for item in summary.items] == ["q1", "q2", "q3"]
    assert summary.get_item("q4") is None
    assert ItemAnalysisItem.from_question(summary, quiz.questions[-1]) is None
    assert summary.respondent_scores("q4") == []


def test_correct_answer_is_ranked_first(summary):
    item = summary.get_item("q3")
    assert item.answers == ["q3_a", "q3_b", "q3_c", "q3_d"]
    assert item.correct_answer_id == "q3_a"


def test_performance_groups(summary):
    assert summary.size == 4
    assert summary.buckets[PerformanceGroup.TOP] == ["u1"]
    assert summary.buckets[PerformanceGroup.MIDDLE] == ["u2", "u3"]
    assert summary.buckets[PerformanceGroup.BOTTOM] == ["u4"]


def test_multiple_choice_item_counts(summary):
    item = summary.get_item("q3")

    assert item.num_respondents() == 3
    assert item.num_respondents(RespondentFilter.CORRECT) == 2
    assert item.num_respondents("incorrect") == 1
    assert item.num_respondents(PerformanceGroup.TOP) == 1
    assert item.num_respondents(PerformanceGroup.MIDDLE) == 2
    assert item.num_respondents(PerformanceGroup.BOTTOM) == 0
    assert item.num_respondents("top", "correct") == 1
    assert item.num_respondents("middle", "correct") == 1
    assert item.num_respondents("middle", "incorrect") == 1


def test_multiple_choice_item_statistics(summary):
    item = summary.get_item("q3")

    assert item.variance == pytest.approx(0.2222222)
    assert item.standard_deviation == pytest.approx(0.4714045)
    assert item.difficulty_index == pytest.approx(0.6666667)
    assert item.ratio_for("correct") == pytest.approx(2 / 3)


def test_point_biserials(summary):
    biserials = summary.get_item("q3").point_biserials
    assert biserials[0] == pytest.approx(0.5)
    assert biserials[1] == pytest.approx(-0.5)
    assert biserials[2:] == [None, None]


def test_answer_id_filter(summary):
    item = summary.get_item("q3")
    assert item.respondents_for("q3_b") == ["u3"]
    assert item.respondents_for("q3_d") == []
    with pytest.raises(ValueError):
        item.respondents_for("nonsense")


def test_alpha_and_scores(summary):
    assert summary.alpha == pytest.approx(-2.0)
    assert summary.mean_score() == pytest.approx(2.25)
    assert summary.score_for("u1") == 3.0


def test_respondent_scores(summary):
    scores = summary.respondent_scores("q3")
    assert [(s.respondent_id, s.correct, s.group) for s in scores] == [
        ("u1", True, PerformanceGroup.TOP),
        ("u2", True, PerformanceGroup.MIDDLE),
        ("u3", False, PerformanceGroup.MIDDLE),
    ]


def test_identical_totals_leave_point_biserials_undefined():
    question = QuizQuestion(
        id="tf",
        question_type="true_false_question",
        answers=[
            QuizAnswer(id="t", weight=100),
            QuizAnswer(id="f", weight=0),
        ],
    )
    quiz = Quiz(id="quiz2", questions=[question])
    submissions = [
        QuizSubmission(
            id=f"s{i}",
            quiz_id="quiz2",
            user_id=f"u{i}",
            score=1,
            responses=[QuizQuestionResponse(question_id="tf", answer_id=answer)],
        )
        for i, answer in enumerate(["t", "f"])
    ]

    summary = ItemAnalysisSummary(quiz, submissions)
    assert summary.get_item("tf").point_biserials == [None, None]
    assert summary.alpha is None


def test_total_score_falls_back_to_correct_points(quiz):
    submission = QuizSubmission(
        id="qs",
        quiz_id="quiz1",
        user_id="u9",
        responses=[
            QuizQuestionResponse(question_id="q1", answer_id="q1_t"),
            QuizQuestionResponse(question_id="q2", answer_id="q2_f"),
            QuizQuestionResponse(question_id="q3", answer_id="q3_a"),
        ],
    )
    assert ItemAnalysisSummary(quiz, [submission]).score_for("u9") == 2.0


def test_only_latest_submission_per_user_counts(quiz, quiz_submissions):
    retake = QuizSubmission(
        id="qs-u3-retake",
        quiz_id="quiz1",
        user_id="u3",
        score=3,
        responses=[QuizQuestionResponse(question_id="q3", answer_id="q3_a")],
    )
    summary = ItemAnalysisSummary(quiz, quiz_submissions + [retake])

    assert summary.size == 4
    assert summary.score_for("u3") == 3.0
    assert summary.get_item("q1").num_respondents() == 3


def test_empty_quiz_results():
    summary = ItemAnalysisSummary(Quiz(id="empty"), [])
    assert summary.size == 0
    assert summary.items == []
    assert summary.alpha is None
    assert summary.to_dict()["groups"] == {"top": 0, "middle": 0, "bottom": 0}


def test_item_without_respondents(quiz):
    item = ItemAnalysisSummary(quiz, []).get_item("q1")
    assert item.variance == 0.0
    assert item.difficulty_index == 0.0
    assert item.ratio_for("correct") == 0.0
    assert item.point_biserials == [None, None]


@pytest.mark.parametrize(
    "cutoffs",
    [{"top": 0.6, "bottom": 0.6}, {"top": -0.1, "bottom": 0.27}, {"top": 1.5}],
)
def test_invalid_cutoffs_raise(quiz, cutoffs):
    with pytest.raises(ValueError):
        ItemAnalysisSummary(quiz, [], cutoffs=cutoffs)


def test_custom_cutoffs(quiz, quiz_submissions):
    summary = ItemAnalysisSummary(
        quiz, quiz_submissions, cutoffs={"top": 0.5, "bottom": 0.5}
    )
    assert summary.buckets[PerformanceGroup.TOP] == ["u1", "u2"]
    assert summary.buckets[PerformanceGroup.MIDDLE] == []
    assert summary.buckets[PerformanceGroup.BOTTOM] == ["u3", "u4"]


def test_to_dict(summary):
    result = summary.to_dict()
    assert result["quiz_id"] == "quiz1"
    assert result["respondents"] == 4
    assert result["groups"] == {"top": 1, "middle": 2, "bottom": 1}
    assert [item["question_id"] for item in result["items"]] == ["q1", "q2", "q3"]
    assert result["items"][2]["groups"]["middle"] == {"respondents": 2, "correct": 1}
    assert result["score_statistics"]["median"] == 2.0
    assert result["score_statistics"]["max"] == 3.0


def test_question_without_a_keyed_answer_has_no_correct_respondents():
    question = QuizQuestion(
        id="mc",
        question_type="multiple_choice_question",
        answers=[QuizAnswer(id="a", weight=50), QuizAnswer(id="b", weight=0)],
    )
    submission = QuizSubmission(
        id="s1",
        quiz_id="quiz3",
        user_id="u1",
        responses=[QuizQuestionResponse(question_id="mc", answer_id="a")],
    )
    item = ItemAnalysisSummary(Quiz(id="quiz3", questions=[question]), [submission]).get_item("mc")

    assert item.correct_answer_id is None
    assert item.num_respondents(RespondentFilter.CORRECT) == 0
