import json
from datetime import datetime, timedelta, timezone

import pytest

from config.settings import Settings
from coursework.data.data_repository import DataRepository
from coursework.data.models import (
    Course,
    Quiz,
    QuizAnswer,
    QuizQuestion,
    QuizQuestionResponse,
    QuizSubmission,
    SubmissionRecord,
    WorkItem,
)

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)

STUDENT = "s1"
GRADER = "t1"

ITEM_RIGHTS = {STUDENT: ["submit"], GRADER: ["grade"]}


def make_item(item_id, days=None, **kwargs):
    """Work item due ``days`` after NOW (undated when days is None)."""
    kwargs.setdefault("rights", ITEM_RIGHTS)
    kwargs.setdefault("course_id", "c1")
    due_at = NOW + timedelta(days=days) if days is not None else None
    return WorkItem(id=item_id, name=item_id, due_at=due_at, **kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def course():
    return Course(id="c1", name="Biology 101", rights={GRADER: ["manage_grades"]})


@pytest.fixture
def student_submissions():
    return [
        SubmissionRecord(
            id="sub-graded",
            assignment_id="a_past_graded",
            user_id=STUDENT,
            grading_state="graded",
            has_submission=False,
            score=8.0,
        ),
        SubmissionRecord(
            id="sub-turned-in",
            assignment_id="a_past_submitted",
            user_id=STUDENT,
            has_submission=True,
        ),
    ]


@pytest.fixture
def items(student_submissions):
    by_assignment = {s.assignment_id: [s] for s in student_submissions}
    return [
        make_item(
            "a_past_submitted",
            -3,
            needs_grading_count=1,
            submissions=by_assignment["a_past_submitted"],
        ),
        make_item("a_past", -2),
        make_item(
            "a_past_graded", -1, submissions=by_assignment["a_past_graded"]
        ),
        make_item("a_paper", -1, submission_types=["on_paper"]),
        make_item("a_now", 0),
        make_item("a_soon", 3),
        make_item("a_week", 7),
        make_item("a_later", 10),
        make_item("a_undated"),
    ]


def ids(items):
    return [item.id for item in items]


def _tf_question(question_id, position):
    return QuizQuestion(
        id=question_id,
        position=position,
        question_type="true_false_question",
        question_name=f"Question {position}",
        answers=[
            QuizAnswer(id=f"{question_id}_t", text="True", weight=100),
            QuizAnswer(id=f"{question_id}_f", text="False", weight=0),
        ],
    )


@pytest.fixture
def quiz():
    """Two true/false questions keyed True and a multiple choice keyed A."""
    return Quiz(
        id="quiz1",
        title="Cell Structure",
        course_id="c1",
        questions=[
            QuizQuestion(
                id="q3",
                position=3,
                question_type="multiple_choice_question",
                question_name="Question 3",
                question_text="Which organelle makes ATP?",
                answers=[
                    QuizAnswer(id="q3_b", text="Nucleus", weight=0),
                    QuizAnswer(id="q3_a", text="Mitochondria", weight=100),
                    QuizAnswer(id="q3_c", text="Ribosome", weight=0),
                    QuizAnswer(id="q3_d", text="Vacuole", weight=0),
                ],
            ),
            _tf_question("q1", 1),
            _tf_question("q2", 2),
            QuizQuestion(
                id="q4",
                position=4,
                question_type="essay_question",
                question_name="Question 4",
            ),
        ],
    )


def _quiz_submission(user_id, score, answers):
    return QuizSubmission(
        id=f"qs-{user_id}",
        quiz_id="quiz1",
        user_id=user_id,
        score=score,
        responses=[
            QuizQuestionResponse(question_id=question_id, answer_id=answer_id)
            for question_id, answer_id in answers.items()
        ],
    )


@pytest.fixture
def quiz_submissions():
    return [
        _quiz_submission("u1", 3, {"q1": "q1_t", "q2": "q2_t", "q3": "q3_a"}),
        _quiz_submission("u2", 2, {"q1": "q1_t", "q2": "q2_f", "q3": "q3_a"}),
        _quiz_submission("u3", 2, {"q1": "q1_t", "q2": "q2_t", "q3": "q3_b"}),
        _quiz_submission("u4", 2, {"q1": "q1_t", "q2": "q2_t"}),
    ]


@pytest.fixture
def data_dir(tmp_path, course, items, student_submissions, quiz, quiz_submissions):
    """Directory of JSON exports the repositories load from."""
    directory = tmp_path / "input"
    directory.mkdir()

    extra = [
        SubmissionRecord(
            id="sub-other",
            assignment_id="a_past",
            user_id="s2",
            has_submission=True,
        )
    ]
    exports = {
        "courses.json": [course.model_dump(mode="json")],
        "assignments.json": [
            item.model_dump(mode="json", exclude={"submissions"}) for item in items
        ],
        "submissions.json": [
            s.model_dump(mode="json") for s in student_submissions + extra
        ],
        "quizzes.json": [quiz.model_dump(mode="json")],
        "quiz_submissions.json": [s.model_dump(mode="json") for s in quiz_submissions],
    }
    for filename, documents in exports.items():
        (directory / filename).write_text(json.dumps(documents), encoding="utf-8")
    return directory


@pytest.fixture
def settings(data_dir, tmp_path, monkeypatch):
    for name in (
        "COURSEWORK_UPCOMING_WINDOW_DAYS",
        "COURSEWORK_CACHE_ENABLED",
        "COURSEWORK_OUTPUT_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    settings.set_data_dir(str(data_dir))
    settings.OUTPUT_DIR = tmp_path / "output"
    return settings


@pytest.fixture
def data_repository(settings):
    repository = DataRepository(settings)
    repository.connect()
    return repository
