"""
Enumerations for the coursework analytics system.

This module defines all the enumerations used throughout the system,
providing type safety and documentation for categorical data.
Compatible with Pydantic models.
"""

from enum import Enum
from typing import FrozenSet, List, Optional

from coursework.utils.safe_ops import safe_lower

# Submission types that never produce a submission in the system
NO_SUBMISSION_TYPES: FrozenSet[str] = frozenset(
    {"none", "on_paper", "external_tool", "not_graded", "wiki_page"}
)


class Right(str, Enum):
    """Rights an actor can be granted on a course or an assignment."""

    SUBMIT = "submit"
    GRADE = "grade"
    MANAGE_GRADES = "manage_grades"


class Bucket(str, Enum):
    """Named due-date buckets an assignment can fall into."""

    PAST = "past"
    OVERDUE = "overdue"
    UNDATED = "undated"
    UNGRADED = "ungraded"
    UNSUBMITTED = "unsubmitted"
    UPCOMING = "upcoming"
    FUTURE = "future"

    @classmethod
    def get_all_values(cls) -> List[str]:
        """Returns a list of all bucket names in sorting order"""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Bucket":
        """
        Resolve a bucket name, case-insensitively.

        Raises:
            ValueError: If the name is not a known bucket
        """
        for member in cls:
            if member.value == safe_lower(value):
                return member
        raise ValueError(
            f"Unknown bucket: {value!r} (expected one of {', '.join(cls.get_all_values())})"
        )


class GradingState(str, Enum):
    """Grading state of a submission record."""

    GRADED = "graded"
    UNGRADED = "ungraded"


class SubmissionType(str, Enum):
    """Submission types an assignment can accept."""

    NONE = "none"
    ON_PAPER = "on_paper"
    EXTERNAL_TOOL = "external_tool"
    NOT_GRADED = "not_graded"
    WIKI_PAGE = "wiki_page"
    ONLINE_TEXT_ENTRY = "online_text_entry"
    ONLINE_UPLOAD = "online_upload"
    ONLINE_URL = "online_url"
    ONLINE_QUIZ = "online_quiz"
    DISCUSSION_TOPIC = "discussion_topic"
    MEDIA_RECORDING = "media_recording"

    @classmethod
    def expects_submission(cls, value: str) -> bool:
        """Check whether a submission type produces a submission"""
        return safe_lower(value) not in NO_SUBMISSION_TYPES


class PerformanceGroup(str, Enum):
    """Performance groups respondents are ranked into for item analysis."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class QuestionType(str, Enum):
    """Quiz question types."""

    TRUE_FALSE = "true_false_question"
    MULTIPLE_CHOICE = "multiple_choice_question"
    MULTIPLE_ANSWERS = "multiple_answers_question"
    SHORT_ANSWER = "short_answer_question"
    FILL_IN_MULTIPLE_BLANKS = "fill_in_multiple_blanks_question"
    NUMERICAL = "numerical_question"
    ESSAY = "essay_question"
    FILE_UPLOAD = "file_upload_question"
    TEXT_ONLY = "text_only_question"


class RespondentFilter(str, Enum):
    """Answer-state filters for counting item respondents."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
