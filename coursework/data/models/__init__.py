"""
Models package for the coursework analytics system.

This package contains all the data models used for representing courses,
assignments, submissions and quizzes handed over by the host application.
"""

# Re-export enums
from .enums import (
    Right,
    Bucket,
    GradingState,
    SubmissionType,
    PerformanceGroup,
    QuestionType,
    RespondentFilter,
)

# Re-export base models
from .base_model import CapabilityCheck, PermissionedModel, grants_right

# Re-export entity models
from .assignment_model import Course, SubmissionRecord, WorkItem
from .quiz_model import (
    Quiz,
    QuizAnswer,
    QuizQuestion,
    QuizQuestionResponse,
    QuizSubmission,
    RespondentScore,
)

# Define all models for easy access
__all__ = [
    # Enums
    "Right",
    "Bucket",
    "GradingState",
    "SubmissionType",
    "PerformanceGroup",
    "QuestionType",
    "RespondentFilter",
    # Base models
    "CapabilityCheck",
    "PermissionedModel",
    "grants_right",
    # Assignment models
    "Course",
    "SubmissionRecord",
    "WorkItem",
    # Quiz models
    "Quiz",
    "QuizAnswer",
    "QuizQuestion",
    "QuizQuestionResponse",
    "QuizSubmission",
    "RespondentScore",
]
