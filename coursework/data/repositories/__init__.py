"""
Repositories package for the coursework analytics system.

This package contains all the repository classes used for
accessing the coursework data exported by the host application.
"""

from .base_repository import BaseRepository
from .assignment_repository import AssignmentRepository
from .course_repository import CourseRepository
from .quiz_repository import QuizRepository
from .submission_repository import QuizSubmissionRepository, SubmissionRepository

__all__ = [
    "BaseRepository",
    "AssignmentRepository",
    "CourseRepository",
    "QuizRepository",
    "QuizSubmissionRepository",
    "SubmissionRepository",
]
