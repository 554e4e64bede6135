"""
Submission repository for the coursework analytics system.

This module provides data access for assignment submission records and for
quiz submissions.
"""

from typing import Dict, List, Optional

from coursework.data.db import InMemoryDatabase
from coursework.data.models.assignment_model import SubmissionRecord
from coursework.data.models.enums import GradingState
from coursework.data.models.quiz_model import QuizSubmission
from coursework.data.repositories.base_repository import BaseRepository


class SubmissionRepository(BaseRepository[SubmissionRecord]):
    """Repository for assignment submission records."""

    def __init__(self, db: Optional[InMemoryDatabase] = None, config=None):
        super().__init__("submissions", SubmissionRecord, db=db, config=config)

    def connect(self) -> None:
        self._connect_from_setting("SUBMISSION_DATA_PATH")

    def find_by_user(
        self, user_id: str, assignment_ids: Optional[List[str]] = None
    ) -> List[SubmissionRecord]:
        """
        Get a user's submission records.

        Args:
            user_id: Student identifier
            assignment_ids: Optional assignments to restrict to

        Returns:
            List[SubmissionRecord]: Matching records
        """
        query: Dict = {"user_id": user_id}
        if assignment_ids is not None:
            query["assignment_id"] = {"$in": list(assignment_ids)}
        return self.find_many(query)

    def count_ungraded(self, assignment_id: str) -> int:
        """
        Count submitted records still waiting for a grade.

        Args:
            assignment_id: Assignment identifier

        Returns:
            int: Number of submitted, ungraded records
        """
        return self.count(
            {
                "assignment_id": assignment_id,
                "has_submission": True,
                "grading_state": {"$ne": GradingState.GRADED.value},
            }
        )


class QuizSubmissionRepository(BaseRepository[QuizSubmission]):
    """Repository for quiz submissions."""

    def __init__(self, db: Optional[InMemoryDatabase] = None, config=None):
        super().__init__("quiz_submissions", QuizSubmission, db=db, config=config)

    def connect(self) -> None:
        self._connect_from_setting("QUIZ_SUBMISSION_DATA_PATH")

    def find_by_quiz(self, quiz_id: str) -> List[QuizSubmission]:
        return self.find_many({"quiz_id": quiz_id})
