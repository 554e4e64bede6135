"""
Assignment models for the coursework analytics system.

This module defines the work items that get sorted into due-date buckets,
the submission records attached to them, and the course they belong to.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursework.data.models.base_model import PermissionedModel
from coursework.data.models.enums import GradingState, SubmissionType
from coursework.utils.safe_ops import safe_parse_datetime


class SubmissionRecord(BaseModel):
    """A student's submission record for one assignment."""

    id: Optional[str] = None  # No id means there is no real submission yet
    assignment_id: str
    user_id: Optional[str] = None
    grading_state: GradingState = GradingState.UNGRADED
    has_submission: bool = False
    score: Optional[float] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_graded(self) -> bool:
        """Whether a grade has been posted for this record."""
        return self.grading_state == GradingState.GRADED

    def without_graded_submission(self) -> bool:
        """
        Check whether the record carries neither a submission nor a grade.

        Returns:
            bool: True if nothing was submitted and nothing was graded
        """
        return not self.has_submission and not self.is_graded


class Course(PermissionedModel):
    """A course; instructors hold manage_grades on it."""

    id: str
    name: Optional[str] = None


class WorkItem(PermissionedModel):
    """
    A gradable unit of work (assignment) with an optional due date.

    Rights are granted per actor through the rights table, e.g. students get
    ``submit`` and graders get ``grade``.
    """

    id: str
    course_id: Optional[str] = None
    name: Optional[str] = None
    due_at: Optional[datetime] = None
    submission_types: List[str] = Field(
        default_factory=lambda: [SubmissionType.ONLINE_TEXT_ENTRY.value]
    )
    needs_grading_count: int = 0
    submissions: List[SubmissionRecord] = Field(default_factory=list)
    due_date_overrides: Dict[str, Optional[datetime]] = Field(default_factory=dict)

    @field_validator("due_at", mode="before")
    @classmethod
    def parse_due_at(cls, value):
        return safe_parse_datetime(value)

    @field_validator("due_date_overrides", mode="before")
    @classmethod
    def parse_overrides(cls, value):
        if not value:
            return {}
        return {actor: safe_parse_datetime(due) for actor, due in value.items()}

    @property
    def is_dated(self) -> bool:
        return self.due_at is not None

    @property
    def expects_submission(self) -> bool:
        """
        Whether students are expected to turn something in.

        Returns:
            bool: True if any submission type produces a submission
        """
        return any(
            SubmissionType.expects_submission(kind) for kind in self.submission_types
        )

    def submission_for(self, user_id: Optional[str]) -> Optional[SubmissionRecord]:
        """
        Get the submission record a user has for this item.

        Args:
            user_id: Student identifier

        Returns:
            Optional[SubmissionRecord]: The record, or None if there is none
        """
        for submission in self.submissions:
            if submission.user_id == user_id:
                return submission
        return None

    def overridden_for(self, user_id: Optional[str]) -> "WorkItem":
        """
        Apply a user's due-date override.

        Args:
            user_id: Student identifier

        Returns:
            WorkItem: A copy with the overridden due date, or self when the
            user has no override
        """
        if user_id is None or user_id not in self.due_date_overrides:
            return self
        return self.model_copy(update={"due_at": self.due_date_overrides[user_id]})
