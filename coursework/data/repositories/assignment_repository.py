"""
Assignment repository for the coursework analytics system.

This module provides data access for work items (assignments). Submission
records stored in the ``submissions`` collection are attached to each
assignment as it is loaded, so ``WorkItem.submission_for`` works without
another lookup.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from coursework.data.db import InMemoryDatabase
from coursework.data.models.assignment_model import WorkItem
from coursework.data.repositories.base_repository import BaseRepository


class AssignmentRepository(BaseRepository[WorkItem]):
    """Repository for WorkItem data access."""

    def __init__(self, db: Optional[InMemoryDatabase] = None, config=None):
        """
        Initialize the assignment repository.

        Args:
            db: Optional shared document store
            config: Optional configuration object
        """
        super().__init__("assignments", WorkItem, db=db, config=config)

    def connect(self) -> None:
        self._connect_from_setting("ASSIGNMENT_DATA_PATH")

    def _to_model(self, data: Dict) -> WorkItem:
        if "submissions" not in data and self._db is not None:
            data = dict(data)
            data["submissions"] = list(
                self._db["submissions"].find({"assignment_id": data.get("id")})
            )
        return super()._to_model(data)

    def find_by_course(self, course_id: str) -> List[WorkItem]:
        """
        Get a course's assignments, ordered by due date (undated last).

        Args:
            course_id: Course identifier

        Returns:
            List[WorkItem]: Assignments of the course
        """
        items = self.find_many({"course_id": course_id})
        earliest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(items, key=lambda item: (item.due_at is None, item.due_at or earliest))
