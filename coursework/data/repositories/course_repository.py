"""
Course repository for the coursework analytics system.

This module provides data access for Course records and the rights
instructors hold on them.
"""

from typing import List, Optional

from coursework.data.db import InMemoryDatabase
from coursework.data.models.assignment_model import Course
from coursework.data.models.enums import Right
from coursework.data.repositories.base_repository import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """Repository for Course data access."""

    def __init__(self, db: Optional[InMemoryDatabase] = None, config=None):
        """
        Initialize the course repository.

        Args:
            db: Optional shared document store
            config: Optional configuration object
        """
        super().__init__("courses", Course, db=db, config=config)

    def connect(self) -> None:
        self._connect_from_setting("COURSE_DATA_PATH")

    def find_grade_managers(self, course_id: str) -> List[str]:
        """
        Get the actors allowed to manage grades in a course.

        Args:
            course_id: Course identifier

        Returns:
            List[str]: Actor identifiers, empty if the course is unknown
        """
        course = self.find_by_id(course_id)
        if course is None:
            return []
        return [
            actor
            for actor in course.rights
            if course.grants_right(actor, Right.MANAGE_GRADES)
        ]
