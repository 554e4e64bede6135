"""
Assignment analyzer for the coursework analytics system.

Runs the due-date bucketing engine against a course's assignments as loaded
through the data repository.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from coursework.analyzers.sorts_assignments import bucket_filter, by_due_date
from coursework.data.data_repository import DataRepository
from coursework.data.models.assignment_model import WorkItem
from coursework.data.models.enums import Bucket
from coursework.utils.safe_ops import ensure_aware


class AssignmentAnalyzer:
    """
    Analyzer that sorts a course's assignments into due-date buckets.

    Needs-grading counts come from the count stored on the assignment, or,
    when that is zero, from the submitted-but-ungraded submission records.
    """

    def __init__(self, data_repo: DataRepository, upcoming_window_days: int = 7):
        """
        Initialize the assignment analyzer.

        Args:
            data_repo: Data repository with access to all entity repositories
            upcoming_window_days: Length of the upcoming window in days
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._data_repo = data_repo
        self._upcoming_window = timedelta(days=upcoming_window_days)

    def set_upcoming_window(self, days: int) -> None:
        self._upcoming_window = timedelta(days=days)

    def _needs_grading_count(self, item: WorkItem, actor: Optional[str]) -> int:
        if item.needs_grading_count > 0:
            return item.needs_grading_count
        return self._data_repo.submissions.count_ungraded(item.id)

    @staticmethod
    def _serialize(item: WorkItem) -> Dict[str, Any]:
        return {
            "id": item.id,
            "name": item.name,
            "due_at": item.due_at.isoformat() if item.due_at else None,
        }

    def sort_assignments(
        self,
        course_id: str,
        user_id: str,
        current_user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Sort a course's assignments into every bucket for a user.

        Args:
            course_id: Course identifier
            user_id: Student the buckets are computed for
            current_user_id: Viewer, defaults to the student
            now: Reference time, defaults to the current UTC time

        Returns:
            Dict[str, Any]: Assignment ids and counts per bucket
        """
        try:
            course = self._data_repo.get_course(course_id)
            if course is None:
                return {"error": f"Course not found: {course_id}"}

            now = ensure_aware(now) if now else datetime.now(timezone.utc)
            items = self._data_repo.get_course_assignments(course_id)
            submissions = self._data_repo.get_user_submissions(user_id, course_id)

            sorted_assignments = by_due_date(
                items,
                user_id,
                current_user=current_user_id,
                submissions=submissions,
                course=course,
                upcoming_limit=now + self._upcoming_window,
                now=now,
                needs_grading=self._needs_grading_count,
            )
            buckets = sorted_assignments.to_dict()

            self._logger.info(
                f"Sorted {len(items)} assignments in course {course_id} for {user_id}"
            )
            return {
                "course_id": course_id,
                "user_id": user_id,
                "current_user_id": sorted_assignments.current_user,
                "now": now.isoformat(),
                "upcoming_limit": sorted_assignments.upcoming_limit.isoformat(),
                "buckets": buckets,
                "counts": {name: len(ids) for name, ids in buckets.items()},
            }
        except Exception as e:
            self._logger.error(f"Error sorting assignments for {user_id}: {e}")
            return {"error": str(e)}

    def get_bucket(
        self,
        course_id: str,
        bucket: str,
        user_id: str,
        current_user_id: Optional[str] = None,
        observed_user_ids: Optional[List[str]] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        List the assignments of a course that fall into one bucket.

        Args:
            course_id: Course identifier
            bucket: Bucket name
            user_id: Viewing user
            current_user_id: Acting user, defaults to the viewing user
            observed_user_ids: Students the viewing user observes
            now: Reference time, defaults to the current UTC time

        Returns:
            Dict[str, Any]: The bucket's assignments
        """
        try:
            bucket = Bucket.from_string(bucket)
        except ValueError as e:
            return {"error": str(e)}

        try:
            course = self._data_repo.get_course(course_id)
            if course is None:
                return {"error": f"Course not found: {course_id}"}

            now = ensure_aware(now) if now else datetime.now(timezone.utc)
            observed = list(observed_user_ids or [])
            sorted_for = observed[0] if len(observed) == 1 else user_id
            items = bucket_filter(
                self._data_repo.get_course_assignments(course_id),
                bucket,
                user_id,
                current_user=current_user_id,
                course=course,
                submissions=self._data_repo.get_user_submissions(sorted_for, course_id),
                observed_users=observed,
                upcoming_limit=now + self._upcoming_window,
                now=now,
                needs_grading=self._needs_grading_count,
            )
            return {
                "course_id": course_id,
                "bucket": bucket.value,
                "user_id": sorted_for,
                "assignments": [self._serialize(item) for item in items],
            }
        except Exception as e:
            self._logger.error(f"Error filtering {bucket.value} assignments for {user_id}: {e}")
            return {"error": str(e)}
