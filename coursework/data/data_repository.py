"""
Main data repository for the coursework analytics system.

This module provides the DataRepository class that serves as the primary entry point
for accessing all entity-specific repositories over one shared document store.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import Settings
from coursework.data.db import InMemoryDatabase
from coursework.data.models.assignment_model import Course, SubmissionRecord, WorkItem
from coursework.data.models.quiz_model import Quiz, QuizSubmission
from coursework.data.repositories import (
    AssignmentRepository,
    CourseRepository,
    QuizRepository,
    QuizSubmissionRepository,
    SubmissionRepository,
)


class DataRepository:
    """
    Main data repository for coordinating access to all entity-specific repositories.

    This class serves as a facade for accessing all repository classes and
    provides methods for cross-entity lookups used by the analyzers.
    """

    # Data file name -> collection name
    FILE_MAPPINGS = {
        "courses.json": "courses",
        "assignments.json": "assignments",
        "submissions.json": "submissions",
        "quizzes.json": "quizzes",
        "quiz_submissions.json": "quiz_submissions",
    }

    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize the data repository.

        Args:
            config: Optional settings configuration
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._config = config or Settings()
        self._db = InMemoryDatabase()  # Shared in-memory database for all repositories

        self._course_repo = CourseRepository(db=self._db, config=self._config)
        self._assignment_repo = AssignmentRepository(db=self._db, config=self._config)
        self._submission_repo = SubmissionRepository(db=self._db, config=self._config)
        self._quiz_repo = QuizRepository(db=self._db, config=self._config)
        self._quiz_submission_repo = QuizSubmissionRepository(
            db=self._db, config=self._config
        )

        # Track whether data has been loaded
        self._data_loaded = False

    @property
    def _repositories(self):
        return [
            self._course_repo,
            self._assignment_repo,
            self._submission_repo,
            self._quiz_repo,
            self._quiz_submission_repo,
        ]

    def connect(self) -> None:
        """
        Load every configured data file.

        Raises:
            OSError, json.JSONDecodeError: If a configured file cannot be read
        """
        if self._data_loaded:
            return

        try:
            for repo in self._repositories:
                repo.connect()

            self._data_loaded = True
            self._logger.info("Successfully connected to all data sources")
        except Exception as e:
            self._logger.error(f"Error connecting to data sources: {e}")
            raise

    @property
    def courses(self) -> CourseRepository:
        """Get the course repository."""
        self._ensure_connected()
        return self._course_repo

    @property
    def assignments(self) -> AssignmentRepository:
        """Get the assignment repository."""
        self._ensure_connected()
        return self._assignment_repo

    @property
    def submissions(self) -> SubmissionRepository:
        """Get the submission repository."""
        self._ensure_connected()
        return self._submission_repo

    @property
    def quizzes(self) -> QuizRepository:
        """Get the quiz repository."""
        self._ensure_connected()
        return self._quiz_repo

    @property
    def quiz_submissions(self) -> QuizSubmissionRepository:
        """Get the quiz submission repository."""
        self._ensure_connected()
        return self._quiz_submission_repo

    def _ensure_connected(self) -> None:
        if not self._data_loaded:
            self.connect()

    def _clear_caches(self) -> None:
        for repo in self._repositories:
            repo.clear_cache()

    def load_records(self, collection_name: str, documents: List[Dict[str, Any]]) -> int:
        """
        Add documents handed over by a host application.

        Args:
            collection_name: One of the collection names in FILE_MAPPINGS
            documents: Raw documents

        Returns:
            int: Number of documents added

        Raises:
            ValueError: If the collection name is unknown
        """
        if collection_name not in self.FILE_MAPPINGS.values():
            raise ValueError(f"Unknown collection: {collection_name}")

        self._db.insert_many(collection_name, documents)
        self._clear_caches()
        self._data_loaded = True
        return len(documents)

    def load_data_from_directory(self, directory_path: str) -> Dict[str, int]:
        """
        Load data from all known JSON files in a directory.

        Files that are missing are skipped; files that cannot be parsed are
        logged and counted as 0.

        Args:
            directory_path: Path to directory containing JSON data files

        Returns:
            Dict[str, int]: Number of documents loaded per file
        """
        results = {}
        path = Path(directory_path)

        for filename, collection_name in self.FILE_MAPPINGS.items():
            file_path = path / filename
            if not file_path.exists():
                continue

            try:
                with open(file_path, "r", encoding="utf-8") as file:
                    data = json.load(file)
            except (OSError, json.JSONDecodeError) as e:
                self._logger.error(f"Error loading data from {file_path}: {e}")
                results[filename] = 0
                continue

            documents = data if isinstance(data, list) else [data]
            self._db.drop_collection(collection_name)
            self._db.insert_many(collection_name, documents)
            results[filename] = len(documents)
            self._logger.info(f"Loaded {len(documents)} documents from {file_path}")

        self._clear_caches()
        self._data_loaded = True

        return results

    def get_data_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all loaded data.

        Returns:
            Dict[str, Any]: Data summary statistics
        """
        self._ensure_connected()

        try:
            assignments = self._assignment_repo.get_all()
            return {
                "courses": {"count": self._course_repo.count()},
                "assignments": {
                    "count": len(assignments),
                    "dated": sum(1 for a in assignments if a.is_dated),
                    "expecting_submission": sum(
                        1 for a in assignments if a.expects_submission
                    ),
                },
                "submissions": {"count": self._submission_repo.count()},
                "quizzes": {
                    "count": self._quiz_repo.count(),
                    "question_types": self._quiz_repo.get_question_types(),
                },
                "quiz_submissions": {"count": self._quiz_submission_repo.count()},
            }
        except Exception as e:
            self._logger.error(f"Error creating data summary: {e}")
            return {"error": str(e)}

    def get_course_assignments(self, course_id: str) -> List[WorkItem]:
        return self.assignments.find_by_course(course_id)

    def get_user_submissions(
        self, user_id: str, course_id: Optional[str] = None
    ) -> List[SubmissionRecord]:
        """
        Get a user's submission records, optionally within one course.

        Args:
            user_id: Student identifier
            course_id: Optional course identifier

        Returns:
            List[SubmissionRecord]: Submission records
        """
        if course_id is None:
            return self.submissions.find_by_user(user_id)

        assignment_ids = [a.id for a in self.get_course_assignments(course_id)]
        return self.submissions.find_by_user(user_id, assignment_ids=assignment_ids)

    def get_course(self, course_id: str) -> Optional[Course]:
        return self.courses.find_by_id(course_id)

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return self.quizzes.find_by_id(quiz_id)

    def get_quiz_submissions(self, quiz_id: str) -> List[QuizSubmission]:
        return self.quiz_submissions.find_by_quiz(quiz_id)
