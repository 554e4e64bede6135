"""
Quiz repository for the coursework analytics system.

This module provides data access for quizzes and their questions.
"""

from typing import List, Optional

from coursework.data.db import InMemoryDatabase
from coursework.data.models.quiz_model import Quiz
from coursework.data.repositories.base_repository import BaseRepository


class QuizRepository(BaseRepository[Quiz]):
    """Repository for Quiz data access."""

    def __init__(self, db: Optional[InMemoryDatabase] = None, config=None):
        super().__init__("quizzes", Quiz, db=db, config=config)

    def connect(self) -> None:
        self._connect_from_setting("QUIZ_DATA_PATH")

    def get_question_types(self) -> List[str]:
        """Distinct question types across all quizzes."""
        types: List[str] = []
        for quiz in self.get_all():
            for question in quiz.questions:
                if question.question_type not in types:
                    types.append(question.question_type)
        return types
