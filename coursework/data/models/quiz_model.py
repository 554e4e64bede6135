"""
Quiz models for the coursework analytics system.

This module defines quizzes, their questions and answers, the submissions
students make, and the per-item respondent scores derived from them during
item analysis.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from coursework.data.models.enums import PerformanceGroup


class QuizAnswer(BaseModel):
    """An answer option of a quiz question."""

    id: str
    text: Optional[str] = None
    weight: float = 0.0  # 100 for the correct answer

    model_config = ConfigDict(populate_by_name=True)


class QuizQuestion(BaseModel):
    """A question on a quiz."""

    id: str
    position: Optional[int] = None
    question_type: str
    question_name: Optional[str] = None
    question_text: Optional[str] = None
    points_possible: float = 1.0
    answers: List[QuizAnswer] = Field(default_factory=list)

    def get_ranked_answers(self) -> List[QuizAnswer]:
        """
        Get the answers with the correct one first.

        Answers are ordered by weight, highest first; answers of equal weight
        keep their original order.

        Returns:
            List[QuizAnswer]: Ranked answers
        """
        return sorted(self.answers, key=lambda answer: -answer.weight)


class QuizQuestionResponse(BaseModel):
    """A student's response to a single question."""

    question_id: str
    answer_id: Optional[str] = None  # None when the question was skipped
    points: Optional[float] = None

    @property
    def answered(self) -> bool:
        return self.answer_id is not None


class QuizSubmission(BaseModel):
    """A student's submission for a quiz."""

    id: str
    quiz_id: str
    user_id: str
    score: Optional[float] = None
    responses: List[QuizQuestionResponse] = Field(default_factory=list)

    def get_response(self, question_id: str) -> Optional[QuizQuestionResponse]:
        """
        Get the response to a question.

        Args:
            question_id: Question identifier

        Returns:
            Optional[QuizQuestionResponse]: The response or None
        """
        for response in self.responses:
            if response.question_id == question_id:
                return response
        return None


class Quiz(BaseModel):
    """A quiz and its questions."""

    id: str
    title: Optional[str] = None
    course_id: Optional[str] = None
    questions: List[QuizQuestion] = Field(default_factory=list)

    def get_sorted_questions(self) -> List[QuizQuestion]:
        """
        Get the questions in position order.

        Questions without a position go last, in their original order.

        Returns:
            List[QuizQuestion]: Sorted questions
        """
        return sorted(
            self.questions,
            key=lambda q: (q.position is None, q.position or 0),
        )


class RespondentScore(BaseModel):
    """Per-item, per-respondent correctness with the respondent's group."""

    respondent_id: str
    question_id: str
    correct: bool
    group: PerformanceGroup
