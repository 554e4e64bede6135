"""
Quiz analyzer for the coursework analytics system.

Runs quiz item analysis against quizzes and submissions loaded through the
data repository.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from coursework.analyzers.item_analysis import (
    DEFAULT_CUTOFFS,
    DEFAULT_SUPPORTED_TYPES,
    ItemAnalysisSummary,
)
from coursework.data.data_repository import DataRepository
from coursework.reports.item_analysis_report import ItemAnalysisReport


class QuizAnalyzer:
    """Analyzer for quiz item statistics."""

    def __init__(
        self,
        data_repo: DataRepository,
        cutoffs: Optional[Dict[str, float]] = None,
        supported_types: Sequence[str] = DEFAULT_SUPPORTED_TYPES,
    ):
        """
        Initialize the quiz analyzer.

        Args:
            data_repo: Data repository with access to all entity repositories
            cutoffs: Fractions of respondents in the top and bottom groups
            supported_types: Question types that can be analyzed
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._data_repo = data_repo
        self._cutoffs = dict(cutoffs or DEFAULT_CUTOFFS)
        self._supported_types = tuple(supported_types)

    def build_summary(self, quiz_id: str) -> ItemAnalysisSummary:
        """
        Run item analysis for a quiz.

        Args:
            quiz_id: Quiz identifier

        Returns:
            ItemAnalysisSummary: The analysis

        Raises:
            ValueError: If the quiz does not exist
        """
        quiz = self._data_repo.get_quiz(quiz_id)
        if quiz is None:
            raise ValueError(f"Quiz not found: {quiz_id}")

        submissions = self._data_repo.get_quiz_submissions(quiz_id)
        return ItemAnalysisSummary(
            quiz,
            submissions,
            cutoffs=self._cutoffs,
            supported_types=self._supported_types,
        )

    def analyze_quiz(self, quiz_id: str) -> Dict[str, Any]:
        """
        Item analysis of a quiz as a serializable dictionary.

        Args:
            quiz_id: Quiz identifier

        Returns:
            Dict[str, Any]: Quiz-level and per-item statistics
        """
        try:
            summary = self.build_summary(quiz_id)
            self._logger.info(
                f"Item analysis for quiz {quiz_id}: {len(summary.items)} items, "
                f"{summary.size} respondents"
            )
            return summary.to_dict()
        except Exception as e:
            self._logger.error(f"Error analyzing quiz {quiz_id}: {e}")
            return {"error": str(e)}

    def get_report(self, quiz_id: str) -> ItemAnalysisReport:
        """
        Tabular item analysis report for a quiz.

        Raises:
            ValueError: If the quiz does not exist
        """
        return ItemAnalysisReport(self.build_summary(quiz_id))
