"""
Item analysis report.

Flattens an ItemAnalysisSummary into one row per question, the layout quiz
authors download to review their items.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from coursework.analyzers.item_analysis import ItemAnalysisItem, ItemAnalysisSummary
from coursework.data.models.enums import PerformanceGroup, RespondentFilter

BASE_COLUMNS = [
    "Question Id",
    "Question Title",
    "Answered Student Count",
    "Top Student Count",
    "Middle Student Count",
    "Bottom Student Count",
    "Quiz Question Count",
    "Correct Student Count",
    "Wrong Student Count",
    "Correct Student Ratio",
    "Wrong Student Ratio",
    "Correct Top Student Count",
    "Correct Middle Student Count",
    "Correct Bottom Student Count",
    "Variance",
    "Standard Deviation",
    "Difficulty Index",
    "Alpha",
    "Point Biserial of Correct",
]


class ItemAnalysisReport:
    """Tabular export of a quiz item analysis."""

    def __init__(self, summary: ItemAnalysisSummary):
        self._logger = logging.getLogger(self.__class__.__name__)
        self.summary = summary

    @property
    def distractor_count(self) -> int:
        """Most distractors any analyzed question has."""
        return max((len(item.answers) - 1 for item in self.summary.items), default=0)

    @property
    def columns(self) -> List[str]:
        return BASE_COLUMNS + [
            f"Point Biserial of Distractor {i}"
            for i in range(1, self.distractor_count + 1)
        ]

    def _row(self, item: ItemAnalysisItem, alpha: Any) -> Dict[str, Any]:
        point_biserials = item.point_biserials
        row = {
            "Question Id": item.id,
            "Question Title": item.question.question_name,
            "Answered Student Count": item.num_respondents(),
            "Top Student Count": item.num_respondents(PerformanceGroup.TOP),
            "Middle Student Count": item.num_respondents(PerformanceGroup.MIDDLE),
            "Bottom Student Count": item.num_respondents(PerformanceGroup.BOTTOM),
            "Quiz Question Count": len(self.summary.items),
            "Correct Student Count": item.num_respondents(RespondentFilter.CORRECT),
            "Wrong Student Count": item.num_respondents(RespondentFilter.INCORRECT),
            "Correct Student Ratio": item.ratio_for(RespondentFilter.CORRECT),
            "Wrong Student Ratio": item.ratio_for(RespondentFilter.INCORRECT),
            "Correct Top Student Count": item.num_respondents(
                PerformanceGroup.TOP, RespondentFilter.CORRECT
            ),
            "Correct Middle Student Count": item.num_respondents(
                PerformanceGroup.MIDDLE, RespondentFilter.CORRECT
            ),
            "Correct Bottom Student Count": item.num_respondents(
                PerformanceGroup.BOTTOM, RespondentFilter.CORRECT
            ),
            "Variance": item.variance,
            "Standard Deviation": item.standard_deviation,
            "Difficulty Index": item.difficulty_index,
            "Alpha": alpha,
            "Point Biserial of Correct": point_biserials[0] if point_biserials else None,
        }
        for i, value in enumerate(point_biserials[1:], start=1):
            row[f"Point Biserial of Distractor {i}"] = value
        return row

    def to_dataframe(self) -> pd.DataFrame:
        """
        Build the report table.

        Undefined statistics are left empty (NaN).

        Returns:
            pd.DataFrame: One row per analyzed question
        """
        alpha = self.summary.alpha
        rows = [self._row(item, alpha) for item in self.summary.sorted_items]
        return pd.DataFrame(rows, columns=self.columns)

    def to_csv(self, path: Union[str, Path]) -> Path:
        """
        Write the report as CSV.

        Args:
            path: Destination file

        Returns:
            Path: The written file
        """
        path = Path(path)
        self.to_dataframe().to_csv(path, index=False)
        self._logger.info(f"Item analysis report written to {path}")
        return path
