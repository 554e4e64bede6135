"""
Quiz item analysis.

Given a quiz and the students' submissions, computes for each supported
question (true/false and multiple choice) how many respondents answered it,
how they split across performance groups, the item's variance, standard
deviation and difficulty index, and the point-biserial correlation of every
answer with the respondents' total scores.

Respondents are ranked by total score and split into ``top``, ``middle`` and
``bottom`` groups; by default the top and bottom 27% form the outer groups.
Correlations that are undefined (for instance when every respondent has the
same total) are reported as ``None``.
"""

import logging
import math
from collections import defaultdict
from functools import cached_property
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from coursework.data.models.enums import (
    PerformanceGroup,
    QuestionType,
    RespondentFilter,
)
from coursework.data.models.quiz_model import (
    Quiz,
    QuizQuestion,
    QuizSubmission,
    RespondentScore,
)
from coursework.utils.common_utils import (
    calculate_cronbach_alpha,
    calculate_difficulty_index,
    calculate_mean,
    calculate_point_biserial,
    calculate_population_variance,
    calculate_standard_deviation,
    calculate_summary_statistics,
)
from coursework.utils.safe_ops import safe_enum_from_string

DEFAULT_CUTOFFS = {"top": 0.27, "bottom": 0.27}
DEFAULT_SUPPORTED_TYPES = (
    QuestionType.TRUE_FALSE.value,
    QuestionType.MULTIPLE_CHOICE.value,
)

Filter = Union[RespondentFilter, PerformanceGroup, str]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ItemAnalysisItem:
    """
    Statistics for a single quiz question.

    Answers are ordered with the correct answer first; the remaining answers
    (distractors) keep their original order.
    """

    def __init__(self, summary: "ItemAnalysisSummary", question: QuizQuestion):
        self.summary = summary
        self.question = question
        self.answers: List[str] = [a.id for a in question.get_ranked_answers()]
        self._respondent_ids: List[str] = []
        self._respondent_map: Dict[str, List[str]] = defaultdict(list)

    @classmethod
    def from_question(
        cls,
        summary: "ItemAnalysisSummary",
        question: QuizQuestion,
        supported_types: Sequence[str] = DEFAULT_SUPPORTED_TYPES,
    ) -> Optional["ItemAnalysisItem"]:
        """
        Create an item for a question, if its type supports item analysis.

        Args:
            summary: Summary the item belongs to
            question: Quiz question
            supported_types: Question types that can be analyzed

        Returns:
            Optional[ItemAnalysisItem]: The item, or None for unsupported types
        """
        if question.question_type not in supported_types:
            return None
        return cls(summary, question)

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def question_text(self) -> Optional[str]:
        return self.question.question_text

    @property
    def correct_answer_id(self) -> Optional[str]:
        for answer in self.question.answers:
            if answer.weight == 100:
                return answer.id
        return None

    def add_response(self, answer_id: str, respondent_id: str) -> None:
        """
        Record that a respondent picked an answer.

        Args:
            answer_id: Picked answer
            respondent_id: Respondent identifier
        """
        self._respondent_ids.append(respondent_id)
        self._respondent_map[answer_id].append(respondent_id)

    @property
    def all_respondents(self) -> List[str]:
        """Respondents who answered this question, in submission order."""
        return list(self._respondent_ids)

    def is_correct(self, respondent_id: str) -> bool:
        return respondent_id in self._respondent_map.get(self.correct_answer_id, [])

    def respondents_for(self, filter_value: Filter) -> List[str]:
        """
        Get the respondents matching a filter.

        Args:
            filter_value: ``correct``, ``incorrect``, a performance group
                (``top``, ``middle``, ``bottom``) or an answer id

        Returns:
            List[str]: Matching respondents

        Raises:
            ValueError: If the filter is neither a known filter nor an answer id
        """
        if isinstance(filter_value, (RespondentFilter, PerformanceGroup)):
            kind = filter_value
        else:
            kind = safe_enum_from_string(
                RespondentFilter, filter_value
            ) or safe_enum_from_string(PerformanceGroup, filter_value)

        if kind is None:
            if filter_value in self.answers or filter_value in self._respondent_map:
                return list(self._respondent_map.get(filter_value, []))
            raise ValueError(f"Unknown respondent filter: {filter_value!r}")

        if kind == RespondentFilter.CORRECT:
            return [r for r in self._respondent_ids if self.is_correct(r)]
        if kind == RespondentFilter.INCORRECT:
            return [r for r in self._respondent_ids if not self.is_correct(r)]
        return [r for r in self._respondent_ids if self.summary.group_for(r) == kind]

    def num_respondents(self, *filters: Filter) -> int:
        """
        Count respondents matching every given filter.

        Args:
            *filters: Filters to intersect; none counts all respondents

        Returns:
            int: Number of matching respondents
        """
        respondents = set(self._respondent_ids)
        for filter_value in filters:
            respondents &= set(self.respondents_for(filter_value))
        return len(respondents)

    def ratio_for(self, filter_value: Filter) -> float:
        """
        Fraction of this question's respondents matching a filter.

        Returns:
            float: Ratio, 0.0 when nobody answered
        """
        if not self._respondent_ids:
            return 0.0
        return len(self.respondents_for(filter_value)) / len(self._respondent_ids)

    @property
    def scores(self) -> List[float]:
        """1.0 for each correct respondent and 0.0 for each incorrect one."""
        return [1.0 if self.is_correct(r) else 0.0 for r in self._respondent_ids]

    @property
    def variance(self) -> float:
        return calculate_population_variance(self.scores)

    @property
    def standard_deviation(self) -> float:
        return calculate_standard_deviation(self.scores)

    @property
    def difficulty_index(self) -> float:
        return calculate_difficulty_index(
            [self.is_correct(r) for r in self._respondent_ids]
        )

    def point_biserial_for(self, answer_id: str) -> Optional[float]:
        """
        Correlate picking an answer with the respondents' total scores.

        Args:
            answer_id: Answer identifier

        Returns:
            Optional[float]: Point-biserial correlation, or None when undefined
        """
        picked = set(self._respondent_map.get(answer_id, []))
        totals = self.summary.total_scores(self._respondent_ids)
        indicator = [1 if r in picked else 0 for r in self._respondent_ids]
        return calculate_point_biserial(totals, indicator)

    @property
    def point_biserials(self) -> List[Optional[float]]:
        """Point biserials for every answer, correct answer first."""
        return [self.point_biserial_for(answer_id) for answer_id in self.answers]

    def respondent_scores(self) -> List[RespondentScore]:
        """
        Per-respondent correctness and performance group for this question.

        Returns:
            List[RespondentScore]: One entry per respondent
        """
        return [
            RespondentScore(
                respondent_id=r,
                question_id=self.id,
                correct=self.is_correct(r),
                group=self.summary.group_for(r),
            )
            for r in self._respondent_ids
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Serializable statistics for this question."""
        return {
            "question_id": self.id,
            "question_name": self.question.question_name,
            "question_text": self.question_text,
            "num_respondents": self.num_respondents(),
            "num_correct": self.num_respondents(RespondentFilter.CORRECT),
            "num_incorrect": self.num_respondents(RespondentFilter.INCORRECT),
            "groups": {
                group.value: {
                    "respondents": self.num_respondents(group),
                    "correct": self.num_respondents(group, RespondentFilter.CORRECT),
                }
                for group in PerformanceGroup
            },
            "variance": self.variance,
            "standard_deviation": self.standard_deviation,
            "difficulty_index": self.difficulty_index,
            "answers": self.answers,
            "point_biserials": self.point_biserials,
        }


class ItemAnalysisSummary:
    """
    Item analysis of a whole quiz.

    Only the latest submission of each student is analyzed. A student's total
    score is the submission's score, or, when the submission carries none, the
    points of the analyzed questions the student answered correctly.
    """

    def __init__(
        self,
        quiz: Quiz,
        submissions: Iterable[QuizSubmission],
        cutoffs: Optional[Dict[str, float]] = None,
        supported_types: Sequence[str] = DEFAULT_SUPPORTED_TYPES,
    ):
        """
        Initialize and run the item analysis.

        Args:
            quiz: Quiz to analyze
            submissions: Submissions for the quiz
            cutoffs: Fractions of respondents in the ``top`` and ``bottom`` groups
            supported_types: Question types that can be analyzed

        Raises:
            ValueError: If the cutoffs are out of range
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self.quiz = quiz
        self.cutoffs = self._validate_cutoffs(cutoffs or DEFAULT_CUTOFFS)

        latest: Dict[str, QuizSubmission] = {}
        for submission in submissions:
            if submission.quiz_id == quiz.id:
                latest.pop(submission.user_id, None)
                latest[submission.user_id] = submission
        self._submissions = list(latest.values())

        self._items: List[ItemAnalysisItem] = []
        for question in quiz.get_sorted_questions():
            item = ItemAnalysisItem.from_question(self, question, supported_types)
            if item is None:
                self._logger.debug(
                    f"Skipping question {question.id} of type {question.question_type}"
                )
                continue
            self._items.append(item)

        for submission in self._submissions:
            for item in self._items:
                response = submission.get_response(item.id)
                if response is not None and response.answered:
                    item.add_response(response.answer_id, submission.user_id)

        self._respondent_scores: Dict[str, float] = {
            submission.user_id: self._score_submission(submission)
            for submission in self._submissions
        }

        self._logger.debug(
            f"Analyzed {len(self._items)} items over {self.size} respondents "
            f"for quiz {quiz.id}"
        )

    @staticmethod
    def _validate_cutoffs(cutoffs: Dict[str, float]) -> Dict[str, float]:
        top = float(cutoffs.get("top", DEFAULT_CUTOFFS["top"]))
        bottom = float(cutoffs.get("bottom", DEFAULT_CUTOFFS["bottom"]))
        if not (0 <= top <= 1 and 0 <= bottom <= 1) or top + bottom > 1:
            raise ValueError(
                f"Invalid item analysis cutoffs: top={top}, bottom={bottom}"
            )
        return {"top": top, "bottom": bottom}

    def _score_submission(self, submission: QuizSubmission) -> float:
        if submission.score is not None:
            return float(submission.score)
        return sum(
            item.question.points_possible
            for item in self._items
            if item.is_correct(submission.user_id)
        )

    @property
    def items(self) -> List[ItemAnalysisItem]:
        return list(self._items)

    @property
    def sorted_items(self) -> List[ItemAnalysisItem]:
        """Items in question position order."""
        return list(self._items)

    def get_item(self, question_id: str) -> Optional[ItemAnalysisItem]:
        for item in self._items:
            if item.id == question_id:
                return item
        return None

    @property
    def size(self) -> int:
        """Number of respondents."""
        return len(self._respondent_scores)

    def score_for(self, respondent_id: str) -> float:
        return self._respondent_scores[respondent_id]

    def total_scores(self, respondents: Optional[Iterable[str]] = None) -> List[float]:
        """
        Total scores of the given respondents (all respondents by default).

        Args:
            respondents: Respondent identifiers

        Returns:
            List[float]: Scores in the given order
        """
        if respondents is None:
            return list(self._respondent_scores.values())
        return [self._respondent_scores[r] for r in respondents]

    def mean_score(self, respondents: Optional[Iterable[str]] = None) -> float:
        return calculate_mean(self.total_scores(respondents))

    def standard_deviation(self, respondents: Optional[Iterable[str]] = None) -> float:
        return calculate_standard_deviation(self.total_scores(respondents))

    @cached_property
    def buckets(self) -> Dict[PerformanceGroup, List[str]]:
        """
        Respondents split into performance groups.

        Respondents are ranked by total score, highest first; equal scores
        keep submission order.

        Returns:
            Dict[PerformanceGroup, List[str]]: Respondents per group
        """
        ranked = sorted(
            self._respondent_scores, key=lambda r: -self._respondent_scores[r]
        )
        n = len(ranked)
        top_n = _round_half_up(n * self.cutoffs["top"])
        bottom_n = min(_round_half_up(n * self.cutoffs["bottom"]), n - top_n)

        return {
            PerformanceGroup.TOP: ranked[:top_n],
            PerformanceGroup.MIDDLE: ranked[top_n : n - bottom_n],
            PerformanceGroup.BOTTOM: ranked[n - bottom_n :],
        }

    @cached_property
    def _group_index(self) -> Dict[str, PerformanceGroup]:
        return {
            respondent: group
            for group, respondents in self.buckets.items()
            for respondent in respondents
        }

    def group_for(self, respondent_id: str) -> PerformanceGroup:
        return self._group_index[respondent_id]

    @property
    def alpha(self) -> Optional[float]:
        """
        Cronbach's alpha across the analyzed items.

        Unanswered items count as incorrect.

        Returns:
            Optional[float]: Alpha, or None when undefined
        """
        respondents = list(self._respondent_scores)
        item_scores = [
            [1.0 if item.is_correct(r) else 0.0 for r in respondents]
            for item in self._items
        ]
        return calculate_cronbach_alpha(item_scores)

    def respondent_scores(self, question_id: str) -> List[RespondentScore]:
        """
        Per-respondent correctness and group for one question.

        Args:
            question_id: Question identifier

        Returns:
            List[RespondentScore]: Scores, empty if the question was not analyzed
        """
        item = self.get_item(question_id)
        if item is None:
            return []
        return item.respondent_scores()

    def to_dict(self) -> Dict[str, Any]:
        """Serializable item analysis of the whole quiz."""
        return {
            "quiz_id": self.quiz.id,
            "quiz_title": self.quiz.title,
            "respondents": self.size,
            "mean_score": self.mean_score(),
            "standard_deviation": self.standard_deviation(),
            "score_statistics": calculate_summary_statistics(self.total_scores()),
            "alpha": self.alpha,
            "groups": {
                group.value: len(respondents)
                for group, respondents in self.buckets.items()
            },
            "items": [item.to_dict() for item in self.sorted_items],
        }
