"""
Analyzer Manager for the coursework analytics system.

This module provides a centralized management system for analyzer components,
handling initialization, lifecycle, and coordination of analysis operations.
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple

from config.settings import Settings
from coursework.analyzers.assignment_analyzer import AssignmentAnalyzer
from coursework.analyzers.quiz_analyzer import QuizAnalyzer
from coursework.data.data_repository import DataRepository


class AnalyzerManager:
    """
    Manages the lifecycle and coordination of analyzer components.

    This class centralizes the initialization, configuration, and execution
    of the analyzers, and caches their results by analysis type and parameters.
    """

    ANALYSIS_TYPES = ("assignments", "bucket", "item_analysis")

    def __init__(self, data_repository: DataRepository, settings: Optional[Settings] = None):
        """
        Initialize the analyzer manager.

        Args:
            data_repository: Data repository for accessing all entities
            settings: Optional settings for analyzer parameters
        """
        self._logger = logging.getLogger(self.__class__.__name__)
        self._data_repo = data_repository
        self._settings = settings or Settings()

        # Initialize analyzer instances to None
        self._assignment_analyzer = None
        self._quiz_analyzer = None

        # Cache for analysis results
        self._result_cache: Dict[str, Any] = {}
        self._cache_enabled = bool(self._settings.CACHE_ENABLED)

    def initialize_analyzers(self) -> bool:
        """
        Initialize all analyzer instances.

        Returns:
            bool: True if all analyzers were initialized successfully
        """
        try:
            self._logger.info("Initializing analyzers...")

            self._assignment_analyzer = AssignmentAnalyzer(
                self._data_repo,
                upcoming_window_days=int(self._settings.UPCOMING_WINDOW_DAYS),
            )
            self._quiz_analyzer = QuizAnalyzer(
                self._data_repo,
                cutoffs=self._settings.ITEM_ANALYSIS_CUTOFFS,
                supported_types=self._settings.SUPPORTED_QUESTION_TYPES,
            )

            self._logger.info("All analyzers initialized successfully")
            return True
        except Exception as e:
            self._logger.error(f"Error initializing analyzers: {e}")
            return False

    def get_assignment_analyzer(self) -> Optional[AssignmentAnalyzer]:
        if not self._assignment_analyzer:
            self._logger.warning("Assignment analyzer not initialized")
        return self._assignment_analyzer

    def get_quiz_analyzer(self) -> Optional[QuizAnalyzer]:
        if not self._quiz_analyzer:
            self._logger.warning("Quiz analyzer not initialized")
        return self._quiz_analyzer

    def get_all_analyzers(self) -> Tuple:
        """
        Get all analyzer instances.

        Returns:
            Tuple: (assignment_analyzer, quiz_analyzer)
        """
        return (self._assignment_analyzer, self._quiz_analyzer)

    def enable_cache(self, enabled: bool = True) -> None:
        """
        Enable or disable caching of analysis results.

        Args:
            enabled: Whether caching should be enabled
        """
        self._cache_enabled = enabled
        self._logger.info(
            f"Analysis result caching {'enabled' if enabled else 'disabled'}"
        )

        if not enabled:
            self.clear_cache()

    def clear_cache(self) -> None:
        """Clear the analysis result cache."""
        self._result_cache = {}
        self._logger.debug("Analysis result cache cleared")

    def _get_cache_key(self, analysis_type: str, params: Dict[str, Any]) -> str:
        # Convert params to a stable string representation
        param_str = json.dumps(params, sort_keys=True, default=str)
        return f"{analysis_type}:{param_str}"

    def run_analysis(self, analysis_type: str, **params: Any) -> Dict[str, Any]:
        """
        Run an analysis by type, serving repeated requests from the cache.

        Assignment analyses are only cached when the caller pins ``now``.

        Args:
            analysis_type: ``assignments``, ``bucket`` or ``item_analysis``
            **params: Keyword arguments for the analyzer method

        Returns:
            Dict[str, Any]: Analysis result, or a dict with an ``error`` key

        Raises:
            ValueError: If the analysis type is unknown
        """
        if analysis_type not in self.ANALYSIS_TYPES:
            raise ValueError(
                f"Unknown analysis type: {analysis_type} "
                f"(expected one of {', '.join(self.ANALYSIS_TYPES)})"
            )

        # Assignment buckets computed against the wall clock go stale
        cacheable = self._cache_enabled and (
            analysis_type == "item_analysis" or params.get("now") is not None
        )

        key = self._get_cache_key(analysis_type, params)
        if cacheable and key in self._result_cache:
            self._logger.debug(f"Using cached result for {analysis_type}")
            return self._result_cache[key]

        if self._assignment_analyzer is None or self._quiz_analyzer is None:
            return {"error": "Analyzers not initialized"}

        if analysis_type == "assignments":
            result = self._assignment_analyzer.sort_assignments(**params)
        elif analysis_type == "bucket":
            result = self._assignment_analyzer.get_bucket(**params)
        else:
            result = self._quiz_analyzer.analyze_quiz(**params)

        # Error results are never cached
        if cacheable and "error" not in result:
            self._result_cache[key] = result
            self._logger.debug(f"Cached result for {analysis_type}")

        return result
