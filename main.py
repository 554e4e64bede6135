#!/usr/bin/env python3
"""
Coursework Analytics

This script provides a command-line interface for sorting a student's
assignments into dashboard due-date buckets and for running quiz item
analysis. It serves as the main entry point for the analytics system,
coordinating between data repositories, analyzers, and output files.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.settings import Settings
from coursework.analyzers.analyzer_manager import AnalyzerManager
from coursework.analyzers.sorts_assignments import VALID_BUCKETS
from coursework.data.data_repository import DataRepository
from coursework.utils.file_manager import FileManager
from coursework.utils.safe_ops import safe_parse_datetime


class AnalysisApp:
    """
    Main application class for the coursework analytics system.

    This class coordinates the entire application workflow, including:
    - Parsing command line arguments
    - Setting up logging
    - Initializing data repositories and analyzers
    - Running analyses and saving their results
    """

    def __init__(self):
        """Initialize the application."""
        self.args = None
        self.settings = None
        self.logger = None
        self.data_repository = None
        self.analyzer_manager = None
        self.file_manager = None

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run the application.

        This is the main entry point that orchestrates the entire workflow.

        Args:
            argv: Command line arguments, sys.argv[1:] by default

        Returns:
            int: Exit code (0 for success, non-zero for errors)
        """
        try:
            self._parse_arguments(argv)
            self._setup_logging()
            self._load_configuration()

            if not self._initialize_components():
                return 1

            return self._execute_requested_operation()

        except Exception as e:
            if self.logger:
                self.logger.exception(f"Unhandled exception: {e}")
            else:
                print(f"ERROR: {e}", file=sys.stderr)
            return 1

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Coursework Analytics",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        )

        # Configuration options
        config_group = parser.add_argument_group("Configuration Options")
        config_group.add_argument(
            "--config", type=str, help="Path to configuration file (JSON or YAML)"
        )
        config_group.add_argument(
            "--data-dir", type=str, help="Directory containing the JSON data files"
        )
        config_group.add_argument("--log-dir", type=str, help="Directory for log files")
        config_group.add_argument(
            "--output-dir", type=str, help="Output directory for results"
        )

        # Analysis selection options
        analysis_group = parser.add_argument_group("Analysis Selection")
        analysis_type = analysis_group.add_mutually_exclusive_group(required=True)
        analysis_type.add_argument(
            "--data-summary", action="store_true", help="Summarize the loaded data"
        )
        analysis_type.add_argument(
            "--assignments",
            action="store_true",
            help="Sort a course's assignments into due-date buckets",
        )
        analysis_type.add_argument(
            "--item-analysis", metavar="QUIZ_ID", help="Run item analysis for a quiz"
        )

        # Assignment parameters
        params_group = parser.add_argument_group("Assignment Parameters")
        params_group.add_argument("--course", metavar="ID", help="Course ID")
        params_group.add_argument("--user", metavar="ID", help="Student ID")
        params_group.add_argument(
            "--current-user", metavar="ID", help="Viewer ID (defaults to the student)"
        )
        params_group.add_argument(
            "--observed-user",
            metavar="ID",
            action="append",
            help="Student observed by the user (repeatable)",
        )
        params_group.add_argument(
            "--bucket", choices=VALID_BUCKETS, help="Only list this bucket"
        )
        params_group.add_argument(
            "--now", metavar="TIMESTAMP", help="Reference time (ISO 8601)"
        )
        params_group.add_argument(
            "--upcoming-days", type=int, help="Length of the upcoming window in days"
        )

        # Report options
        report_group = parser.add_argument_group("Report Options")
        report_group.add_argument(
            "--csv", action="store_true", help="Also export item analysis as CSV"
        )

        # System options
        sys_group = parser.add_argument_group("System Options")
        sys_group.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose logging"
        )
        sys_group.add_argument(
            "--no-cache", action="store_true", help="Disable caching of analysis results"
        )
        return parser

    def _parse_arguments(self, argv: Optional[List[str]] = None):
        """Parse command line arguments."""
        parser = self._build_parser()
        self.args = parser.parse_args(argv)

        if self.args.assignments and not (self.args.course and self.args.user):
            parser.error("--assignments requires --course and --user")

    def _setup_logging(self):
        """Configure logging for the application."""
        log_level = logging.DEBUG if self.args.verbose else logging.INFO

        log_path = Path(self.args.log_dir or "./logs")
        log_path.mkdir(parents=True, exist_ok=True)

        # Create log filename with timestamp
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"coursework_analytics_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

        # Console handler with a simpler format
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.info("Logging initialized")

    def _load_configuration(self):
        """Load configuration settings."""
        self.logger.info("Loading configuration settings")

        self.settings = Settings(config_path=self.args.config)

        # Command line arguments override the configuration file
        if self.args.data_dir:
            self.logger.info(f"Using data directory from arguments: {self.args.data_dir}")
            self.settings.set_data_dir(self.args.data_dir)

        if self.args.output_dir:
            self.logger.info(
                f"Using output directory from arguments: {self.args.output_dir}"
            )
            self.settings.OUTPUT_DIR = Path(self.args.output_dir)

        if self.args.upcoming_days is not None:
            self.settings.UPCOMING_WINDOW_DAYS = self.args.upcoming_days

        if self.args.no_cache:
            self.settings.CACHE_ENABLED = False

        self.logger.info("Configuration loaded successfully")

    def _initialize_components(self) -> bool:
        """
        Initialize the core components of the system.

        Returns:
            bool: True if initialization was successful, False otherwise
        """
        try:
            self.logger.info("Initializing data repository")
            self.data_repository = DataRepository(self.settings)
            self.data_repository.connect()

            data_summary = self.data_repository.get_data_summary()
            if "error" in data_summary:
                self.logger.error(f"Error in data repository: {data_summary['error']}")
                return False

            self.logger.info(
                f"Data loaded: {data_summary['courses']['count']} courses, "
                f"{data_summary['assignments']['count']} assignments, "
                f"{data_summary['submissions']['count']} submissions, "
                f"{data_summary['quizzes']['count']} quizzes, "
                f"{data_summary['quiz_submissions']['count']} quiz submissions"
            )

            self.logger.info("Initializing analyzer manager")
            self.analyzer_manager = AnalyzerManager(self.data_repository, self.settings)
            if not self.analyzer_manager.initialize_analyzers():
                self.logger.error("Failed to initialize analyzers")
                return False

            self.file_manager = FileManager(self.settings.OUTPUT_DIR)

            self.logger.info("All components initialized successfully")
            return True

        except Exception as e:
            self.logger.exception(f"Error initializing components: {e}")
            return False

    def _execute_requested_operation(self) -> int:
        """
        Execute the requested analysis.

        Returns:
            int: Exit code (0 for success, non-zero for errors)
        """
        operation_type, func = self._get_requested_operation()
        self.logger.info(f"Executing {operation_type} operation")

        try:
            if not func():
                self.logger.error(f"{operation_type} operation failed")
                return 1

            self.logger.info(f"{operation_type} operation completed successfully")
            return 0

        except Exception as e:
            self.logger.exception(f"Error executing {operation_type} operation: {e}")
            return 1

    def _get_requested_operation(self) -> Tuple[str, Callable[[], bool]]:
        """
        Determine the requested operation from command line arguments.

        Returns:
            Tuple[str, Callable[[], bool]]: Operation name and function
        """
        if self.args.data_summary:
            return "data-summary", self._generate_data_summary
        if self.args.item_analysis:
            return "item-analysis", self._run_item_analysis
        if self.args.bucket:
            return "bucket", self._list_bucket
        return "assignments", self._sort_assignments

    def _reference_time(self) -> Optional[datetime]:
        return safe_parse_datetime(self.args.now) if self.args.now else None

    def _report_result(self, result: Dict[str, Any], filename: str, subcategory: str) -> bool:
        """Log and save an analysis result; False if it carries an error."""
        if "error" in result:
            self.logger.error(f"Analysis error: {result['error']}")
            return False

        output_file = self.file_manager.save_json(
            result, filename, category="analysis", subcategory=subcategory
        )
        self.logger.info(f"Results saved to: {output_file}")
        print(json.dumps(result, indent=2, default=str))
        return True

    # === Analysis Methods ===

    def _generate_data_summary(self) -> bool:
        summary = self.data_repository.get_data_summary()
        return self._report_result(summary, "data_summary", "summary")

    def _sort_assignments(self) -> bool:
        self.logger.info(
            f"Sorting assignments in course {self.args.course} for {self.args.user}"
        )
        result = self.analyzer_manager.run_analysis(
            "assignments",
            course_id=self.args.course,
            user_id=self.args.user,
            current_user_id=self.args.current_user,
            now=self._reference_time(),
        )
        if "counts" in result:
            for bucket, count in result["counts"].items():
                self.logger.info(f"  {bucket}: {count}")
        return self._report_result(
            result, f"assignments_{self.args.course}_{self.args.user}", "assignments"
        )

    def _list_bucket(self) -> bool:
        result = self.analyzer_manager.run_analysis(
            "bucket",
            course_id=self.args.course,
            bucket=self.args.bucket,
            user_id=self.args.user,
            current_user_id=self.args.current_user,
            observed_user_ids=self.args.observed_user,
            now=self._reference_time(),
        )
        return self._report_result(
            result,
            f"{self.args.bucket}_{self.args.course}_{self.args.user}",
            "assignments",
        )

    def _run_item_analysis(self) -> bool:
        quiz_id = self.args.item_analysis
        result = self.analyzer_manager.run_analysis("item_analysis", quiz_id=quiz_id)
        if not self._report_result(result, f"item_analysis_{quiz_id}", "quizzes"):
            return False

        if self.args.csv:
            report = self.analyzer_manager.get_quiz_analyzer().get_report(quiz_id)
            csv_file = self.file_manager.save_dataframe(
                report.to_dataframe(), f"item_analysis_{quiz_id}"
            )
            self.logger.info(f"Item analysis CSV saved to: {csv_file}")
        return True


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the coursework-analytics command."""
    return AnalysisApp().run(argv)


if __name__ == "__main__":
    sys.exit(main())
