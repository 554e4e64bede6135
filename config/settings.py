"""
Configuration settings for the coursework analytics system.

This module provides the Settings class that holds all configuration
parameters for the application, including file paths and analysis options.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class Settings:
    """
    Configuration settings for the coursework analytics system.

    This class provides centralized configuration management for file paths
    and analysis parameters. Values come from the defaults below, then an
    optional JSON/YAML file, then ``COURSEWORK_*`` environment variables.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings with default values or from config file.

        Args:
            config_path: Optional path to configuration file
        """
        # Default base paths
        self.BASE_DIR = Path(__file__).parent.parent  # Project root directory
        self.INPUT_DIR = self.BASE_DIR / "input"
        self.OUTPUT_DIR = self.BASE_DIR / "output"
        self.LOG_DIR = self.BASE_DIR / "logs"

        # File paths for data sources
        self.COURSE_DATA_PATH = self.INPUT_DIR / "courses.json"
        self.ASSIGNMENT_DATA_PATH = self.INPUT_DIR / "assignments.json"
        self.SUBMISSION_DATA_PATH = self.INPUT_DIR / "submissions.json"
        self.QUIZ_DATA_PATH = self.INPUT_DIR / "quizzes.json"
        self.QUIZ_SUBMISSION_DATA_PATH = self.INPUT_DIR / "quiz_submissions.json"

        # Assignment bucketing
        self.UPCOMING_WINDOW_DAYS = 7  # Length of the "upcoming" window

        # Item analysis: fraction of respondents in the outer performance groups
        self.ITEM_ANALYSIS_CUTOFFS = {"top": 0.27, "bottom": 0.27}
        self.SUPPORTED_QUESTION_TYPES = [
            "true_false_question",
            "multiple_choice_question",
        ]

        # Cache settings
        self.CACHE_ENABLED = True

        # Load additional settings from config file if provided
        if config_path:
            self._load_from_file(config_path)

        # Override with environment variables if set
        self._load_from_env()

    def set_data_dir(self, data_dir: str) -> None:
        """
        Point every data file path at a different directory.

        Args:
            data_dir: Directory holding the JSON exports
        """
        self.INPUT_DIR = Path(data_dir)
        self.COURSE_DATA_PATH = self.INPUT_DIR / "courses.json"
        self.ASSIGNMENT_DATA_PATH = self.INPUT_DIR / "assignments.json"
        self.SUBMISSION_DATA_PATH = self.INPUT_DIR / "submissions.json"
        self.QUIZ_DATA_PATH = self.INPUT_DIR / "quizzes.json"
        self.QUIZ_SUBMISSION_DATA_PATH = self.INPUT_DIR / "quiz_submissions.json"

    def _load_from_file(self, config_path: str) -> None:
        """
        Load settings from a configuration file.

        Args:
            config_path: Path to configuration file
        """
        config_file = Path(config_path)
        if not config_file.exists():
            logger.warning(f"Config file not found: {config_path}")
            return

        if config_file.suffix.lower() == ".json":
            with open(config_file, "r") as f:
                config_data = json.load(f)
        elif config_file.suffix.lower() in [".yml", ".yaml"]:
            with open(config_file, "r") as f:
                config_data = yaml.safe_load(f)
        else:
            logger.warning(f"Unsupported config file format: {config_file.suffix}")
            return

        self._apply(config_data or {})

    def _apply(self, config_data: Dict[str, Any]) -> None:
        """Update known settings from a mapping; unknown keys are ignored."""
        for key, value in config_data.items():
            if not hasattr(self, key):
                logger.warning(f"Ignoring unknown setting: {key}")
                continue
            if isinstance(getattr(self, key), Path):
                value = Path(value)
            setattr(self, key, value)

    def _load_from_env(self) -> None:
        """Load settings from environment variables."""
        # Define mappings from environment variable names to attributes
        env_mappings = {
            "COURSEWORK_COURSE_DATA": "COURSE_DATA_PATH",
            "COURSEWORK_ASSIGNMENT_DATA": "ASSIGNMENT_DATA_PATH",
            "COURSEWORK_SUBMISSION_DATA": "SUBMISSION_DATA_PATH",
            "COURSEWORK_QUIZ_DATA": "QUIZ_DATA_PATH",
            "COURSEWORK_QUIZ_SUBMISSION_DATA": "QUIZ_SUBMISSION_DATA_PATH",
            "COURSEWORK_OUTPUT_DIR": "OUTPUT_DIR",
            "COURSEWORK_UPCOMING_WINDOW_DAYS": "UPCOMING_WINDOW_DAYS",
            "COURSEWORK_CACHE_ENABLED": "CACHE_ENABLED",
        }

        for env_name, attr_name in env_mappings.items():
            if env_name in os.environ and hasattr(self, attr_name):
                env_value = os.environ[env_name]
                attr_value = getattr(self, attr_name)

                # Convert type based on current attribute type
                if isinstance(attr_value, bool):
                    env_value = env_value.lower() in ["true", "1", "yes"]
                elif isinstance(attr_value, int):
                    env_value = int(env_value)
                elif isinstance(attr_value, float):
                    env_value = float(env_value)
                elif isinstance(attr_value, Path):
                    env_value = Path(env_value)

                setattr(self, attr_name, env_value)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert settings to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of settings
        """
        result = {}
        for key, value in self.__dict__.items():
            if not key.startswith("_"):
                if isinstance(value, Path):
                    result[key] = str(value)
                else:
                    result[key] = value
        return result

    def save_to_file(self, file_path: str) -> None:
        """
        Save current settings to a JSON or YAML file.

        Unknown extensions are saved as JSON next to the requested path.

        Args:
            file_path: Path to save settings
        """
        settings_dict = self.to_dict()
        file_path = Path(file_path)

        if file_path.suffix.lower() in [".yml", ".yaml"]:
            with open(file_path, "w") as f:
                yaml.safe_dump(settings_dict, f, default_flow_style=False)
            return

        if file_path.suffix.lower() != ".json":
            logger.warning(f"Unsupported file format: {file_path.suffix}, saving as JSON")
            file_path = file_path.with_suffix(".json")

        with open(file_path, "w") as f:
            json.dump(settings_dict, f, indent=4)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value by key.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Any: Setting value or default
        """
        return getattr(self, key, default)
