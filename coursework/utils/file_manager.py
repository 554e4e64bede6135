"""
FileManager for the coursework analytics system.

This module provides a centralized file management system for saving analysis
results. It ensures consistent file naming and directory structures across
the codebase.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union
from uuid import uuid4

import pandas as pd


class FileManager:
    """
    Centralized file management for analysis output.

    Output is organized as ``<base>/analysis/<assignments|quizzes>/`` for JSON
    results and ``<base>/reports/`` for tabular exports.
    """

    def __init__(self, base_dir: Union[str, Path], use_session_ids: bool = True):
        """
        Initialize the FileManager with a base directory.

        Args:
            base_dir: Base directory for all outputs
            use_session_ids: Whether to tag filenames with the session id
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.base_dir = Path(base_dir)
        self.use_session_ids = use_session_ids

        # Define standard subdirectories
        self.structure = {
            "analysis": {"assignments": {}, "quizzes": {}, "summary": {}},
            "reports": {},
            "temp": {},
        }

        # Initialize a session ID for grouping related outputs
        self.session_id = self._generate_session_id()
        self.logger.debug(
            f"FileManager initialized with base directory: {self.base_dir}"
        )

    def _generate_session_id(self) -> str:
        """Generate a unique session ID for grouping files."""
        timestamp = datetime.now().strftime("%Y%m%d%H%M")
        short_uuid = str(uuid4())[:8]
        return f"{timestamp}_{short_uuid}"

    def get_path(
        self,
        category: str,
        subcategory: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> Path:
        """
        Get a standardized path within the directory structure.

        Args:
            category: Top-level category (analysis, reports, temp)
            subcategory: Optional subcategory (assignments, quizzes, summary)
            filename: Optional filename to append to the path

        Returns:
            Path: Constructed path, with its directories created
        """
        if category not in self.structure:
            self.logger.warning(f"Unknown category: {category}, using 'temp' instead")
            category = "temp"

        path = self.base_dir / category
        if subcategory:
            if subcategory in self.structure[category]:
                path = path / subcategory
            else:
                self.logger.warning(f"Unknown subcategory: {subcategory} for {category}")

        path.mkdir(parents=True, exist_ok=True)

        if filename:
            path = path / filename
        return path

    def generate_filename(self, base_name: str, extension: str) -> str:
        """
        Generate a standardized, filesystem-safe filename.

        Args:
            base_name: Core name for the file
            extension: File extension (with or without the dot)

        Returns:
            str: Generated filename
        """
        components = [self._sanitize_filename(base_name)]
        if self.use_session_ids:
            components.append(self.session_id.split("_")[0])

        if not extension.startswith("."):
            extension = f".{extension}"
        return "_".join(components) + extension

    def _sanitize_filename(self, filename: str) -> str:
        filename = filename.replace(" ", "_")
        for char in ["\\", "/", ":", "*", "?", '"', "<", ">", "|", "%"]:
            filename = filename.replace(char, "_")

        # Ensure it doesn't start with a dot (hidden file in Unix)
        if filename.startswith("."):
            filename = "_" + filename[1:]

        return filename

    def _unique_path(self, file_path: Path) -> Path:
        """Add a version suffix until the path does not exist."""
        base_path = file_path.with_suffix("")
        version = 1
        while file_path.exists():
            file_path = base_path.with_name(
                f"{base_path.name}_v{version}{file_path.suffix}"
            )
            version += 1
        return file_path

    def save_json(
        self,
        data: Dict[str, Any],
        filename: str,
        category: str = "analysis",
        subcategory: Optional[str] = None,
    ) -> Path:
        """
        Save a result dictionary as JSON.

        Args:
            data: Data to save
            filename: Base filename (without extension)
            category: Category for directory structure
            subcategory: Optional subcategory

        Returns:
            Path: Path to the saved file
        """
        file_path = self._unique_path(
            self.get_path(category, subcategory, self.generate_filename(filename, "json"))
        )
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        self.logger.info(f"File saved successfully: {file_path}")
        return file_path

    def save_dataframe(
        self, df: pd.DataFrame, filename: str, category: str = "reports"
    ) -> Path:
        """
        Save a DataFrame as CSV.

        Args:
            df: Data to save
            filename: Base filename (without extension)
            category: Category for directory structure

        Returns:
            Path: Path to the saved file
        """
        file_path = self._unique_path(
            self.get_path(category, filename=self.generate_filename(filename, "csv"))
        )
        df.to_csv(file_path, index=False)

        self.logger.info(f"File saved successfully: {file_path}")
        return file_path
