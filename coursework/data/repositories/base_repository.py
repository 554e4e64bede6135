"""
Base repository for the coursework analytics system.

This module provides the BaseRepository abstract class that serves as the foundation
for all entity-specific repositories. It defines common read operations over the
in-memory document store and the JSON loading shared by every repository.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
import functools
import json
import logging
from pathlib import Path

from pydantic import BaseModel

from coursework.data.db import InMemoryDatabase

# Type variable for the model type
T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T], ABC):
    """
    Base repository for data access.

    This abstract class provides common read operations and utility methods
    for working with exported coursework data through Pydantic models.

    Attributes:
        _collection_name (str): Name of the data collection
        _model_class (Type[T]): Pydantic model class for this repository
        _db (Optional[InMemoryDatabase]): Shared document store
        _config (Optional[Any]): Settings object with data file paths
        _cache (Dict): In-memory cache for query results
    """

    def __init__(
        self,
        collection_name: str,
        model_class: Type[T],
        db: Optional[InMemoryDatabase] = None,
        config: Optional[Any] = None,
    ):
        """
        Initialize the repository.

        Args:
            collection_name: Name of the data collection
            model_class: Pydantic model class to use for this repository
            db: Optional shared document store
            config: Optional settings object
        """
        self._collection_name = collection_name
        self._model_class = model_class
        self._db = db
        self._config = config
        self._logger = logging.getLogger(self.__class__.__name__)
        self._cache: Dict[str, Any] = {}

    @abstractmethod
    def connect(self) -> None:
        """
        Connect to the data source.

        Subclasses load their configured JSON file into the document store.
        """

    @property
    def collection(self):
        """
        Get the data collection.

        Raises:
            RuntimeError: If the database connection is not established
        """
        if self._db is None:
            raise RuntimeError(
                "Database connection not established. Call connect() first."
            )
        return self._db[self._collection_name]

    def _connect_from_setting(self, setting_name: str) -> None:
        """
        Load the collection from the file a setting points at.

        A missing setting or file leaves the collection empty.

        Args:
            setting_name: Name of the settings attribute holding the path
        """
        if self._db is None:
            self._db = InMemoryDatabase()

        file_path = getattr(self._config, setting_name, None) if self._config else None
        if file_path is None or not Path(file_path).exists():
            self._logger.warning(
                f"No data file for {self._collection_name} ({setting_name}={file_path})"
            )
            return

        count = self.load_data_from_file(file_path)
        self._logger.info(f"Loaded {count} {self._collection_name} from {file_path}")

    def _to_model(self, data: Dict) -> T:
        """
        Convert raw data to a Pydantic model.

        Raises:
            pydantic.ValidationError: If the document is malformed
        """
        try:
            return self._model_class.model_validate(data)
        except Exception as e:
            self._logger.error(f"Error converting data to {self._model_class.__name__}: {e}")
            raise

    def clear_cache(self) -> None:
        self._cache = {}

    # Cache decorator for query methods
    def _cache_result(func):
        """Decorator to cache results of repository methods."""

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            cache_key = f"{func.__name__}:{args!r}:{sorted(kwargs.items())!r}"

            if cache_key in self._cache:
                return self._cache[cache_key]

            result = func(self, *args, **kwargs)
            self._cache[cache_key] = result
            return result

        return wrapper

    @_cache_result
    def find_by_id(self, id_value: str) -> Optional[T]:
        """
        Find a document by its ID.

        Args:
            id_value: Document ID

        Returns:
            Optional[T]: Model instance or None if not found
        """
        result = self.collection.find_one({"id": id_value})
        if result:
            return self._to_model(result)
        return None

    def find_one(self, query: Dict) -> Optional[T]:
        result = self.collection.find_one(query)
        if result:
            return self._to_model(result)
        return None

    @_cache_result
    def find_many(
        self,
        query: Dict,
        skip: int = 0,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_direction: int = 1,
    ) -> List[T]:
        """
        Find multiple documents matching the query.

        Args:
            query: Query dictionary
            skip: Number of documents to skip
            limit: Maximum number of documents to return (None for all)
            sort_by: Field to sort by
            sort_direction: Sort direction (1=ascending, -1=descending)

        Returns:
            List[T]: List of model instances
        """
        cursor = self.collection.find(query)

        if sort_by:
            cursor = cursor.sort(sort_by, sort_direction)

        cursor = cursor.skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)

        return [self._to_model(doc) for doc in cursor]

    def count(self, query: Optional[Dict] = None) -> int:
        return self.collection.count_documents(query or {})

    def get_all(self) -> List[T]:
        return self.find_many({})

    def load_data_from_file(self, filepath: Union[str, Path]) -> int:
        """
        Load documents from a JSON file into the collection.

        The collection is replaced by the file's contents.

        Args:
            filepath: Path to the JSON file (a list of documents or one document)

        Returns:
            int: Number of documents loaded

        Raises:
            OSError, json.JSONDecodeError: If the file cannot be read or parsed
        """
        if self._db is None:
            self._db = InMemoryDatabase()

        try:
            with open(filepath, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.error(f"Error loading data from file {filepath}: {e}")
            raise

        self._db.drop_collection(self._collection_name)
        self.clear_cache()

        documents = data if isinstance(data, list) else [data]
        self.collection.insert_many(documents)
        return len(documents)
