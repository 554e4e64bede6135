"""
In-memory document store for the coursework analytics system.

Holds the raw JSON documents the host exports (courses, assignments,
submissions, quizzes, quiz submissions) behind a small MongoDB-like query
interface, so repositories can filter them before validating into models.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional


class InMemoryCollection:
    """
    A named list of documents with MongoDB-like lookups.

    Queries are dictionaries of field → value. A value may be an operator
    dictionary (``$eq``, ``$ne``, ``$in``, ``$nin``, ``$exists``); fields may
    use dot notation; ``$and`` / ``$or`` combine sub-queries. A plain value
    matched against a list field tests membership.
    """

    def __init__(self, name: str):
        self.name = name
        self.documents: List[Dict[str, Any]] = []
        self._logger = logging.getLogger(f"{self.__class__.__name__}.{name}")

    def insert_one(self, document: Dict[str, Any]) -> None:
        self.documents.append(document)

    def insert_many(self, documents: List[Dict[str, Any]]) -> None:
        self.documents.extend(documents)
        self._logger.debug(f"Inserted {len(documents)} documents")

    def find_one(self, query: Optional[Dict[str, Any]] = None) -> Optional[Dict]:
        """
        Find the first document matching the query.

        Args:
            query: Query to filter documents

        Returns:
            dict: Matching document or None
        """
        for doc in self.documents:
            if self._matches(doc, query or {}):
                return doc
        return None

    def find(self, query: Optional[Dict[str, Any]] = None) -> "InMemoryCursor":
        """
        Find all documents matching the query.

        Args:
            query: Query to filter documents

        Returns:
            InMemoryCursor: Cursor over the matches, in insertion order
        """
        query = query or {}
        return InMemoryCursor([doc for doc in self.documents if self._matches(doc, query)])

    def count_documents(self, query: Optional[Dict[str, Any]] = None) -> int:
        query = query or {}
        return sum(1 for doc in self.documents if self._matches(doc, query))

    def distinct(self, field: str, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        """
        Get distinct values for a field, in first-seen order.

        Args:
            field: Field name (dot notation allowed)
            query: Optional query to filter documents

        Returns:
            List: Distinct non-null values
        """
        values = []
        for doc in self.find(query):
            value = self._get_field_value(doc, field)
            if value is not None and value not in values:
                values.append(value)
        return values

    @staticmethod
    def _get_field_value(doc: Dict[str, Any], field: str) -> Any:
        value: Any = doc
        for part in field.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return None
        return value

    def _matches(self, doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, value in query.items():
            if key == "$and":
                if not all(self._matches(doc, q) for q in value):
                    return False
            elif key == "$or":
                if not any(self._matches(doc, q) for q in value):
                    return False
            elif isinstance(value, dict) and any(k.startswith("$") for k in value):
                if not self._matches_operator(doc, key, value):
                    return False
            else:
                field_value = self._get_field_value(doc, key)
                if isinstance(field_value, list):
                    if value not in field_value:
                        return False
                elif field_value != value:
                    return False
        return True

    def _matches_operator(
        self, doc: Dict[str, Any], field: str, operators: Dict[str, Any]
    ) -> bool:
        field_value = self._get_field_value(doc, field)
        for op, value in operators.items():
            if op == "$eq" and field_value != value:
                return False
            elif op == "$ne" and field_value == value:
                return False
            elif op == "$in" and field_value not in value:
                return False
            elif op == "$nin" and field_value in value:
                return False
            elif op == "$exists" and (field_value is not None) != bool(value):
                return False
        return True


class InMemoryCursor:
    """Cursor over query results with MongoDB-like chaining."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def skip(self, count: int) -> "InMemoryCursor":
        self.documents = self.documents[count:]
        return self

    def limit(self, count: int) -> "InMemoryCursor":
        self.documents = self.documents[:count]
        return self

    def sort(self, field: str, direction: int = 1) -> "InMemoryCursor":
        """
        Sort by a single field; documents missing the field go last.

        Args:
            field: Field name (dot notation allowed)
            direction: 1 for ascending, -1 for descending

        Returns:
            self: Cursor
        """
        value_of = InMemoryCollection._get_field_value
        present = [doc for doc in self.documents if value_of(doc, field) is not None]
        missing = [doc for doc in self.documents if value_of(doc, field) is None]
        present.sort(key=lambda doc: value_of(doc, field), reverse=direction == -1)
        self.documents = present + missing
        return self


class InMemoryDatabase:
    """
    Simple in-memory database.

    Collections are created on first access.
    """

    def __init__(self):
        self.collections: Dict[str, InMemoryCollection] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def __getitem__(self, collection_name: str) -> InMemoryCollection:
        if collection_name not in self.collections:
            self.collections[collection_name] = InMemoryCollection(collection_name)
        return self.collections[collection_name]

    def drop_collection(self, collection_name: str) -> None:
        if collection_name in self.collections:
            del self.collections[collection_name]

    def insert_one(self, collection_name: str, document: Dict[str, Any]) -> None:
        self[collection_name].insert_one(document)

    def insert_many(self, collection_name: str, documents: List[Dict[str, Any]]) -> None:
        self[collection_name].insert_many(documents)

    def count(self, collection_name: str, query: Optional[Dict[str, Any]] = None) -> int:
        return self[collection_name].count_documents(query)
